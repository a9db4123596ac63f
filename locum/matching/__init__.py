"""Pure decision functions for the application workflow.

Nothing in this package performs I/O; callers load records, pass them in,
and persist whatever comes back.
"""
