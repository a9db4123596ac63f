"""Locum physician application and matching workflow."""
