"""Core configuration, storage and infrastructure."""
