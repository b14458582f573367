"""Dynamic product form schemas for a multi-tenant catalog."""

__version__ = "0.1.0"
