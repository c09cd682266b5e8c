"""Async client for the portal's paginated REST list views."""

__version__ = "0.1.0"
