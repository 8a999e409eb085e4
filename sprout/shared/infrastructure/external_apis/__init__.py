"""Clients for third-party HTTP APIs."""

from .api_client import APIClient

__all__ = ["APIClient"]
