"""Blob storage for uploaded images."""

from .supabase_storage import SupabaseStorageClient, get_storage_client

__all__ = ["SupabaseStorageClient", "get_storage_client"]
