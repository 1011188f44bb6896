# orderdesk/core/storage_utils.py
from functools import lru_cache

from orderdesk.core.config import get_settings
from orderdesk.core.supabase_client import supabase_admin

settings = get_settings()


def order_file_path(order_id: str, filename: str) -> str:
    """
    Object key for an order attachment.

    Path pattern:
        orders/<order_id>/<filename>
    """
    return f"orders/{order_id}/{filename}"


def order_id_from_path(path: str) -> str | None:
    """
    Extract the order id segment from an attachment key.

    Example:
        'orders/5f0c.../part-A.dxf' -> '5f0c...'
    """
    parts = path.split("/")
    if len(parts) != 3 or parts[0] != "orders" or not parts[1] or not parts[2]:
        return None
    return parts[1]


class BlobStorage:
    """
    Thin wrapper around the Supabase Storage bucket holding customer files.

    The bucket is private: files are only reachable through short-lived
    signed URLs. Every method lets the Supabase client's exceptions
    propagate; callers decide what a failure means.
    """

    def __init__(self, bucket: str, client=None):
        self.bucket = bucket
        self._client = client

    @property
    def client(self):
        # Created on first use so importing this module needs no service key
        if self._client is None:
            self._client = supabase_admin()
        return self._client

    def upload(self, path: str, file_bytes: bytes, content_type: str) -> None:
        """
        Upload bytes to `path`. Existing objects are NOT overwritten.
        """
        self.client.storage.from_(self.bucket).upload(
            path,
            file_bytes,
            {"content-type": content_type, "upsert": "false"},
        )

    def remove(self, path: str) -> None:
        # Supabase Python client expects a list of paths.
        self.client.storage.from_(self.bucket).remove([path])

    def create_signed_url(self, path: str, expires_in: int) -> str:
        """
        Return a URL granting read access to `path` for `expires_in` seconds.
        """
        data = self.client.storage.from_(self.bucket).create_signed_url(path, expires_in)
        signed = data.get("signedURL") or data.get("signedUrl")
        if not signed:
            raise RuntimeError(f"Storage returned no signed URL for {path}")
        return signed


@lru_cache
def get_storage() -> BlobStorage:
    """
    FastAPI dependency returning the shared uploads bucket wrapper.
    Tests override it with an in-memory fake.
    """
    return BlobStorage(settings.STORAGE_BUCKET)
