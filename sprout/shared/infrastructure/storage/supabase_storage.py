# 📄 File: sprout/shared/infrastructure/storage/supabase_storage.py

# 🧭 Purpose (Layman Explanation):
# Uploads and deletes pictures (plant photos, profile pictures, forum banners) in cloud storage,
# shrinking oversized photos first and filing them in tidy folders.

# 🧪 Purpose (Technical Summary):
# Supabase Storage client wrapper with image validation, Pillow-based optimization,
# deterministic path layout per category, public URL generation and URL-based deletion.

# 🔗 Dependencies:
# - supabase: Storage client
# - PIL (Pillow): Image processing and optimization
# - starlette.concurrency: the supabase client is synchronous

# 🔄 Connected Modules / Calls From:
# Called by: user_management (avatars), plant_listings (listing photos),
# community (forum banners)

import io
from pathlib import Path
from typing import Dict, Optional, Tuple
from uuid import uuid4

from PIL import Image, ImageOps, UnidentifiedImageError
from starlette.concurrency import run_in_threadpool
from supabase import Client, create_client
from supabase.lib.client_options import ClientOptions

from sprout.shared.config.settings import get_settings
from sprout.shared.core.exceptions import (
    FileStorageError,
    FileTooLargeError,
    InvalidFileTypeError,
    ServiceNotConfiguredError,
)
from sprout.shared.utils.logging import get_logger

logger = get_logger(__name__)


class SupabaseStorageClient:
    """
    Supabase Storage client for marketplace images.

    Handles:
    - Image validation (size, MIME type, decodable content)
    - Optimization (EXIF orientation, downscale, JPEG re-encode)
    - Path organization per category
    - Public URL generation and deletion by URL
    """

    # Path prefix per category, formatted with the owning entity id
    storage_paths = {
        'profile_images': 'profile_images/{owner_id}',
        'plant_images': 'plant_images/{owner_id}',
        'forum_banners': 'forum_banners/{owner_id}',
    }

    allowed_image_types = {
        'image/jpeg', 'image/png', 'image/webp', 'image/gif'
    }

    def __init__(self, client: Optional[Client] = None):
        settings = get_settings()
        self.bucket_name = settings.SUPABASE_STORAGE_BUCKET
        self.max_image_bytes = settings.MAX_IMAGE_SIZE
        self.image_quality = settings.IMAGE_QUALITY
        self.max_image_size = (2048, 2048)
        self._supabase_url = settings.SUPABASE_URL
        self._supabase_key = settings.SUPABASE_SERVICE_ROLE_KEY
        self.client = client

    def _get_client(self) -> Client:
        if self.client is None:
            if not (self._supabase_url and self._supabase_key):
                raise ServiceNotConfiguredError(
                    "File storage is not configured on the server.",
                    service="supabase_storage"
                )
            self.client = create_client(
                self._supabase_url,
                self._supabase_key,
                options=ClientOptions(
                    postgrest_client_timeout=10,
                    storage_client_timeout=30
                )
            )
            logger.info("Supabase Storage client initialized")
        return self.client

    def _bucket(self):
        return self._get_client().storage.from_(self.bucket_name)

    def generate_file_path(
        self,
        category: str,
        owner_id: str,
        filename: str,
        index: Optional[int] = None
    ) -> str:
        """
        Build the object path for an upload.

        Plant photos keep their position in the listing gallery as a
        ``{index}_`` prefix; other categories get a short random prefix.
        """
        if category not in self.storage_paths:
            raise ValueError(f"Unknown storage category: {category}")

        base_path = self.storage_paths[category].format(owner_id=owner_id)
        stem = Path(filename).stem or "image"
        safe_stem = "".join(c if c.isalnum() or c in "-_" else "_" for c in stem)[:80]

        prefix = str(index) if index is not None else uuid4().hex[:8]
        return f"{base_path}/{prefix}_{safe_stem}.jpg"

    def validate_image(self, file_data: bytes, content_type: str) -> None:
        """Validate file size, type, and that the bytes really are an image."""
        if len(file_data) > self.max_image_bytes:
            raise FileTooLargeError(len(file_data), self.max_image_bytes)

        if content_type not in self.allowed_image_types:
            raise InvalidFileTypeError(content_type, list(self.allowed_image_types))

        try:
            with Image.open(io.BytesIO(file_data)) as img:
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise InvalidFileTypeError(content_type) from e

    def optimize_image(self, image_data: bytes) -> Tuple[bytes, Dict[str, object]]:
        """
        Re-encode an image as progressive JPEG no larger than 2048px per side.

        Returns:
            Tuple of (optimized_bytes, metadata)
        """
        with Image.open(io.BytesIO(image_data)) as img:
            img = ImageOps.exif_transpose(img)
            if img.mode not in ('RGB', 'L'):
                img = img.convert('RGB')

            original_size = img.size
            if img.size[0] > self.max_image_size[0] or img.size[1] > self.max_image_size[1]:
                img.thumbnail(self.max_image_size, Image.Resampling.LANCZOS)

            output = io.BytesIO()
            img.save(output, format='JPEG', quality=self.image_quality, optimize=True, progressive=True)
            optimized = output.getvalue()

        return optimized, {
            'original_size': original_size,
            'optimized_size': img.size,
            'original_bytes': len(image_data),
            'optimized_bytes': len(optimized),
        }

    async def upload_image(
        self,
        category: str,
        owner_id: str,
        filename: str,
        file_data: bytes,
        content_type: str,
        index: Optional[int] = None
    ) -> str:
        """
        Validate, optimize and upload an image.

        Args:
            category: One of storage_paths
            owner_id: User, listing or forum id the image belongs to
            filename: Original filename
            file_data: Raw bytes
            content_type: Declared MIME type
            index: Gallery position for listing photos

        Returns:
            Public URL of the stored object
        """
        self.validate_image(file_data, content_type)
        optimized, metadata = self.optimize_image(file_data)
        storage_path = self.generate_file_path(category, owner_id, filename, index)

        try:
            await run_in_threadpool(
                self._bucket().upload,
                storage_path,
                optimized,
                {"content-type": "image/jpeg", "cache-control": "3600", "upsert": "true"},
            )
            public_url = await run_in_threadpool(self._bucket().get_public_url, storage_path)
        except ServiceNotConfiguredError:
            raise
        except Exception as e:
            logger.error(f"File upload failed: {e}", storage_path=storage_path)
            raise FileStorageError(
                "Upload failed", operation="upload", storage_path=storage_path
            ) from e

        logger.info(
            f"Image uploaded: {storage_path}",
            category=category,
            optimized_bytes=metadata['optimized_bytes'],
        )
        return public_url

    def path_from_url(self, url: str) -> Optional[str]:
        """Extract the object path from a public URL of this bucket."""
        marker = f"/object/public/{self.bucket_name}/"
        if marker not in url:
            return None
        return url.split(marker, 1)[1].split("?", 1)[0]

    async def delete_by_url(self, url: str) -> bool:
        """
        Delete the object behind a public URL.

        Returns:
            False when the URL does not point into this bucket
        """
        storage_path = self.path_from_url(url)
        if storage_path is None:
            logger.warning(f"Not a storage URL of bucket {self.bucket_name}: {url}")
            return False

        try:
            await run_in_threadpool(self._bucket().remove, [storage_path])
        except ServiceNotConfiguredError:
            raise
        except Exception as e:
            logger.error(f"File deletion failed: {e}", storage_path=storage_path)
            raise FileStorageError(
                "Delete failed", operation="delete", storage_path=storage_path
            ) from e

        logger.info(f"File deleted: {storage_path}")
        return True


# Global storage client instance
storage_client: Optional[SupabaseStorageClient] = None


async def get_storage_client() -> SupabaseStorageClient:
    """Get the storage client (dependency injection)."""
    global storage_client

    if storage_client is None:
        storage_client = SupabaseStorageClient()

    return storage_client
