# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles media uploads and retrieval URLs with Supabase Storage.
#
# Uploads are validated (content type, size, emptiness) before any call to
# storage. Stored objects are only ever handed out as time-limited signed
# URLs, except in the public challenges bucket.
#
# Some assets (event images) were written to different buckets over time,
# so both upload and retrieval can try an ordered list of candidate
# buckets, stopping at the first one that works.
# =============================================================================

import logging
import secrets
import string
import time
from typing import Any

from lib.supabase_client import SupabaseClient
from app.config import settings
from app.exceptions import (
    BackendError,
    EmptyFileError,
    FileTooLargeError,
    InvalidFileTypeError,
)

logger = logging.getLogger(__name__)

ALLOWED_VIDEO_TYPES = ["video/mp4", "video/quicktime", "video/x-msvideo", "video/m4v"]
ALLOWED_IMAGE_TYPES = ["image/jpeg", "image/jpg", "image/png", "image/webp", "image/gif"]

# Extension used when the uploaded filename has none
IMAGE_EXTENSIONS = {
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}

_TOKEN_ALPHABET = string.ascii_lowercase + string.digits
TOKEN_LENGTH = 13


class StorageService:
    """
    Service for Supabase Storage operations.

    Handles upload validation, path construction, uploads and signed URLs.
    """

    # -------------------------------------------------------------------------
    # Validation and paths
    # -------------------------------------------------------------------------

    @staticmethod
    def validate_upload(
        content: bytes,
        content_type: str | None,
        allowed_types: list[str],
        max_bytes: int,
    ) -> None:
        """
        Check an upload against an allow-list and a byte ceiling.

        Raises:
            InvalidFileTypeError: Content type not in `allowed_types`
            FileTooLargeError: More than `max_bytes`
            EmptyFileError: No bytes at all
        """
        if content_type not in allowed_types:
            raise InvalidFileTypeError(content_type, allowed_types)

        if len(content) > max_bytes:
            raise FileTooLargeError(len(content), max_bytes)

        if not content:
            raise EmptyFileError()

    @staticmethod
    def file_extension(filename: str | None, default: str) -> str:
        """Extension of `filename` (without the dot), or `default`."""
        if filename and "." in filename:
            extension = filename.rsplit(".", 1)[-1]
            if extension:
                return extension
        return default

    @staticmethod
    def random_token(length: int = TOKEN_LENGTH) -> str:
        """Short lowercase alphanumeric token used to disambiguate paths."""
        return "".join(secrets.choice(_TOKEN_ALPHABET) for _ in range(length))

    @staticmethod
    def is_full_url(path: str) -> bool:
        """True when `path` is already a fully-qualified URL."""
        return path.startswith(("http://", "https://"))

    # -------------------------------------------------------------------------
    # Uploads
    # -------------------------------------------------------------------------

    @staticmethod
    def upload(
        bucket: str,
        path: str,
        content: bytes,
        content_type: str,
        upsert: bool = True,
    ) -> str:
        """
        Upload raw content to a bucket.

        Returns:
            Storage path where the file was uploaded

        Raises:
            BackendError: If the upload fails
        """
        client = SupabaseClient.get_client()

        try:
            client.storage.from_(bucket).upload(
                path=path,
                file=content,
                file_options={
                    "content-type": content_type,
                    "upsert": "true" if upsert else "false",
                },
            )
            logger.info(f"Uploaded file to storage: {bucket}/{path}")
            return path

        except Exception as e:
            logger.error(f"Storage upload to {bucket}/{path} failed: {e}")
            raise BackendError("Failed to upload file", e)

    @staticmethod
    def upload_to_first_bucket(
        buckets: list[str],
        path: str,
        content: bytes,
        content_type: str,
    ) -> str:
        """
        Upload to the first bucket in `buckets` that accepts the file.

        Returns:
            Name of the bucket that took the upload

        Raises:
            BackendError: If every bucket failed (carries the last error)
        """
        client = SupabaseClient.get_client()
        last_error: Exception | None = None

        for bucket in buckets:
            try:
                client.storage.from_(bucket).upload(
                    path=path,
                    file=content,
                    file_options={"content-type": content_type, "upsert": "true"},
                )
                logger.info(f"Uploaded file to storage: {bucket}/{path}")
                return bucket
            except Exception as e:
                logger.debug(f"Upload to bucket {bucket} failed: {e}")
                last_error = e

        logger.error(f"Upload of {path} failed for all buckets {buckets}: {last_error}")
        raise BackendError("Failed to upload image", last_error)

    @staticmethod
    def upload_exercise_video(
        exercise_id: str,
        gender: str,
        filename: str | None,
        content_type: str | None,
        content: bytes,
    ) -> str:
        """
        Upload a demonstration video for an exercise.

        The path is deterministic per (exercise, gender), so a new upload
        replaces the previous video.

        Returns:
            Storage path, e.g. "exercises/{id}/video_male.mp4"
        """
        StorageService.validate_upload(
            content, content_type, ALLOWED_VIDEO_TYPES, settings.max_video_upload_bytes
        )

        extension = StorageService.file_extension(filename, "mp4")
        path = f"exercises/{exercise_id}/video_{gender}.{extension}"

        return StorageService.upload(
            settings.EXERCISE_VIDEO_BUCKET, path, content, content_type, upsert=True
        )

    @staticmethod
    def upload_event_image(
        event_id: str,
        filename: str | None,
        content_type: str | None,
        content: bytes,
    ) -> dict[str, Any]:
        """
        Upload an event cover image.

        Returns:
            {"path": str, "bucket": str}
        """
        StorageService.validate_upload(
            content, content_type, ALLOWED_IMAGE_TYPES, settings.max_image_upload_bytes
        )

        extension = StorageService.file_extension(
            filename, IMAGE_EXTENSIONS.get(content_type, "jpg")
        )
        timestamp = int(time.time() * 1000)
        path = f"event-{event_id}-{timestamp}-{StorageService.random_token()}.{extension}"

        bucket = StorageService.upload_to_first_bucket(
            settings.event_image_buckets_list, path, content, content_type
        )
        return {"path": path, "bucket": bucket}

    @staticmethod
    def upload_challenge_image(
        image_type: str,
        filename: str | None,
        content_type: str | None,
        content: bytes,
    ) -> dict[str, Any]:
        """
        Upload a challenge image to the public challenges bucket.

        Every upload gets a fresh path; nothing is overwritten.

        Returns:
            {"path": str, "url": str} where url is the public URL
        """
        StorageService.validate_upload(
            content, content_type, ALLOWED_IMAGE_TYPES, settings.max_image_upload_bytes
        )

        extension = StorageService.file_extension(
            filename, IMAGE_EXTENSIONS.get(content_type, "jpg")
        )
        timestamp = int(time.time() * 1000)
        path = f"{image_type}/{timestamp}-{StorageService.random_token()}.{extension}"

        bucket = settings.CHALLENGE_IMAGE_BUCKET
        StorageService.upload(bucket, path, content, content_type, upsert=False)

        return {"path": path, "url": StorageService.get_public_url(bucket, path)}

    # -------------------------------------------------------------------------
    # Retrieval
    # -------------------------------------------------------------------------

    @staticmethod
    def _signed_url_from(result: Any) -> str | None:
        if isinstance(result, dict):
            return result.get("signedUrl") or result.get("signedURL")
        return getattr(result, "signed_url", None)

    @staticmethod
    def create_signed_url(bucket: str, path: str) -> str:
        """
        Get a time-limited URL for a stored object.

        Full URLs are returned unchanged without calling storage.

        Raises:
            BackendError: If signing fails
        """
        if StorageService.is_full_url(path):
            return path

        client = SupabaseClient.get_client()

        try:
            result = client.storage.from_(bucket).create_signed_url(
                path, settings.SIGNED_URL_EXPIRY_SECONDS
            )
        except Exception as e:
            logger.error(f"Failed to create signed URL for {bucket}/{path}: {e}")
            raise BackendError("Failed to create signed URL", e)

        url = StorageService._signed_url_from(result)
        if not url:
            logger.error(f"Storage returned no signed URL for {bucket}/{path}")
            raise BackendError("Failed to create signed URL", "no URL returned")
        return url

    @staticmethod
    def create_signed_url_from_buckets(buckets: list[str], path: str) -> str:
        """
        Sign `path` against each candidate bucket in order.

        Returns the first URL obtained. Full URLs are returned unchanged
        without calling storage.

        Raises:
            BackendError: If every bucket failed (carries the last error)
        """
        if StorageService.is_full_url(path):
            return path

        client = SupabaseClient.get_client()
        last_error: Exception | str | None = None

        for bucket in buckets:
            try:
                result = client.storage.from_(bucket).create_signed_url(
                    path, settings.SIGNED_URL_EXPIRY_SECONDS
                )
            except Exception as e:
                logger.debug(f"Signing {path} in bucket {bucket} failed: {e}")
                last_error = e
                continue

            url = StorageService._signed_url_from(result)
            if url:
                return url
            last_error = f"no URL returned by bucket {bucket}"

        logger.error(f"Failed to create signed URL for {path} in {buckets}: {last_error}")
        raise BackendError("Failed to create signed URL", last_error)

    @staticmethod
    def get_public_url(bucket: str, path: str) -> str:
        """
        Get a public URL for a file in a public bucket.

        Raises:
            BackendError: If the URL cannot be built
        """
        client = SupabaseClient.get_client()

        try:
            return client.storage.from_(bucket).get_public_url(path)
        except Exception as e:
            logger.error(f"Failed to get public URL for {bucket}/{path}: {e}")
            raise BackendError("Failed to get public URL", e)
