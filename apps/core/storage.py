"""
Supabase Storage Service for participant uploads

Provides Supabase Storage operations for attachments:
- Per-user storage paths for each upload kind
- Size-limited uploads that return a public URL
- File deletion
"""
import logging
import re
import time
from dataclasses import dataclass
from uuid import UUID

import httpx
from django.conf import settings

from .exceptions import UpstreamError, ValidationError

logger = logging.getLogger(__name__)

# Upload kind -> (bucket setting key, upsert)
UPLOAD_KINDS = {
    'task_attachment': ('task_attachments', False),
    'document': ('documents', False),
    'trade_receipt': ('documents', False),
    'enrollment': ('documents', True),
    'avatar': ('documents', True),
}


def _get_storage_headers() -> dict:
    """Get headers for Supabase Storage API requests."""
    service_key = settings.SUPABASE_SERVICE_ROLE_KEY
    return {
        'Authorization': f'Bearer {service_key}',
        'apikey': service_key,
    }


def _extension(file_name: str) -> str:
    """Lower-cased extension without the dot, 'bin' when there is none."""
    if '.' not in file_name:
        return 'bin'
    ext = file_name.rsplit('.', 1)[-1].lower()
    return re.sub(r'[^a-z0-9]', '', ext) or 'bin'


@dataclass
class UploadResult:
    """Result of file upload operation."""
    success: bool
    bucket: str | None = None
    storage_path: str | None = None
    public_url: str | None = None
    size: int | None = None
    content_type: str | None = None
    error: str | None = None


@dataclass
class DeleteResult:
    """Result of file deletion operation."""
    success: bool
    deleted_count: int = 0
    error: str | None = None


def bucket_for(kind: str) -> str:
    bucket_key, _ = UPLOAD_KINDS[kind]
    return settings.STORAGE_BUCKETS[bucket_key]


def max_size_for(kind: str) -> int:
    return settings.UPLOAD_LIMITS[kind]


def validate_file(kind: str, size: int) -> str | None:
    """
    Validate file size before upload.

    Returns error message if validation fails, None if valid.
    """
    if size == 0:
        return 'File is empty'

    limit = max_size_for(kind)
    if size > limit:
        return f'File size exceeds limit. Maximum size is {limit // (1024 * 1024)}MB.'

    return None


def generate_storage_path(
    kind: str,
    user_id: UUID,
    file_name: str,
    *,
    document_type: str | None = None,
    task_id: UUID | None = None,
    timestamp_ms: int | None = None,
) -> str:
    """
    Generate the per-user storage path for an upload.

    Formats:
        task_attachment: {user}/{task}/{ts}.{ext}
        document:        {user}/{document_type}_{ts}.{ext}
        trade_receipt:   {user}/trades/{ts}.{ext}
        enrollment:      {user}/enrollment-{ts}.{ext}
        avatar:          {user}/avatar.{ext}
    """
    ts = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
    ext = _extension(file_name)

    if kind == 'task_attachment':
        return f'{user_id}/{task_id}/{ts}.{ext}'
    if kind == 'document':
        return f'{user_id}/{document_type}_{ts}.{ext}'
    if kind == 'trade_receipt':
        return f'{user_id}/trades/{ts}.{ext}'
    if kind == 'enrollment':
        return f'{user_id}/enrollment-{ts}.{ext}'
    if kind == 'avatar':
        return f'{user_id}/avatar.{ext}'
    raise ValueError(f'Unknown upload kind: {kind}')


def public_url(bucket: str, storage_path: str) -> str:
    return f'{settings.SUPABASE_URL}/storage/v1/object/public/{bucket}/{storage_path}'


def upload_file(
    bucket: str,
    storage_path: str,
    file_content: bytes,
    content_type: str,
    upsert: bool = False,
) -> UploadResult:
    """
    Upload bytes to a Supabase Storage bucket.

    Returns:
        UploadResult with the public URL or an error
    """
    upload_url = f'{settings.SUPABASE_URL}/storage/v1/object/{bucket}/{storage_path}'

    headers = _get_storage_headers()
    headers['Content-Type'] = content_type or 'application/octet-stream'
    if upsert:
        headers['x-upsert'] = 'true'

    try:
        with httpx.Client(timeout=60.0) as client:
            response = client.post(upload_url, content=file_content, headers=headers)
    except httpx.RequestError as e:
        logger.error(f'Storage request error: {e}')
        return UploadResult(success=False, error='Storage service unavailable')

    if not response.is_success:
        logger.error(f'Supabase storage upload failed: {response.text}')
        return UploadResult(success=False, error=f'Storage upload failed: {response.status_code}')

    return UploadResult(
        success=True,
        bucket=bucket,
        storage_path=storage_path,
        public_url=public_url(bucket, storage_path),
        size=len(file_content),
        content_type=content_type,
    )


def upload_user_file(
    kind: str,
    user_id: UUID,
    uploaded_file,
    *,
    document_type: str | None = None,
    task_id: UUID | None = None,
) -> UploadResult:
    """
    Validate and upload a Django UploadedFile for a participant.

    Raises:
        ValidationError: file is empty or over the limit for its kind
        UpstreamError: Supabase Storage rejected or could not be reached
    """
    error = validate_file(kind, uploaded_file.size)
    if error:
        raise ValidationError(error)

    bucket = bucket_for(kind)
    _, upsert = UPLOAD_KINDS[kind]
    storage_path = generate_storage_path(
        kind,
        user_id,
        uploaded_file.name,
        document_type=document_type,
        task_id=task_id,
    )

    result = upload_file(
        bucket,
        storage_path,
        uploaded_file.read(),
        getattr(uploaded_file, 'content_type', None) or 'application/octet-stream',
        upsert=upsert,
    )
    if not result.success:
        raise UpstreamError(result.error or 'Failed to upload file')

    logger.info(f'Uploaded {kind} for {user_id} to {bucket}/{storage_path}')
    return result


def delete_file(bucket: str, storage_path: str) -> DeleteResult:
    """
    Delete a single file from storage.
    """
    delete_url = f'{settings.SUPABASE_URL}/storage/v1/object/{bucket}'

    try:
        with httpx.Client(timeout=30.0) as client:
            response = client.request(
                'DELETE',
                delete_url,
                headers=_get_storage_headers(),
                json={'prefixes': [storage_path]},
            )
    except httpx.RequestError as e:
        logger.error(f'Storage request error: {e}')
        return DeleteResult(success=False, error='Storage service unavailable')

    if not response.is_success:
        logger.error(f'Failed to delete file: {response.text}')
        return DeleteResult(success=False, error='Failed to delete file')

    return DeleteResult(success=True, deleted_count=1)


def storage_path_from_url(url: str | None, bucket: str) -> str | None:
    """Recover the object path from a public URL issued by public_url()."""
    if not url:
        return None
    marker = f'/storage/v1/object/public/{bucket}/'
    if marker not in url:
        return None
    return url.split(marker, 1)[1]
