"""
Blob storage helpers for attachments.

Files are written through Django's default_storage below the bucket prefix
(settings.FILE_STORAGE_BUCKET, "files" by default) using the folder
conventions:

    manufacturing/          manufacturing invoice attachments
    invoices/buy            buy invoice attachments
    invoices/sell           sell invoice attachments
    daily-reports/          daily report attachments
    medicine-consumption/   medicine consumption attachments

Generated names look like ``{epoch_millis}_{random}.{ext}``.
"""

import logging
import os
import time
from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from django.core.files.storage import default_storage
from django.utils.crypto import get_random_string

logger = logging.getLogger(__name__)

MANUFACTURING_FOLDER = 'manufacturing'
INVOICE_BUY_FOLDER = 'invoices/buy'
INVOICE_SELL_FOLDER = 'invoices/sell'
DAILY_REPORTS_FOLDER = 'daily-reports'
MEDICINE_CONSUMPTION_FOLDER = 'medicine-consumption'

_NAME_CHARS = 'abcdefghijklmnopqrstuvwxyz0123456789'


@dataclass
class UploadResult:
    success: bool
    error: Optional[str] = None
    file_url: Optional[str] = None
    file_path: Optional[str] = None


def _bucket():
    return settings.FILE_STORAGE_BUCKET.strip('/')


def generate_file_name(original_name):
    ext = os.path.splitext(original_name or '')[1].lstrip('.') or 'bin'
    return f"{int(time.time() * 1000)}_{get_random_string(13, _NAME_CHARS)}.{ext}"


def upload_file(uploaded_file, folder, file_name=None):
    """
    Upload a file into `folder`.

    Returns an UploadResult whose file_path is relative to the bucket, the
    same value delete_file() and get_file_path_from_url() work with.
    """
    size = getattr(uploaded_file, 'size', None)
    if size is not None and size > settings.MAX_UPLOAD_SIZE:
        return UploadResult(
            success=False,
            error=f"File exceeds maximum upload size of {settings.MAX_UPLOAD_SIZE} bytes",
        )

    file_path = f"{folder.strip('/')}/{file_name or generate_file_name(uploaded_file.name)}"
    try:
        stored_name = default_storage.save(f"{_bucket()}/{file_path}", uploaded_file)
    except Exception as exc:
        logger.error(f"Storage upload error for {file_path}: {exc}")
        return UploadResult(success=False, error=str(exc) or 'Failed to upload file')

    # Storage may rename on collision; keep the path it actually used
    file_path = stored_name.split(f"{_bucket()}/", 1)[-1]
    return UploadResult(
        success=True,
        file_url=default_storage.url(stored_name),
        file_path=file_path,
    )


def delete_file(file_path):
    """Delete a bucket-relative file; a missing file is not an error."""
    try:
        default_storage.delete(f"{_bucket()}/{file_path}")
    except Exception as exc:
        logger.error(f"Storage delete error for {file_path}: {exc}")
        return UploadResult(success=False, error=str(exc) or 'Failed to delete file')
    return UploadResult(success=True, file_path=file_path)


def get_file_path_from_url(file_url):
    """Recover the bucket-relative path from a public URL (text after /files/)."""
    if not file_url:
        return None
    marker = f"/{_bucket()}/"
    if marker not in file_url:
        return None
    return file_url.split(marker, 1)[1].split('?', 1)[0]
