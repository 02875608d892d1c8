"""
Attachment rows and their upload/delete actions.

Four parents carry attachments (invoices, manufacturing invoices, medicine
consumption invoices, daily reports). Each app declares a concrete model
from AttachmentBase and a small AttachmentService subclass naming the parent
model, the foreign key, the storage folder and the routes to revalidate.
"""

import logging
import uuid

from django.db import DatabaseError, models, transaction

from .actions import ActionResult, action, get_or_404
from .cache import revalidate_path
from .storage import delete_file, get_file_path_from_url, upload_file

logger = logging.getLogger(__name__)


class AttachmentBase(models.Model):
    """Uploaded file metadata; the file itself lives in blob storage."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    file_url = models.CharField(max_length=500, help_text="Public URL of the stored file")
    file_name = models.CharField(max_length=255, help_text="Original file name")
    file_type = models.CharField(max_length=100, blank=True, help_text="MIME type")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True
        ordering = ['created_at']

    def __str__(self):
        return self.file_name


class AttachmentService:
    model = None
    parent_model = None
    parent_field = None
    folder = None
    parent_label = 'Record'

    @classmethod
    def get_folder(cls, parent):
        return cls.folder

    @classmethod
    def revalidate_paths(cls, parent_id):
        return ()

    @classmethod
    @action('Failed to get attachments')
    def list(cls, parent_id):
        return list(cls.model.objects.filter(**{f"{cls.parent_field}_id": parent_id}).order_by('created_at'))

    @classmethod
    @action('Failed to create attachment')
    def create(cls, parent_id, uploaded_file):
        parent = get_or_404(cls.parent_model, f"{cls.parent_label} not found", pk=parent_id)

        upload = upload_file(uploaded_file, cls.get_folder(parent))
        if not upload.success or not upload.file_url:
            return ActionResult.fail(upload.error or 'Upload failed')

        try:
            with transaction.atomic():
                attachment = cls.model.objects.create(
                    **{cls.parent_field: parent},
                    file_url=upload.file_url,
                    file_name=uploaded_file.name,
                    file_type=getattr(uploaded_file, 'content_type', '') or '',
                )
        except DatabaseError as exc:
            # Row insert failed after the upload: remove the orphaned file
            logger.error(f"Attachment insert failed for {cls.parent_label} {parent_id}: {exc}")
            delete_file(upload.file_path)
            return ActionResult.fail(str(exc) or 'Failed to save attachment')

        logger.info(f"Attachment {attachment.file_name} added to {cls.parent_label} {parent_id}")
        revalidate_path(*cls.revalidate_paths(parent_id))
        return ActionResult.ok(attachment)

    @classmethod
    @action('Failed to delete attachment')
    def delete(cls, attachment_id):
        attachment = get_or_404(cls.model, 'Attachment not found', pk=attachment_id)
        parent_id = getattr(attachment, f"{cls.parent_field}_id")
        file_url = attachment.file_url

        attachment.delete()

        file_path = get_file_path_from_url(file_url)
        if file_path:
            delete_file(file_path)

        revalidate_path(*cls.revalidate_paths(parent_id))
        return ActionResult.ok()
