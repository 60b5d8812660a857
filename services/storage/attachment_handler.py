"""
Attachment Handler — stores uploaded CV documents in AWS S3 (via boto3) or in
a local directory that mirrors the bucket layout.
"""

import os
import logging

import boto3
from botocore.exceptions import ClientError
from typing import Optional

from config.models import CVAttachment
from config.settings import AWSConfig, PortalConfig, get_aws_config, get_portal_config

logger = logging.getLogger(__name__)


class AttachmentHandler:
    """Unified CV file storage with AWS + local-filesystem S3 emulation."""

    def __init__(self, aws_config: Optional[AWSConfig] = None, portal_config: Optional[PortalConfig] = None):
        self.aws = aws_config or get_aws_config()
        self.portal = portal_config or get_portal_config()

        self.local_mode = self.portal.local_mode
        self.root = os.path.join(self.portal.local_root, "attachments")
        self.bucket = self.aws.attachments_bucket

        if self.local_mode:
            logger.info(f"AttachmentHandler running in LOCAL mode. Root: {self.root}")
        else:
            logger.info("AttachmentHandler running in AWS mode.")
            self.s3 = boto3.client(
                "s3",
                region_name=self.aws.region,
                aws_access_key_id=self.aws.aws_access_key,
                aws_secret_access_key=self.aws.aws_secret_key,
                aws_session_token=self.aws.aws_session_token,
            )

    # ================================================================
    # LOCAL FILESYSTEM HELPERS
    # ================================================================

    def _fs_path(self, key: str) -> str:
        """Map key → local filesystem path."""
        safe_key = key.lstrip("/")
        return os.path.join(self.root, self.bucket, safe_key)

    def _write_file_fs(self, path: str, data: bytes):
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "wb") as f:
            f.write(data)

    # ================================================================
    # PUBLIC METHODS
    # ================================================================

    def upload_attachment(self, attachment: CVAttachment, key_prefix: str) -> str:
        """Store a CV document under `<key_prefix>/<filename>` and return its key."""
        key = f"{key_prefix.strip('/')}/{attachment.filename}"

        if self.local_mode:
            path = self._fs_path(key)
            logger.info(f"[LOCAL] Upload CV: {path}")
            self._write_file_fs(path, attachment.data)
            return key

        logger.info(f"[AWS] Upload CV: s3://{self.bucket}/{key} ({attachment.size} bytes)")
        self.s3.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=attachment.data,
            ContentType=attachment.content_type,
            Metadata={"original-filename": attachment.filename},
        )
        return key

    def delete_object(self, key: str):
        """Remove a stored CV document; missing objects are ignored."""
        if self.local_mode:
            path = self._fs_path(key)
            if os.path.exists(path):
                os.remove(path)
            logger.info(f"[LOCAL] Deleted CV: {path}")
            return

        logger.info(f"[AWS] Delete CV: s3://{self.bucket}/{key}")
        self.s3.delete_object(Bucket=self.bucket, Key=key)

    def check_file_exists(self, key: str) -> bool:
        """Return True if the CV document exists."""
        if self.local_mode:
            return os.path.exists(self._fs_path(key))

        try:
            self.s3.head_object(Bucket=self.bucket, Key=key)
            return True
        except ClientError:
            return False
