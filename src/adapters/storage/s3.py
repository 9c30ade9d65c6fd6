"""
S3 avatar storage adapter - Implements AvatarStorage protocol via boto3.

Credentials come from StorageConfig; when no access key is configured
boto3 falls back to its default chain (instance profile, environment).
Objects are written without an ACL unless one is configured; the bucket
policy is expected to grant public reads on the avatars/ prefix.
"""

import logging
from typing import Any

import boto3

from src.config.settings import StorageConfig

logger = logging.getLogger(__name__)


class S3AvatarStorage:
    """
    Implements AvatarStorage protocol on an S3 bucket.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, config: StorageConfig, client: Any = None) -> None:
        """
        Initialize storage for the configured bucket.

        Args:
            config: Resolved storage configuration (backend "s3")
            client: Optional pre-built S3 client, mainly for tests
        """
        if not config.bucket:
            raise ValueError("S3 storage requires a bucket")
        self._bucket = config.bucket
        self._region = config.region
        self._acl = config.acl
        self._client = client or boto3.client(
            "s3",
            aws_access_key_id=config.access_key,
            aws_secret_access_key=config.secret_key,
            region_name=config.region,
        )

    def store(self, key: str, data: bytes, content_type: str | None) -> str:
        params: dict[str, Any] = {"Bucket": self._bucket, "Key": key, "Body": data}
        if content_type:
            params["ContentType"] = content_type
        if self._acl:
            params["ACL"] = self._acl

        self._client.put_object(**params)
        logger.info("Uploaded %s to bucket %s", key, self._bucket)
        return f"https://{self._bucket}.s3.{self._region}.amazonaws.com/{key}"
