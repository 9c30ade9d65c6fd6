"""Avatar storage adapters - Local disk and S3 implementations."""

from src.config.settings import StorageConfig

from .local import LocalAvatarStorage
from .s3 import S3AvatarStorage


def build_avatar_storage(config: StorageConfig) -> LocalAvatarStorage | S3AvatarStorage:
    """Construct the adapter selected by the storage configuration."""
    if config.backend == "s3":
        return S3AvatarStorage(config)
    return LocalAvatarStorage(config.upload_dir, config.url_prefix)


__all__ = ["LocalAvatarStorage", "S3AvatarStorage", "build_avatar_storage"]
