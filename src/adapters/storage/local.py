"""
Local filesystem avatar storage - Implements AvatarStorage protocol.

Used outside production. Files land under a directory that the API
serves as static files.
"""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class LocalAvatarStorage:
    """
    Implements AvatarStorage protocol on local disk.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, root: str | Path, url_prefix: str = "/uploads") -> None:
        self._root = Path(root)
        self._url_prefix = url_prefix.rstrip("/")

    def store(self, key: str, data: bytes, content_type: str | None) -> str:
        path = (self._root / key).resolve()
        if self._root.resolve() not in path.parents:
            raise ValueError(f"Storage key escapes upload directory: {key}")

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.debug("Wrote %d bytes to %s", len(data), path)
        return f"{self._url_prefix}/{key}"
