from __future__ import annotations

import hashlib
import logging

from .errors import DigestError
from .models import DEFAULT_CHUNK_SIZE

logger = logging.getLogger(__name__)

DIGEST_SIZE = 32


class ContentDigester:
    """SHA-256 over a file's full byte content, streamed in chunks."""

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = chunk_size

    def digest(self, path: str) -> bytes:
        """Return the 32-byte digest of ``path``.

        Raises:
            DigestError: the file could not be opened or read to the end.
        """
        hasher = hashlib.sha256()
        try:
            with open(path, "rb") as handle:
                while chunk := handle.read(self.chunk_size):
                    hasher.update(chunk)
        except OSError as exc:
            raise DigestError(path, exc.strerror or str(exc)) from exc
        logger.debug("Digested %s", path)
        return hasher.digest()


def hex_digest(digest: bytes) -> str:
    return digest.hex()
