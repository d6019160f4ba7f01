"""
File Storage

Stores uploaded student materials on the local filesystem. Every object is
namespaced by the owning student's ID: `students/{student_id}/{name}`.
"""

import asyncio
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class FileStorage:
    """Local-disk object storage returning public URLs for stored files."""

    def __init__(self, root: str | Path, public_url: str):
        self.root = Path(root)
        self.public_url = public_url.rstrip("/")

    @staticmethod
    def object_key(student_id: str, name: str) -> str:
        return f"students/{student_id}/{name}"

    def _write(self, key: str, content: bytes) -> None:
        path = self.root / key
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)

    async def save(self, student_id: str, name: str, content: bytes) -> str:
        """
        Write a file for a student, replacing any previous object of that name.

        Returns:
            The URL the stored file is served from
        """
        key = self.object_key(student_id, name)
        await asyncio.to_thread(self._write, key, content)
        logger.info(f"Stored {len(content)} bytes at {key}")
        return f"{self.public_url}/{key}"
