"""
Local storage for downloaded attachments.

Files are written under `<root>/<card_id>/<attachment_id>_<file name>`.
Deletion is restricted to paths inside the root directory.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from trellomcp.integrations.trello.schemas import Attachment

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def safe_file_name(name: str) -> str:
    """Reduce a file name to a single safe path component."""
    cleaned = _UNSAFE_CHARS.sub("_", Path(name).name).strip("._")
    return cleaned or "attachment"


@dataclass
class AttachmentStorage:
    """Saves attachment content to, and removes it from, a local directory."""

    root: Path

    def __post_init__(self) -> None:
        self.root = Path(self.root).expanduser().resolve()

    def path_for(self, card_id: str, attachment: Attachment) -> Path:
        file_name = safe_file_name(attachment.file_name or attachment.name or attachment.id)
        return self.root / safe_file_name(card_id) / f"{safe_file_name(attachment.id)}_{file_name}"

    def save(self, card_id: str, attachment: Attachment, content: bytes) -> Path:
        """Write content to disk, replacing any earlier download."""
        path = self.path_for(card_id, attachment)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        logger.info(f"[attachments] Saved {attachment.id} to {path} ({len(content)} bytes)")
        return path

    def delete(self, path: str | Path) -> bool:
        """
        Remove a previously saved file.

        Returns:
            True if a file was removed, False if it did not exist

        Raises:
            ValueError: If the path is outside the storage root
        """
        target = Path(path).expanduser().resolve()
        if not target.is_relative_to(self.root):
            raise ValueError(f"Refusing to delete outside attachment directory: {target}")
        if not target.is_file():
            return False

        target.unlink()
        logger.info(f"[attachments] Deleted {target}")

        # Drop the per-card directory once it is empty
        parent = target.parent
        if parent != self.root and not any(parent.iterdir()):
            parent.rmdir()
        return True
