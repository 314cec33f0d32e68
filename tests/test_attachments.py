"""
Tests for local attachment storage.
"""

import pytest

from trellomcp.integrations.trello import Attachment, AttachmentStorage
from trellomcp.integrations.trello.attachments import safe_file_name


class TestSafeFileName:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("report.pdf", "report.pdf"),
            ("my report (final).pdf", "my_report_final_.pdf"),
            ("../../etc/passwd", "passwd"),
            ("..", "attachment"),
            ("", "attachment"),
        ],
    )
    def test_sanitizes(self, name, expected):
        assert safe_file_name(name) == expected


class TestAttachmentStorage:
    def test_save_layout(self, tmp_path):
        storage = AttachmentStorage(tmp_path)
        attachment = Attachment(id="a1", name="Screenshot", file_name="shot.png")

        path = storage.save("c1", attachment, b"\x89PNG")

        assert path == storage.root / "c1" / "a1_shot.png"
        assert path.read_bytes() == b"\x89PNG"

    def test_falls_back_to_name(self, tmp_path):
        storage = AttachmentStorage(tmp_path)

        path = storage.path_for("c1", Attachment(id="a2", name="notes.txt"))

        assert path.name == "a2_notes.txt"

    def test_save_overwrites(self, tmp_path):
        storage = AttachmentStorage(tmp_path)
        attachment = Attachment(id="a1", file_name="f.txt")

        storage.save("c1", attachment, b"one")
        path = storage.save("c1", attachment, b"two")

        assert path.read_bytes() == b"two"

    def test_delete_removes_empty_card_dir(self, tmp_path):
        storage = AttachmentStorage(tmp_path)
        path = storage.save("c1", Attachment(id="a1", file_name="f.txt"), b"x")

        assert storage.delete(path) is True
        assert not path.exists()
        assert not (storage.root / "c1").exists()

    def test_delete_keeps_non_empty_card_dir(self, tmp_path):
        storage = AttachmentStorage(tmp_path)
        first = storage.save("c1", Attachment(id="a1", file_name="f.txt"), b"x")
        second = storage.save("c1", Attachment(id="a2", file_name="g.txt"), b"y")

        storage.delete(first)

        assert second.exists()

    def test_delete_missing_file(self, tmp_path):
        storage = AttachmentStorage(tmp_path)

        assert storage.delete(tmp_path / "c1" / "nothing.txt") is False

    def test_delete_outside_root_refused(self, tmp_path):
        storage = AttachmentStorage(tmp_path / "store")
        outside = tmp_path / "other.txt"
        outside.write_text("keep")

        with pytest.raises(ValueError, match="outside attachment directory"):
            storage.delete(outside)

        assert outside.exists()

    def test_delete_traversal_refused(self, tmp_path):
        storage = AttachmentStorage(tmp_path / "store")
        (tmp_path / "secret.txt").write_text("keep")

        with pytest.raises(ValueError):
            storage.delete(storage.root / ".." / "secret.txt")
