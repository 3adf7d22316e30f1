"""
test_media_manager.py
---------------------
Unit tests for MediaManager: stored uploads, renames and deletes.

Usage:
    python -m pytest tests/unit/managers/test_media_manager.py -v
"""
import re

import pytest

from folio.core.exceptions import ConflictError, ValidationError
from folio.database.managers import MediaManager
from folio.database.models import MediaType

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 24


class TestGenerateUniqueFilename:
    """Test MediaManager.generate_unique_filename()."""

    def test_format(self):
        """Test stem, millisecond timestamp, random suffix and extension."""
        name = MediaManager.generate_unique_filename("Team Photo.JPG")
        assert re.fullmatch(r"team-photo-\d{13}-[0-9a-z]{6}\.jpg", name)

    def test_without_extension(self):
        """Test names without an extension get none."""
        assert re.fullmatch(r"readme-\d{13}-[0-9a-z]{6}", MediaManager.generate_unique_filename("README"))

    def test_unusable_stem(self):
        """Test a stem with no safe characters becomes 'file'."""
        assert MediaManager.generate_unique_filename("???.png").startswith("file-")

    def test_names_differ(self):
        """Test two calls produce different names."""
        assert MediaManager.generate_unique_filename("a.png") != MediaManager.generate_unique_filename("a.png")


class TestStoreUpload:
    """Test MediaManager.store_upload()."""

    def test_writes_file_and_row(self, media_manager, upload_dir):
        """Test the bytes land in the upload directory and the row describes them."""
        media = media_manager.store_upload("Cover.PNG", PNG_BYTES, "image/png", alt_text="Cover")

        stored = upload_dir / media.filename
        assert stored.read_bytes() == PNG_BYTES
        assert media.file_url == f"/uploads/{media.filename}"
        assert media.original_filename == "Cover.PNG"
        assert media.file_type == MediaType.IMAGE
        assert media.file_size == len(PNG_BYTES)
        assert media.alt_text == "Cover"

    def test_unknown_mime_is_document(self, media_manager):
        """Test missing content types default to a document."""
        media = media_manager.store_upload("notes.txt", b"hello")
        assert media.mime_type == "application/octet-stream"
        assert media.file_type == MediaType.DOCUMENT

    def test_requires_name(self, media_manager):
        """Test an upload without a filename is rejected."""
        with pytest.raises(ValidationError):
            media_manager.store_upload("", b"data")

    def test_create_duplicate_filename(self, media_manager):
        """Test a row cannot reuse a stored filename."""
        media_manager.create({"filename": "logo.svg", "mime_type": "image/svg+xml"})
        with pytest.raises(ConflictError):
            media_manager.create({"filename": "logo.svg", "mime_type": "image/svg+xml"})


class TestMediaQueries:
    """Test listing and statistics."""

    @pytest.fixture
    def library(self, media_manager):
        return [
            media_manager.store_upload("beach.jpg", b"x" * 100, "image/jpeg", alt_text="Sunset beach"),
            media_manager.store_upload("clip.mp4", b"x" * 300, "video/mp4"),
            media_manager.store_upload("resume.pdf", b"x" * 50, "application/pdf"),
        ]

    def test_filter_by_type(self, media_manager, library):
        """Test plural and singular type filters."""
        assert media_manager.get_all(file_type="images").total == 1
        assert media_manager.get_all(file_type="video").total == 1
        assert media_manager.get_all(file_type="unknown").total == 3

    def test_search(self, media_manager, library):
        """Test search over original name and alt text."""
        assert media_manager.get_all(search="sunset").total == 1
        assert media_manager.get_all(search="resume").total == 1

    def test_storage_stats(self, media_manager, library):
        """Test counts per type and total size."""
        assert media_manager.get_storage_stats() == {
            "total_files": 3,
            "total_size": 450,
            "image_count": 1,
            "video_count": 1,
            "document_count": 1,
        }

    def test_empty_storage_stats(self, media_manager):
        """Test stats on an empty library are zero."""
        assert media_manager.get_storage_stats()["total_size"] == 0


class TestRename:
    """Test MediaManager.rename()."""

    @pytest.fixture
    def image(self, media_manager):
        return media_manager.store_upload("photo.png", PNG_BYTES, "image/png")

    def test_rename_keeps_extension(self, media_manager, image, upload_dir, db_session):
        """Test a bare name gains the current extension and the file moves on commit."""
        old_path = upload_dir / image.filename

        media_manager.rename(image.id, "Cover")
        assert old_path.exists()
        db_session.commit()

        assert image.filename == "cover.png"
        assert image.file_url == "/uploads/cover.png"
        assert (upload_dir / "cover.png").exists()
        assert not old_path.exists()

    def test_rename_different_extension(self, media_manager, image):
        """Test a different extension is kept and the real one appended."""
        media_manager.rename(image, "cover.jpg")
        assert image.filename == "cover.jpg.png"

    @pytest.mark.parametrize("name", ["", "   ", "!!!"])
    def test_rename_empty(self, media_manager, image, name):
        """Test names that sanitize to nothing are rejected."""
        with pytest.raises(ValidationError):
            media_manager.rename(image, name)

    def test_rename_conflict(self, media_manager, image):
        """Test another file's name cannot be taken."""
        media_manager.create({"filename": "taken.png", "mime_type": "image/png"})
        with pytest.raises(ConflictError):
            media_manager.rename(image, "taken")

    def test_rename_missing(self, media_manager):
        """Test renaming a missing row returns None."""
        assert media_manager.rename(999, "anything") is None


class TestUpdateDelete:
    """Test update, delete and delete_multiple."""

    def test_update_alt_text(self, media_manager):
        """Test alt text can be set and cleared."""
        media = media_manager.store_upload("a.png", PNG_BYTES, "image/png")
        media_manager.update(media.id, {"alt_text": "Diagram"})
        assert media.alt_text == "Diagram"
        media_manager.update(media.id, {"alt_text": None})
        assert media.alt_text is None

    def test_delete_removes_file(self, media_manager, upload_dir, db_session):
        """Test the row is removed and the file follows on commit."""
        media = media_manager.store_upload("gone.png", PNG_BYTES, "image/png")
        path = upload_dir / media.filename

        assert media_manager.delete(media.id) is True
        assert path.exists()
        db_session.commit()
        assert not path.exists()
        assert media_manager.get_by_id(media.id) is None

    def test_delete_without_file(self, media_manager):
        """Test rows whose file is already gone still delete."""
        media = media_manager.create({"filename": "ghost.png", "mime_type": "image/png"})
        assert media_manager.delete(media) is True

    def test_delete_multiple_skips_invalid(self, media_manager):
        """Test bad and unknown ids are skipped."""
        first = media_manager.store_upload("1.png", PNG_BYTES, "image/png")
        second = media_manager.store_upload("2.png", PNG_BYTES, "image/png")

        deleted = media_manager.delete_multiple([first.id, "abc", 999, second.id])

        assert deleted == 2
        assert media_manager.get_all().total == 0


class TestFilesFollowTransaction:
    """Test disk changes wait for commit and are undone on rollback."""

    def test_rolled_back_delete_keeps_file(self, media_manager, upload_dir, db_session):
        """Test the file and the row survive a delete that is rolled back."""
        media = media_manager.store_upload("keep.png", PNG_BYTES, "image/png")
        db_session.commit()
        path = upload_dir / media.filename

        assert media_manager.delete(media.id) is True
        db_session.rollback()

        assert path.exists()
        assert media_manager.get_by_id(media.id) is not None

    def test_failed_delete_multiple_keeps_files(self, test_db, upload_dir):
        """Test an error after delete_multiple leaves every file in place."""
        with test_db.session_scope() as session:
            manager = MediaManager(session, upload_dir=upload_dir)
            ids = [
                manager.store_upload(f"{n}.png", PNG_BYTES, "image/png").id
                for n in range(2)
            ]
            names = [manager.get_by_id(media_id).filename for media_id in ids]

        with pytest.raises(RuntimeError):
            with test_db.session_scope() as session:
                MediaManager(session, upload_dir=upload_dir).delete_multiple(ids)
                raise RuntimeError("request failed")

        assert all((upload_dir / name).exists() for name in names)
        with test_db.session_scope() as session:
            assert MediaManager(session, upload_dir=upload_dir).get_all().total == 2

    def test_rolled_back_rename_keeps_file(self, media_manager, upload_dir, db_session):
        """Test the file stays at its old name when the rename is rolled back."""
        media = media_manager.store_upload("before.png", PNG_BYTES, "image/png")
        db_session.commit()
        old_path = upload_dir / media.filename

        media_manager.rename(media.id, "after")
        db_session.rollback()

        assert old_path.exists()
        assert not (upload_dir / "after.png").exists()

    def test_rolled_back_upload_removes_file(self, media_manager, upload_dir, db_session):
        """Test a stored upload whose row is rolled back leaves no file."""
        media = media_manager.store_upload("temp.png", PNG_BYTES, "image/png")
        path = upload_dir / media.filename
        assert path.exists()

        db_session.rollback()

        assert not path.exists()

    def test_savepoint_rollback_keeps_earlier_upload(self, media_manager, upload_dir, db_session):
        """Test only the file written inside a rolled-back savepoint is removed."""
        with db_session.begin_nested():
            kept = media_manager.store_upload("kept.png", PNG_BYTES, "image/png")
        kept_id, kept_path = kept.id, upload_dir / kept.filename

        savepoint = db_session.begin_nested()
        dropped = media_manager.store_upload("dropped.png", PNG_BYTES, "image/png")
        dropped_path = upload_dir / dropped.filename
        savepoint.rollback()
        db_session.commit()

        assert kept_path.exists()
        assert not dropped_path.exists()
        assert media_manager.get_by_id(kept_id) is not None
