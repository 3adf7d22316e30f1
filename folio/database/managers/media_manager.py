#!/usr/bin/env python3
"""
media_manager.py
--------------------
Manages uploaded media files: the media_files rows and the files they
describe inside the upload directory.

Key Features:
    - Listing with search and type filter (image/video/document)
    - Upload storage with collision-free generated filenames
    - Rename on disk and in the database
    - File moves and removals deferred until the transaction commits
    - Row deletion with best-effort file removal
    - Storage statistics

Usage:
    media = MediaManager(session, logger, upload_dir=Path("static/uploads"))

    item = media.store_upload("Team Photo.JPG", data, "image/jpeg")
    media.rename(item.id, "team.jpg")
    media.delete(item.id)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import secrets
import string
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

# --- Third party imports ---
from sqlalchemy import case, event, func, select
from sqlalchemy.orm import Session, SessionTransaction

# --- Local imports ---
from folio.core.exceptions import ConflictError, ValidationError
from folio.core.logging_manager import FolioLogger, safe_logger
from folio.core.paths import UPLOAD_DIR
from folio.core.validators import DataValidator
from folio.database.decorators import (
    handle_db_errors,
    log_database_operation,
    validate_metadata,
)
from folio.database.models import MediaFile, MediaType
from folio.database.pagination import PaginatedResult, paginate
from folio.utils.slugify import sanitize_filename, split_extension
from .base_manager import BaseManager

BASE36 = string.digits + string.ascii_lowercase
URL_PREFIX = "/uploads"

PENDING_FILE_OPS = "pending_media_file_ops"


# -----------------------------------------------------------------------------
# Deferred file operations
# -----------------------------------------------------------------------------
# Files on disk follow the database: moves and removals run once the root
# transaction commits, and files written for rows that get rolled back are
# removed again.


@dataclass
class PendingFileOperation:
    """
    Filesystem work tied to the transaction that queued it.

    Attributes:
        transaction: Innermost SessionTransaction active when queued
        on_commit: Run after the root transaction commits
        on_rollback: Run when the transaction (or an ancestor) rolls back
    """

    transaction: Optional[SessionTransaction]
    on_commit: Optional[Callable[[], None]] = None
    on_rollback: Optional[Callable[[], None]] = None


def _within(
    transaction: Optional[SessionTransaction], ancestor: SessionTransaction
) -> bool:
    while transaction is not None:
        if transaction is ancestor:
            return True
        transaction = transaction.parent
    return False


def queue_file_operation(
    session: Session,
    on_commit: Optional[Callable[[], None]] = None,
    on_rollback: Optional[Callable[[], None]] = None,
) -> None:
    """Attach filesystem work to the session's current transaction."""
    transaction = session.get_nested_transaction() or session.get_transaction()
    session.info.setdefault(PENDING_FILE_OPS, []).append(
        PendingFileOperation(transaction, on_commit, on_rollback)
    )


@event.listens_for(Session, "after_commit")
def _apply_file_operations(session: Session) -> None:
    # Savepoint releases also dispatch after_commit.
    if session.in_nested_transaction():
        return
    for operation in session.info.pop(PENDING_FILE_OPS, []):
        if operation.on_commit:
            operation.on_commit()


@event.listens_for(Session, "after_soft_rollback")
def _discard_file_operations(
    session: Session, previous_transaction: SessionTransaction
) -> None:
    pending = session.info.get(PENDING_FILE_OPS)
    if not pending:
        return
    kept = []
    for operation in pending:
        if _within(operation.transaction, previous_transaction):
            if operation.on_rollback:
                operation.on_rollback()
        else:
            kept.append(operation)
    session.info[PENDING_FILE_OPS] = kept


@event.listens_for(Session, "after_transaction_end")
def _drop_file_operations(session: Session, transaction: SessionTransaction) -> None:
    # A root transaction closed without commit (e.g. session.close()).
    if transaction.parent is None:
        for operation in session.info.pop(PENDING_FILE_OPS, []):
            if operation.on_rollback:
                operation.on_rollback()


class MediaManager(BaseManager):
    """
    Manages MediaFile rows and the upload directory.

    Attributes:
        upload_dir: Directory holding uploaded files
        url_prefix: Public URL prefix of upload_dir
    """

    def __init__(
        self,
        session: Session,
        logger: Optional[FolioLogger] = None,
        upload_dir: Optional[Path] = None,
        url_prefix: str = URL_PREFIX,
    ):
        super().__init__(session, logger)
        self.upload_dir = Path(upload_dir) if upload_dir else UPLOAD_DIR
        self.url_prefix = url_prefix.rstrip("/")

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("get_all_media")
    def get_all(
        self,
        search: Optional[str] = None,
        file_type: Optional[str] = None,
        limit: Optional[int] = 50,
        offset: Optional[int] = 0,
    ) -> PaginatedResult[MediaFile]:
        """
        List media files, newest first.

        Args:
            search: Substring of original_filename or alt_text
            file_type: image(s), video(s) or document(s); unknown values
                are ignored
            limit: Page size
            offset: Rows to skip
        """
        stmt = select(MediaFile)
        media_type = MediaType.from_filter(file_type)
        if media_type is not None:
            stmt = stmt.where(MediaFile.file_type == media_type.value)
        stmt = self._apply_search(
            stmt, search, [MediaFile.original_filename, MediaFile.alt_text]
        )
        stmt = stmt.order_by(MediaFile.created_at.desc(), MediaFile.id.desc())
        return paginate(self.session, stmt, limit, offset)

    @handle_db_errors
    @log_database_operation("get_media_by_id")
    def get_by_id(self, media_id: Any) -> Optional[MediaFile]:
        return self._get_by_id(MediaFile, media_id)

    @handle_db_errors
    @log_database_operation("get_media_by_filename")
    def get_by_filename(self, filename: str) -> Optional[MediaFile]:
        return self._get_by_field(MediaFile, "filename", filename)

    @handle_db_errors
    @log_database_operation("media_storage_stats")
    def get_storage_stats(self) -> Dict[str, int]:
        """File counts per type and total size in bytes."""

        def count_of(media_type: MediaType):
            return func.coalesce(
                func.sum(case((MediaFile.file_type == media_type.value, 1), else_=0)), 0
            )

        stmt = select(
            func.count(MediaFile.id),
            func.coalesce(func.sum(MediaFile.file_size), 0),
            count_of(MediaType.IMAGE),
            count_of(MediaType.VIDEO),
            count_of(MediaType.DOCUMENT),
        )
        total, size, images, videos, documents = self.session.execute(stmt).one()
        return {
            "total_files": total,
            "total_size": size,
            "image_count": images,
            "video_count": videos,
            "document_count": documents,
        }

    # -------------------------------------------------------------------------
    # Filenames
    # -------------------------------------------------------------------------

    @staticmethod
    def generate_unique_filename(original_filename: str) -> str:
        """
        Build a collision-resistant stored name.

        Format: {sanitized-stem}-{milliseconds}-{6 base36 chars}.{ext}

        >>> MediaManager.generate_unique_filename("Team Photo.JPG")  # doctest: +SKIP
        'team-photo-1718000000000-k3x9qa.jpg'
        """
        stem, ext = split_extension(original_filename)
        safe_stem = sanitize_filename(stem).replace(".", "-").strip("-") or "file"
        random_part = "".join(secrets.choice(BASE36) for _ in range(6))
        name = f"{safe_stem}-{int(time.time() * 1000)}-{random_part}"
        return f"{name}.{ext}" if ext else name

    def _path_for(self, filename: str) -> Path:
        return self.upload_dir / filename

    def _url_for(self, filename: str) -> str:
        return f"{self.url_prefix}/{filename}"

    def _remove_file(self, path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            safe_logger(self.logger).log_warning(
                f"Could not remove media file: {e}", {"path": str(path)}
            )

    def _move_file(self, old_path: Path, new_path: Path, media_id: int) -> None:
        if not old_path.exists():
            safe_logger(self.logger).log_warning(
                "Renamed media row without a file on disk",
                {"media_id": media_id, "path": str(old_path)},
            )
            return
        try:
            new_path.parent.mkdir(parents=True, exist_ok=True)
            old_path.rename(new_path)
        except OSError as e:
            safe_logger(self.logger).log_warning(
                f"Could not move media file: {e}",
                {"media_id": media_id, "from": str(old_path), "to": str(new_path)},
            )

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("create_media")
    @validate_metadata(["filename", "mime_type"])
    def create(self, metadata: Dict[str, Any]) -> MediaFile:
        """
        Record a file that already sits in the upload directory.

        Args:
            metadata: filename and mime_type (required); original_filename,
                file_path, file_url, file_type, file_size, width, height,
                duration, alt_text

        Raises:
            ConflictError: If a row already uses the filename
        """
        filename = DataValidator.normalize_string(metadata["filename"])
        if self._exists(MediaFile, "filename", filename):
            raise ConflictError(f"Media file already exists: {filename}")

        mime_type = DataValidator.normalize_string(metadata["mime_type"])
        file_type = metadata.get("file_type") or MediaType.from_mime(mime_type).value
        file_type = DataValidator.normalize_enum(file_type, MediaType.choices(), "file_type")

        file_size = DataValidator.normalize_int(metadata.get("file_size")) or 0
        if file_size < 0:
            raise ValidationError("File size cannot be negative", field="file_size")

        media = MediaFile(
            filename=filename,
            original_filename=DataValidator.normalize_string(
                metadata.get("original_filename")
            )
            or filename,
            file_path=str(metadata.get("file_path") or self._path_for(filename)),
            file_url=metadata.get("file_url") or self._url_for(filename),
            file_type=file_type,
            file_size=file_size,
            mime_type=mime_type,
            width=DataValidator.normalize_int(metadata.get("width")),
            height=DataValidator.normalize_int(metadata.get("height")),
            duration=metadata.get("duration"),
            alt_text=DataValidator.normalize_text(metadata.get("alt_text")),
        )
        self.session.add(media)
        self.session.flush()
        return media

    def store_upload(
        self,
        original_filename: str,
        content: bytes,
        content_type: Optional[str] = None,
        alt_text: Optional[str] = None,
    ) -> MediaFile:
        """
        Write uploaded bytes under a generated name and record them.

        The file is removed again when the row cannot be created, or when
        the transaction that created it rolls back.
        """
        if not original_filename:
            raise ValidationError("Uploaded file has no name", field="filename")

        filename = self.generate_unique_filename(original_filename)
        path = self._path_for(filename)
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)

        try:
            media = self.create(
                {
                    "filename": filename,
                    "original_filename": original_filename,
                    "file_path": str(path),
                    "file_url": self._url_for(filename),
                    "file_size": len(content),
                    "mime_type": content_type or "application/octet-stream",
                    "alt_text": alt_text,
                }
            )
        except Exception:
            path.unlink(missing_ok=True)
            raise

        queue_file_operation(self.session, on_rollback=lambda: self._remove_file(path))
        return media

    @handle_db_errors
    @log_database_operation("update_media")
    def update(
        self, media: Union[MediaFile, int], metadata: Dict[str, Any]
    ) -> Optional[MediaFile]:
        """Update alt_text and original_filename. Other keys are ignored."""
        target = self._resolve_optional(media, MediaFile)
        if target is None:
            return None

        changed = self._update_scalar_fields(
            target,
            metadata,
            [
                ("alt_text", DataValidator.normalize_text, True),
                ("original_filename", DataValidator.normalize_string),
            ],
        )
        if changed:
            self.session.flush()
        return target

    @handle_db_errors
    @log_database_operation("rename_media")
    def rename(self, media: Union[MediaFile, int], new_filename: str) -> Optional[MediaFile]:
        """
        Rename a stored file on disk and in the database.

        The new name is sanitized and keeps the current extension. The
        file on disk moves once the rename commits.

        Returns:
            The renamed row, or None when it does not exist

        Raises:
            ValidationError: If the new name is empty after sanitizing
            ConflictError: If another file already uses the name
        """
        target = self._resolve_optional(media, MediaFile)
        if target is None:
            return None

        sanitized = sanitize_filename(new_filename or "")
        _, current_ext = split_extension(target.filename)
        stem, new_ext = split_extension(sanitized)
        if not stem.strip(".-"):
            raise ValidationError("New filename cannot be empty", field="filename")
        if current_ext and new_ext != current_ext:
            sanitized = f"{sanitized}.{current_ext}"

        if sanitized == target.filename:
            return target
        if self._exists(MediaFile, "filename", sanitized, exclude_id=target.id):
            raise ConflictError(f"A file named '{sanitized}' already exists")

        media_id = target.id
        old_path = Path(target.file_path)
        new_path = self._path_for(sanitized)

        target.filename = sanitized
        target.file_path = str(new_path)
        target.file_url = self._url_for(sanitized)
        self.session.flush()

        queue_file_operation(
            self.session,
            on_commit=lambda: self._move_file(old_path, new_path, media_id),
        )
        return target

    @handle_db_errors
    @log_database_operation("delete_media")
    def delete(self, media: Union[MediaFile, int]) -> bool:
        """
        Delete the row; the file is removed once the deletion commits.

        A file that cannot be removed is logged, not raised.
        """
        target = self._resolve_optional(media, MediaFile)
        if target is None:
            return False

        path = Path(target.file_path)
        self.session.delete(target)
        self.session.flush()

        queue_file_operation(self.session, on_commit=lambda: self._remove_file(path))
        return True

    def delete_multiple(self, ids: List[Any]) -> int:
        """Delete several files; returns how many rows were removed."""
        deleted = 0
        for media_id in ids:
            media_id = DataValidator.normalize_int(media_id)
            if media_id is not None and self.delete(media_id):
                deleted += 1
        return deleted
