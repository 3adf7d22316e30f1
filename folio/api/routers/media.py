#!/usr/bin/env python3
"""
media.py
--------
/api/media: uploads, listing, metadata edits, renames and deletes.

Uploads accept several files in the multipart field `files`. Each file
is stored in its own savepoint: a file that fails is reported in the
result list and the others are kept.
"""
# --- Standard library imports ---
from typing import Any, Dict, List, Optional

# --- Third-party imports ---
from fastapi import APIRouter, Depends, File, Form, UploadFile

# --- Local imports ---
from folio.api.auth import require_admin, require_editor
from folio.api.deps import get_logger, get_media
from folio.api.schemas import MediaBulkDelete, MediaOut, MediaPatch, dump, ok, paginated
from folio.core.exceptions import AppError, NotFoundError, ValidationError
from folio.core.logging_manager import FolioLogger, safe_logger
from folio.database.managers import MediaManager
from folio.database.models import User

router = APIRouter(prefix="/api/media", tags=["media"])


@router.get("")
def list_media(
    search: Optional[str] = None,
    type: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
    media: MediaManager = Depends(get_media),
    user: User = Depends(require_editor),
) -> Dict[str, Any]:
    page = media.get_all(search=search, file_type=type, limit=limit, offset=offset)
    return paginated(MediaOut, page)


@router.post("")
def upload_media(
    files: Optional[List[UploadFile]] = File(None),
    alt_text: Optional[str] = Form(None),
    media: MediaManager = Depends(get_media),
    logger: Optional[FolioLogger] = Depends(get_logger),
    user: User = Depends(require_editor),
) -> Dict[str, Any]:
    if not files:
        raise ValidationError("No files provided", field="files")

    log = safe_logger(logger)
    results: List[Dict[str, Any]] = []
    for upload in files:
        name = upload.filename or ""
        try:
            with media.session.begin_nested():
                stored = media.store_upload(
                    name,
                    upload.file.read(),
                    content_type=upload.content_type,
                    alt_text=alt_text,
                )
            results.append(dump(MediaOut, stored))
        except (AppError, OSError) as e:
            log.log_warning(f"Upload failed: {e}", {"filename": name})
            results.append({"error": f"Failed to process file: {name}", "filename": name})

    log.log_operation(
        "media_uploaded",
        {"requested": len(files), "stored": sum(1 for r in results if "error" not in r)},
    )
    return ok(results)


@router.delete("")
def delete_many(
    body: MediaBulkDelete,
    media: MediaManager = Depends(get_media),
    user: User = Depends(require_admin),
) -> Dict[str, Any]:
    if not body.ids:
        raise ValidationError("Invalid or missing file IDs", field="ids")
    deleted = media.delete_multiple(body.ids)
    return ok({"deleted_count": deleted, "total_requested": len(body.ids)})


@router.get("/stats")
def media_stats(
    media: MediaManager = Depends(get_media),
    user: User = Depends(require_editor),
) -> Dict[str, Any]:
    return ok(media.get_storage_stats())


@router.get("/{media_id}")
def get_media_file(
    media_id: int,
    media: MediaManager = Depends(get_media),
    user: User = Depends(require_editor),
) -> Dict[str, Any]:
    item = media.get_by_id(media_id)
    if item is None:
        raise NotFoundError("Media file", media_id)
    return ok(dump(MediaOut, item))


@router.patch("/{media_id}")
def update_media_file(
    media_id: int,
    body: MediaPatch,
    media: MediaManager = Depends(get_media),
    user: User = Depends(require_editor),
) -> Dict[str, Any]:
    """
    `filename` renames the stored file; `alt_text` and
    `original_filename` update metadata only.
    """
    item = media.get_by_id(media_id)
    if item is None:
        raise NotFoundError("Media file", media_id)

    metadata = {
        key: value
        for key, value in body.model_dump(include={"alt_text", "original_filename"}).items()
        if value is not None
    }
    if not body.filename and not metadata:
        raise ValidationError("No valid fields to update")

    if body.filename:
        item = media.rename(item, body.filename)
    if metadata:
        item = media.update(item, metadata)
    return ok(dump(MediaOut, item))


@router.delete("/{media_id}")
def delete_media_file(
    media_id: int,
    media: MediaManager = Depends(get_media),
    user: User = Depends(require_admin),
) -> Dict[str, Any]:
    if not media.delete(media_id):
        raise NotFoundError("Media file", media_id)
    return ok({"deleted": True, "id": media_id})
