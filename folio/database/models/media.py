"""
Media Models
------------

Uploaded files and site-wide settings.

Models:
    - MediaFile: A file stored under the upload directory
    - SiteConfig: Key/value site settings (title, url, author...)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Optional

# --- Third party ---
from sqlalchemy import CheckConstraint, Enum as SQLEnum, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

# --- Local imports ---
from .base import Base, TimestampMixin
from .enums import MediaType


class MediaFile(TimestampMixin, Base):
    """
    An uploaded media file.

    Attributes:
        id: Primary key
        filename: Stored name inside the upload directory (unique)
        original_filename: Name of the file as uploaded
        file_path: Filesystem path of the stored file
        file_url: Public URL (/uploads/<filename>)
        file_type: MediaType
        file_size: Size in bytes
        mime_type: Reported MIME type
        width / height: Pixel dimensions, images and videos
        duration: Seconds, videos only
        alt_text: Accessibility text
    """

    __tablename__ = "media_files"
    __table_args__ = (
        CheckConstraint("filename != ''", name="ck_media_non_empty_filename"),
        CheckConstraint("file_size >= 0", name="ck_media_size_positive"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    filename: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    original_filename: Mapped[str] = mapped_column(String(255), nullable=False)
    file_path: Mapped[str] = mapped_column(String(1000), nullable=False)
    file_url: Mapped[str] = mapped_column(String(1000), nullable=False)
    file_type: Mapped[MediaType] = mapped_column(
        SQLEnum(
            MediaType,
            values_callable=lambda x: [e.value for e in x],
            native_enum=False,
            create_constraint=True,
            name="media_type",
        ),
        nullable=False,
        index=True,
    )
    file_size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    mime_type: Mapped[str] = mapped_column(String(255), nullable=False)
    width: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    height: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    duration: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    alt_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<MediaFile(id={self.id}, filename={self.filename!r})>"


class SiteConfig(TimestampMixin, Base):
    """Key/value site setting."""

    __tablename__ = "site_config"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    key: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
