"""
Comic series, creators and chapter models for PostgreSQL
"""
import uuid
from sqlalchemy import Column, String, Text, JSON, DateTime, Integer, Boolean
from sqlalchemy.sql import func
from core.database import Base, RecordMixin


class ComicSeries(RecordMixin, Base):
    __tablename__ = "comic_series"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)
    cover_image_url = Column(Text, nullable=True)
    banner_image_url = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="ongoing")  # ongoing, completed, hiatus, cancelled
    age_rating = Column(String(20), nullable=False, default="all")  # all, teen, mature
    genre = Column(JSON, nullable=False, default=[])
    tags = Column(JSON, nullable=False, default=[])
    is_featured = Column(Boolean, default=False)
    is_active = Column(Boolean, default=True)
    display_order = Column(Integer, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class Creator(RecordMixin, Base):
    __tablename__ = "creators"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    bio = Column(Text, nullable=True)
    avatar_url = Column(Text, nullable=True)
    website_url = Column(Text, nullable=True)
    social_links = Column(JSON, nullable=False, default={})
    specialties = Column(JSON, nullable=False, default=[])
    is_active = Column(Boolean, default=True)
    display_order = Column(Integer, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class SeriesCreator(RecordMixin, Base):
    """Role-tagged link between a series and a creator"""
    __tablename__ = "series_creators"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    series_id = Column(String(64), index=True, nullable=False)
    creator_id = Column(String(64), index=True, nullable=False)
    role = Column(String(20), nullable=False)  # writer, artist, colorist, letterer, editor, publisher
    is_primary = Column(Boolean, default=False)
    display_order = Column(Integer, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class BookChapter(RecordMixin, Base):
    __tablename__ = "book_chapters"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    book_id = Column(String(64), index=True, nullable=False)
    chapter_number = Column(Integer, nullable=False)
    chapter_title = Column(String(255), nullable=False)
    chapter_description = Column(Text, nullable=True)
    is_preview = Column(Boolean, default=False)
    coin_price = Column(Integer, default=0)
    is_active = Column(Boolean, default=True)
    display_order = Column(Integer, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class ChapterPage(RecordMixin, Base):
    __tablename__ = "chapter_pages"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    chapter_id = Column(String(64), index=True, nullable=False)
    page_number = Column(Integer, nullable=False)
    page_url = Column(Text, nullable=True)
    page_title = Column(String(255), nullable=True)
    page_description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True)
    display_order = Column(Integer, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
