"""
Marketing page models for PostgreSQL
Home hero banners, announcements, generic page sections, About Us and Our Journey
"""
import uuid
from sqlalchemy import Column, String, Text, JSON, DateTime, Integer, Boolean
from sqlalchemy.sql import func
from core.database import Base, RecordMixin


class HeroBanner(RecordMixin, Base):
    __tablename__ = "hero_banners"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    subtitle = Column(Text, nullable=True)
    image_url = Column(Text, nullable=False, default="")
    button_text = Column(String(100), nullable=True)
    button_link = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True)
    display_order = Column(Integer, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class Announcement(RecordMixin, Base):
    __tablename__ = "announcements"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    content = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)
    badge = Column(String(50), nullable=True)
    is_active = Column(Boolean, default=True)
    display_order = Column(Integer, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class PageSection(RecordMixin, Base):
    __tablename__ = "page_sections"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    page_name = Column(String(100), index=True, nullable=False)
    section_name = Column(String(100), nullable=False)
    content = Column(JSON, nullable=False, default={})
    is_active = Column(Boolean, default=True)
    display_order = Column(Integer, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class AboutUsHero(RecordMixin, Base):
    __tablename__ = "about_us_hero"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    subtitle = Column(Text, nullable=False, default="")
    background_image_url = Column(Text, nullable=False, default="")
    is_active = Column(Boolean, default=True)
    display_order = Column(Integer, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class AboutUsSection(RecordMixin, Base):
    __tablename__ = "about_us_sections"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    section_key = Column(String(20), index=True, nullable=False)  # about, mission, team
    title = Column(String(255), nullable=False)
    heading = Column(String(255), nullable=False, default="")
    main_text = Column(Text, nullable=False, default="")
    subtext = Column(Text, nullable=True)
    highlights = Column(JSON, nullable=False, default=[])
    additional_text = Column(Text, nullable=True)
    closing_text = Column(Text, nullable=True)
    image_url = Column(Text, nullable=False, default="")
    is_active = Column(Boolean, default=True)
    display_order = Column(Integer, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class OurJourneySection(RecordMixin, Base):
    __tablename__ = "our_journey_section"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    subtitle = Column(Text, nullable=False, default="")
    is_active = Column(Boolean, default=True)
    display_order = Column(Integer, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class OurJourneyTimelineItem(RecordMixin, Base):
    __tablename__ = "our_journey_timeline"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    year = Column(Integer, nullable=False)
    header = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    left_image_url = Column(Text, nullable=True)
    right_image_url = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True)
    display_order = Column(Integer, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
