"""
Featured series models for PostgreSQL
- featured_series_configs: marketing copy for the featured block
- featured_series_badges: badge catalog shown on featured cards
- featured_series_templates: named snapshots of configs + badges
- featured_series_template_history: apply/restore audit trail
"""
import uuid
from sqlalchemy import Column, String, Text, JSON, DateTime, Integer, Boolean
from sqlalchemy.sql import func
from core.database import Base, RecordMixin


class FeaturedSeriesConfig(RecordMixin, Base):
    __tablename__ = "featured_series_configs"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    background_image_url = Column(Text, nullable=False, default="")
    primary_button_text = Column(String(100), nullable=False, default="")
    primary_button_link = Column(Text, nullable=False, default="")
    secondary_button_text = Column(String(100), nullable=False, default="")
    secondary_button_link = Column(Text, nullable=False, default="")
    is_active = Column(Boolean, default=True)
    display_order = Column(Integer, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class FeaturedSeriesBadge(RecordMixin, Base):
    __tablename__ = "featured_series_badges"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    color = Column(String(64), nullable=False, default="bg-red-600")
    text_color = Column(String(64), nullable=False, default="text-white")
    is_active = Column(Boolean, default=True)
    display_order = Column(Integer, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class FeaturedSeriesTemplate(RecordMixin, Base):
    __tablename__ = "featured_series_templates"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    template_type = Column(String(20), nullable=False, default="combined")  # config, badge, combined
    config_data = Column(JSON, nullable=False, default={})  # {"configs": [...]}
    badge_data = Column(JSON, nullable=False, default={})  # {"badges": [...]}
    is_default = Column(Boolean, default=False)
    is_active = Column(Boolean, default=True)
    created_by = Column(String(255), nullable=False, default="admin")
    display_order = Column(Integer, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class FeaturedSeriesTemplateHistory(RecordMixin, Base):
    __tablename__ = "featured_series_template_history"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    template_id = Column(String(64), index=True, nullable=False)
    action = Column(String(20), nullable=False)  # created, updated, applied, restored
    previous_data = Column(JSON, nullable=True)
    new_data = Column(JSON, nullable=True)
    applied_by = Column(String(255), nullable=False, default="admin")
    display_order = Column(Integer, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
