"""
Shop All page models for PostgreSQL (hero blocks, filter facets, sort options)
"""
import uuid
from sqlalchemy import Column, String, Text, JSON, DateTime, Integer, Boolean
from sqlalchemy.sql import func
from core.database import Base, RecordMixin


class ShopAllHero(RecordMixin, Base):
    __tablename__ = "shop_all_heroes"

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


class ShopAllFilter(RecordMixin, Base):
    __tablename__ = "shop_all_filters"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    type = Column(String(20), nullable=False)  # category, price, status, type, genre, age_rating, author, publisher
    options = Column(JSON, nullable=False, default=[])
    is_active = Column(Boolean, default=True)
    display_order = Column(Integer, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class ShopAllSort(RecordMixin, Base):
    __tablename__ = "shop_all_sorts"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    value = Column(String(100), nullable=False)
    is_active = Column(Boolean, default=True)
    display_order = Column(Integer, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
