"""
Catalog models for PostgreSQL
Books, merchandise, print editions and their volumes share one table
"""
import uuid
from sqlalchemy import Column, String, Text, JSON, DateTime, Integer, Boolean, Float
from sqlalchemy.sql import func
from core.database import Base, RecordMixin


class Book(RecordMixin, Base):
    __tablename__ = "books"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))

    title = Column(String(255), nullable=False)
    author = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=False)
    label = Column(String(100), nullable=True)
    sku = Column(String(100), nullable=True)

    # Pricing
    price = Column(Float, nullable=False)
    original_price = Column(Float, nullable=True)
    coins = Column(Integer, nullable=True)  # coin price shown on the card
    can_unlock_with_coins = Column(Boolean, default=False)

    # Media
    image_url = Column(Text, nullable=True)
    hover_image_url = Column(Text, nullable=True)
    cover_page_url = Column(Text, nullable=True)
    video_url = Column(Text, nullable=True)

    # Flags and placement
    is_new = Column(Boolean, default=False)
    is_on_sale = Column(Boolean, default=False)
    is_active = Column(Boolean, default=True)
    section_type = Column(String(32), nullable=False, default="new-releases")  # new-releases, best-sellers, leaving-soon, featured, trending
    display_order = Column(Integer, default=0)
    tags = Column(JSON, nullable=False, default=[])
    product_type = Column(String(32), nullable=False, default="book")  # book, merchandise, print, digital, other

    # Volumes point at their parent product
    parent_id = Column(String(64), index=True, nullable=True)
    volume_number = Column(Integer, nullable=True)

    # Physical goods
    stock_quantity = Column(Integer, nullable=True)
    weight = Column(Float, nullable=True)
    dimensions = Column(String(100), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
