from sqlalchemy import Column, String, Text, JSON, DateTime, Integer, Float
from sqlalchemy.sql import func
import uuid
from core.database import Base, RecordMixin


class Order(RecordMixin, Base):
    """
    One storefront order. Line items are snapshots taken from the cart,
    not references to live catalog rows.
    """
    __tablename__ = "orders"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    order_number = Column(String(64), unique=True, index=True, nullable=False)
    user_id = Column(String(128), index=True, nullable=True)
    user_email = Column(String(255), nullable=True)
    user_name = Column(String(255), nullable=True)

    status = Column(String(20), nullable=False, default="pending")  # pending, processing, shipped, delivered, cancelled
    payment_status = Column(String(20), nullable=False, default="pending")  # pending, paid, failed, refunded
    payment_method = Column(String(50), nullable=True)

    currency = Column(String(10), nullable=False, default="USD")
    subtotal = Column(Float, nullable=False, default=0)
    tax = Column(Float, nullable=False, default=0)
    shipping = Column(Float, nullable=False, default=0)
    discount = Column(Float, nullable=False, default=0)
    total = Column(Float, nullable=False, default=0)

    items = Column(JSON, nullable=False, default=[])  # cart entries: {id, title, price, quantity, ...}
    shipping_address = Column(JSON, nullable=False, default={})
    billing_address = Column(JSON, nullable=False, default={})
    notes = Column(Text, nullable=True)
    display_order = Column(Integer, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
