"""
Coin models for PostgreSQL
- coin_packages: static catalog rows
- user_coins: current balance snapshot per user
- coin_transactions: append-only ledger (balance recorded at write time)
- coin_purchases: package purchases
"""
import uuid
from sqlalchemy import Column, String, Text, DateTime, Integer, Boolean, Float
from sqlalchemy.sql import func
from core.database import Base, RecordMixin


class CoinPackage(RecordMixin, Base):
    __tablename__ = "coin_packages"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    coins = Column(Integer, nullable=False)
    bonus = Column(Integer, nullable=False, default=0)
    price = Column(Float, nullable=False)
    popular = Column(Boolean, default=False)
    best_value = Column(Boolean, default=False)
    is_active = Column(Boolean, default=True)
    display_order = Column(Integer, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class UserCoins(RecordMixin, Base):
    __tablename__ = "user_coins"

    user_id = Column(String(128), primary_key=True, index=True)
    balance = Column(Integer, nullable=False, default=0)
    total_earned = Column(Integer, nullable=False, default=0)
    total_spent = Column(Integer, nullable=False, default=0)
    last_updated = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class CoinTransaction(RecordMixin, Base):
    __tablename__ = "coin_transactions"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(128), index=True, nullable=False)
    type = Column(String(20), nullable=False)  # purchase, spend, earn, refund
    amount = Column(Integer, nullable=False)  # signed
    balance = Column(Integer, nullable=False)  # balance after this transaction
    description = Column(Text, nullable=False, default="")
    reference = Column(String(255), index=True, nullable=True)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class CoinPurchase(RecordMixin, Base):
    __tablename__ = "coin_purchases"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(128), index=True, nullable=False)
    package_id = Column(String(64), nullable=False)
    coins = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)
    status = Column(String(20), nullable=False, default="pending")  # pending, completed, failed
    payment_method = Column(String(50), nullable=False)
    transaction_id = Column(String(128), nullable=True)
    display_order = Column(Integer, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
