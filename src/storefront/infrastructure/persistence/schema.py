"""Relational schema for the storefront tables (SQLAlchemy Core)."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.types import TypeDecorator


class UtcDateTime(TypeDecorator):
    """Stores UTC and always hands back timezone-aware datetimes.

    Some backends (SQLite) drop the offset on the way in.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            raise ValueError("Naive datetimes are not stored; pass an aware UTC value")
        return value.astimezone(timezone.utc).replace(tzinfo=None)

    def process_result_value(self, value: datetime | None, dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


metadata = MetaData()

variants = Table(
    "variants",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("product_id", Integer, nullable=False, index=True),
    Column("product_name", String(200), nullable=False),
    Column("size", String(20), nullable=False),
    Column("color", String(50), nullable=False),
    Column("unit_price", Numeric(12, 2), nullable=False),
    Column("currency", String(3), nullable=False),
    Column("available_quantity", Integer, nullable=False, default=0),
    Column("active", Boolean, nullable=False, default=True),
    CheckConstraint("available_quantity >= 0", name="ck_variants_available_non_negative"),
    UniqueConstraint("product_id", "size", "color", name="uq_variants_product_size_color"),
)

orders = Table(
    "orders",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("customer_id", Integer, nullable=False, index=True),
    Column("status", String(20), nullable=False),
    Column("created_at", UtcDateTime(), nullable=False, index=True),
    Column("ship_street", String(200), nullable=False),
    Column("ship_city", String(100), nullable=False),
    Column("ship_province", String(100), nullable=False),
    Column("ship_postal_code", String(20), nullable=False),
)

order_lines = Table(
    "order_lines",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("order_id", Integer, ForeignKey("orders.id"), nullable=False, index=True),
    Column("position", Integer, nullable=False),
    Column("variant_id", Integer, ForeignKey("variants.id"), nullable=False),
    Column("product_name", String(200), nullable=False),
    Column("size", String(20), nullable=False),
    Column("color", String(50), nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("unit_price", Numeric(12, 2), nullable=False),
    Column("currency", String(3), nullable=False),
)

payments = Table(
    "payments",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("order_id", Integer, ForeignKey("orders.id"), nullable=False, unique=True),
    Column("payment_method", String(50), nullable=False),
    Column("amount", Numeric(12, 2), nullable=False),
    Column("currency", String(3), nullable=False),
    Column("status", String(20), nullable=False, index=True),
    Column("rejection_reason", Text, nullable=True),
    Column("created_at", UtcDateTime(), nullable=False),
    Column("updated_at", UtcDateTime(), nullable=False),
)

stock_movements = Table(
    "stock_movements",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("variant_id", Integer, ForeignKey("variants.id"), nullable=False, index=True),
    Column("delta", Integer, nullable=False),
    Column("kind", String(20), nullable=False),
    Column("order_id", Integer, ForeignKey("orders.id"), nullable=True, index=True),
    Column("actor_id", Integer, nullable=True),
    Column("note", Text, nullable=True),
    Column("created_at", UtcDateTime(), nullable=False),
)
