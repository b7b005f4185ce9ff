"""SQLAlchemy models and helpers for console data."""
from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Iterator, Optional

from sqlalchemy import (
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from .core import ensure_db_path

_ENGINE_CACHE: dict[Path, Engine] = {}
_SESSION_FACTORY_CACHE: dict[Path, sessionmaker[Session]] = {}

DOMAINS: tuple[str, ...] = ("general", "grocery", "medicine")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Declarative base for CareStore ORM models."""


def _resolve_db_path(path: Path | None = None) -> Path:
    return ensure_db_path(path).resolve()


def _enable_foreign_keys(dbapi_connection, _record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


def get_engine(path: Path | None = None) -> Engine:
    """Return or create a cached SQLAlchemy engine for the configured database."""

    db_path = _resolve_db_path(path)
    engine = _ENGINE_CACHE.get(db_path)
    if engine is None:
        engine = create_engine(
            f"sqlite:///{db_path}",
            future=True,
            echo=False,
        )
        event.listen(engine, "connect", _enable_foreign_keys)
        _ENGINE_CACHE[db_path] = engine
    return engine


def get_session_factory(path: Path | None = None) -> sessionmaker[Session]:
    """Return a cached session factory bound to the configured engine."""

    db_path = _resolve_db_path(path)
    factory = _SESSION_FACTORY_CACHE.get(db_path)
    if factory is None:
        engine = get_engine(db_path)
        factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True)
        _SESSION_FACTORY_CACHE[db_path] = factory
    return factory


@contextmanager
def session_scope(path: Path | None = None) -> Iterator[Session]:
    """Context manager yielding a SQLAlchemy session committed on success."""

    factory = get_session_factory(path)
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


class Category(Base):
    """Product category scoped to one inventory domain."""

    __tablename__ = "categories"
    __table_args__ = (UniqueConstraint("domain", "name", name="uq_categories_domain_name"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    domain: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="active")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )


class Supplier(Base):
    """Supplier scoped to one inventory domain."""

    __tablename__ = "suppliers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    domain: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_person: Mapped[Optional[str]] = mapped_column(String(255))
    email: Mapped[Optional[str]] = mapped_column(String(255))
    phone: Mapped[Optional[str]] = mapped_column(String(64))
    address: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="active")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )


class Product(Base):
    """Purchased item with its stock and account aggregates.

    The aggregate columns (``current_stock``, ``used_stock``, ``balance_stock``,
    ``stock_status``, ``settlement_amount``, ``balance_amount`` and
    ``payment_status``) are written only by the ledger services.
    """

    __tablename__ = "products"
    __table_args__ = (UniqueConstraint("domain", "code", name="uq_products_domain_code"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    domain: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    code: Mapped[str] = mapped_column(String(32), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    category: Mapped[str] = mapped_column(String(255), nullable=False)
    supplier: Mapped[str] = mapped_column(String(255), nullable=False)
    unit: Mapped[Optional[str]] = mapped_column(String(32))
    price: Mapped[float] = mapped_column(Float, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="active")
    purchase_date: Mapped[date] = mapped_column(Date, nullable=False)

    manufacturer: Mapped[Optional[str]] = mapped_column(String(255))
    batch_number: Mapped[Optional[str]] = mapped_column(String(128))
    expiry_date: Mapped[Optional[date]] = mapped_column(Date)

    current_stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    used_stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    balance_stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    stock_status: Mapped[str] = mapped_column(String(16), nullable=False, default="in_stock")
    last_update: Mapped[Optional[date]] = mapped_column(Date)

    purchase_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    settlement_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    balance_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    payment_status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")
    payment_type: Mapped[Optional[str]] = mapped_column(String(32))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )


class StockEntry(Base):
    """Append-only stock movement for a product."""

    __tablename__ = "stock_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[Optional[str]] = mapped_column(String(255))
    supplier: Mapped[Optional[str]] = mapped_column(String(255))
    purchase_date: Mapped[Optional[date]] = mapped_column(Date)
    stock_change: Mapped[int] = mapped_column(Integer, nullable=False)
    stock_type: Mapped[str] = mapped_column(String(16), nullable=False, default="used")
    current_stock_before: Mapped[int] = mapped_column(Integer, nullable=False)
    current_stock_after: Mapped[int] = mapped_column(Integer, nullable=False)
    update_date: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)


class SettlementEntry(Base):
    """Append-only payment made against a product purchase."""

    __tablename__ = "settlement_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[Optional[str]] = mapped_column(String(255))
    supplier: Mapped[Optional[str]] = mapped_column(String(255))
    purchase_date: Mapped[Optional[date]] = mapped_column(Date)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    payment_date: Mapped[date] = mapped_column(Date, nullable=False)
    payment_type: Mapped[str] = mapped_column(String(32), nullable=False, default="cash")
    description: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)


class Role(Base):
    """Named role with a JSON list of permitted page identifiers."""

    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text)
    permissions_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="active")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )


class StaffMember(Base):
    """Staff registry entry; rows are soft deleted via ``deleted_at``."""

    __tablename__ = "staff"

    id: Mapped[str] = mapped_column(String(16), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), unique=True)
    phone: Mapped[Optional[str]] = mapped_column(String(64))
    address: Mapped[Optional[str]] = mapped_column(Text)
    role: Mapped[Optional[str]] = mapped_column(String(255), index=True)
    department: Mapped[Optional[str]] = mapped_column(String(255))
    join_date: Mapped[Optional[date]] = mapped_column(Date)
    salary: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    total_paid: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    payment_mode: Mapped[Optional[str]] = mapped_column(String(32))
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="Active")
    photo: Mapped[Optional[str]] = mapped_column(Text)
    documents_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    deleted_by: Mapped[Optional[str]] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )


def create_all(path: Path | None = None) -> None:
    """Ensure all ORM tables are created."""

    engine = get_engine(path)
    Base.metadata.create_all(engine)


__all__ = [
    "DOMAINS",
    "Base",
    "Category",
    "Product",
    "Role",
    "SettlementEntry",
    "StaffMember",
    "StockEntry",
    "Supplier",
    "create_all",
    "get_engine",
    "get_session_factory",
    "session_scope",
]
