"""SQLAlchemy models for the spendbook record store."""

import uuid
from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    String,
    ForeignKey,
    DateTime,
    Numeric,
    Boolean,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


class Account(Base):
    """Account model with its cashback policy."""

    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String, nullable=False)
    image_url = Column(String, nullable=True)
    type = Column(String, nullable=True)
    credit_limit = Column(Numeric(18, 2), nullable=True)
    is_cashback_eligible = Column(Boolean, default=False, nullable=False)
    # Stored as a fraction: 0.05 means 5%
    cashback_percentage = Column(Numeric(7, 4), nullable=True)
    max_cashback_amount = Column(Numeric(18, 2), nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)


class Category(Base):
    """Top-level category model."""

    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String, nullable=False)
    image_url = Column(String, nullable=True)
    # Free text: historical rows use "Expense", "EX", "expenses", ...
    transaction_nature = Column(String, nullable=True)
    is_shop = Column(Boolean, default=False, nullable=False)

    # Relationships
    subcategories = relationship("Subcategory", back_populates="category")


class Subcategory(Base):
    """Subcategory model; transactions point at subcategories."""

    __tablename__ = "subcategories"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String, nullable=False)
    image_url = Column(String, nullable=True)
    transaction_nature = Column(String, nullable=True)
    category_id = Column(String(36), ForeignKey("categories.id"), nullable=True)

    # Relationships
    category = relationship("Category", back_populates="subcategories")


class Shop(Base):
    """Shop model."""

    __tablename__ = "shops"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String, nullable=False)
    image_url = Column(String, nullable=True)
    type = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)


class Person(Base):
    """Person model."""

    __tablename__ = "people"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String, nullable=False)
    image_url = Column(String, nullable=True)
    is_group = Column(Boolean, default=False, nullable=False)


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=_new_id)
    date = Column(DateTime(timezone=True), nullable=False)
    amount = Column(Numeric(18, 2), nullable=False)
    final_price = Column(Numeric(18, 2), nullable=True)
    notes = Column(String, nullable=True)
    status = Column(String, default="Active", nullable=False)
    nature = Column(String, nullable=True)
    from_account_id = Column(String(36), ForeignKey("accounts.id"), nullable=True)
    to_account_id = Column(String(36), ForeignKey("accounts.id"), nullable=True)
    subcategory_id = Column(String(36), ForeignKey("subcategories.id"), nullable=True)
    shop_id = Column(String(36), ForeignKey("shops.id"), nullable=True)
    person_id = Column(String(36), ForeignKey("people.id"), nullable=True)
    cashback_percent = Column(Numeric(5, 2), nullable=True)
    cashback_amount = Column(Numeric(18, 2), nullable=True)
    debt_tag = Column(String, nullable=True)
    debt_cycle_tag = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    from_account = relationship("Account", foreign_keys=[from_account_id])
    to_account = relationship("Account", foreign_keys=[to_account_id])
    subcategory = relationship("Subcategory")
    shop = relationship("Shop")
    person = relationship("Person")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
