"""SQLAlchemy models for ledgerbook database."""

import uuid
from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _new_id() -> str:
    return uuid.uuid4().hex


class Account(Base):
    """Chart-of-accounts model."""

    __tablename__ = "accounts"

    id = Column(String, primary_key=True)
    code = Column(String, nullable=False)
    name = Column(String, nullable=False)
    account_class = Column(String, nullable=False)
    level = Column(String, nullable=False)
    normal_balance = Column(String, nullable=False)
    is_posting = Column(Boolean, default=True, nullable=False)
    parent_id = Column(String, ForeignKey("accounts.id"), nullable=True)
    is_system = Column(Boolean, default=False, nullable=False)
    is_direct_cost = Column(Boolean, default=False, nullable=False)
    linked_asset_id = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    parent = relationship("Account", remote_side=[id], backref="children")


class Transaction(Base):
    """Ledger posting model.

    Account references are plain strings: historical postings may point at
    accounts that no longer exist.
    """

    __tablename__ = "transactions"

    id = Column(String, primary_key=True, default=_new_id)
    date = Column(DateTime, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    account_id = Column(String, nullable=False, index=True)
    payment_account_id = Column(String, nullable=True, index=True)
    transaction_type = Column(String, nullable=False, default="journal")
    note = Column(String, nullable=True)
    related_party_id = Column(String, nullable=True)
    original_amount = Column(Numeric(14, 2), nullable=True)
    currency = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Party(Base):
    """Customer/vendor model."""

    __tablename__ = "parties"

    id = Column(String, primary_key=True, default=_new_id)
    name = Column(String, nullable=False)
    party_type = Column(String, nullable=False, default="other")
    linked_account_id = Column(String, nullable=True)


class Asset(Base):
    """Fixed asset model."""

    __tablename__ = "assets"

    id = Column(String, primary_key=True, default=_new_id)
    name = Column(String, nullable=False)
    original_value = Column(Numeric(14, 2), nullable=False)
    purchase_date = Column(Date, nullable=False)
    useful_life_years = Column(Integer, nullable=False)
    cost_account_id = Column(String, nullable=True)
    accumulated_account_id = Column(String, nullable=True)
    last_depreciation_date = Column(Date, nullable=True)
    note = Column(String, nullable=True)


class RecurringRule(Base):
    """Recurring transaction rule model."""

    __tablename__ = "recurring_rules"

    id = Column(String, primary_key=True, default=_new_id)
    transaction_type = Column(String, nullable=False)
    account_id = Column(String, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    frequency = Column(String, nullable=False)
    next_due_date = Column(Date, nullable=False)
    payment_account_id = Column(String, nullable=True)
    party_id = Column(String, nullable=True)
    note = Column(String, nullable=True)
    active = Column(Boolean, default=True, nullable=False)
    last_run_date = Column(Date, nullable=True)


class Receivable(Base):
    """Receivable/payable model."""

    __tablename__ = "receivables"

    id = Column(String, primary_key=True, default=_new_id)
    kind = Column(String, nullable=False)
    sub_type = Column(String, nullable=False)
    party_id = Column(String, ForeignKey("parties.id"), nullable=False)
    target_account_id = Column(String, nullable=False)
    control_account_id = Column(String, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    paid_amount = Column(Numeric(14, 2), nullable=False, default=0)
    issue_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False, index=True)
    paid_date = Column(Date, nullable=True)
    note = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class MonthlyBudget(Base):
    """Monthly budget model; per-account limits live in budget_limits."""

    __tablename__ = "monthly_budgets"

    month_key = Column(String, primary_key=True)
    limit = Column(Numeric(14, 2), nullable=False)

    # Relationships
    account_limits = relationship(
        "BudgetLimit", back_populates="budget", cascade="all, delete-orphan"
    )


class BudgetLimit(Base):
    """Spending limit for one expense account within a monthly budget."""

    __tablename__ = "budget_limits"

    month_key = Column(String, ForeignKey("monthly_budgets.month_key"), primary_key=True)
    account_id = Column(String, primary_key=True)
    amount = Column(Numeric(14, 2), nullable=False)

    # Relationships
    budget = relationship("MonthlyBudget", back_populates="account_limits")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
