"""SQLAlchemy models for fxposition database."""

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
    Text,
    Index,
    UniqueConstraint,
    create_engine,
    event,
    text,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

AMOUNT = Numeric(20, 5)
RATE = Numeric(15, 6)
PERCENT = Numeric(9, 4)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Currency(Base):
    """Currency model."""

    __tablename__ = "currencies"

    id = Column(Integer, primary_key=True)
    code = Column(String(3), unique=True, nullable=False)
    name = Column(String(100), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)


class BalanceItem(Base):
    """Balance-sheet line catalog model."""

    __tablename__ = "balance_items"

    id = Column(Integer, primary_key=True)
    code = Column(String(50), unique=True, nullable=False)
    name = Column(String(100), nullable=False)
    category = Column(String(20), nullable=False)
    balance_type = Column(String(20), default="on_balance_sheet", nullable=False)
    display_order = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    entries = relationship("BalanceEntry", back_populates="item")


class ExchangeRate(Base):
    """Exchange rate model."""

    __tablename__ = "exchange_rates"

    id = Column(Integer, primary_key=True)
    currency_id = Column(Integer, ForeignKey("currencies.id"), nullable=False)
    rate_date = Column(Date, nullable=False)
    buying_rate = Column(RATE, nullable=False)
    selling_rate = Column(RATE, nullable=False)
    mid_rate = Column(RATE, nullable=False)

    __table_args__ = (UniqueConstraint("currency_id", "rate_date", name="uq_rate_currency_date"),)


class BalanceEntry(Base):
    """Daily balance entry model."""

    __tablename__ = "balance_entries"

    id = Column(Integer, primary_key=True)
    balance_date = Column(Date, nullable=False)
    currency_id = Column(Integer, ForeignKey("currencies.id"), nullable=False)
    item_id = Column(Integer, ForeignKey("balance_items.id"), nullable=False)
    amount = Column(AMOUNT, default=0, nullable=False)
    status = Column(String(20), default="draft", nullable=False)
    created_by = Column(Integer, nullable=True)
    authorized_by = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    # One entry per (date, currency, item)
    __table_args__ = (
        UniqueConstraint("balance_date", "currency_id", "item_id", name="uq_balance_key"),
    )
    __mapper_args__ = {"version_id_col": version}

    # Relationships
    item = relationship("BalanceItem", back_populates="entries")


class FxTransaction(Base):
    """Foreign-currency purchase/sale model."""

    __tablename__ = "fcy_transactions"

    id = Column(Integer, primary_key=True)
    transaction_date = Column(Date, nullable=False)
    currency_id = Column(Integer, ForeignKey("currencies.id"), nullable=False)
    transaction_type = Column(String(10), nullable=False)
    amount = Column(AMOUNT, nullable=False)
    rate = Column(RATE, nullable=True)
    reference = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    status = Column(String(20), default="draft", nullable=False)
    created_by = Column(Integer, nullable=True)
    authorized_by = Column(Integer, nullable=True)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    __mapper_args__ = {"version_id_col": version}


class CapitalRecord(Base):
    """Paid-up capital timeline model."""

    __tablename__ = "paid_up_capital"

    id = Column(Integer, primary_key=True)
    amount = Column(Numeric(20, 2), nullable=False)
    effective_date = Column(Date, nullable=False)
    currency = Column(String(3), default="ETB", nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_by = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)


class CorrespondentBank(Base):
    """Correspondent bank model."""

    __tablename__ = "correspondent_banks"

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)
    currency_id = Column(Integer, ForeignKey("currencies.id"), nullable=False)
    max_limit = Column(Numeric(5, 2), nullable=True)
    min_limit = Column(Numeric(5, 2), nullable=True)
    account_number = Column(String(100), nullable=True)
    swift_code = Column(String(11), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    balances = relationship("CorrespondentBalance", back_populates="bank", cascade="all, delete-orphan")
    alerts = relationship("Alert", back_populates="bank", cascade="all, delete-orphan")


class CorrespondentBalance(Base):
    """Correspondent bank daily balance model."""

    __tablename__ = "correspondent_balances"

    id = Column(Integer, primary_key=True)
    bank_id = Column(Integer, ForeignKey("correspondent_banks.id"), nullable=False)
    balance_date = Column(Date, nullable=False)
    balance_amount = Column(Numeric(20, 2), nullable=False)
    created_by = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)

    __table_args__ = (UniqueConstraint("bank_id", "balance_date", name="uq_bank_balance_date"),)

    # Relationships
    bank = relationship("CorrespondentBank", back_populates="balances")


class Alert(Base):
    """Correspondent limit alert model."""

    __tablename__ = "correspondent_alerts"

    id = Column(Integer, primary_key=True)
    bank_id = Column(Integer, ForeignKey("correspondent_banks.id"), nullable=False)
    alert_type = Column(String(30), nullable=False)
    current_percentage = Column(PERCENT, nullable=False)
    limit_percentage = Column(PERCENT, nullable=False)
    variation = Column(PERCENT, nullable=False)
    alert_date = Column(Date, nullable=False)
    is_resolved = Column(Boolean, default=False, nullable=False)
    resolved_by = Column(Integer, nullable=True)
    resolved_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # At most one unresolved alert per (bank, date, type)
    __table_args__ = (
        Index(
            "uq_open_alert",
            "bank_id",
            "alert_date",
            "alert_type",
            unique=True,
            sqlite_where=text("is_resolved = 0"),
            postgresql_where=text("NOT is_resolved"),
        ),
    )

    # Relationships
    bank = relationship("CorrespondentBank", back_populates="alerts")


def _enable_sqlite_savepoints(engine) -> None:
    """Let SQLAlchemy, not pysqlite, emit BEGIN so SAVEPOINT works."""

    @event.listens_for(engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    if engine.dialect.name == "sqlite":
        _enable_sqlite_savepoints(engine)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
