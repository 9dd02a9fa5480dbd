"""SQLAlchemy-backed implementation of ReservationRepository.

Reservations live in a relational table so the overlap query can use a
composite ``(product_id, variant_id, start_date, end_date)`` index and
check-then-insert can run inside a real database transaction.

Serialization of writers for the same product:

* in-process, a re-entrant lock per product id;
* across processes, the database: SQLite transactions are opened with
  ``BEGIN IMMEDIATE`` (one writer at a time), other backends run at
  SERIALIZABLE isolation and abort the loser of a race, which surfaces
  as ``StorageConflictError``.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager, nullcontext
from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Engine,
    Index,
    Integer,
    String,
    create_engine,
    event,
    select,
    update,
)
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from rms.domain.exceptions import StorageConflictError, StorageError
from rms.domain.model.reservation import Reservation, ReservationStatus
from rms.domain.model.value_objects import RentalPeriod
from rms.domain.repository.reservation_repository import ReservationRepository

logger = logging.getLogger(__name__)

# SQLSTATE codes for serialization failure and deadlock.
_RETRYABLE_SQLSTATES = {"40001", "40P01"}


class Base(DeclarativeBase):
    pass


class ReservationRow(Base):
    __tablename__ = "reservations"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_reservations_quantity_positive"),
        CheckConstraint("start_date < end_date", name="ck_reservations_period"),
        Index(
            "ix_reservations_product_variant_period",
            "product_id",
            "variant_id",
            "start_date",
            "end_date",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(String(64), nullable=False)
    variant_id = Column(String(64), nullable=True)
    order_id = Column(Integer, nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    status = Column(String(16), nullable=False, default=ReservationStatus.ACTIVE.value)
    created_at = Column(DateTime(timezone=True), nullable=False)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<ReservationRow #{self.id} {self.product_id} x{self.quantity} "
            f"{self.start_date}..{self.end_date} {self.status}>"
        )


def create_reservation_engine(url: str, busy_timeout: float = 30.0) -> Engine:
    """Create an engine for ``url`` and make sure the schema exists."""
    if url.startswith("sqlite"):
        engine = create_engine(
            url, connect_args={"timeout": busy_timeout, "check_same_thread": False}
        )

        @event.listens_for(engine, "connect")
        def _disable_pysqlite_begin(dbapi_connection, connection_record):
            # Let SQLAlchemy emit BEGIN itself (see the "begin" hook).
            dbapi_connection.isolation_level = None

        @event.listens_for(engine, "begin")
        def _begin_immediate(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    else:
        engine = create_engine(url, isolation_level="SERIALIZABLE", pool_pre_ping=True)

    Base.metadata.create_all(engine)
    return engine


class SqlReservationRepository(ReservationRepository):

    def __init__(self, engine: Engine) -> None:
        self._sessions = sessionmaker(bind=engine, expire_on_commit=False)
        self._local = threading.local()
        self._locks: dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    # --- ReservationRepository interface --------------------------------------

    @contextmanager
    def transaction(self, product_id: str | None = None) -> Iterator[None]:
        lock = self._product_lock(product_id) if product_id is not None else nullcontext()
        with lock:
            if self._current_session() is not None:
                # Nested call joins the enclosing transaction.
                yield
                return

            session = self._sessions()
            self._local.session = session
            try:
                with _translate_errors(), session.begin():
                    yield
            finally:
                self._local.session = None
                session.close()

    def find_active_overlapping(
        self,
        product_id: str,
        period: RentalPeriod,
        exclude_order_id: int | None = None,
    ) -> list[Reservation]:
        stmt = (
            select(ReservationRow)
            .where(
                ReservationRow.product_id == product_id,
                ReservationRow.status == ReservationStatus.ACTIVE.value,
                ReservationRow.start_date < period.end,
                ReservationRow.end_date > period.start,
            )
            .order_by(ReservationRow.start_date, ReservationRow.id)
        )
        if exclude_order_id is not None:
            stmt = stmt.where(ReservationRow.order_id != exclude_order_id)

        with self._session() as session:
            return [self._to_domain(row) for row in session.scalars(stmt)]

    def list_for_order(self, order_id: int) -> list[Reservation]:
        stmt = (
            select(ReservationRow)
            .where(ReservationRow.order_id == order_id)
            .order_by(ReservationRow.id)
        )
        with self._session() as session:
            return [self._to_domain(row) for row in session.scalars(stmt)]

    def add(self, reservation: Reservation) -> Reservation:
        row = self._to_row(reservation)
        with self._session() as session:
            session.add(row)
            session.flush()
            reservation.id = row.id
        return reservation

    def save(self, reservation: Reservation) -> None:
        stmt = (
            update(ReservationRow)
            .where(ReservationRow.id == reservation.id)
            .values(status=reservation.status.value, cancelled_at=reservation.cancelled_at)
        )
        with self._session() as session:
            session.execute(stmt)

    # --- Session helpers ------------------------------------------------------

    def _current_session(self) -> Session | None:
        return getattr(self._local, "session", None)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        """The enclosing transaction's session, or a short-lived one."""
        current = self._current_session()
        if current is not None:
            with _translate_errors():
                yield current
            return

        with _translate_errors(), self._sessions() as session, session.begin():
            yield session

    def _product_lock(self, product_id: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(product_id)
            if lock is None:
                lock = self._locks[product_id] = threading.RLock()
            return lock

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_row(reservation: Reservation) -> ReservationRow:
        return ReservationRow(
            product_id=reservation.product_id,
            variant_id=reservation.variant_id,
            order_id=reservation.order_id,
            quantity=reservation.quantity,
            start_date=reservation.period.start,
            end_date=reservation.period.end,
            status=reservation.status.value,
            created_at=reservation.created_at,
            cancelled_at=reservation.cancelled_at,
        )

    @staticmethod
    def _to_domain(row: ReservationRow) -> Reservation:
        return Reservation(
            id=row.id,
            product_id=row.product_id,
            variant_id=row.variant_id,
            order_id=row.order_id,
            quantity=row.quantity,
            period=RentalPeriod(row.start_date, row.end_date),
            status=ReservationStatus(row.status),
            created_at=_as_utc(row.created_at),
            cancelled_at=_as_utc(row.cancelled_at) if row.cancelled_at else None,
        )


@contextmanager
def _translate_errors() -> Iterator[None]:
    """Map SQLAlchemy failures onto domain storage errors."""
    try:
        yield
    except DBAPIError as exc:
        if _is_serialization_failure(exc):
            raise StorageConflictError(f"Concurrent reservation transaction won: {exc.orig}") from exc
        logger.error("Reservation store failure: %s", exc)
        raise StorageError(f"Reservation store unavailable: {exc.orig}") from exc
    except SQLAlchemyError as exc:
        logger.error("Reservation store failure: %s", exc)
        raise StorageError(f"Reservation store failure: {exc}") from exc


def _is_serialization_failure(exc: DBAPIError) -> bool:
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code in _RETRYABLE_SQLSTATES:
        return True
    return "database is locked" in str(orig).lower()


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
