"""SQLAlchemy-backed stock ledger.

Stock counts live in ``variant_stock``, guarded by a CHECK constraint that
keeps them non-negative. Every change is appended to ``stock_movements``
together with the resulting balance. A movement may carry a unique
reference; replaying a reference has no effect, which is what lets the
order lifecycle fire each stock effect at most once.

Reservations are a single conditional UPDATE
(``... SET stock_quantity = stock_quantity - :q WHERE stock_quantity >= :q``).
On PostgreSQL the row lock taken by that UPDATE serializes competing
writers; on SQLite every transaction is opened with ``BEGIN IMMEDIATE`` so
writers queue on the database lock instead of failing half-way.
"""

from datetime import UTC, datetime

import structlog
from protean.exceptions import ValidationError
from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    delete,
    event,
    insert,
    select,
    update,
)
from sqlalchemy.exc import IntegrityError

from storefront.errors import InsufficientStock, VariantNotFound
from storefront.inventory.port import StockLedger, StockLevel, StockMovement

logger = structlog.get_logger(__name__)

metadata = MetaData()

variant_stock = Table(
    "variant_stock",
    metadata,
    Column("variant_id", String(64), primary_key=True),
    Column("stock_quantity", Integer, nullable=False, default=0),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    CheckConstraint("stock_quantity >= 0", name="non_negative_stock"),
)

stock_movements = Table(
    "stock_movements",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("variant_id", String(64), nullable=False, index=True),
    Column("kind", String(20), nullable=False),
    Column("quantity_change", Integer, nullable=False),
    Column("balance_after", Integer, nullable=False),
    Column("reference", String(128), unique=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
)


def _positive(quantity):
    if quantity is None or quantity <= 0:
        raise ValidationError({"quantity": ["Quantity must be greater than zero"]})


def _non_negative(quantity):
    if quantity is None or quantity < 0:
        raise ValidationError({"stock_quantity": ["Stock quantity cannot be negative"]})


class SqlStockLedger(StockLedger):
    def __init__(self, database_uri: str, **engine_options):
        self.database_uri = database_uri
        if database_uri.startswith("sqlite"):
            connect_args = engine_options.pop("connect_args", {})
            connect_args.setdefault("check_same_thread", False)
            connect_args.setdefault("timeout", 30)
            self._engine = create_engine(database_uri, connect_args=connect_args, **engine_options)
            self._serialize_sqlite_writers()
        else:
            self._engine = create_engine(database_uri, **engine_options)

    def _serialize_sqlite_writers(self):
        # pysqlite defers BEGIN until the first write; take the write lock up front instead
        @event.listens_for(self._engine, "connect")
        def _disable_pysqlite_transactions(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None

        @event.listens_for(self._engine, "begin")
        def _begin_immediate(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    # -------------------------------------------------------------------
    # Schema management
    # -------------------------------------------------------------------
    def create_schema(self) -> None:
        metadata.create_all(self._engine)

    def drop_schema(self) -> None:
        metadata.drop_all(self._engine)

    def reset(self) -> None:
        """Empty both tables (used between tests)."""
        with self._engine.begin() as conn:
            conn.execute(delete(stock_movements))
            conn.execute(delete(variant_stock))

    def dispose(self) -> None:
        self._engine.dispose()

    # -------------------------------------------------------------------
    # Helpers (all expect an open transaction)
    # -------------------------------------------------------------------
    @staticmethod
    def _current_quantity(conn, variant_id, for_update=False):
        query = select(variant_stock.c.stock_quantity).where(variant_stock.c.variant_id == variant_id)
        if for_update:
            query = query.with_for_update()
        return conn.execute(query).scalar_one_or_none()

    def _read_level(self, conn, variant_id) -> StockLevel:
        quantity = self._current_quantity(conn, variant_id)
        if quantity is None:
            raise VariantNotFound(variant_id)
        return StockLevel(variant_id=variant_id, stock_quantity=quantity)

    @staticmethod
    def _reference_applied(conn, reference) -> bool:
        if not reference:
            return False
        found = conn.execute(
            select(stock_movements.c.id).where(stock_movements.c.reference == reference)
        ).scalar_one_or_none()
        return found is not None

    def _record(self, conn, variant_id, kind, quantity_change, reference=None) -> StockLevel:
        level = self._read_level(conn, variant_id)
        conn.execute(
            insert(stock_movements).values(
                variant_id=variant_id,
                kind=kind,
                quantity_change=quantity_change,
                balance_after=level.stock_quantity,
                reference=reference,
                created_at=datetime.now(UTC),
            )
        )
        return level

    def _replayed(self, conn, variant_id, reference) -> StockLevel:
        logger.warning("Stock movement already applied", variant_id=variant_id, reference=reference)
        return self._read_level(conn, variant_id)

    def _replayed_after_race(self, variant_id, reference) -> StockLevel:
        logger.warning("Stock movement applied concurrently", variant_id=variant_id, reference=reference)
        return self.level(variant_id)

    # -------------------------------------------------------------------
    # Ledger operations
    # -------------------------------------------------------------------
    def register(self, variant_id, quantity):
        variant_id = str(variant_id)
        _non_negative(quantity)
        try:
            with self._engine.begin() as conn:
                conn.execute(
                    insert(variant_stock).values(
                        variant_id=variant_id,
                        stock_quantity=quantity,
                        updated_at=datetime.now(UTC),
                    )
                )
                level = self._record(conn, variant_id, "register", quantity)
        except IntegrityError:
            raise ValidationError({"variant_id": ["Stock is already registered for this variant"]}) from None

        logger.info("Stock registered", variant_id=variant_id, stock_quantity=quantity)
        return level

    def reserve(self, variant_id, quantity, reference=None):
        variant_id = str(variant_id)
        _positive(quantity)
        try:
            with self._engine.begin() as conn:
                if self._reference_applied(conn, reference):
                    return self._replayed(conn, variant_id, reference)

                result = conn.execute(
                    update(variant_stock)
                    .where(
                        variant_stock.c.variant_id == variant_id,
                        variant_stock.c.stock_quantity >= quantity,
                    )
                    .values(
                        stock_quantity=variant_stock.c.stock_quantity - quantity,
                        updated_at=datetime.now(UTC),
                    )
                )
                if result.rowcount == 0:
                    available = self._current_quantity(conn, variant_id)
                    if available is None:
                        raise VariantNotFound(variant_id)
                    logger.info(
                        "Reservation rejected",
                        variant_id=variant_id,
                        requested=quantity,
                        available=available,
                    )
                    raise InsufficientStock(variant_id, quantity, available)

                level = self._record(conn, variant_id, "reserve", -quantity, reference)
        except IntegrityError:
            # Lost a race on the same reference; the winner's decrement stands.
            if not reference:
                raise
            return self._replayed_after_race(variant_id, reference)

        logger.info(
            "Stock reserved",
            variant_id=variant_id,
            quantity=quantity,
            stock_quantity=level.stock_quantity,
            reference=reference,
        )
        return level

    def release(self, variant_id, quantity, reference=None):
        variant_id = str(variant_id)
        _positive(quantity)
        try:
            with self._engine.begin() as conn:
                if self._reference_applied(conn, reference):
                    return self._replayed(conn, variant_id, reference)

                result = conn.execute(
                    update(variant_stock)
                    .where(variant_stock.c.variant_id == variant_id)
                    .values(
                        stock_quantity=variant_stock.c.stock_quantity + quantity,
                        updated_at=datetime.now(UTC),
                    )
                )
                if result.rowcount == 0:
                    raise VariantNotFound(variant_id)

                level = self._record(conn, variant_id, "release", quantity, reference)
        except IntegrityError:
            if not reference:
                raise
            return self._replayed_after_race(variant_id, reference)

        logger.info(
            "Stock released",
            variant_id=variant_id,
            quantity=quantity,
            stock_quantity=level.stock_quantity,
            reference=reference,
        )
        return level

    def set_level(self, variant_id, quantity):
        variant_id = str(variant_id)
        _non_negative(quantity)
        with self._engine.begin() as conn:
            previous = self._current_quantity(conn, variant_id, for_update=True)
            if previous is None:
                raise VariantNotFound(variant_id)
            conn.execute(
                update(variant_stock)
                .where(variant_stock.c.variant_id == variant_id)
                .values(stock_quantity=quantity, updated_at=datetime.now(UTC))
            )
            level = self._record(conn, variant_id, "set", quantity - previous)

        logger.info("Stock level set", variant_id=variant_id, previous=previous, stock_quantity=quantity)
        return level

    def level(self, variant_id):
        with self._engine.connect() as conn:
            return self._read_level(conn, str(variant_id))

    def levels(self, variant_ids):
        ids = [str(variant_id) for variant_id in variant_ids]
        if not ids:
            return {}
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(variant_stock.c.variant_id, variant_stock.c.stock_quantity).where(
                    variant_stock.c.variant_id.in_(ids)
                )
            ).all()
        return {row.variant_id: row.stock_quantity for row in rows}

    def remove(self, variant_ids):
        ids = [str(variant_id) for variant_id in variant_ids]
        if not ids:
            return
        with self._engine.begin() as conn:
            conn.execute(delete(variant_stock).where(variant_stock.c.variant_id.in_(ids)))
        logger.info("Stock rows removed", variant_ids=ids)

    def movements(self, variant_id):
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(stock_movements)
                .where(stock_movements.c.variant_id == str(variant_id))
                .order_by(stock_movements.c.id)
            ).all()
        return [
            StockMovement(
                variant_id=row.variant_id,
                kind=row.kind,
                quantity_change=row.quantity_change,
                balance_after=row.balance_after,
                reference=row.reference,
                created_at=row.created_at,
            )
            for row in rows
        ]
