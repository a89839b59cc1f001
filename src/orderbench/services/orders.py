"""Order placement.

Stock is reserved with one conditional UPDATE guarded by ``stock >= quantity``
inside the same transaction that inserts the order row, so concurrent
placements for one product serialise on the row lock the store takes for the
UPDATE. No application-level locking is involved.
"""
import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .. import crud, models, schemas

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


class OrderError(Exception):
    """Base exception for every failure `place_order` reports."""

    code: str = "order_error"

    def __init__(self, message: str | None = None) -> None:
        if message is None:
            message = "Order could not be placed."
        super().__init__(message)

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(OrderError):
    """Malformed request. Raised before anything is written."""

    code: str = "validation_error"

    def __init__(self, message: str | None = None, field: str | None = None) -> None:
        super().__init__(message or "Invalid order request.")
        self.field = field


class InsufficientStockOrNotFound(OrderError):
    """The conditional stock update matched no row.

    ``reason`` is filled from a read taken after the rollback. It is only a
    hint for the caller's message and may already be stale.
    """

    code: str = "insufficient_stock_or_not_found"

    NOT_FOUND = "not_found"
    INSUFFICIENT_STOCK = "insufficient_stock"

    def __init__(self, product_id: int, reason: str | None = None) -> None:
        if reason == self.NOT_FOUND:
            message = "Product not found"
        elif reason == self.INSUFFICIENT_STOCK:
            message = "Insufficient stock"
        else:
            message = "Insufficient stock or product not found"
        super().__init__(message)
        self.product_id = product_id
        self.reason = reason


class TransientStoreError(OrderError):
    """The store failed. Nothing was committed, so the call can be retried as is."""

    code: str = "transient_store_error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "Service temporarily unavailable, please try again")


def validate_order_request(user_id, product_id, quantity) -> None:
    for field, value in (("user_id", user_id), ("product_id", product_id), ("quantity", quantity)):
        if value is None:
            raise ValidationError(f"{field} is required", field=field)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"{field} must be an integer", field=field)
    for field, value in (("user_id", user_id), ("product_id", product_id)):
        if not schemas.MIN_ID <= value <= schemas.MAX_ID:
            raise ValidationError(f"{field} must be between {schemas.MIN_ID} and {schemas.MAX_ID}", field=field)
    if not schemas.MIN_QUANTITY <= quantity <= schemas.MAX_QUANTITY:
        raise ValidationError(
            f"quantity must be between {schemas.MIN_QUANTITY} and {schemas.MAX_QUANTITY}",
            field="quantity",
        )


class OrderPlacementService:
    """Places orders through an explicitly supplied SQLAlchemy session.

    The service keeps no state between calls; one instance per request (or one
    shared instance per session) is fine.
    """

    def __init__(self, db: Session):
        self.db = db

    def place_order(self, user_id: int, product_id: int, quantity: int) -> schemas.OrderConfirmation:
        """Reserve ``quantity`` units of ``product_id`` and record a paid order.

        Returns the confirmation of the committed order. Raises
        `ValidationError`, `InsufficientStockOrNotFound` or
        `TransientStoreError`; in each case no stock was decremented and no
        order row exists.
        """
        validate_order_request(user_id, product_id, quantity)
        self._ensure_user_exists(user_id)

        try:
            confirmation = self._reserve_and_record(user_id, product_id, quantity)
        except InsufficientStockOrNotFound as exc:
            raise self._diagnose(exc) from None
        except IntegrityError as exc:
            logger.warning("order for user %s / product %s violated a constraint", user_id, product_id, exc_info=True)
            raise ValidationError("order references a missing user or product") from exc
        except SQLAlchemyError as exc:
            logger.warning("store failure placing order for product %s", product_id, exc_info=True)
            raise TransientStoreError() from exc

        logger.info(
            "order %s placed: user=%s product=%s quantity=%s total=%s",
            confirmation.id, user_id, product_id, quantity, confirmation.total_price,
        )
        return confirmation

    def _ensure_user_exists(self, user_id: int) -> None:
        # fast-fail only; the foreign key is what actually protects the insert
        try:
            exists = crud.user_exists(self.db, user_id)
        except SQLAlchemyError as exc:
            self._rollback()
            logger.warning("store failure checking user %s", user_id, exc_info=True)
            raise TransientStoreError() from exc
        if not exists:
            self._rollback()
            raise ValidationError("user_id does not exist", field="user_id")

    def _reserve_and_record(self, user_id: int, product_id: int, quantity: int) -> schemas.OrderConfirmation:
        now = datetime.now()
        try:
            result = self.db.execute(
                update(models.Product)
                .where(models.Product.id == product_id, models.Product.stock >= quantity)
                .values(stock=models.Product.stock - quantity, updated_at=now)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise InsufficientStockOrNotFound(product_id)

            unit_price = self.db.execute(
                select(models.Product.price).where(models.Product.id == product_id)
            ).scalar_one_or_none()
            if unit_price is None:
                # the row we just decremented is gone
                raise InsufficientStockOrNotFound(product_id, InsufficientStockOrNotFound.NOT_FOUND)

            unit_price = Decimal(unit_price).quantize(CENT)
            db_order = models.Order(
                user_id=user_id,
                product_id=product_id,
                quantity=quantity,
                unit_price=unit_price,
                total_price=(unit_price * quantity).quantize(CENT),
                status=models.OrderStatus.PAID.value,
                created_at=now,
                updated_at=now,
            )
            self.db.add(db_order)
            self.db.flush()
            # built before commit so nothing has to be reloaded afterwards
            confirmation = schemas.OrderConfirmation.model_validate(db_order)
            self.db.commit()
        except BaseException:
            self._rollback()
            raise
        return confirmation

    def _diagnose(self, exc: InsufficientStockOrNotFound) -> InsufficientStockOrNotFound:
        if exc.reason is not None:
            return exc
        try:
            stock = crud.get_product_stock(self.db, exc.product_id)
        except SQLAlchemyError:
            logger.debug("could not read product %s for diagnostics", exc.product_id, exc_info=True)
            return exc
        finally:
            self._rollback()
        reason = exc.NOT_FOUND if stock is None else exc.INSUFFICIENT_STOCK
        logger.info("order rejected for product %s: %s", exc.product_id, reason)
        return InsufficientStockOrNotFound(exc.product_id, reason)

    def _rollback(self) -> None:
        try:
            self.db.rollback()
        except SQLAlchemyError:
            logger.debug("rollback failed", exc_info=True)
