from fastapi import FastAPI, HTTPException, Depends, Path, Response, status, APIRouter
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from decimal import Decimal
from typing import Optional
import logging
import math

from . import models, schemas, crud, database, services
from .logging_config import configure_logging

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Orders Benchmark Service")

# Create tables on startup (migrations are out of scope for the benchmark)
models.Base.metadata.create_all(bind=database.engine)

DEFAULT_PER_PAGE = 20
MAX_PER_PAGE = 100

# Test routes
router = APIRouter(prefix="/test", tags=["test"])


@router.post("/reset-db", status_code=status.HTTP_204_NO_CONTENT, include_in_schema=False)
def reset_database(db: Session = Depends(database.get_db)):
    """
    Clear all data from database tables. For testing purposes only.
    """
    try:
        crud.reset_database(db)
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to reset database: {str(e)}")

# Include test routes
app.include_router(router)


@app.get("/", response_model=schemas.ServiceStatus)
def service_status(db: Session = Depends(database.get_db)):
    """Report which engine the service is talking to, its version, and row counts."""
    driver = db.get_bind().dialect.name
    try:
        version = crud.database_version(db)
    except SQLAlchemyError:
        logger.warning("could not read database version", exc_info=True)
        db.rollback()
        version = "Unable to connect"
    try:
        stats = crud.database_stats(db)
    except SQLAlchemyError:
        logger.warning("could not read database stats", exc_info=True)
        db.rollback()
        stats = None
    return {"driver": driver, "database_version": version, "stats": stats}


@app.get(
    "/products/",
    response_model=schemas.ProductList,
    responses={
        200: {
            "description": "Filtered, sorted, paged list of products",
            "content": {"application/json": {"example": schemas.ProductList.model_config["json_schema_extra"]["example"]}},
        },
        400: {"description": "Bad Request", "content": {"application/json": {"example": {"detail": "page must be >= 1"}}}},
    },
)
def read_products(
    search: Optional[str] = None,
    min_price: Optional[Decimal] = None,
    max_price: Optional[Decimal] = None,
    sort: str = "recent",
    page: int = 1,
    per_page: int = DEFAULT_PER_PAGE,
    db: Session = Depends(database.get_db),
):
    """List products.

    - `search` matches a substring of the product name.
    - `min_price` / `max_price` bound the price inclusively.
    - `sort` is `recent` (default), `price_asc` or `price_desc`; anything else means `recent`.
    - `per_page` is clamped to 1..100.
    """
    if page < 1:
        raise HTTPException(status_code=400, detail="page must be >= 1")
    per_page = min(max(per_page, 1), MAX_PER_PAGE)
    filters = {"search": search, "min_price": min_price, "max_price": max_price}
    items = crud.get_products(db, skip=(page - 1) * per_page, limit=per_page, sort=sort, **filters)
    total = crud.count_products(db, **filters)
    return {
        "items": items,
        "page": page,
        "per_page": per_page,
        "total": total,
        "last_page": max(math.ceil(total / per_page), 1),
    }


@app.get(
    "/products/{product_id}",
    response_model=schemas.Product,
    responses={404: {"description": "Not Found", "content": {"application/json": {"example": {"detail": "Product not found"}}}}},
)
def read_product(product_id: int = Path(..., ge=schemas.MIN_ID, le=schemas.MAX_ID), db: Session = Depends(database.get_db)):
    db_product = crud.get_product(db, product_id)
    if db_product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return db_product


@app.post(
    "/orders/",
    response_model=schemas.OrderConfirmation,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Order created", "content": {"application/json": {"example": schemas.OrderConfirmation.model_config["json_schema_extra"]["example"]}}},
        409: {"description": "Insufficient stock or product not found", "content": {"application/json": {"example": {"detail": "Insufficient stock"}}}},
        422: {"description": "Validation error", "content": {"application/json": {"example": {"detail": "user_id does not exist"}}}},
        503: {"description": "Store unavailable", "content": {"application/json": {"example": {"detail": "Service temporarily unavailable, please try again"}}}},
    },
)
def create_order(order: schemas.OrderCreate, response: Response, db: Session = Depends(database.get_db)):
    """Place an order, decrementing stock atomically. Returns 201 with a Location header.

    Nothing is retried here: every failure leaves the store untouched, so a
    client may retry a 503 verbatim.
    """
    service = services.OrderPlacementService(db)
    try:
        confirmation = service.place_order(order.user_id, order.product_id, order.quantity)
    except services.ValidationError as e:
        raise HTTPException(status_code=422, detail=e.message)
    except services.InsufficientStockOrNotFound as e:
        raise HTTPException(status_code=409, detail=e.message)
    except services.TransientStoreError as e:
        raise HTTPException(status_code=503, detail=e.message)
    response.headers["Location"] = f"/orders/{confirmation.id}"
    return confirmation


@app.get(
    "/orders/{order_id}",
    response_model=schemas.OrderConfirmation,
    responses={404: {"description": "Not Found", "content": {"application/json": {"example": {"detail": "Order not found"}}}}},
)
def read_order(order_id: int = Path(..., ge=schemas.MIN_ID, le=schemas.MAX_ID), db: Session = Depends(database.get_db)):
    """Retrieve a placed order. Orders are never modified after creation."""
    db_order = crud.get_order(db, order_id)
    if not db_order:
        raise HTTPException(status_code=404, detail="Order not found")
    return db_order
