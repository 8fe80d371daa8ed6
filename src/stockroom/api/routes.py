"""FastAPI routes for products and their stock movements."""

from typing import Literal

from fastapi import APIRouter
from protean.utils.globals import current_domain

from stockroom.api.schemas import (
    MovementIdResponse,
    MovementResponse,
    ProductDetailResponse,
    ProductIdResponse,
    ProductSummaryResponse,
    RecordMovementRequest,
    RegisterProductRequest,
    StatusResponse,
)
from stockroom.product.management import RecordStockMovement, RegisterProduct, RemoveProduct
from stockroom.product.registry import registry

product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def register_product(body: RegisterProductRequest) -> ProductIdResponse:
    command = RegisterProduct(
        product_id=body.product_id,
        name=body.name,
        entry_date=body.entry_date,
        initial_quantity=body.initial_quantity,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.get("", response_model=list[ProductSummaryResponse])
async def list_products() -> list[ProductSummaryResponse]:
    return [ProductSummaryResponse.from_aggregate(p) for p in registry.all()]


@product_router.get("/{product_id}", response_model=ProductDetailResponse)
async def get_product(product_id: str) -> ProductDetailResponse:
    return ProductDetailResponse.from_aggregate(registry.get(product_id))


@product_router.delete("/{product_id}", response_model=StatusResponse)
async def remove_product(product_id: str) -> StatusResponse:
    current_domain.process(RemoveProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


@product_router.post("/{product_id}/movements", status_code=201, response_model=MovementIdResponse)
async def record_movement(product_id: str, body: RecordMovementRequest) -> MovementIdResponse:
    command = RecordStockMovement(
        product_id=product_id,
        kind=body.kind,
        quantity=body.quantity,
        movement_date=body.movement_date,
    )
    result = current_domain.process(command, asynchronous=False)
    return MovementIdResponse(movement_id=result)


@product_router.get("/{product_id}/movements", response_model=list[MovementResponse])
async def list_movements(
    product_id: str, order: Literal["recent", "quantity"] = "quantity"
) -> list[MovementResponse]:
    product = registry.get(product_id)
    if order == "recent":
        movements = product.recent_movements()
    else:
        movements = product.history_sorted_by_quantity()
    return [MovementResponse.from_entity(m) for m in movements]
