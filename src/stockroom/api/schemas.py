"""Pydantic request/response schemas for the Stockroom API.

These are external contracts, kept separate from the internal Protean
commands. Domain rules (blank ids, movement kinds, stock checks) are left to
the domain so that every client gets the same error messages.
"""

from datetime import date

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class RegisterProductRequest(BaseModel):
    product_id: str
    name: str
    entry_date: date | None = None
    initial_quantity: int = Field(ge=0, default=0)


class RecordMovementRequest(BaseModel):
    kind: str = Field(description="AddToStock or RemoveFromStock")
    quantity: int
    movement_date: date | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class ProductIdResponse(BaseModel):
    product_id: str


class MovementIdResponse(BaseModel):
    movement_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class MovementResponse(BaseModel):
    movement_id: str
    kind: str
    quantity: int
    movement_date: date

    @classmethod
    def from_entity(cls, movement) -> "MovementResponse":
        return cls(
            movement_id=str(movement.id),
            kind=movement.kind,
            quantity=movement.quantity,
            movement_date=movement.movement_date,
        )


class ProductSummaryResponse(BaseModel):
    product_id: str
    name: str
    entry_date: date
    quantity: int

    @classmethod
    def from_aggregate(cls, product) -> "ProductSummaryResponse":
        return cls(
            product_id=str(product.id),
            name=product.name,
            entry_date=product.entry_date,
            quantity=product.quantity,
        )


class ProductDetailResponse(ProductSummaryResponse):
    history_capacity: int
    movements: list[MovementResponse] = Field(default_factory=list)

    @classmethod
    def from_aggregate(cls, product) -> "ProductDetailResponse":
        return cls(
            product_id=str(product.id),
            name=product.name,
            entry_date=product.entry_date,
            quantity=product.quantity,
            history_capacity=product.history_capacity,
            movements=[MovementResponse.from_entity(m) for m in product.recent_movements()],
        )
