"""Pydantic request/response schemas for the Storefront API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands. Customer-facing variant responses have no
cost_price field, so it can never leak through them.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------
class SuccessResponse(BaseModel):
    success: bool = True


class AdminActor(BaseModel):
    admin_id: str | None = None
    admin_name: str | None = None


class AdminStampSchema(BaseModel):
    admin_id: str
    admin_name: str
    timestamp: datetime | None = None


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------
class ProductResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    category: str
    image_url: str | None = None
    available_sizes: list[str] = []
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AdminProductResponse(ProductResponse):
    variant_count: int = 0
    total_stock: int = 0


class VariantResponse(BaseModel):
    id: str
    product_id: str
    color: str
    available_sizes: list[str] = []
    selling_price: float
    stock_quantity: int
    image_url: str | None = None


class AdminVariantResponse(VariantResponse):
    cost_price: float


class VariantStockResponse(BaseModel):
    id: str
    color: str
    stock_quantity: int


class FirstVariantSchema(BaseModel):
    color: str
    available_sizes: list[str] = []
    cost_price: float = Field(ge=0, default=0.0)
    selling_price: float = Field(ge=0)
    stock_quantity: int = Field(ge=0, default=10)
    image_url: str | None = None


class CreateProductRequest(BaseModel):
    name: str
    description: str | None = None
    category: str
    image_url: str | None = None
    available_sizes: list[str] = []
    is_active: bool = True
    first_variant: FirstVariantSchema | None = None


class UpdateProductRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    category: str | None = None
    image_url: str | None = None
    available_sizes: list[str] | None = None
    is_active: bool | None = None


class CreateVariantRequest(FirstVariantSchema):
    product_id: str


class SetStockRequest(BaseModel):
    stock_quantity: int = Field(ge=0)


class ProductCreatedResponse(BaseModel):
    success: bool = True
    product_id: str
    variant_id: str | None = None


class VariantCreatedResponse(BaseModel):
    success: bool = True
    variant_id: str


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    variant_id: str
    quantity: int = Field(ge=1)
    phone_number: str
    product_id: str | None = None
    product_name: str | None = None
    size: str | None = None
    color: str | None = None
    country: str | None = None


class OrderPlacedResponse(BaseModel):
    success: bool = True
    order_id: str


class ChangeStatusRequest(AdminActor):
    status: str


class AdminOrderResponse(BaseModel):
    id: str
    variant_id: str
    product_id: str
    product_name: str
    size: str | None = None
    color: str | None = None
    quantity: int
    phone_number: str
    country: str | None = None
    status: str
    allowed_transitions: list[str] = []
    approved_by: AdminStampSchema | None = None
    deleted_by: AdminStampSchema | None = None
    cost_price: float
    selling_price: float
    profit: float
    created_at: datetime | None = None
    updated_at: datetime | None = None


class StockAlertSchema(BaseModel):
    id: str
    product_id: str
    product_name: str
    color: str
    stock_quantity: int


class AnalyticsResponse(BaseModel):
    total_orders: int
    approved_orders: int  # completed
    cancelled_orders: int
    pending_orders: int  # pending or confirmed
    total_products: int
    total_revenue: float
    total_profit: float
    inventory_value: float
    low_stock_variants: list[StockAlertSchema] = []
    out_of_stock_variants: list[StockAlertSchema] = []
