"""FastAPI routes for the storefront — customer catalogue/ordering and admin."""

import json

from fastapi import APIRouter
from protean.utils.globals import current_domain

from storefront.api.schemas import (
    AdminActor,
    AdminOrderResponse,
    AdminProductResponse,
    AdminVariantResponse,
    AnalyticsResponse,
    ChangeStatusRequest,
    CreateProductRequest,
    CreateVariantRequest,
    OrderPlacedResponse,
    PlaceOrderRequest,
    ProductCreatedResponse,
    ProductResponse,
    SetStockRequest,
    SuccessResponse,
    UpdateProductRequest,
    VariantCreatedResponse,
    VariantResponse,
    VariantStockResponse,
)
from storefront.catalogue import queries
from storefront.catalogue.management import CreateProduct, DeleteProduct, UpdateProduct
from storefront.catalogue.variants import AddVariant, RemoveVariant, SetVariantStock
from storefront.ordering import reports
from storefront.ordering.placement import PlaceOrder
from storefront.ordering.transitions import ChangeOrderStatus, RemoveOrder

# ---------------------------------------------------------------------------
# Customer Router
# ---------------------------------------------------------------------------
storefront_router = APIRouter(prefix="/api", tags=["storefront"])


@storefront_router.get("/products", response_model=list[ProductResponse])
async def list_products(category: str | None = None) -> list[dict]:
    return queries.active_products(category)


@storefront_router.get("/products/{product_id}/variants", response_model=list[VariantResponse])
async def list_variants(product_id: str) -> list[dict]:
    return queries.customer_variants(product_id)


@storefront_router.get("/variants/{variant_id}/stock", response_model=VariantStockResponse)
async def variant_stock(variant_id: str) -> dict:
    return queries.variant_stock(variant_id)


@storefront_router.post("/orders", status_code=201, response_model=OrderPlacedResponse)
async def place_order(body: PlaceOrderRequest) -> OrderPlacedResponse:
    command = PlaceOrder(
        variant_id=body.variant_id,
        quantity=body.quantity,
        phone_number=body.phone_number,
        product_id=body.product_id,
        product_name=body.product_name,
        size=body.size,
        color=body.color,
        country=body.country,
    )
    order_id = current_domain.process(command, asynchronous=False)
    return OrderPlacedResponse(order_id=order_id)


# ---------------------------------------------------------------------------
# Admin Router
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/api/admin", tags=["admin"])


@admin_router.get("/orders", response_model=list[AdminOrderResponse])
async def list_orders() -> list[dict]:
    return reports.admin_order_rows()


@admin_router.patch("/orders/{order_id}", response_model=SuccessResponse)
async def change_order_status(order_id: str, body: ChangeStatusRequest) -> SuccessResponse:
    command = ChangeOrderStatus(
        order_id=order_id,
        status=body.status,
        admin_id=body.admin_id,
        admin_name=body.admin_name,
    )
    current_domain.process(command, asynchronous=False)
    return SuccessResponse()


@admin_router.delete("/orders/{order_id}", response_model=SuccessResponse)
async def remove_order(order_id: str, body: AdminActor | None = None) -> SuccessResponse:
    actor = body or AdminActor()
    command = RemoveOrder(
        order_id=order_id,
        admin_id=actor.admin_id,
        admin_name=actor.admin_name,
    )
    current_domain.process(command, asynchronous=False)
    return SuccessResponse()


@admin_router.get("/analytics", response_model=AnalyticsResponse)
async def analytics() -> dict:
    return reports.dashboard()


@admin_router.get("/products", response_model=list[AdminProductResponse])
async def list_all_products() -> list[dict]:
    return queries.all_products()


@admin_router.post("/products", status_code=201, response_model=ProductCreatedResponse)
async def create_product(body: CreateProductRequest) -> ProductCreatedResponse:
    command = CreateProduct(
        name=body.name,
        description=body.description,
        category=body.category,
        image_url=body.image_url,
        available_sizes=json.dumps(body.available_sizes),
        is_active=body.is_active,
    )
    product_id = current_domain.process(command, asynchronous=False)

    variant_id = None
    if body.first_variant is not None:
        first = body.first_variant
        variant_id = current_domain.process(
            AddVariant(
                product_id=product_id,
                color=first.color,
                available_sizes=json.dumps(first.available_sizes or body.available_sizes),
                cost_price=first.cost_price,
                selling_price=first.selling_price,
                stock_quantity=first.stock_quantity,
                image_url=first.image_url or body.image_url,
            ),
            asynchronous=False,
        )
    return ProductCreatedResponse(product_id=product_id, variant_id=variant_id)


@admin_router.patch("/products/{product_id}", response_model=SuccessResponse)
async def update_product(product_id: str, body: UpdateProductRequest) -> SuccessResponse:
    command = UpdateProduct(
        product_id=product_id,
        name=body.name,
        description=body.description,
        category=body.category,
        image_url=body.image_url,
        available_sizes=json.dumps(body.available_sizes) if body.available_sizes is not None else None,
        is_active=body.is_active,
    )
    current_domain.process(command, asynchronous=False)
    return SuccessResponse()


@admin_router.delete("/products/{product_id}", response_model=SuccessResponse)
async def delete_product(product_id: str) -> SuccessResponse:
    current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return SuccessResponse()


@admin_router.get("/products/{product_id}/variants", response_model=list[AdminVariantResponse])
async def list_product_variants(product_id: str) -> list[dict]:
    return queries.admin_variants(product_id)


@admin_router.post("/variants", status_code=201, response_model=VariantCreatedResponse)
async def create_variant(body: CreateVariantRequest) -> VariantCreatedResponse:
    command = AddVariant(
        product_id=body.product_id,
        color=body.color,
        available_sizes=json.dumps(body.available_sizes),
        cost_price=body.cost_price,
        selling_price=body.selling_price,
        stock_quantity=body.stock_quantity,
        image_url=body.image_url,
    )
    variant_id = current_domain.process(command, asynchronous=False)
    return VariantCreatedResponse(variant_id=variant_id)


@admin_router.patch("/variants/{variant_id}/stock", response_model=SuccessResponse)
async def set_variant_stock(variant_id: str, body: SetStockRequest) -> SuccessResponse:
    command = SetVariantStock(variant_id=variant_id, stock_quantity=body.stock_quantity)
    current_domain.process(command, asynchronous=False)
    return SuccessResponse()


@admin_router.delete("/variants/{variant_id}", response_model=SuccessResponse)
async def delete_variant(variant_id: str) -> SuccessResponse:
    current_domain.process(RemoveVariant(variant_id=variant_id), asynchronous=False)
    return SuccessResponse()
