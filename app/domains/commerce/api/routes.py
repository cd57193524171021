"""
Commerce API Routes

FastAPI routers for the catalog stock, cart and payment endpoints. Domain
exceptions propagate to the registered exception handlers.
"""

from fastapi import APIRouter, Depends, Query, status

from app.domains.commerce.api.dependencies import (
    get_cart_store,
    get_commerce_config,
    get_payment_ledger,
    get_stock_authority,
)
from app.domains.commerce.api.schemas import (
    AddCartLineRequest,
    CartCountResponse,
    CartLineResponse,
    CartTotalResponse,
    ClearCartResponse,
    ContainsProductResponse,
    PaymentResponse,
    PaymentStatisticsResponse,
    PaymentStatusResponse,
    ProductResponse,
    RegisterProductRequest,
    RemoveCartLineResponse,
    SettlePaymentRequest,
    StockAdjustmentRequest,
    StockCheckResponse,
)
from app.domains.commerce.application.dto import PaymentDTO, ProductDTO
from app.domains.commerce.application.dto import RegisterProductRequest as RegisterProductCommand
from app.domains.commerce.application.services import CartStore, PaymentLedger, StockAuthority
from app.domains.commerce.domain.value_objects import CommerceConfig

catalog_router = APIRouter(prefix="/catalog", tags=["Catalog"])
cart_router = APIRouter(prefix="/cart", tags=["Cart"])
payment_router = APIRouter(prefix="/payments", tags=["Payments"])


# ==================== Catalog ====================


@catalog_router.post("/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def register_product(
    request: RegisterProductRequest,
    stock: StockAuthority = Depends(get_stock_authority),
):
    """Register a product with its initial stock."""
    product = await stock.register_product(RegisterProductCommand(**request.model_dump()))
    return ProductResponse.model_validate(ProductDTO.from_entity(product))


@catalog_router.get("/products/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: int,
    stock: StockAuthority = Depends(get_stock_authority),
):
    """Get an active product by ID."""
    product = await stock.get_product(product_id)
    return ProductResponse.model_validate(ProductDTO.from_entity(product))


@catalog_router.get("/products/{product_id}/stock", response_model=StockCheckResponse)
async def check_stock(
    product_id: int,
    quantity: int = Query(...),
    stock: StockAuthority = Depends(get_stock_authority),
):
    """Check whether the product can cover the requested quantity."""
    sufficient = await stock.has_sufficient_stock(product_id, quantity)
    return StockCheckResponse(
        product_id=product_id,
        requested_quantity=quantity,
        available_quantity=await stock.available_quantity(product_id),
        sufficient=sufficient,
    )


@catalog_router.post("/products/{product_id}/stock/reduce", response_model=ProductResponse)
async def reduce_stock(
    product_id: int,
    request: StockAdjustmentRequest,
    stock: StockAuthority = Depends(get_stock_authority),
):
    product = await stock.reduce_stock(product_id, request.quantity)
    return ProductResponse.model_validate(ProductDTO.from_entity(product))


@catalog_router.post("/products/{product_id}/stock/increase", response_model=ProductResponse)
async def increase_stock(
    product_id: int,
    request: StockAdjustmentRequest,
    stock: StockAuthority = Depends(get_stock_authority),
):
    product = await stock.increase_stock(product_id, request.quantity)
    return ProductResponse.model_validate(ProductDTO.from_entity(product))


# ==================== Cart ====================


@cart_router.get("/health")
async def cart_health() -> dict[str, str]:
    return {"status": "ok", "service": "cart"}


@cart_router.post("/items", response_model=CartLineResponse, status_code=status.HTTP_201_CREATED)
async def add_cart_line(
    request: AddCartLineRequest,
    user_id: int = Query(...),
    cart: CartStore = Depends(get_cart_store),
):
    """Add a product to the user's cart, merging with an existing line."""
    line = await cart.add_line(user_id, request.product_id, request.quantity)
    return CartLineResponse.model_validate(line)


@cart_router.get("/items", response_model=list[CartLineResponse])
async def list_cart_lines(
    user_id: int = Query(...),
    cart: CartStore = Depends(get_cart_store),
):
    """List the active lines of the user's cart, newest first."""
    return [CartLineResponse.model_validate(line) for line in await cart.list_lines(user_id)]


@cart_router.delete("/items", response_model=ClearCartResponse)
async def clear_cart(
    user_id: int = Query(...),
    cart: CartStore = Depends(get_cart_store),
):
    """Remove every active line of the user's cart."""
    return ClearCartResponse.model_validate(await cart.clear_cart(user_id))


@cart_router.get("/items/{line_id}", response_model=CartLineResponse)
async def get_cart_line(
    line_id: int,
    user_id: int = Query(...),
    cart: CartStore = Depends(get_cart_store),
):
    return CartLineResponse.model_validate(await cart.get_line(user_id, line_id))


@cart_router.put("/items/{line_id}", response_model=CartLineResponse)
async def update_cart_line(
    line_id: int,
    user_id: int = Query(...),
    quantity: int = Query(...),
    cart: CartStore = Depends(get_cart_store),
):
    """Replace the quantity of a cart line."""
    line = await cart.update_quantity(user_id, line_id, quantity)
    return CartLineResponse.model_validate(line)


@cart_router.delete("/items/{line_id}", response_model=RemoveCartLineResponse)
async def remove_cart_line(
    line_id: int,
    user_id: int = Query(...),
    cart: CartStore = Depends(get_cart_store),
):
    success = await cart.remove_line(user_id, line_id)
    return RemoveCartLineResponse(success=success, line_id=line_id)


@cart_router.get("/total", response_model=CartTotalResponse)
async def get_cart_total(
    user_id: int = Query(...),
    cart: CartStore = Depends(get_cart_store),
    config: CommerceConfig = Depends(get_commerce_config),
):
    total = await cart.total(user_id)
    return CartTotalResponse(user_id=user_id, total=total, currency=config.default_currency)


@cart_router.get("/count", response_model=CartCountResponse)
async def get_cart_count(
    user_id: int = Query(...),
    cart: CartStore = Depends(get_cart_store),
):
    return CartCountResponse(user_id=user_id, count=await cart.count(user_id))


@cart_router.get("/check-product", response_model=ContainsProductResponse)
async def check_product_in_cart(
    user_id: int = Query(...),
    product_id: int = Query(...),
    cart: CartStore = Depends(get_cart_store),
):
    in_cart = await cart.contains_product(user_id, product_id)
    return ContainsProductResponse(user_id=user_id, product_id=product_id, in_cart=in_cart)


# ==================== Payments ====================
# Static paths are declared before /{payment_id} so they are matched first.


@payment_router.post("/process", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
async def process_payment(
    request: SettlePaymentRequest,
    user_id: int | None = Query(default=None),
    ledger: PaymentLedger = Depends(get_payment_ledger),
):
    """
    Settle the payment of an order.

    The response carries the final status; a declined settlement is a
    successful request with status FAILED.
    """
    payment = await ledger.settle(
        order_id=request.order_id,
        amount=request.amount,
        payment_method=request.payment_method,
        description=request.description,
        currency=request.currency,
        user_id=user_id,
    )
    return PaymentResponse.model_validate(payment)


@payment_router.get("/pending", response_model=list[PaymentResponse])
async def list_pending_payments(ledger: PaymentLedger = Depends(get_payment_ledger)):
    """List pending payments, oldest first."""
    return _to_responses(await ledger.list_pending())


@payment_router.get("/statistics", response_model=PaymentStatisticsResponse)
async def get_payment_statistics(ledger: PaymentLedger = Depends(get_payment_ledger)):
    return PaymentStatisticsResponse.model_validate(await ledger.statistics())


@payment_router.get("/transaction/{transaction_id}", response_model=PaymentResponse)
async def get_payment_by_transaction(
    transaction_id: str,
    ledger: PaymentLedger = Depends(get_payment_ledger),
):
    return PaymentResponse.model_validate(await ledger.get_by_transaction_id(transaction_id))


@payment_router.get("/user/{user_id}", response_model=list[PaymentResponse])
async def list_user_payments(user_id: int, ledger: PaymentLedger = Depends(get_payment_ledger)):
    return _to_responses(await ledger.list_by_user(user_id))


@payment_router.get("/order/{order_id}", response_model=list[PaymentResponse])
async def list_order_payments(order_id: int, ledger: PaymentLedger = Depends(get_payment_ledger)):
    return _to_responses(await ledger.list_by_order(order_id))


@payment_router.get("/status/{payment_status}", response_model=list[PaymentResponse])
async def list_payments_by_status(payment_status: str, ledger: PaymentLedger = Depends(get_payment_ledger)):
    """List payments in a status (PENDING, COMPLETED, FAILED), case-insensitive."""
    return _to_responses(await ledger.list_by_status(payment_status))


@payment_router.get("/{payment_id}", response_model=PaymentResponse)
async def get_payment(payment_id: int, ledger: PaymentLedger = Depends(get_payment_ledger)):
    return PaymentResponse.model_validate(await ledger.get_by_id(payment_id))


@payment_router.get("/{payment_id}/status", response_model=PaymentStatusResponse)
async def get_payment_status(payment_id: int, ledger: PaymentLedger = Depends(get_payment_ledger)):
    payment = await ledger.get_by_id(payment_id)
    return PaymentStatusResponse(
        payment_id=payment.id,
        transaction_id=payment.transaction_id,
        status=payment.status,
        failure_reason=payment.failure_reason,
        processed_at=payment.processed_at,
    )


@payment_router.put("/{payment_id}/status", response_model=PaymentResponse)
async def update_payment_status(
    payment_id: int,
    new_status: str = Query(..., alias="status"),
    ledger: PaymentLedger = Depends(get_payment_ledger),
):
    """Administrative status override; bypasses the settlement transitions."""
    return PaymentResponse.model_validate(await ledger.update_status(payment_id, new_status))


def _to_responses(payments: list[PaymentDTO]) -> list[PaymentResponse]:
    return [PaymentResponse.model_validate(payment) for payment in payments]


__all__ = ["catalog_router", "cart_router", "payment_router"]
