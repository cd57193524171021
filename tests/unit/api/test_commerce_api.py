"""
HTTP tests for the commerce endpoints.

The application is built by the app factory; the database dependency is
overridden with the in-memory test database and the global container is
replaced by one using a deterministic settlement gateway.
"""

from collections.abc import AsyncGenerator
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.config.settings import Settings
from app.core.app_factory import create_app
from app.core.container import DependencyContainer, reset_container, set_container
from app.database.async_db import get_async_db
from app.domains.commerce.domain.services import FixedSettlementGateway

API = "/api/v1"


@pytest.fixture
def test_settings() -> Settings:
    return Settings(ENVIRONMENT="test", DATABASE_URL="sqlite+aiosqlite:///:memory:", SENTRY_DSN=None)


@pytest.fixture
def app(test_settings, async_session_factory):
    application = create_app(test_settings)

    async def override_get_async_db() -> AsyncGenerator:
        async with async_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_async_db] = override_get_async_db
    set_container(DependencyContainer(settings=test_settings, settlement_gateway=FixedSettlementGateway()))
    yield application
    reset_container()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client


@pytest_asyncio.fixture
async def product_id(client) -> int:
    response = await client.post(
        f"{API}/catalog/products",
        json={"name": "Laptop ROG Strix", "price": "1500.00", "quantity": 50, "sku": "ROG-G15"},
    )
    assert response.status_code == 201
    return response.json()["id"]


# ============================================================================
# Health and catalog
# ============================================================================


@pytest.mark.api
@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["database"] == "ok"


@pytest.mark.api
@pytest.mark.asyncio
async def test_cart_health(client):
    response = await client.get(f"{API}/cart/health")

    assert response.status_code == 200


@pytest.mark.api
@pytest.mark.asyncio
async def test_get_product_and_stock_check(client, product_id):
    product = await client.get(f"{API}/catalog/products/{product_id}")
    enough = await client.get(f"{API}/catalog/products/{product_id}/stock", params={"quantity": 50})
    too_many = await client.get(f"{API}/catalog/products/{product_id}/stock", params={"quantity": 51})

    assert product.status_code == 200
    assert Decimal(product.json()["price"]) == Decimal("1500.00")
    assert enough.json()["sufficient"] is True
    assert too_many.json()["sufficient"] is False
    assert too_many.json()["available_quantity"] == 50


@pytest.mark.api
@pytest.mark.asyncio
async def test_stock_adjustments(client, product_id):
    reduced = await client.post(f"{API}/catalog/products/{product_id}/stock/reduce", json={"quantity": 20})
    increased = await client.post(f"{API}/catalog/products/{product_id}/stock/increase", json={"quantity": 5})
    rejected = await client.post(f"{API}/catalog/products/{product_id}/stock/reduce", json={"quantity": 100})

    assert reduced.json()["quantity"] == 30
    assert increased.json()["quantity"] == 35
    assert rejected.status_code == 400
    assert rejected.json()["code"] == "INSUFFICIENT_STOCK"
    assert rejected.json()["details"]["available"] == 35


@pytest.mark.api
@pytest.mark.asyncio
async def test_missing_product_is_404(client):
    response = await client.get(f"{API}/catalog/products/999")

    assert response.status_code == 404
    assert response.json()["error"] is True
    assert response.json()["code"] == "ENTITY_NOT_FOUND"


# ============================================================================
# Cart
# ============================================================================


@pytest.mark.api
@pytest.mark.asyncio
async def test_cart_scenario(client, product_id):
    first = await client.post(f"{API}/cart/items", params={"user_id": 1}, json={"product_id": product_id, "quantity": 2})
    assert first.status_code == 201
    assert Decimal(first.json()["total_price"]) == Decimal("3000.00")

    merged = await client.post(
        f"{API}/cart/items", params={"user_id": 1}, json={"product_id": product_id, "quantity": 1}
    )
    assert merged.json()["id"] == first.json()["id"]
    assert merged.json()["quantity"] == 3
    assert Decimal(merged.json()["total_price"]) == Decimal("4500.00")

    rejected = await client.post(
        f"{API}/cart/items", params={"user_id": 1}, json={"product_id": product_id, "quantity": 100}
    )
    assert rejected.status_code == 400
    assert rejected.json()["code"] == "INSUFFICIENT_STOCK"

    lines = await client.get(f"{API}/cart/items", params={"user_id": 1})
    total = await client.get(f"{API}/cart/total", params={"user_id": 1})
    count = await client.get(f"{API}/cart/count", params={"user_id": 1})
    contains = await client.get(f"{API}/cart/check-product", params={"user_id": 1, "product_id": product_id})

    assert [line["quantity"] for line in lines.json()] == [3]
    assert Decimal(total.json()["total"]) == Decimal("4500.00")
    assert total.json()["currency"] == "PEN"
    assert count.json()["count"] == 1
    assert contains.json()["in_cart"] is True


@pytest.mark.api
@pytest.mark.asyncio
async def test_update_remove_and_clear(client, product_id):
    created = await client.post(
        f"{API}/cart/items", params={"user_id": 1}, json={"product_id": product_id, "quantity": 2}
    )
    line_id = created.json()["id"]

    updated = await client.put(f"{API}/cart/items/{line_id}", params={"user_id": 1, "quantity": 4})
    assert updated.status_code == 200
    assert Decimal(updated.json()["total_price"]) == Decimal("6000.00")

    removed = await client.delete(f"{API}/cart/items/{line_id}", params={"user_id": 1})
    assert removed.json()["success"] is True

    inactive = await client.put(f"{API}/cart/items/{line_id}", params={"user_id": 1, "quantity": 1})
    assert inactive.status_code == 400
    assert inactive.json()["code"] == "INACTIVE_CART_LINE"

    cleared = await client.delete(f"{API}/cart/items", params={"user_id": 1})
    assert cleared.status_code == 200
    assert cleared.json() == {"success": True, "cleared_lines": 0}


@pytest.mark.api
@pytest.mark.asyncio
async def test_cart_line_of_other_user_is_403(client, product_id):
    created = await client.post(
        f"{API}/cart/items", params={"user_id": 1}, json={"product_id": product_id, "quantity": 1}
    )

    response = await client.get(f"{API}/cart/items/{created.json()['id']}", params={"user_id": 2})

    assert response.status_code == 403
    assert response.json()["code"] == "CART_LINE_NOT_OWNED"


@pytest.mark.api
@pytest.mark.asyncio
async def test_missing_cart_line_is_404(client):
    response = await client.delete(f"{API}/cart/items/999", params={"user_id": 1})

    assert response.status_code == 404


@pytest.mark.api
@pytest.mark.asyncio
async def test_add_with_invalid_body_is_422(client):
    response = await client.post(f"{API}/cart/items", params={"user_id": 1}, json={"product_id": 1, "quantity": 0})

    assert response.status_code == 422
    assert response.json()["message"] == "Validation error"


# ============================================================================
# Payments
# ============================================================================


@pytest.mark.api
@pytest.mark.asyncio
async def test_process_payment_and_duplicate(client):
    first = await client.post(
        f"{API}/payments/process",
        params={"user_id": 1},
        json={"order_id": 7, "amount": "9999.99", "payment_method": "card"},
    )
    second = await client.post(f"{API}/payments/process", params={"user_id": 1}, json={"order_id": 7, "amount": "1.00"})
    by_order = await client.get(f"{API}/payments/order/7")

    assert first.status_code == 201
    assert first.json()["status"] == "COMPLETED"
    assert first.json()["currency"] == "PEN"
    assert second.status_code == 409
    assert second.json()["code"] == "DUPLICATE_PAYMENT"
    assert len(by_order.json()) == 1


@pytest.mark.api
@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("body", "code"),
    [
        ({"order_id": 9, "amount": "0"}, "INVALID_AMOUNT"),
        ({"order_id": 9}, "INVALID_AMOUNT"),
        ({"order_id": 9, "amount": "100000.01"}, "AMOUNT_TOO_LARGE"),
        ({"amount": "10.00"}, "MISSING_ORDER"),
    ],
)
async def test_rejected_payment_requests(client, body, code):
    response = await client.post(f"{API}/payments/process", json=body)

    assert response.status_code == 400
    assert response.json()["code"] == code


@pytest.mark.api
@pytest.mark.asyncio
async def test_payment_lookups_and_admin_override(client):
    created = (await client.post(f"{API}/payments/process", params={"user_id": 5}, json={"order_id": 1, "amount": "50.00"})).json()

    by_id = await client.get(f"{API}/payments/{created['id']}")
    by_txn = await client.get(f"{API}/payments/transaction/{created['transaction_id']}")
    status_view = await client.get(f"{API}/payments/{created['id']}/status")
    by_user = await client.get(f"{API}/payments/user/5")

    assert by_id.json()["order_id"] == 1
    assert by_txn.json()["id"] == created["id"]
    assert status_view.json()["status"] == "COMPLETED"
    assert [p["id"] for p in by_user.json()] == [created["id"]]

    overridden = await client.put(f"{API}/payments/{created['id']}/status", params={"status": "failed"})
    assert overridden.status_code == 200
    assert overridden.json()["status"] == "FAILED"
    assert overridden.json()["failure_reason"] == "Status manually updated to failed"

    failed = await client.get(f"{API}/payments/status/FAILED")
    stats = await client.get(f"{API}/payments/statistics")
    assert [p["id"] for p in failed.json()] == [created["id"]]
    assert stats.json()["failed_payments"] == 1
    assert stats.json()["total_payments"] == 1
    assert Decimal(stats.json()["total_completed_amount"]) == Decimal("0")


@pytest.mark.api
@pytest.mark.asyncio
async def test_pending_payments(client):
    created = (await client.post(f"{API}/payments/process", json={"order_id": 2, "amount": "10.00"})).json()
    await client.put(f"{API}/payments/{created['id']}/status", params={"status": "PENDING"})

    response = await client.get(f"{API}/payments/pending")

    assert response.status_code == 200
    assert [p["id"] for p in response.json()] == [created["id"]]


@pytest.mark.api
@pytest.mark.asyncio
async def test_unknown_status_is_400(client):
    response = await client.get(f"{API}/payments/status/REFUNDED")

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


@pytest.mark.api
@pytest.mark.asyncio
async def test_missing_payment_is_404(client):
    response = await client.get(f"{API}/payments/999")

    assert response.status_code == 404


@pytest.mark.api
@pytest.mark.asyncio
async def test_unexpected_error_is_generic_500(app):
    class BrokenGateway:
        async def settle(self, payment):
            raise RuntimeError("processor exploded")

    set_container(DependencyContainer(settings=Settings(ENVIRONMENT="test"), settlement_gateway=BrokenGateway()))
    transport = ASGITransport(app=app, raise_app_exceptions=False)

    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        response = await http_client.post(f"{API}/payments/process", json={"order_id": 3, "amount": "10.00"})

    assert response.status_code == 500
    assert response.json()["message"] == "Internal server error"


@pytest.mark.api
@pytest.mark.asyncio
async def test_sub_cent_amount_is_422(client):
    response = await client.post(f"{API}/payments/process", json={"order_id": 11, "amount": "0.004"})
    by_order = await client.get(f"{API}/payments/order/11")

    assert response.status_code == 422
    assert by_order.json() == []
