"""
Concurrency tests for the cart and payment components.

Each competing coroutine gets its own session on a file-backed database, the
way concurrent requests do, while sharing the process-wide lock registries.
"""

import asyncio
from decimal import Decimal

import pytest

from app.core.shared import KeyedLock
from app.database.async_db import create_session_factory
from app.domains.commerce.application.dto import RegisterProductRequest
from app.domains.commerce.application.services import CartStore, PaymentLedger, StockAuthority
from app.domains.commerce.domain.exceptions import DuplicatePaymentException
from app.domains.commerce.domain.services import FixedSettlementGateway
from app.domains.commerce.domain.value_objects import CommerceConfig
from app.domains.commerce.infrastructure.repositories import (
    SQLAlchemyCartLineRepository,
    SQLAlchemyPaymentRepository,
    SQLAlchemyProductRepository,
)


def _cart_store(session, cart_locks: KeyedLock, stock_locks: KeyedLock, config: CommerceConfig) -> CartStore:
    stock = StockAuthority(SQLAlchemyProductRepository(session), stock_locks)
    return CartStore(SQLAlchemyCartLineRepository(session), stock, config, cart_locks)


def _ledger(session, order_locks: KeyedLock) -> PaymentLedger:
    return PaymentLedger(
        SQLAlchemyPaymentRepository(session),
        CommerceConfig(),
        FixedSettlementGateway(approve=True),
        order_locks,
    )


@pytest.mark.unit
@pytest.mark.asyncio
async def test_concurrent_adds_merge_into_one_line(file_engine):
    factory = create_session_factory(file_engine)
    cart_locks, stock_locks, config = KeyedLock("cart"), KeyedLock("stock"), CommerceConfig()

    async with factory() as setup_session:
        stock = StockAuthority(SQLAlchemyProductRepository(setup_session), stock_locks)
        product = await stock.register_product(
            RegisterProductRequest(name="Laptop ROG Strix", price=Decimal("1500.00"), quantity=50)
        )

    async with factory() as first_session, factory() as second_session:
        first = _cart_store(first_session, cart_locks, stock_locks, config)
        second = _cart_store(second_session, cart_locks, stock_locks, config)

        await asyncio.gather(
            first.add_line(1, product.id, 2),
            second.add_line(1, product.id, 3),
        )

    async with factory() as check_session:
        lines = await _cart_store(check_session, cart_locks, stock_locks, config).list_lines(1)

    assert len(lines) == 1
    assert lines[0].quantity == 5
    assert lines[0].total_price == Decimal("7500.00")
    assert len(cart_locks) == 0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_concurrent_settlements_of_one_order(file_engine):
    factory = create_session_factory(file_engine)
    order_locks = KeyedLock("payment")

    async with factory() as first_session, factory() as second_session:
        results = await asyncio.gather(
            _ledger(first_session, order_locks).settle(order_id=7, amount=Decimal("9999.99")),
            _ledger(second_session, order_locks).settle(order_id=7, amount=Decimal("1.00")),
            return_exceptions=True,
        )

    failures = [r for r in results if isinstance(r, Exception)]
    successes = [r for r in results if not isinstance(r, Exception)]
    assert len(successes) == 1
    assert len(failures) == 1
    assert isinstance(failures[0], DuplicatePaymentException)

    async with factory() as check_session:
        assert len(await _ledger(check_session, order_locks).list_by_order(7)) == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unique_order_constraint_backs_up_missing_lock(file_engine):
    """Ledgers with separate lock registries still record one payment per order."""
    factory = create_session_factory(file_engine)

    async with factory() as first_session, factory() as second_session:
        results = await asyncio.gather(
            _ledger(first_session, KeyedLock("a")).settle(order_id=7, amount=Decimal("10.00")),
            _ledger(second_session, KeyedLock("b")).settle(order_id=7, amount=Decimal("20.00")),
            return_exceptions=True,
        )

    assert sum(isinstance(r, DuplicatePaymentException) for r in results) == 1

    async with factory() as check_session:
        assert len(await _ledger(check_session, KeyedLock("c")).list_by_order(7)) == 1
