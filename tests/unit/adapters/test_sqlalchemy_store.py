"""Unit tests for the SQLAlchemy adapter (store model, database, session factory).

Uses an in-memory SQLite database via *aiosqlite* – no running server needed.
"""
from __future__ import annotations

import asyncio
import datetime
from collections.abc import Awaitable, Callable
from typing import Any

import pytest
from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.pool import StaticPool

from sqrepo import Criteria, CriteriaBuilder, Repository, TransactionRunner
from sqrepo.adapters.sqlalchemy import SqlAlchemyDatabase, SqlAlchemySessionFactory, SqlAlchemyStoreModel
from sqrepo.errors import UnknownFieldError
from sqrepo.query import (
    INCLUDE_ALL,
    Condition,
    Include,
    Op,
    QueryOptions,
    Sort,
    SortDirection,
    between,
    eq,
    gte,
    ilike,
    in_,
    is_,
    like,
    lt,
    ne,
    not_in,
)
from sqrepo.testing import FakeClock

# ---------------------------------------------------------------------------
# ORM models
# ---------------------------------------------------------------------------


class Base(DeclarativeBase):
    pass


class Customer(Base):
    __tablename__ = "customers"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    city: Mapped[str | None] = mapped_column(String(100), nullable=True, default=None)
    age: Mapped[int | None] = mapped_column(Integer, nullable=True, default=None)
    updated_date: Mapped[datetime.datetime | None] = mapped_column(DateTime, nullable=True, default=None)
    orders: Mapped[list["Order"]] = relationship(back_populates="customer")


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    customer_id: Mapped[str] = mapped_column(ForeignKey("customers.id"))
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    customer: Mapped[Customer] = relationship(back_populates="orders")


class CustomerRepository(Repository[Customer]):
    async def find_all_by_name_and_city(self, name, city): ...

    async def find_by_name(self, name): ...


class OrderRepository(Repository[Order]):
    async def find_all_by_customer_id(self, customer_id): ...


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


async def _seed(factory: SqlAlchemySessionFactory) -> None:
    await factory.create_all(Base.metadata)
    async with factory() as session:
        async with session.begin():
            session.add_all([
                Customer(id="c1", name="Ann", city="Oslo", age=31),
                Customer(id="c2", name="Bob", city="Oslo", age=45),
                Customer(id="c3", name="Ann", city="Rome", age=27),
                Customer(id="c4", name="Cid", city=None, age=None),
                Order(id="o1", customer_id="c1", amount=100),
                Order(id="o2", customer_id="c1", amount=50),
                Order(id="o3", customer_id="c2", amount=7),
            ])


def _run(test: Callable[[SqlAlchemySessionFactory], Awaitable[Any]]) -> Any:
    async def main() -> Any:
        factory = SqlAlchemySessionFactory(
            "sqlite+aiosqlite:///:memory:",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        try:
            await _seed(factory)
            return await test(factory)
        finally:
            await factory.dispose()

    return asyncio.run(main())


def _ids(rows: list[Any]) -> list[str]:
    return sorted(row.id for row in rows)


# ---------------------------------------------------------------------------
# SqlAlchemyStoreModel
# ---------------------------------------------------------------------------


class TestStoreModelWhere:
    @pytest.mark.parametrize(
        ("where", "expected"),
        [
            ({"name": "Ann"}, ["c1", "c3"]),
            ({"name": eq("Bob")}, ["c2"]),
            ({"name": ne("Ann")}, ["c2", "c4"]),
            ({"city": None}, ["c4"]),
            ({"city": ne(None)}, ["c1", "c2", "c3"]),
            ({"city": is_(None)}, ["c4"]),
            ({"name": in_(["Ann", "Cid"])}, ["c1", "c3", "c4"]),
            ({"name": not_in(["Ann"])}, ["c2", "c4"]),
            ({"age": gte(31)}, ["c1", "c2"]),
            ({"age": lt(31)}, ["c3"]),
            ({"age": between(27, 31)}, ["c1", "c3"]),
            ({"name": like("A%")}, ["c1", "c3"]),
            ({"name": ilike("b%")}, ["c2"]),
            ({"name": "Ann", "city": "Rome"}, ["c3"]),
            ({}, ["c1", "c2", "c3", "c4"]),
        ],
    )
    def test_conditions(self, where: dict[str, Any], expected: list[str]) -> None:
        async def test(factory: SqlAlchemySessionFactory) -> list[str]:
            store = SqlAlchemyStoreModel(factory, Customer)
            return _ids(await store.find_all(QueryOptions(where=where)))

        assert _run(test) == expected

    def test_unknown_field(self) -> None:
        async def test(factory: SqlAlchemySessionFactory) -> None:
            store = SqlAlchemyStoreModel(factory, Customer)
            await store.find_all(QueryOptions(where={"nickname": "x"}))

        with pytest.raises(UnknownFieldError) as exc_info:
            _run(test)
        assert exc_info.value.field == "nickname"

    def test_missing_field_from_malformed_criteria_fails_at_execution(self) -> None:
        criteria = Criteria([{"value": 1, "condition": eq(1)}])

        async def test(factory: SqlAlchemySessionFactory) -> None:
            store = SqlAlchemyStoreModel(factory, Customer)
            await store.find_all(QueryOptions(where=criteria.get_criteria()))

        with pytest.raises(UnknownFieldError):
            _run(test)

    def test_relationship_is_not_a_filterable_field(self) -> None:
        async def test(factory: SqlAlchemySessionFactory) -> None:
            store = SqlAlchemyStoreModel(factory, Customer)
            await store.find_all(QueryOptions(where={"orders": Condition(Op.EQ, 1)}))

        with pytest.raises(UnknownFieldError):
            _run(test)


class TestStoreModelReads:
    def test_include_all_loads_relationships(self) -> None:
        async def test(factory: SqlAlchemySessionFactory) -> dict[str, int]:
            store = SqlAlchemyStoreModel(factory, Customer)
            rows = await store.find_all(QueryOptions(include=INCLUDE_ALL))
            return {row.id: sum(o.amount for o in row.orders) for row in rows}

        assert _run(test) == {"c1": 150, "c2": 7, "c3": 0, "c4": 0}

    def test_named_include(self) -> None:
        async def test(factory: SqlAlchemySessionFactory) -> str:
            store = SqlAlchemyStoreModel(factory, Order)
            order = await store.find_one(QueryOptions(where={"id": "o3"}, include=Include(relations=("customer",))))
            return order.customer.name

        assert _run(test) == "Bob"

    def test_unknown_include(self) -> None:
        async def test(factory: SqlAlchemySessionFactory) -> None:
            store = SqlAlchemyStoreModel(factory, Customer)
            await store.find_all(QueryOptions(include=Include(relations=("invoices",))))

        with pytest.raises(UnknownFieldError):
            _run(test)

    def test_order_limit_offset(self) -> None:
        async def test(factory: SqlAlchemySessionFactory) -> list[str]:
            store = SqlAlchemyStoreModel(factory, Customer)
            rows = await store.find_all(
                QueryOptions(order=(Sort("id", SortDirection.DESC),), limit=2, offset=1)
            )
            return [row.id for row in rows]

        assert _run(test) == ["c3", "c2"]

    def test_find_one_none(self) -> None:
        async def test(factory: SqlAlchemySessionFactory) -> Any:
            store = SqlAlchemyStoreModel(factory, Customer)
            return await store.find_one(QueryOptions(where={"name": "Zed"}))

        assert _run(test) is None

    def test_find_and_count_all(self) -> None:
        async def test(factory: SqlAlchemySessionFactory) -> tuple[int, list[str]]:
            store = SqlAlchemyStoreModel(factory, Customer)
            result = await store.find_and_count_all(
                QueryOptions(where={"city": "Oslo"}, limit=1, order=(Sort("id"),))
            )
            return result.count, [row.id for row in result.rows]

        assert _run(test) == (2, ["c1"])

    def test_sum(self) -> None:
        async def test(factory: SqlAlchemySessionFactory) -> tuple[Any, Any, Any]:
            store = SqlAlchemyStoreModel(factory, Order)
            total = await store.sum("amount")
            filtered = await store.sum("amount", QueryOptions(where={"customer_id": "c1"}))
            nothing = await store.sum("amount", QueryOptions(where={"customer_id": "zz"}))
            return total, filtered, nothing

        assert _run(test) == (157, 150, 0)


class TestStoreModelUpsert:
    def test_insert_then_update(self) -> None:
        async def test(factory: SqlAlchemySessionFactory) -> tuple[bool, bool, str, str | None]:
            store = SqlAlchemyStoreModel(factory, Customer)
            _, created = await store.upsert({"id": "c9", "name": "Dee", "city": "Lima"}, QueryOptions())
            updated, created_again = await store.upsert({"id": "c9", "name": "Dea"}, QueryOptions())
            return created, created_again, updated.name, updated.city

        assert _run(test) == (True, False, "Dea", "Lima")

    def test_non_column_values_are_ignored(self) -> None:
        async def test(factory: SqlAlchemySessionFactory) -> str:
            store = SqlAlchemyStoreModel(factory, Customer)
            entity, _ = await store.upsert({"id": "c8", "name": "Eve", "orders": [], "extra": 1}, QueryOptions())
            return entity.name

        assert _run(test) == "Eve"

    def test_driver_errors_propagate(self) -> None:
        async def test(factory: SqlAlchemySessionFactory) -> None:
            store = SqlAlchemyStoreModel(factory, Order)
            await store.upsert({"id": "o9", "customer_id": "c1", "amount": None}, QueryOptions())

        with pytest.raises(IntegrityError):
            _run(test)

    def test_lost_lookup_race_raises_integrity_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        async def missing(self: AsyncSession, *args: Any, **kwargs: Any) -> None:
            return None

        # another writer inserted c1 between the lookup and the insert
        monkeypatch.setattr(AsyncSession, "get", missing)

        async def test(factory: SqlAlchemySessionFactory) -> None:
            store = SqlAlchemyStoreModel(factory, Customer)
            await store.upsert({"id": "c1", "name": "Ann"}, QueryOptions())

        with pytest.raises(IntegrityError):
            _run(test)


# ---------------------------------------------------------------------------
# Repository on top of SQLAlchemy
# ---------------------------------------------------------------------------


class TestRepositoryOverSqlAlchemy:
    def test_named_queries(self) -> None:
        async def test(factory: SqlAlchemySessionFactory) -> tuple[list[str], list[str], str]:
            repo = CustomerRepository(SqlAlchemyStoreModel(factory, Customer))
            plain = await repo.find_all_by_name_and_city("Ann", "Oslo")
            many = await repo.find_all_by_name_and_city(["Ann", "Bob"], "Oslo")
            one = await repo.find_by_name("Bob")
            return _ids(plain), _ids(many), one.id

        assert _run(test) == (["c1"], ["c1", "c2"], "c2")

    def test_named_query_eager_loads(self) -> None:
        async def test(factory: SqlAlchemySessionFactory) -> int:
            repo = OrderRepository(SqlAlchemyStoreModel(factory, Order))
            orders = await repo.find_all_by_customer_id("c1")
            return len({order.customer.name for order in orders})

        assert _run(test) == 1

    def test_save_generates_key_and_stamps_update(self) -> None:
        async def test(factory: SqlAlchemySessionFactory) -> tuple[int, Any, str]:
            repo = CustomerRepository(SqlAlchemyStoreModel(factory, Customer), clock=FakeClock())
            saved = await repo.save({"name": "Fay", "city": "Kyiv"})
            reloaded = await repo.find_by_id(saved.id)
            return len(saved.id), reloaded.updated_date, reloaded.name

        key_length, updated, name = _run(test)
        assert key_length == 32
        assert updated.replace(tzinfo=None) == datetime.datetime(2026, 1, 1, 12, 0)
        assert name == "Fay"

    def test_save_update_returns_entity(self) -> None:
        async def test(factory: SqlAlchemySessionFactory) -> tuple[str, str, bool]:
            repo = CustomerRepository(SqlAlchemyStoreModel(factory, Customer))
            saved = await repo.save(Customer(id="c2", name="Robert"))
            _, created = await repo.upsert({"id": "c2", "name": "Bobby"})
            return saved.id, saved.name, created

        assert _run(test) == ("c2", "Robert", False)

    def test_paginated_by_criteria(self) -> None:
        async def test(factory: SqlAlchemySessionFactory) -> tuple[int, int, int, list[str]]:
            repo = CustomerRepository(SqlAlchemyStoreModel(factory, Customer))
            criteria = (
                CriteriaBuilder()
                .add("city", ["Oslo", "Rome"], in_(["Oslo", "Rome"]))
                .add("name", "", eq(""))
                .build()
            )
            page = await repo.find_all_by_criteria_and_paginated(criteria, page=1, size=2, order_attr="age")
            return page.total_items, page.total_pages, page.current_page, [row.id for row in page.rows]

        # ages DESC: c2 (45), c1 (31), c3 (27)
        assert _run(test) == (3, 2, 1, ["c3"])

    def test_sum_with_criteria(self) -> None:
        async def test(factory: SqlAlchemySessionFactory) -> Any:
            repo = OrderRepository(SqlAlchemyStoreModel(factory, Order))
            return await repo.sum("amount", CriteriaBuilder().add("amount", 10, gte(10)).build())

        assert _run(test) == 150


# ---------------------------------------------------------------------------
# SqlAlchemyDatabase + TransactionRunner
# ---------------------------------------------------------------------------


class TestTransactions:
    def test_commit(self) -> None:
        async def test(factory: SqlAlchemySessionFactory) -> list[str]:
            repo = OrderRepository(SqlAlchemyStoreModel(factory, Order))

            async def work(tx: Any) -> None:
                await repo.save({"id": "o4", "customer_id": "c3", "amount": 5}, tx)
                await repo.save({"id": "o5", "customer_id": "c3", "amount": 6}, tx)

            await TransactionRunner.run(SqlAlchemyDatabase(factory), work)
            return _ids(await repo.find_all_by_customer_id("c3"))

        assert _run(test) == ["o4", "o5"]

    def test_rollback(self) -> None:
        async def test(factory: SqlAlchemySessionFactory) -> tuple[list[str], int]:
            repo = OrderRepository(SqlAlchemyStoreModel(factory, Order))

            async def work(tx: Any) -> None:
                await repo.save({"id": "o1", "customer_id": "c1", "amount": 0}, tx)
                await repo.save({"id": "o6", "customer_id": "c3", "amount": 6}, tx)
                raise ValueError("abort")

            with pytest.raises(ValueError):
                await TransactionRunner.run(SqlAlchemyDatabase(factory), work)
            first = await repo.find_by_id("o1")
            return _ids(await repo.find_all_by_customer_id("c3")), first.amount

        assert _run(test) == ([], 100)

    def test_reads_inside_transaction_see_uncommitted_writes(self) -> None:
        async def test(factory: SqlAlchemySessionFactory) -> str:
            repo = CustomerRepository(SqlAlchemyStoreModel(factory, Customer))

            async def work(tx: Any) -> str:
                await repo.save({"id": "c7", "name": "Gil"}, tx)
                found = await repo.find_by_name("Gil", transaction=tx)
                return found.id

            return await TransactionRunner.run(SqlAlchemyDatabase(factory), work)

        assert _run(test) == "c7"
