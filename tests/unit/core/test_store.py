"""
Unit tests for Store

Tests type-name resolution, call forwarding and empty_attrs with a mocked
transport.
"""

import logging
import pytest
from unittest.mock import AsyncMock

from easy_orm.core.model import Model, attr
from easy_orm.core.record import Record
from easy_orm.core.registry import ModelRegistry
from easy_orm.core.store import Store


class UserModel(Model):
    name = "user"
    namespace = "/v1"
    url = "/users"
    root_key = "resp"
    model = {
        "username": attr("string"),
        "email": attr("string"),
        "roles": attr("array"),
        "age": attr(default_value=None),
    }


@pytest.fixture
def registry():
    registry = ModelRegistry()
    registry.register(UserModel)
    return registry


@pytest.fixture
def request_mock():
    return AsyncMock()


@pytest.fixture
def store(registry, request_mock):
    return Store(registry=registry, request=request_mock)


class TestModelFor:
    """Test model resolution."""

    def test_resolves_registered_model(self, store, request_mock):
        model = store.model_for("user")

        assert isinstance(model, UserModel)
        assert model.request is request_mock

    def test_new_instance_per_call(self, store):
        assert store.model_for("user") is not store.model_for("user")

    def test_unknown_type_returns_placeholder(self, store, caplog):
        with caplog.at_level(logging.WARNING, logger="easy_orm.core.store"):
            placeholder = store.model_for("ghost")

        assert placeholder == {}
        assert isinstance(placeholder, Record)
        assert "model:ghost is not found" in caplog.text

    def test_default_registry_is_package_registry(self):
        import easy_orm

        assert Store().registry is easy_orm.registry


class TestForwarding:
    """Test CRUD forwarding to resolved models."""

    @pytest.mark.asyncio
    async def test_find(self, store, request_mock):
        request_mock.get.return_value = {"resp": [{"username": "a"}]}

        result = await store.find("user", {"q": "a", "page": None})

        request_mock.get.assert_awaited_once_with("/v1/users", {"data": {"q": "a"}})
        assert result == [{"username": "a"}]

    @pytest.mark.asyncio
    async def test_find_one(self, store, request_mock):
        request_mock.get.return_value = {"resp": {"_id": "1"}}

        result = await store.find_one("user", "1")

        request_mock.get.assert_awaited_once_with("/v1/users/1", {})
        assert result._id == "1"

    def test_create_record(self, store):
        record = store.create_record("user", {"username": "a"})

        assert record == {"username": "a", "email": "", "roles": [], "age": None}

    @pytest.mark.asyncio
    async def test_save_and_delete(self, store, request_mock):
        request_mock.put.return_value = {"code": 0}
        request_mock.delete.return_value = {"code": 0}
        record = store.create_record("user", {"_id": "9", "username": "a"})

        assert await store.save("user", record) == {"code": 0}
        assert await store.delete_record("user", record, {"soft": True}) == {"code": 0}

        assert request_mock.put.await_args.args[0] == "/v1/users/9"
        request_mock.delete.assert_awaited_once_with("/v1/users/9", {"data": {"soft": True}})

    @pytest.mark.asyncio
    async def test_unknown_type_has_no_operations(self, store):
        with pytest.raises(AttributeError):
            await store.find("ghost")


class TestEmptyAttrs:
    """Test required-field reporting."""

    def test_schema_keys(self, store):
        record = store.create_record("user", {"username": "a"})

        assert store.empty_attrs("user", record) == ["email", "roles", "age"]

    def test_unfilter_keys(self, store):
        record = store.create_record("user")

        assert store.empty_attrs("user", record, unfilter_keys=["roles", "email"]) == ["username", "age"]

    def test_filter_keys(self, store):
        record = Record(username="", email="x@y.z", age=0)

        assert store.empty_attrs("user", record, filter_keys=["username", "email", "age", "missing"]) == [
            "username",
            "missing",
        ]

    def test_whitespace_is_blank(self, store):
        record = Record(username="   ", email="a", roles=["admin"], age=3)

        assert store.empty_attrs("user", record) == ["username"]

    def test_non_string_keys_skipped(self, store):
        assert store.empty_attrs("user", {}, filter_keys=["email", 3]) == ["email"]

    def test_plain_object(self, store):
        class Form:
            username = "a"
            email = ""

        assert store.empty_attrs("user", Form(), unfilter_keys=["roles"]) == ["email", "age"]

    def test_unknown_type_without_filter_keys(self, store):
        assert store.empty_attrs("ghost", {}) == []
