"""
Unit tests for HttpxTransport

Uses httpx.MockTransport so no network access is needed.
"""

import asyncio
import json
import httpx
import pytest

from easy_orm.config import TransportConfig
from easy_orm.core.model import Model
from easy_orm.core.transport import HttpxTransport, TransportError


def make_transport(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://api.test")
    return HttpxTransport(client=client, config=TransportConfig(base_url="http://api.test"))


class TestRequests:
    """Test payload placement per method."""

    @pytest.mark.asyncio
    async def test_get_sends_query_params(self):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={"resp": []})

        async with make_transport(handler) as transport:
            result = await transport.get("/v1/posts", {"data": {"page": 2, "q": "x"}})

        assert result == {"resp": []}
        assert seen == {"method": "GET", "params": {"page": "2", "q": "x"}}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["post", "put", "delete"])
    async def test_body_methods_send_json(self, method):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"code": 0})

        async with make_transport(handler) as transport:
            result = await getattr(transport, method)("/v1/posts/1", {"data": {"title": "x"}})

        assert result == {"code": 0}
        assert seen == {"method": method.upper(), "body": {"title": "x"}}

    @pytest.mark.asyncio
    async def test_no_options_sends_no_payload(self):
        seen = {}

        def handler(request):
            seen["content"] = request.content
            seen["query"] = request.url.query
            return httpx.Response(200, json={})

        async with make_transport(handler) as transport:
            await transport.delete("/v1/posts/1")

        assert seen == {"content": b"", "query": b""}


class TestResponses:
    """Test body parsing and error mapping."""

    @pytest.mark.asyncio
    async def test_empty_body_is_none(self):
        async with make_transport(lambda request: httpx.Response(204)) as transport:
            assert await transport.delete("/v1/posts/1") is None

    @pytest.mark.asyncio
    async def test_text_body(self):
        async with make_transport(lambda request: httpx.Response(200, text="ok")) as transport:
            assert await transport.get("/ping") == "ok"

    @pytest.mark.asyncio
    async def test_error_status_raises(self):
        def handler(request):
            return httpx.Response(404, json={"code": 404, "msg": "missing"})

        async with make_transport(handler) as transport:
            with pytest.raises(TransportError) as exc_info:
                await transport.get("/v1/posts/9")

        error = exc_info.value
        assert error.method == "GET"
        assert error.url == "/v1/posts/9"
        assert error.status_code == 404
        assert error.body == {"code": 404, "msg": "missing"}

    @pytest.mark.asyncio
    async def test_network_failure_raises(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with make_transport(handler) as transport:
            with pytest.raises(TransportError) as exc_info:
                await transport.post("/v1/posts", {"data": {}})

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


class TestClientLifecycle:

    @pytest.mark.asyncio
    async def test_client_taken_from_config(self):
        config = TransportConfig(base_url="http://api.test", timeout=5, auth_token="")
        transport = HttpxTransport(config=config)

        assert transport.client is config.get_client()

        await transport.aclose()
        assert config._client is None

    def test_new_client_per_event_loop(self):
        config = TransportConfig(base_url="http://api.test", timeout=5, auth_token="")
        transport = HttpxTransport(config=config)

        async def current_client():
            first = transport.client
            assert transport.client is first
            return first

        first_run = asyncio.run(current_client())
        second_run = asyncio.run(current_client())

        assert first_run is not second_run
        assert config.get_client() is not second_run

    def test_sequential_runs_complete_requests(self, monkeypatch):
        real_client = httpx.AsyncClient
        mock = httpx.MockTransport(lambda request: httpx.Response(200, json={"resp": []}))
        monkeypatch.setattr(httpx, "AsyncClient", lambda **kwargs: real_client(transport=mock, **kwargs))

        config = TransportConfig(base_url="http://api.test", timeout=5, auth_token="")
        model = Model(request=HttpxTransport(config=config), url="/v1/posts", root_key="resp")
        clients = []

        async def find():
            clients.append(model.request.client)
            return await model.find()

        assert asyncio.run(find()) == []
        assert asyncio.run(find()) == []
        assert clients[0] is not clients[1]
