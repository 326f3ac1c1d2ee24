"""
Tests for the ready-made loaders.

Covers:
- http_loader: URL resolution, JSON parsing, status errors, transport retries
- mapping_loader: hit and KeyError
- http_loader plugged into a keyed switcher
"""

import asyncio

import httpx
import pytest

from lokat.config.schema import RuntimeConfig
from lokat.core.switcher import keyed_switcher
from lokat.loaders import http_loader, mapping_loader


def run(coro):
    return asyncio.run(coro)


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


# ── http_loader ───────────────────────────────────────────────────────────


class TestHttpLoader:
    def test_fetches_resolved_url_and_parses_json(self):
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, json={"home.title": "Welcome"})

        async def scenario():
            async with _client(handler) as client:
                load = http_loader(lambda l: f"https://cdn.test/locales/{l}.json", client=client)
                return await load("en")

        assert run(scenario()) == {"home.title": "Welcome"}
        assert seen == ["https://cdn.test/locales/en.json"]

    def test_status_error_is_raised_without_retry(self):
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(404, json={"error": "not found"})

        async def scenario():
            async with _client(handler) as client:
                load = http_loader(lambda l: f"https://cdn.test/{l}.json", client=client, retries=3)
                await load("xx")

        with pytest.raises(httpx.HTTPStatusError):
            run(scenario())
        assert calls == 1

    def test_transport_errors_are_retried(self):
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            if calls < 3:
                raise httpx.ConnectError("refused", request=request)
            return httpx.Response(200, json={"x": "ok"})

        async def scenario():
            async with _client(handler) as client:
                load = http_loader(lambda l: f"https://cdn.test/{l}.json", client=client, retries=2)
                return await load("en")

        assert run(scenario()) == {"x": "ok"}
        assert calls == 3

    def test_transport_error_propagates_without_retries(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async def scenario():
            async with _client(handler) as client:
                load = http_loader(lambda l: f"https://cdn.test/{l}.json", client=client)
                await load("en")

        with pytest.raises(httpx.ConnectError):
            run(scenario())

    def test_body_is_not_validated(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=["not", "a", "dict"])

        async def scenario():
            async with _client(handler) as client:
                load = http_loader(lambda l: "https://cdn.test/x.json", client=client)
                return await load("en")

        assert run(scenario()) == ["not", "a", "dict"]

    def test_switcher_with_http_loader(self):
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            locale = request.url.path.rsplit("/", 1)[-1].removesuffix(".json")
            return httpx.Response(200, json={"greeting": f"hello-{locale}"})

        async def scenario():
            async with _client(handler) as client:
                load = http_loader(lambda l: f"https://cdn.test/i18n/{l}.json", client=client)
                sw = keyed_switcher("en", load)
                await sw.ready()
                first = sw.t("greeting")
                await asyncio.gather(sw.preload("id"), sw.preload("id"))
                await sw.set_locale("id")
                return first, sw.t("greeting")

        assert run(scenario()) == ("hello-en", "hello-id")
        assert calls == 2

    def test_runtime_config_kwargs(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"x": "ok"})

        runtime = RuntimeConfig(key_strategy="identity", http_timeout=1.0, http_retries=1)

        async def scenario():
            async with _client(handler) as client:
                load = http_loader(lambda l: "https://cdn.test/x.json", client=client, **runtime.http_kwargs())
                sw = keyed_switcher("en", load, **runtime.switcher_kwargs())
                await sw.ready()
                return sw.t("x"), sw.cache.same_locale("en", "en")

        assert run(scenario()) == ("ok", True)


# ── mapping_loader ────────────────────────────────────────────────────────


class TestMappingLoader:
    def test_hit(self):
        load = mapping_loader({"en": {"a": "A"}})
        assert run(load("en")) == {"a": "A"}

    def test_unknown_locale_raises_key_error(self):
        load = mapping_loader({"en": {"a": "A"}})
        with pytest.raises(KeyError):
            run(load("fr"))
