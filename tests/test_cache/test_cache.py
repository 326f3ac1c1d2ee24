"""
Tests for DictionaryCache.

Covers:
- Single-flight for load() and preload() (one loader call, same outcome)
- Poison recovery (failed entry removed before waiters see the error)
- Instance isolation
- disable_cache diagnostics mode
- Key strategies (value, identity, custom)
- Cancellation of one waiter, peek/evict/clear
"""

import asyncio

import pytest

from lokat.core.cache import DictionaryCache, identity_key, resolve_key_fn


# ── Helpers ───────────────────────────────────────────────────────────────


class GatedLoader:
    """Loader that records calls and blocks until release() is called.

    fail_times: number of initial calls that raise RuntimeError("boom").
    """

    def __init__(self, fail_times: int = 0) -> None:
        self.calls: list[object] = []
        self.fail_times = fail_times
        self._gate: asyncio.Event | None = None

    def release(self) -> None:
        self.gate.set()

    @property
    def gate(self) -> asyncio.Event:
        if self._gate is None:
            self._gate = asyncio.Event()
        return self._gate

    async def __call__(self, locale: object) -> dict[str, str]:
        self.calls.append(locale)
        attempt = len(self.calls)
        await self.gate.wait()
        if attempt <= self.fail_times:
            raise RuntimeError("boom")
        return {"locale": str(locale), "attempt": str(attempt)}


def run(coro):
    return asyncio.run(coro)


# ── Single-flight ─────────────────────────────────────────────────────────


class TestSingleFlight:
    def test_concurrent_loads_invoke_loader_once(self):
        async def scenario():
            loader = GatedLoader()
            cache = DictionaryCache(loader)
            pending = [cache.load("en") for _ in range(5)]
            loader.release()
            results = await asyncio.gather(*pending)
            return loader, results

        loader, results = run(scenario())
        assert loader.calls == ["en"]
        assert all(r is results[0] for r in results)

    def test_concurrent_failures_share_the_same_error(self):
        async def scenario():
            loader = GatedLoader(fail_times=1)
            cache = DictionaryCache(loader)
            pending = [cache.load("en") for _ in range(3)]
            loader.release()
            return loader, await asyncio.gather(*pending, return_exceptions=True)

        loader, outcomes = run(scenario())
        assert loader.calls == ["en"]
        assert all(isinstance(o, RuntimeError) for o in outcomes)
        assert outcomes[0] is outcomes[1] is outcomes[2]

    def test_sequential_loads_hit_cache(self):
        async def scenario():
            loader = GatedLoader()
            loader.release()
            cache = DictionaryCache(loader)
            a = await cache.load("en")
            b = await cache.load("en")
            return loader, a, b

        loader, a, b = run(scenario())
        assert loader.calls == ["en"]
        assert a is b

    def test_separate_entries_per_locale(self):
        async def scenario():
            loader = GatedLoader()
            loader.release()
            cache = DictionaryCache(loader)
            en = await cache.load("en")
            id_ = await cache.load("id")
            return loader, en, id_

        loader, en, id_ = run(scenario())
        assert loader.calls == ["en", "id"]
        assert en["locale"] == "en"
        assert id_["locale"] == "id"

    def test_two_preloads_invoke_loader_once(self):
        async def scenario():
            loader = GatedLoader()
            cache = DictionaryCache(loader)
            first = cache.preload("fr")
            second = cache.preload("fr")
            loader.release()
            return loader, await first, await second

        loader, a, b = run(scenario())
        assert loader.calls == ["fr"]
        assert a is b

    def test_preload_and_load_share_entry(self):
        async def scenario():
            loader = GatedLoader()
            cache = DictionaryCache(loader)
            warm = cache.preload("fr")
            pending = cache.load("fr")
            loader.release()
            return loader, await warm, await pending

        loader, a, b = run(scenario())
        assert loader.calls == ["fr"]
        assert a is b


# ── Poison recovery ───────────────────────────────────────────────────────


class TestPoisonRecovery:
    def test_retry_after_failure_invokes_loader_again(self):
        async def scenario():
            loader = GatedLoader(fail_times=1)
            loader.release()
            cache = DictionaryCache(loader)
            with pytest.raises(RuntimeError, match="boom"):
                await cache.load("en")
            return loader, await cache.load("en")

        loader, dictionary = run(scenario())
        assert loader.calls == ["en", "en"]
        assert dictionary["attempt"] == "2"

    def test_failed_entry_removed_before_error_is_observed(self):
        async def scenario():
            loader = GatedLoader(fail_times=1)
            cache = DictionaryCache(loader)
            pending = cache.load("en")
            assert cache.cached("en")
            loader.release()
            try:
                await pending
            except RuntimeError:
                return cache.cached("en"), len(cache)
            raise AssertionError("load should have failed")

        cached, size = run(scenario())
        assert cached is False
        assert size == 0

    def test_prior_waiters_keep_original_failure(self):
        async def scenario():
            loader = GatedLoader(fail_times=1)
            cache = DictionaryCache(loader)
            first = cache.load("en")
            loader.release()
            with pytest.raises(RuntimeError):
                await first
            retry = await cache.load("en")
            # The first awaitable is settled; it still reports the failure.
            return first.exception(), retry

        error, retry = run(scenario())
        assert isinstance(error, RuntimeError)
        assert retry["attempt"] == "2"

    def test_load_right_after_failure_retries_before_eviction_callback(self):
        async def scenario():
            loop = asyncio.get_running_loop()
            gate = loop.create_future()
            calls: list[str] = []

            async def loader(locale: str) -> dict[str, str]:
                calls.append(locale)
                if len(calls) == 1:
                    return await gate
                return {"x": "retry"}

            cache = DictionaryCache(loader)
            first = cache.load("en")
            await asyncio.sleep(0)

            retried = loop.create_future()
            gate.set_exception(RuntimeError("boom"))
            # Runs right after the loader task fails, ahead of its done-callbacks.
            loop.call_soon(lambda: retried.set_result(cache.load("en")))
            second = await retried

            with pytest.raises(RuntimeError, match="boom"):
                await first
            return calls, await second, len(cache)

        calls, dictionary, size = run(scenario())
        assert calls == ["en", "en"]
        assert dictionary == {"x": "retry"}
        assert size == 1

    def test_failure_does_not_touch_other_keys(self):
        async def scenario():
            calls: list[str] = []

            async def loader(locale: str) -> dict[str, str]:
                calls.append(locale)
                if locale == "bad":
                    raise ValueError("nope")
                return {"x": locale}

            cache = DictionaryCache(loader)
            good = await cache.load("en")
            with pytest.raises(ValueError):
                await cache.load("bad")
            again = await cache.load("en")
            return calls, good, again

        calls, good, again = run(scenario())
        assert calls == ["en", "bad"]
        assert good is again


# ── Isolation and diagnostics ─────────────────────────────────────────────


class TestIsolation:
    def test_two_caches_never_share_entries(self):
        async def scenario():
            loader_a = GatedLoader()
            loader_b = GatedLoader()
            loader_a.release()
            loader_b.release()
            a = DictionaryCache(loader_a)
            b = DictionaryCache(loader_b)
            return loader_a, loader_b, await a.load("en"), await b.load("en")

        loader_a, loader_b, da, db = run(scenario())
        assert loader_a.calls == ["en"]
        assert loader_b.calls == ["en"]
        assert da is not db

    def test_disable_cache_runs_loader_every_time(self):
        async def scenario():
            loader = GatedLoader()
            loader.release()
            cache = DictionaryCache(loader, disable_cache=True)
            await cache.preload("en")
            await cache.preload("en")
            await cache.load("en")
            return loader, cache

        loader, cache = run(scenario())
        assert loader.calls == ["en", "en", "en"]
        assert len(cache) == 0
        assert cache.disabled is True

    def test_load_requires_running_loop(self):
        cache = DictionaryCache(GatedLoader())
        with pytest.raises(RuntimeError):
            cache.load("en")


# ── Key strategies ────────────────────────────────────────────────────────


class TestKeyStrategies:
    def test_value_strategy_shares_equal_locales(self):
        async def scenario():
            loader = GatedLoader()
            loader.release()
            cache = DictionaryCache(loader)
            await cache.load(("en", "US"))
            await cache.load(("en", "US"))
            return loader

        assert run(scenario()).calls == [("en", "US")]

    def test_identity_strategy_accepts_unhashable_locales(self):
        async def scenario():
            loader = GatedLoader()
            loader.release()
            cache = DictionaryCache(loader, key_strategy="identity")
            en = {"lang": "en", "region": "US"}
            await cache.preload(en)
            await cache.preload(en)
            calls_same_ref = len(loader.calls)
            await cache.preload({"lang": "en", "region": "US"})
            return calls_same_ref, len(loader.calls)

        same_ref, total = run(scenario())
        assert same_ref == 1
        assert total == 2

    def test_custom_key_function(self):
        async def scenario():
            loader = GatedLoader()
            loader.release()
            cache = DictionaryCache(loader, key_strategy=lambda l: l.lower())
            await cache.load("EN")
            await cache.load("en")
            return loader, cache.same_locale("En", "eN")

        loader, same = run(scenario())
        assert loader.calls == ["EN"]
        assert same is True

    def test_unknown_strategy_raises(self):
        with pytest.raises(ValueError, match="Unknown key strategy"):
            resolve_key_fn("reference")  # type: ignore[arg-type]

    def test_identity_key_equality(self):
        obj = {"a": 1}
        assert identity_key(obj) == identity_key(obj)
        assert identity_key(obj) != identity_key({"a": 1})
        assert hash(identity_key(obj)) == id(obj)


# ── Cancellation and maintenance ──────────────────────────────────────────


class TestMaintenance:
    def test_cancelling_one_waiter_keeps_shared_load(self):
        async def scenario():
            loader = GatedLoader()
            cache = DictionaryCache(loader)

            async def wait_for(locale):
                return await cache.load(locale)

            doomed = asyncio.create_task(wait_for("en"))
            survivor = cache.load("en")
            await asyncio.sleep(0)
            doomed.cancel()
            loader.release()
            result = await survivor
            return loader, doomed, result

        loader, doomed, result = run(scenario())
        assert doomed.cancelled()
        assert loader.calls == ["en"]
        assert result["locale"] == "en"

    def test_peek_evict_clear(self):
        async def scenario():
            loader = GatedLoader()
            cache = DictionaryCache(loader)
            pending = cache.load("en")
            before = cache.peek("en")
            loader.release()
            await pending
            after = cache.peek("en")
            await cache.load("id")
            evicted = cache.evict("en")
            missing = cache.evict("en")
            remaining = cache.clear()
            return before, after, evicted, missing, remaining, len(cache)

        before, after, evicted, missing, remaining, size = run(scenario())
        assert before is None
        assert after == {"locale": "en", "attempt": "1"}
        assert evicted is True
        assert missing is False
        assert remaining == 1
        assert size == 0
