"""
Tests for assistant provider adapters and fallback composition.

Uses stub adapters and a scripted router invoker; no LLM required.
"""

import json

import pytest

from backend.assistant import (
    AssistantResult,
    AssistantTask,
    FallbackProviderChain,
    MockLocalProvider,
    ProviderAdapter,
    ProviderDisabledError,
    RouterProvider,
    build_prompt,
    get_assistant_provider,
)
from backend.llm_router import DEGRADED_CONTENT, BackendError, ModelRouter
from configs import RouterSettings


class StubProvider:
    """Adapter with a fixed enabled flag and an optional failure."""

    def __init__(self, id, enabled=True, error=None):
        self.id = id
        self.enabled = enabled
        self.error = error
        self.calls = 0

    async def generate(self, task):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return AssistantResult(provider=self.id, content=f"from {self.id}")


def make_task(type="summarize_table", prompt="Summarize open incidents", context=None):
    return AssistantTask(type=type, prompt=prompt, context=context)


# =============================================================================
# FALLBACK PROVIDER CHAIN
# =============================================================================

class TestFallbackProviderChain:

    def test_id_joins_both_sides(self):
        chain = FallbackProviderChain(StubProvider("a"), StubProvider("b"))
        assert chain.id == "a>b"

    def test_explicit_id_is_kept(self):
        chain = FallbackProviderChain(StubProvider("a"), StubProvider("b"), id="custom")
        assert chain.id == "custom"

    @pytest.mark.parametrize("primary_on,fallback_on,expected", [
        (True, True, True),
        (True, False, True),
        (False, True, True),
        (False, False, False),
    ])
    def test_enabled_if_either_side_enabled(self, primary_on, fallback_on, expected):
        chain = FallbackProviderChain(StubProvider("a", primary_on), StubProvider("b", fallback_on))
        assert chain.enabled is expected

    def test_enabled_is_dynamic(self):
        primary = StubProvider("a", enabled=False)
        chain = FallbackProviderChain(primary, StubProvider("b", enabled=False))
        assert chain.enabled is False

        primary.enabled = True
        assert chain.enabled is True

    @pytest.mark.asyncio
    async def test_uses_primary_when_it_succeeds(self):
        primary, fallback = StubProvider("a"), StubProvider("b")
        result = await FallbackProviderChain(primary, fallback).generate(make_task())

        assert result.provider == "a"
        assert fallback.calls == 0

    @pytest.mark.asyncio
    async def test_falls_back_when_primary_raises(self):
        primary = StubProvider("a", error=RuntimeError("primary down"))
        fallback = StubProvider("b")

        result = await FallbackProviderChain(primary, fallback).generate(make_task())

        assert result.provider == "b"
        assert primary.calls == 1
        assert fallback.calls == 1

    @pytest.mark.asyncio
    async def test_skips_disabled_primary(self):
        primary = StubProvider("a", enabled=False)
        fallback = StubProvider("b")

        result = await FallbackProviderChain(primary, fallback).generate(make_task())

        assert result.provider == "b"
        assert primary.calls == 0

    @pytest.mark.asyncio
    async def test_fallback_error_reaches_caller(self):
        chain = FallbackProviderChain(
            StubProvider("a", error=RuntimeError("a down")),
            StubProvider("b", error=RuntimeError("b down")),
        )
        with pytest.raises(RuntimeError, match="b down"):
            await chain.generate(make_task())

    @pytest.mark.asyncio
    async def test_chains_nest(self):
        inner = FallbackProviderChain(
            StubProvider("a", error=RuntimeError("a down")),
            StubProvider("b", error=RuntimeError("b down")),
        )
        outer = FallbackProviderChain(inner, StubProvider("c"))

        result = await outer.generate(make_task())

        assert outer.id == "a>b>c"
        assert result.provider == "c"

    def test_chain_satisfies_adapter_protocol(self):
        chain = FallbackProviderChain(StubProvider("a"), MockLocalProvider())
        assert isinstance(chain, ProviderAdapter)
        assert isinstance(MockLocalProvider(), ProviderAdapter)


# =============================================================================
# ADAPTERS
# =============================================================================

class TestMockLocalProvider:

    @pytest.mark.asyncio
    async def test_automation_draft_is_json_with_prompt_as_notes(self):
        result = await MockLocalProvider().generate(
            make_task(type="automation_draft", prompt="Notify owner on update")
        )
        draft = json.loads(result.content)

        assert result.provider == "mock-local"
        assert draft["trigger"]["type"] == "record.updated"
        assert draft["notes"] == "Notify owner on update"
        assert result.router_telemetry is None

    @pytest.mark.asyncio
    async def test_kpi_layout_template(self):
        result = await MockLocalProvider().generate(make_task(type="kpi_layout"))
        assert result.content.startswith("Layout suggestion:")

    @pytest.mark.asyncio
    async def test_summary_template(self):
        result = await MockLocalProvider().generate(make_task())
        assert result.content.startswith("Summary:")


class TestRouterProvider:

    def _router(self, breaker, settings, invoker):
        return ModelRouter(breaker=breaker, invoker=invoker, settings=settings)

    def test_enabled_follows_credential(self, breaker, settings):
        async def invoker(model_id, prompt):
            return "ok"

        assert RouterProvider(self._router(breaker, settings, invoker)).enabled is True
        assert RouterProvider(self._router(breaker, RouterSettings(), invoker)).enabled is False

    @pytest.mark.asyncio
    async def test_disabled_provider_raises(self, breaker):
        async def invoker(model_id, prompt):
            return "ok"

        provider = RouterProvider(self._router(breaker, RouterSettings(), invoker))
        with pytest.raises(ProviderDisabledError):
            await provider.generate(make_task())

    @pytest.mark.asyncio
    async def test_returns_content_with_telemetry(self, breaker, settings):
        sent = []

        async def invoker(model_id, prompt):
            sent.append(prompt)
            return "Three incidents are open."

        provider = RouterProvider(self._router(breaker, settings, invoker))
        result = await provider.generate(make_task(context={"rows": 3}))

        assert result.provider == "free-cloud-router"
        assert result.content == "Three incidents are open."
        assert result.router_telemetry.success is True
        assert result.router_telemetry.task_class == "summary"
        assert "Context:" in sent[0]

    @pytest.mark.asyncio
    async def test_degraded_router_result_is_returned_not_raised(self, breaker, settings):
        async def invoker(model_id, prompt):
            raise BackendError(model_id, "returned 503", status_code=503)

        provider = RouterProvider(self._router(breaker, settings, invoker))
        result = await provider.generate(make_task())

        assert result.content == DEGRADED_CONTENT
        assert result.router_telemetry.success is False

    @pytest.mark.asyncio
    async def test_disabled_router_falls_back_to_mock(self, breaker):
        async def invoker(model_id, prompt):
            return "unused"

        chain = FallbackProviderChain(
            RouterProvider(self._router(breaker, RouterSettings(), invoker)),
            MockLocalProvider(),
        )
        result = await chain.generate(make_task(type="kpi_layout"))

        assert result.provider == "mock-local"


# =============================================================================
# HELPERS
# =============================================================================

class TestBuildPrompt:

    def test_without_context(self):
        assert build_prompt(make_task(prompt="hello")) == "hello"

    def test_with_context(self):
        prompt = build_prompt(make_task(prompt="hello", context={"table": "Incidents"}))
        assert prompt.startswith("hello\n\nContext:\n")
        assert '"table": "Incidents"' in prompt


class TestGetAssistantProvider:

    def test_mock_mode_pins_mock_provider(self, monkeypatch, breaker, settings):
        monkeypatch.setenv("AI_PROVIDER_MODE", "mock")
        provider = get_assistant_provider(ModelRouter(breaker=breaker, settings=settings))
        assert provider.id == "mock-local"

    def test_router_mode_chains_router_then_mock(self, monkeypatch, breaker, settings):
        monkeypatch.setenv("AI_PROVIDER_MODE", "router")
        provider = get_assistant_provider(ModelRouter(breaker=breaker, settings=settings))
        assert provider.id == "free-cloud-router>mock-local"
        assert provider.enabled is True
