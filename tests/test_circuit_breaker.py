"""Tests for the per-model circuit breaker and candidate selection."""

import threading

from backend.llm_router import (
    CIRCUIT_COOLDOWN_SECONDS,
    CIRCUIT_WINDOW_SECONDS,
    FREE_MODELS,
    CircuitBreakerStore,
    get_model,
    select_models,
)


def trip(breaker, model_id, times=3):
    for _ in range(times):
        breaker.record_failure(model_id)


# =============================================================================
# CIRCUIT BREAKER
# =============================================================================

class TestCircuitBreaker:

    def test_starts_closed(self, breaker):
        assert breaker.is_open("m1") is False
        assert breaker.get_state("m1") is None

    def test_opens_after_three_failures_within_window(self, breaker, clock):
        breaker.record_failure("m1")
        clock.advance(30)
        breaker.record_failure("m1")
        clock.advance(30)
        breaker.record_failure("m1")
        assert breaker.is_open("m1") is True

    def test_does_not_open_with_fewer_than_three_failures(self, breaker):
        trip(breaker, "m1", times=2)
        assert breaker.is_open("m1") is False
        assert breaker.get_state("m1").failures == 2

    def test_closes_after_cooldown_and_deletes_entry(self, breaker, clock):
        trip(breaker, "m1")
        clock.advance(CIRCUIT_COOLDOWN_SECONDS - 1)
        assert breaker.is_open("m1") is True

        clock.advance(1)
        assert breaker.is_open("m1") is False
        assert breaker.get_state("m1") is None

    def test_success_clears_state_immediately(self, breaker):
        trip(breaker, "m1")
        assert breaker.is_open("m1") is True

        breaker.record_success("m1")
        assert breaker.is_open("m1") is False
        assert breaker.get_state("m1") is None

    def test_failure_outside_window_resets_counter(self, breaker, clock):
        trip(breaker, "m1", times=2)
        clock.advance(CIRCUIT_WINDOW_SECONDS + 1)
        breaker.record_failure("m1")

        state = breaker.get_state("m1")
        assert state.failures == 1
        assert breaker.is_open("m1") is False

    def test_window_is_sliding_from_last_failure(self, breaker, clock):
        # Each failure lands inside the window of the previous one
        for _ in range(3):
            breaker.record_failure("m1")
            clock.advance(CIRCUIT_WINDOW_SECONDS - 1)
        assert breaker.get_state("m1").failures == 3

    def test_open_until_set_from_tripping_failure(self, breaker, clock):
        trip(breaker, "m1")
        state = breaker.get_state("m1")
        assert state.open_until == clock.now + CIRCUIT_COOLDOWN_SECONDS
        assert state.last_failure_at == clock.now

    def test_models_are_isolated(self, breaker):
        trip(breaker, "m1")
        assert breaker.is_open("m1") is True
        assert breaker.is_open("m2") is False

    def test_get_state_returns_copy(self, breaker):
        breaker.record_failure("m1")
        breaker.get_state("m1").failures = 99
        assert breaker.get_state("m1").failures == 1

    def test_snapshot_returns_state_and_read_time(self, breaker, clock):
        trip(breaker, "m1")
        state, now = breaker.snapshot("m1")

        assert now == clock.now
        assert state.failures == 3
        assert state.open_until == now + CIRCUIT_COOLDOWN_SECONDS

    def test_snapshot_drops_expired_lockout(self, breaker, clock):
        trip(breaker, "m1")
        clock.advance(CIRCUIT_COOLDOWN_SECONDS)

        state, _ = breaker.snapshot("m1")

        assert state is None
        assert len(breaker) == 0

    def test_reset_clears_everything(self, breaker):
        trip(breaker, "m1")
        trip(breaker, "m2", times=1)
        breaker.reset()
        assert len(breaker) == 0

    def test_separate_stores_do_not_share_state(self, clock):
        tenant_a = CircuitBreakerStore(clock=clock)
        tenant_b = CircuitBreakerStore(clock=clock)
        trip(tenant_a, "m1")
        assert tenant_a.is_open("m1") is True
        assert tenant_b.is_open("m1") is False

    def test_concurrent_failures_keep_entry_consistent(self, breaker):
        threads = [threading.Thread(target=trip, args=(breaker, "m1", 50)) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        state = breaker.get_state("m1")
        assert state.failures == 400
        assert breaker.is_open("m1") is True


# =============================================================================
# SELECTOR
# =============================================================================

class TestSelectModels:

    def test_returns_models_matching_task_class(self, breaker):
        models = select_models("coding", "best", breaker)
        assert len(models) > 0
        for model_id in models:
            model = get_model(model_id)
            assert "coding" in model.strengths

    def test_sorted_by_ascending_priority(self, breaker):
        models = select_models("general", "best", breaker)
        priorities = [get_model(i).priority for i in models]
        assert priorities == sorted(priorities)

    def test_stable_order_for_equal_priority(self, breaker):
        # Both priority-1 general models keep registry order
        models = select_models("general", "best", breaker)
        assert models[:2] == ["qwen/qwen3-coder:free", "meta-llama/llama-3.3-70b-instruct:free"]

    def test_fast_mode_limits_to_three(self, breaker):
        assert len(select_models("general", "best", breaker)) == 4
        assert len(select_models("general", "fast", breaker)) == 3

    def test_excludes_open_circuits(self, breaker):
        target = FREE_MODELS[0].id
        trip(breaker, target)

        assert target not in select_models("general", "best", breaker)
        assert target not in select_models("general", "fast", breaker)

    def test_reopened_model_returns_after_cooldown(self, breaker, clock):
        target = FREE_MODELS[0].id
        trip(breaker, target)
        clock.advance(CIRCUIT_COOLDOWN_SECONDS)
        assert select_models("general", "best", breaker)[0] == target

    def test_custom_registry(self, breaker, ab_registry):
        assert select_models("coding", "fast", breaker, ab_registry) == ["A", "B"]
        assert select_models("general", "fast", breaker, ab_registry) == ["B"]
        assert select_models("summary", "fast", breaker, ab_registry) == []

    def test_unknown_model_lookup(self):
        assert get_model("nobody/nothing:free") is None

    def test_unknown_mode_is_capped_like_fast(self, breaker):
        assert select_models("general", "turbo", breaker) == select_models("general", "fast", breaker)
