"""Property tests for the endpoint pool.

Validates that selection always yields a pool member, round-robin fairness
among healthy endpoints, exclusion of demoted endpoints inside the recovery
window, lazy recovery after it, and failure accounting.
"""

from __future__ import annotations

from hypothesis import assume, given, settings
from hypothesis import strategies as st

from rpc_proxy.pool.manager import EndpointPool
from tests.support import FakeClock


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

# Generate 1-10 endpoint URLs
endpoint_url_lists = st.integers(min_value=1, max_value=10).map(
    lambda n: [f"https://node{i}.example.com/rpc" for i in range(n)]
)

# Sequences of pool operations: None = select, int = demote that index (mod N)
pool_operations = st.lists(
    st.one_of(st.none(), st.integers(min_value=0, max_value=9)),
    min_size=1,
    max_size=60,
)

# Boolean mask for demoting endpoints (True = demote)
demotion_masks = st.lists(st.booleans(), min_size=1, max_size=10)

WINDOW = 300.0


def _make_pool(urls: list[str], clock: FakeClock | None = None) -> EndpointPool:
    return EndpointPool(urls, recovery_window_seconds=WINDOW, clock=clock or FakeClock())


def _align(mask: list[bool], size: int) -> list[bool]:
    mask = mask[:size]
    return mask + [False] * (size - len(mask))


# ---------------------------------------------------------------------------
# Selection is total
# ---------------------------------------------------------------------------


@settings(max_examples=200)
@given(
    urls=endpoint_url_lists,
    operations=pool_operations,
    elapsed=st.lists(st.floats(min_value=0, max_value=400), min_size=1, max_size=60),
)
def test_select_always_returns_pool_member(
    urls: list[str],
    operations: list[int | None],
    elapsed: list[float],
) -> None:
    clock = FakeClock()
    pool = _make_pool(urls, clock)

    for step, op in enumerate(operations):
        clock.advance(elapsed[step % len(elapsed)])
        if op is None:
            endpoint = pool.select_endpoint()
            assert 0 <= endpoint.index < len(urls)
            assert endpoint.url == urls[endpoint.index]
        else:
            pool.mark_unavailable(pool.endpoints[op % len(urls)])

        snapshot = pool.health_snapshot()
        assert 0 <= snapshot.current_index < len(urls)
        assert snapshot.total_count == len(urls)
        assert 0 <= snapshot.available_count <= len(urls)


# ---------------------------------------------------------------------------
# Round-robin fairness
# ---------------------------------------------------------------------------


@settings(max_examples=100)
@given(urls=endpoint_url_lists, warmup=st.integers(min_value=0, max_value=25))
def test_round_robin_visits_each_endpoint_once(urls: list[str], warmup: int) -> None:
    pool = _make_pool(urls)
    for _ in range(warmup):
        pool.select_endpoint()

    start = warmup % len(urls)
    visited = [pool.select_endpoint().index for _ in range(len(urls))]

    assert visited == [(start + i) % len(urls) for i in range(len(urls))]


# ---------------------------------------------------------------------------
# Demotion and recovery
# ---------------------------------------------------------------------------


@settings(max_examples=100)
@given(
    urls=endpoint_url_lists,
    mask=demotion_masks,
    within=st.floats(min_value=0, max_value=WINDOW - 0.001),
)
def test_demoted_endpoints_skipped_inside_window(
    urls: list[str],
    mask: list[bool],
    within: float,
) -> None:
    mask = _align(mask, len(urls))
    healthy = [i for i, demoted in enumerate(mask) if not demoted]
    assume(healthy)

    clock = FakeClock()
    pool = _make_pool(urls, clock)
    for i, demoted in enumerate(mask):
        if demoted:
            pool.mark_unavailable(pool.endpoints[i])
    clock.advance(within)

    selected = {pool.select_endpoint().index for _ in range(2 * len(urls))}

    assert selected == set(healthy)


@settings(max_examples=100)
@given(urls=endpoint_url_lists, within=st.floats(min_value=0, max_value=WINDOW - 0.001))
def test_fully_demoted_pool_falls_back(urls: list[str], within: float) -> None:
    clock = FakeClock()
    pool = _make_pool(urls, clock)
    for ep in pool.endpoints:
        pool.mark_unavailable(ep)
    clock.advance(within)

    visited = [pool.select_endpoint().index for _ in range(len(urls))]

    # Fallback still rotates through the pool and restores nothing
    assert visited == list(range(len(urls)))
    assert pool.health_snapshot().available_count == 0


@settings(max_examples=100)
@given(
    urls=endpoint_url_lists,
    mask=demotion_masks,
    after=st.floats(min_value=WINDOW, max_value=10 * WINDOW),
)
def test_demoted_endpoints_recover_after_window(
    urls: list[str],
    mask: list[bool],
    after: float,
) -> None:
    mask = _align(mask, len(urls))
    clock = FakeClock()
    pool = _make_pool(urls, clock)
    for i, demoted in enumerate(mask):
        if demoted:
            pool.mark_unavailable(pool.endpoints[i])
    clock.advance(after)

    visited = [pool.select_endpoint().index for _ in range(len(urls))]

    assert visited == list(range(len(urls)))
    assert pool.health_snapshot().available_count == len(urls)


@settings(max_examples=100)
@given(urls=endpoint_url_lists, operations=pool_operations)
def test_failure_count_matches_demotions(
    urls: list[str],
    operations: list[int | None],
) -> None:
    clock = FakeClock()
    pool = _make_pool(urls, clock)
    expected = [0] * len(urls)

    for op in operations:
        if op is None:
            clock.advance(WINDOW)
            pool.select_endpoint()
        else:
            index = op % len(urls)
            pool.mark_unavailable(pool.endpoints[index])
            expected[index] += 1

    assert [pool.failure_count(ep) for ep in pool.endpoints] == expected
