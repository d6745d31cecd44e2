"""Tests for logging context propagation."""

import asyncio

import pytest

from discovery.logging.context import (
    clear_log_context,
    get_log_context,
    log_context,
    pop_log_context,
    push_log_context,
)


@pytest.fixture(autouse=True)
def clean_context():
    """Clear logging context before and after each test."""
    clear_log_context()
    yield
    clear_log_context()


def test_empty_context():
    assert get_log_context() == {}


def test_push_and_pop():
    token = push_log_context(refresh_id="r-1", trigger="timer")
    assert get_log_context() == {"refresh_id": "r-1", "trigger": "timer"}

    pop_log_context(token)
    assert get_log_context() == {}


def test_nested_pushes_restore_in_reverse():
    outer = push_log_context(refresh_id="r-1")
    inner = push_log_context(trigger="push")
    assert get_log_context() == {"refresh_id": "r-1", "trigger": "push"}

    pop_log_context(inner)
    assert get_log_context() == {"refresh_id": "r-1"}

    pop_log_context(outer)
    assert get_log_context() == {}


def test_inner_value_shadows_outer():
    with log_context(trigger="timer"):
        with log_context(trigger="coalesced"):
            assert get_log_context() == {"trigger": "coalesced"}
        assert get_log_context() == {"trigger": "timer"}


def test_context_manager_restores_on_exception():
    with pytest.raises(RuntimeError):
        with log_context(refresh_id="r-1"):
            raise RuntimeError("fetch exploded")

    assert get_log_context() == {}


def test_returned_context_is_a_copy():
    with log_context(refresh_id="r-1"):
        context = get_log_context()
        context["refresh_id"] = "tampered"
        assert get_log_context() == {"refresh_id": "r-1"}


def test_clear_context():
    push_log_context(refresh_id="r-1")
    clear_log_context()
    assert get_log_context() == {}


def test_tasks_do_not_share_context():
    """Each asyncio task works on its own copy of the context."""
    seen = {}

    async def refresh(name, gate):
        with log_context(refresh_id=name):
            await gate.wait()
            seen[name] = get_log_context()["refresh_id"]

    async def scenario():
        gate = asyncio.Event()
        tasks = [asyncio.ensure_future(refresh(name, gate)) for name in ("a", "b")]
        await asyncio.sleep(0)
        gate.set()
        await asyncio.gather(*tasks)
        return get_log_context()

    outer_context = asyncio.run(scenario())

    assert seen == {"a": "a", "b": "b"}
    assert outer_context == {}
