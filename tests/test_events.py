import logging

import pytest

from storefront.core.events import STORAGE, USER_LOGIN, EventBus


@pytest.mark.anyio
async def test_dispatch_awaits_async_listeners_in_order() -> None:
    bus = EventBus()
    seen: list[str] = []

    async def first(detail: dict) -> None:
        seen.append(f"first:{detail['email']}")

    bus.add_listener(USER_LOGIN, first)
    bus.add_listener(USER_LOGIN, lambda detail: seen.append("second"))
    bus.add_listener(USER_LOGIN, first)

    await bus.dispatch(USER_LOGIN, {"email": "mama@example.com"})

    assert seen == ["first:mama@example.com", "second"]


@pytest.mark.anyio
async def test_emit_keeps_async_listener_tasks_until_done() -> None:
    bus = EventBus()
    keys: list[str] = []

    async def record(detail: dict) -> None:
        keys.append(detail["key"])

    bus.add_listener(STORAGE, record)
    bus.emit(STORAGE, {"key": "cart:guest"})

    assert bus.pending_tasks == 1
    await bus.drain()

    assert keys == ["cart:guest"]
    assert bus.pending_tasks == 0


@pytest.mark.anyio
async def test_emit_logs_async_listener_failures(caplog: pytest.LogCaptureFixture) -> None:
    bus = EventBus()

    async def broken(detail: dict) -> None:
        raise ValueError("listener blew up")

    bus.add_listener(STORAGE, broken)

    with caplog.at_level(logging.ERROR, logger="storefront.core.events"):
        bus.emit(STORAGE, {"key": "token"})
        await bus.drain()

    assert bus.pending_tasks == 0
    assert "listener blew up" in caplog.text


def test_emit_without_running_loop_skips_async_listeners() -> None:
    bus = EventBus()

    async def never(detail: dict) -> None:
        raise AssertionError("should not run")

    bus.add_listener(STORAGE, never)
    bus.emit(STORAGE, {"key": "token"})

    assert bus.pending_tasks == 0
