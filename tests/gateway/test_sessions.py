"""Tests for paperless_mcp.gateway.sessions module."""

from __future__ import annotations

import asyncio
import re

import pytest

from paperless_mcp.exceptions import ChannelConflictError, SessionNotFoundError
from paperless_mcp.gateway.sessions import (
    EventChannel,
    Frame,
    Session,
    SessionRegistry,
    SessionState,
    generate_session_id,
)


async def collect(channel: EventChannel) -> list[str]:
    return [frame async for frame in channel.frames()]


async def first_frame(channel: EventChannel) -> str:
    return await anext(channel.frames())


@pytest.mark.unit
class TestFrame:
    def test_encode_with_event(self) -> None:
        assert Frame(data="/mcp?sessionId=abc", event="endpoint").encode() == (
            "event: endpoint\ndata: /mcp?sessionId=abc\n\n"
        )

    def test_encode_multiline_data(self) -> None:
        assert Frame(data="a\nb").encode() == "data: a\ndata: b\n\n"


@pytest.mark.unit
class TestEventChannel:
    async def test_preserves_order(self) -> None:
        channel = EventChannel()
        for index in range(5):
            channel.send(str(index))
        channel.close()

        frames = await collect(channel)

        assert frames == [f"event: message\ndata: {index}\n\n" for index in range(5)]

    async def test_send_after_close_is_dropped(self) -> None:
        channel = EventChannel()
        channel.close()

        assert channel.send("late") is False
        assert channel.closed
        assert await collect(channel) == []

    async def test_keepalive_when_idle(self) -> None:
        channel = EventChannel(keepalive_interval=0.01)
        frames = channel.frames()

        assert await anext(frames) == ": keep-alive\n\n"
        channel.close()
        await frames.aclose()

    async def test_consumer_wakes_on_send(self) -> None:
        channel = EventChannel()
        reader = asyncio.create_task(first_frame(channel))
        await asyncio.sleep(0)

        channel.send("{}")

        assert await asyncio.wait_for(reader, timeout=1) == "event: message\ndata: {}\n\n"


@pytest.mark.unit
class TestSession:
    def test_lifecycle(self) -> None:
        session = Session(session_id="mcp-1-aa", transport="stateless")
        assert session.state is SessionState.PENDING

        session.activate()
        assert session.is_active

        session.close()
        assert session.state is SessionState.CLOSED
        with pytest.raises(RuntimeError):
            session.activate()

    def test_close_closes_channel(self) -> None:
        channel = EventChannel()
        session = Session(session_id="mcp-1-aa", transport="duplex", channel=channel)

        session.close()

        assert channel.closed
        assert session.channel is None


@pytest.mark.unit
class TestSessionRegistry:
    def test_session_id_format(self) -> None:
        assert re.fullmatch(r"mcp-\d+-[0-9a-f]{16}", generate_session_id())

    def test_ids_are_unique(self) -> None:
        registry = SessionRegistry()

        ids = {registry.create("stateless").session_id for _ in range(500)}

        assert len(ids) == 500
        assert len(registry) == 500

    def test_create_activates(self) -> None:
        session = SessionRegistry().create("duplex", EventChannel())

        assert session.is_active
        assert session.transport == "duplex"

    def test_get_and_require(self) -> None:
        registry = SessionRegistry()
        session = registry.create("stateless")

        assert registry.get(session.session_id) is session
        assert registry.get(None) is None
        assert registry.get("mcp-0-unknown") is None
        with pytest.raises(SessionNotFoundError):
            registry.require("mcp-0-unknown")

    def test_terminate_retires_id(self) -> None:
        registry = SessionRegistry()
        session = registry.create("stateless")

        registry.terminate(session.session_id)

        assert session.state is SessionState.CLOSED
        assert session.session_id not in registry
        assert registry.get(session.session_id) is None
        with pytest.raises(SessionNotFoundError, match="Session not found"):
            registry.terminate(session.session_id)

    def test_retired_ids_are_never_reissued(self, monkeypatch: pytest.MonkeyPatch) -> None:
        registry = SessionRegistry()
        ids = iter(["mcp-1-a", "mcp-1-a", "mcp-1-b"])
        monkeypatch.setattr("paperless_mcp.gateway.sessions.generate_session_id", lambda: next(ids))

        first = registry.create("stateless")
        registry.terminate(first.session_id)
        second = registry.create("stateless")

        assert first.session_id == "mcp-1-a"
        assert second.session_id == "mcp-1-b"

    def test_attach_channel_conflict(self) -> None:
        registry = SessionRegistry()
        session = registry.create("stateless")
        first = EventChannel()

        registry.attach_channel(session.session_id, first)
        with pytest.raises(ChannelConflictError):
            registry.attach_channel(session.session_id, EventChannel())

        registry.detach_channel(session.session_id, first)
        second = EventChannel()
        assert registry.attach_channel(session.session_id, second).channel is second
        assert first.closed

    def test_attach_channel_unknown_session(self) -> None:
        with pytest.raises(SessionNotFoundError):
            SessionRegistry().attach_channel("mcp-0-nope", EventChannel())

    def test_close_all(self) -> None:
        registry = SessionRegistry()
        channel = EventChannel()
        sessions = [registry.create("duplex", channel), registry.create("stateless")]

        registry.close_all()

        assert len(registry) == 0
        assert channel.closed
        assert all(session.state is SessionState.CLOSED for session in sessions)

    def test_require_checks_owning_transport(self) -> None:
        registry = SessionRegistry()
        stateless = registry.create("stateless")
        duplex = registry.create("duplex", EventChannel())

        assert registry.require(stateless.session_id, "stateless") is stateless
        assert registry.require(duplex.session_id, "duplex") is duplex
        assert registry.get(stateless.session_id, "duplex") is None
        with pytest.raises(SessionNotFoundError):
            registry.require(duplex.session_id, "stateless")

    def test_terminate_checks_owning_transport(self) -> None:
        registry = SessionRegistry()
        duplex = registry.create("duplex", EventChannel())

        with pytest.raises(SessionNotFoundError):
            registry.terminate(duplex.session_id, "stateless")

        assert duplex.is_active
        assert registry.terminate(duplex.session_id, "duplex") is duplex

    def test_push_channel_only_for_stateless_sessions(self) -> None:
        registry = SessionRegistry()
        duplex = registry.create("duplex", EventChannel())

        with pytest.raises(SessionNotFoundError):
            registry.attach_channel(duplex.session_id, EventChannel())

    def test_retired_ids_are_capped(self) -> None:
        registry = SessionRegistry(retired_limit=3)
        sessions = [registry.create("stateless") for _ in range(5)]

        for session in sessions:
            registry.terminate(session.session_id)

        assert list(registry._retired) == [session.session_id for session in sessions[2:]]
        assert all(registry.get(session.session_id) is None for session in sessions)
