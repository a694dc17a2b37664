"""Session registry shared by all MCP transports.

A session moves through ``PENDING -> ACTIVE -> CLOSED``. The registry is the
only shared mutable state of the gateway; none of its methods await, so every
mutation is atomic with respect to the event loop.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import secrets
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Literal

from paperless_mcp.exceptions import ChannelConflictError, SessionNotFoundError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)

type TransportKind = Literal["stateless", "duplex", "stdio"]

KEEPALIVE_INTERVAL = 15.0

# Identifiers embed a millisecond timestamp, so an evicted retired identifier
# cannot be minted again unless the clock runs backwards.
RETIRED_ID_LIMIT = 10_000


class SessionState(enum.Enum):
    PENDING = "pending"
    ACTIVE = "active"
    CLOSED = "closed"


@dataclass(frozen=True)
class Frame:
    """One server-sent event."""

    data: str
    event: str | None = None

    def encode(self) -> str:
        lines = [f"event: {self.event}"] if self.event else []
        lines.extend(f"data: {line}" for line in self.data.splitlines() or [""])
        return "\n".join(lines) + "\n\n"


_CLOSE = object()


class EventChannel:
    """Ordered outbound frame queue backing one server-sent-event stream.

    Frames are delivered in the order they were sent. Sending on a closed
    channel is a no-op, which drops results of calls that outlive their
    session.
    """

    def __init__(self, keepalive_interval: float = KEEPALIVE_INTERVAL) -> None:
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._closed = False
        self.keepalive_interval = keepalive_interval

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, data: str, event: str | None = "message") -> bool:
        if self._closed:
            logger.debug("Dropping frame for closed channel")
            return False
        self._queue.put_nowait(Frame(data=data, event=event))
        return True

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(_CLOSE)

    async def frames(self) -> AsyncIterator[str]:
        """Yield encoded frames until the channel is closed.

        A comment line is emitted whenever the channel stays idle for
        ``keepalive_interval`` seconds so proxies keep the stream open.
        """
        while True:
            try:
                item = await asyncio.wait_for(self._queue.get(), timeout=self.keepalive_interval)
            except TimeoutError:
                yield ": keep-alive\n\n"
                continue
            if item is _CLOSE:
                return
            yield item.encode()


@dataclass
class Session:
    """One logical client conversation bound to at most one channel."""

    session_id: str
    transport: TransportKind
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    state: SessionState = SessionState.PENDING
    channel: EventChannel | None = None

    @property
    def is_active(self) -> bool:
        return self.state is SessionState.ACTIVE

    def activate(self) -> None:
        if self.state is not SessionState.PENDING:
            raise RuntimeError(f"Session {self.session_id} cannot be activated from state {self.state.value}")
        self.state = SessionState.ACTIVE

    def close(self) -> None:
        if self.channel is not None:
            self.channel.close()
            self.channel = None
        self.state = SessionState.CLOSED


def generate_session_id() -> str:
    """Timestamp plus a random component, e.g. ``mcp-1718000000000-9f2c4e1ab37d0c55``."""
    return f"mcp-{time.time_ns() // 1_000_000}-{secrets.token_hex(8)}"


class SessionRegistry:
    """Owns every live session, keyed by session identifier."""

    def __init__(self, retired_limit: int = RETIRED_ID_LIMIT) -> None:
        self._sessions: dict[str, Session] = {}
        self._retired: dict[str, None] = {}
        self.retired_limit = retired_limit

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def _retire(self, session_id: str) -> None:
        self._retired[session_id] = None
        while len(self._retired) > self.retired_limit:
            del self._retired[next(iter(self._retired))]

    def _new_id(self) -> str:
        while True:
            session_id = generate_session_id()
            if session_id not in self._sessions and session_id not in self._retired:
                return session_id

    def create(self, transport: TransportKind, channel: EventChannel | None = None) -> Session:
        """Register a new session and activate it."""
        session = Session(session_id=self._new_id(), transport=transport)
        self._sessions[session.session_id] = session
        session.channel = channel
        session.activate()
        logger.info(f"Session created: {session.session_id} ({transport})")
        return session

    def get(self, session_id: str | None, transport: TransportKind | None = None) -> Session | None:
        """Return the active session, or None.

        When ``transport`` is given, a session owned by another transport is
        treated as unknown.
        """
        if not session_id:
            return None
        session = self._sessions.get(session_id)
        if session is None or not session.is_active:
            return None
        if transport is not None and session.transport != transport:
            logger.warning(f"Session {session_id} belongs to the {session.transport} transport, not {transport}")
            return None
        return session

    def require(self, session_id: str | None, transport: TransportKind | None = None) -> Session:
        session = self.get(session_id, transport)
        if session is None:
            raise SessionNotFoundError("Missing or invalid Mcp-Session-Id header")
        return session

    def attach_channel(self, session_id: str | None, channel: EventChannel) -> Session:
        """Bind a push channel to an existing stateless session.

        Raises:
            SessionNotFoundError: If no stateless session is registered under the ID
            ChannelConflictError: If the session already owns an open channel
        """
        session = self.require(session_id, "stateless")
        if session.channel is not None and not session.channel.closed:
            raise ChannelConflictError(f"Session {session.session_id} already has an open stream")
        session.channel = channel
        return session

    def detach_channel(self, session_id: str, channel: EventChannel) -> None:
        """Release a push channel without ending the session."""
        channel.close()
        session = self._sessions.get(session_id)
        if session is not None and session.channel is channel:
            session.channel = None

    def terminate(self, session_id: str | None, transport: TransportKind | None = None) -> Session:
        """Remove a session, close its channel and retire its identifier.

        Raises:
            SessionNotFoundError: If the session is not registered for ``transport``
        """
        session = self._sessions.get(session_id) if session_id else None
        if session is None or (transport is not None and session.transport != transport):
            raise SessionNotFoundError(f"Session not found: {session_id}")
        del self._sessions[session.session_id]
        self._retire(session.session_id)
        session.close()
        logger.info(f"Session terminated: {session.session_id}")
        return session

    def close_all(self) -> None:
        for session_id in list(self._sessions):
            self.terminate(session_id)
