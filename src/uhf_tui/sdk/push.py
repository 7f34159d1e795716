"""Push client contract and the status text shown in the menu header."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from uhf_tui.core import TagRead

# Seconds a success or an error stays relevant for the header
FRESH_WINDOW = 60.0


class PushClient(Protocol):
    """
    Forwards tag reads to a remote service.

    Timestamps are wall-clock seconds; 0 means "never".
    """

    @property
    def base_url(self) -> str:
        ...

    @property
    def enabled(self) -> bool:
        ...

    @property
    def last_success_at(self) -> float:
        ...

    @property
    def last_error_at(self) -> float:
        ...

    @property
    def last_error_message(self) -> str:
        ...

    @property
    def agent_success_at(self) -> float:
        ...

    @property
    def agent_error_at(self) -> float:
        ...

    def enqueue(self, tag: TagRead) -> None:
        ...

    def test_connectivity(self) -> bool:
        ...


def push_status(client: Optional[PushClient], now: float) -> str:
    """
    Summarize push health as ``"Push: <state>"``; empty when there is no client.

    Agent heartbeats take priority over push results, and anything older
    than FRESH_WINDOW seconds no longer counts as current.
    """
    if client is None:
        return ""
    if not client.base_url.strip():
        return "Push: inactive"
    ok, err = client.last_success_at, client.last_error_at
    agent_ok, agent_err = client.agent_success_at, client.agent_error_at
    if agent_ok > 0 and now - agent_ok <= FRESH_WINDOW:
        return "Push: online"
    if agent_err > agent_ok and now - agent_err <= FRESH_WINDOW:
        return "Push: agent-error"
    if ok > 0 and err <= ok and now - ok <= FRESH_WINDOW:
        return "Push: active"
    if not client.enabled:
        return "Push: configured"
    if err > ok:
        return "Push: error"
    if ok == 0:
        return "Push: waiting"
    return "Push: stale"


@dataclass
class RecordingPushClient:
    """
    A push client that keeps events in memory.

    Used by the simulated session; a configured ``base_url`` makes the
    header show push state.
    """
    base_url: str = ""
    enabled: bool = False
    last_success_at: float = 0.0
    last_error_at: float = 0.0
    last_error_message: str = ""
    agent_success_at: float = 0.0
    agent_error_at: float = 0.0

    def __post_init__(self) -> None:
        self.events: list[TagRead] = []

    def enqueue(self, tag: TagRead) -> None:
        if self.enabled:
            self.events.append(tag)

    def test_connectivity(self) -> bool:
        return bool(self.base_url.strip())
