"""Roster providers supplying the active agents for an upload."""
from __future__ import annotations

from typing import Iterable, List, Protocol

from .models import Agent


class RosterProvider(Protocol):
    """Protocol for collaborators that return the agents currently flagged active."""

    def active_agents(self) -> List[Agent]:  # pragma: no cover - runtime protocol
        """Return the active agents in roster order."""


class StaticRosterProvider:
    """Roster held in memory, typically loaded from the configuration file."""

    def __init__(self, agents: Iterable[Agent]) -> None:
        self._agents = list(agents)

    @property
    def agents(self) -> List[Agent]:
        return list(self._agents)

    def active_agents(self) -> List[Agent]:
        return [agent for agent in self._agents if agent.is_active]


__all__ = ["RosterProvider", "StaticRosterProvider"]
