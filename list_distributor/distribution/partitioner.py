"""Split a record sequence across an ordered roster of agents."""
from __future__ import annotations

from typing import List, Sequence

from ..errors import EmptyRosterError
from ..models import Agent, AgentAssignment, Record


def partition(records: Sequence[Record], agents: Sequence[Agent]) -> List[AgentAssignment]:
    """Hand each agent a contiguous slice of ``records``.

    With ``n`` records and ``k`` agents every agent receives ``n // k``
    records and the first ``n % k`` agents, in roster order, receive one
    more. Slices follow the input order, so concatenating the assignments
    reproduces ``records`` exactly. Agents left without records still get an
    (empty) assignment.
    """

    if not agents:
        raise EmptyRosterError("No active agents found. Please add agents first.")

    base, remainder = divmod(len(records), len(agents))
    assignments: List[AgentAssignment] = []
    start = 0
    for index, agent in enumerate(agents):
        count = base + (1 if index < remainder else 0)
        assignments.append(
            AgentAssignment(
                agent_id=str(agent.id),
                agent_name=str(agent.name),
                records=tuple(records[start : start + count]),
            )
        )
        start += count
    return assignments


__all__ = ["partition"]
