from __future__ import annotations

"""
File: queue_planner/schemas.py
Purpose: Pydantic models for the planner request/response contracts.
Key responsibilities:
- Describe the queue state sent to the planner (nodes + waiting items).
- Describe node assignments returned by the planner.
Key entrypoints:
- QueueState, NodeAssignments
"""

from typing import Iterator, Optional

from pydantic import BaseModel, Field, RootModel, StrictInt


class Node(BaseModel):
    """Execution node able to take queued items."""
    name: str = Field(min_length=1)
    executors: int = Field(default=1, ge=1)
    labels: list[str] = Field(default_factory=list)


class Item(BaseModel):
    """Work item waiting in the queue."""
    id: int
    name: str
    priority: int = 0
    labels: list[str] = Field(default_factory=list)


class QueueState(BaseModel):
    """Snapshot of the scheduling input handed to the remote planner."""
    nodes: list[Node] = Field(default_factory=list)
    items: list[Item] = Field(default_factory=list)


class NodeAssignments(RootModel[dict[int, str]]):
    """Mapping of queued item ids to node names."""
    root: dict[int, str] = Field(default_factory=dict)

    def get(self, item_id: int) -> Optional[str]:
        return self.root.get(item_id)

    def items(self):
        return self.root.items()

    def __len__(self) -> int:
        return len(self.root)

    def __iter__(self) -> Iterator[int]:  # type: ignore[override]
        return iter(self.root)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self.root


class Assignment(BaseModel):
    """Single wire entry of a solution or query payload."""
    id: int
    node: str


class SolutionResponse(BaseModel):
    """Body returned by GET on the planner resource."""
    solution: list[Assignment] = Field(default_factory=list)


class ScoreResponse(BaseModel):
    """Body returned by GET on the score resource."""
    score: StrictInt
