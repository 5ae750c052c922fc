from __future__ import annotations

"""
File: queue_planner/codec.py
Purpose: Encode planner requests and decode planner responses.
Key responsibilities:
- Parse the identity banner served on /info.
- Decode score and solution payloads.
- Build a deterministic query body from queue state + assignments.
"""

import json
import re
from typing import Optional

from pydantic import ValidationError

from queue_planner.errors import MalformedResponse
from queue_planner.schemas import NodeAssignments, QueueState, ScoreResponse, SolutionResponse

IDENTITY_PATTERN = re.compile(r"^hudson-queue-planning : (.*?) on URL")


def extract_identity(body: str) -> Optional[str]:
    """Return the planner name announced by the banner, or None when it does not match."""
    match = IDENTITY_PATTERN.match(body)
    if match is None:
        return None
    return match.group(1)


def _load_json(body: str | bytes):
    try:
        return json.loads(body)
    except (TypeError, ValueError) as exc:
        raise MalformedResponse(f"response is not JSON: {body!r}") from exc


def extract_score(body: str | bytes) -> int:
    """Decode `{"score": n}` (or a bare JSON integer) into an int."""
    data = _load_json(body)
    if isinstance(data, int) and not isinstance(data, bool):
        return data
    try:
        return ScoreResponse.model_validate(data).score
    except ValidationError as exc:
        raise MalformedResponse(f"unexpected score payload: {body!r}") from exc


def extract_assignments(body: str | bytes) -> NodeAssignments:
    """Decode `{"solution": [{"id": .., "node": ..}, ...]}` into NodeAssignments."""
    data = _load_json(body)
    try:
        solution = SolutionResponse.model_validate(data)
    except ValidationError as exc:
        raise MalformedResponse(f"unexpected solution payload: {body!r}") from exc
    mapping = {a.id: a.node for a in solution.solution}
    if len(mapping) != len(solution.solution):
        raise MalformedResponse(f"duplicate item ids in solution: {body!r}")
    return NodeAssignments(mapping)


def build_query(state: QueueState, assignments: NodeAssignments) -> bytes:
    """Serialize queue state and current assignments into one stable JSON body."""
    nodes = sorted(state.nodes, key=lambda n: n.name)
    items = sorted(state.items, key=lambda i: i.id)
    payload = {
        "nodes": [
            {"name": n.name, "executors": n.executors, "labels": sorted(n.labels)}
            for n in nodes
        ],
        "items": [
            {"id": i.id, "name": i.name, "priority": i.priority, "labels": sorted(i.labels)}
            for i in items
        ],
        "assignments": [
            {"id": item_id, "node": node}
            for item_id, node in sorted(assignments.items())
        ],
    }
    return json.dumps(payload, separators=(",", ":"), sort_keys=True).encode("utf-8")
