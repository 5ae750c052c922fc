from __future__ import annotations

"""
File: queue_planner/fake_planner.py
Purpose: In-process FastAPI planner speaking the hudson-queue-planning protocol.
Key responsibilities:
- Serve the /info identity banner.
- Start/update/stop an in-memory planning session (POST/PUT/DELETE).
- Return a greedy solution and its score (GET).
Key entrypoints:
- create_app()
"""

from dataclasses import dataclass, field
import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from queue_planner.schemas import Assignment, Item, Node, ScoreResponse, SolutionResponse

logger = logging.getLogger("fake-planner")

PREFIX = "/rest/hudsonQueue"


class QueryRequest(BaseModel):
    """Body posted by PlannerClient.queue()."""
    nodes: list[Node] = Field(default_factory=list)
    items: list[Item] = Field(default_factory=list)
    assignments: list[Assignment] = Field(default_factory=list)


@dataclass
class PlannerSession:
    """In-memory state of the single planning session."""
    running: bool = False
    query: QueryRequest = field(default_factory=QueryRequest)
    updates: int = 0


def plan(query: QueryRequest) -> tuple[list[Assignment], int]:
    """Greedy placement: highest priority first, onto the matching node with most free executors.

    Returns the assignments and the score (minus one per item left unplaced).
    """
    free = {node.name: node.executors for node in query.nodes}
    labels = {node.name: set(node.labels) for node in query.nodes}
    placed: list[Assignment] = []
    unplaced = 0
    for item in sorted(query.items, key=lambda i: (-i.priority, i.id)):
        candidates = [
            name for name in sorted(free)
            if free[name] > 0 and set(item.labels) <= labels[name]
        ]
        if not candidates:
            unplaced += 1
            continue
        best = max(candidates, key=lambda name: free[name])
        free[best] -= 1
        placed.append(Assignment(id=item.id, node=best))
    placed.sort(key=lambda a: a.id)
    return placed, -unplaced


def create_app(name: str = "alpha") -> FastAPI:
    """Build a planner app announcing itself as `name`."""
    app = FastAPI(title="fake-queue-planner", version="1.0.0")
    session = PlannerSession()
    app.state.session = session

    def require_running() -> None:
        if not session.running:
            raise HTTPException(status_code=404, detail="planner not running")

    @app.get(PREFIX + "/info", response_class=PlainTextResponse)
    def info(request: Request) -> str:
        return f"hudson-queue-planning : {name} on URL {request.base_url}"

    @app.post(PREFIX)
    def start(query: QueryRequest) -> dict[str, str]:
        if session.running:
            raise HTTPException(status_code=409, detail="planner already running")
        session.running = True
        session.query = query
        logger.info("planning started items=%s", len(query.items))
        return {"status": "started"}

    @app.put(PREFIX)
    def update(query: QueryRequest) -> dict[str, str]:
        require_running()
        session.query = query
        session.updates += 1
        return {"status": "updated"}

    @app.get(PREFIX, response_model=SolutionResponse)
    def solution() -> SolutionResponse:
        require_running()
        assignments, _ = plan(session.query)
        return SolutionResponse(solution=assignments)

    @app.get(PREFIX + "/score", response_model=ScoreResponse)
    def score() -> ScoreResponse:
        require_running()
        _, value = plan(session.query)
        return ScoreResponse(score=value)

    @app.delete(PREFIX)
    def stop() -> dict[str, str]:
        require_running()
        session.running = False
        logger.info("planning stopped")
        return {"status": "stopped"}

    return app
