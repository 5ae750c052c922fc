from __future__ import annotations

"""
File: queue_planner/planner_client.py
Purpose: HTTP proxy for a remote hudson-queue-planning service.
Key responsibilities:
- Verify the endpoint identifies itself as a planner before first use.
- Track the remote planner lifecycle (not started -> running -> stopped).
- Map queue/score/solution/stop onto POST/PUT/GET/DELETE calls.
- Wrap httpx failures into PlannerError subclasses.
Key entrypoints:
- PlannerClient
- planner_session()
"""

from contextlib import contextmanager
from enum import Enum
import logging
from typing import Iterator, Optional

import httpx

from queue_planner import codec
from queue_planner.errors import (
    IllegalLifecycle,
    IncompatibleService,
    InvalidArgument,
    TransportFailure,
)
from queue_planner.schemas import NodeAssignments, QueueState
from queue_planner.settings import build_http_client

logger = logging.getLogger("planner-client")

PREFIX = "/rest/hudsonQueue"
JSON_TYPE = "application/json"
TEXT_TYPE = "text/plain"


class LifecycleState(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    STOPPED = "stopped"


class Operation(str, Enum):
    QUEUE = "queue"
    SCORE = "score"
    SOLUTION = "solution"
    STOP = "stop"


# (state, operation) -> next state; pairs missing here are forbidden.
TRANSITIONS: dict[tuple[LifecycleState, Operation], LifecycleState] = {
    (LifecycleState.NOT_STARTED, Operation.QUEUE): LifecycleState.RUNNING,
    (LifecycleState.RUNNING, Operation.QUEUE): LifecycleState.RUNNING,
    (LifecycleState.RUNNING, Operation.SCORE): LifecycleState.RUNNING,
    (LifecycleState.RUNNING, Operation.SOLUTION): LifecycleState.RUNNING,
    (LifecycleState.NOT_STARTED, Operation.STOP): LifecycleState.STOPPED,
    (LifecycleState.RUNNING, Operation.STOP): LifecycleState.STOPPED,
    (LifecycleState.STOPPED, Operation.STOP): LifecycleState.STOPPED,
}

_FORBIDDEN_MESSAGES = {
    Operation.QUEUE: "Remote planner already stopped",
    Operation.SCORE: "Remote planner not running",
    Operation.SOLUTION: "Remote planner not running",
}


def _validate_endpoint(endpoint: str | httpx.URL | None) -> httpx.URL:
    if endpoint is None or str(endpoint) == "":
        raise InvalidArgument("No URL provided")
    try:
        url = httpx.URL(endpoint)
    except (httpx.InvalidURL, TypeError) as exc:
        raise InvalidArgument(f"Invalid planner URL: {endpoint!r}") from exc
    if not url.is_absolute_url or not url.host:
        raise InvalidArgument(f"Planner URL must be absolute: {endpoint!r}")
    return url


class PlannerClient:
    """Remote proxy for a single planner instance served over REST.

    Construction probes ``<prefix>/info`` and fails with IncompatibleService
    when the banner does not match, so an instance always talks to a planner.
    Use it as a context manager: a planner still running when the block
    exits is stopped there.
    """

    def __init__(self, endpoint: str | httpx.URL, http: httpx.Client) -> None:
        self._endpoint = _validate_endpoint(endpoint)
        if http is None:
            raise InvalidArgument("No http client provided")
        self._http = http
        self._name = self._fetch_name()
        self._state = LifecycleState.NOT_STARTED

    @property
    def remote_url(self) -> httpx.URL:
        return self._endpoint

    @property
    def name(self) -> str:
        return self._name

    @property
    def state(self) -> LifecycleState:
        return self._state

    def _fetch_name(self) -> str:
        info = self._send("GET", "/info", accept=TEXT_TYPE).text
        name = codec.extract_identity(info)
        if name is None:
            raise IncompatibleService(info)
        logger.info("planner identified name=%s url=%s", name, self._endpoint)
        return name

    def score(self) -> int:
        """Return the current score of the running planner."""
        self._advance(Operation.SCORE)
        logger.info("getting score url=%s", self._endpoint)
        return codec.extract_score(self._send("GET", "/score", accept=JSON_TYPE).content)

    def solution(self) -> NodeAssignments:
        """Return the node assignments currently proposed by the planner."""
        self._advance(Operation.SOLUTION)
        logger.info("getting solution url=%s", self._endpoint)
        return codec.extract_assignments(self._send("GET", "", accept=JSON_TYPE).content)

    def queue(self, state: QueueState, assignments: NodeAssignments) -> "PlannerClient":
        """Start the remote planner with the queue, or update it when already running."""
        target = self._advance(Operation.QUEUE)
        if assignments is None:
            raise InvalidArgument("No assignments")
        if state is None:
            raise InvalidArgument("No queue state")

        body = codec.build_query(state, assignments)
        if self._state is LifecycleState.RUNNING:
            logger.info("sending queue update url=%s items=%s", self._endpoint, len(state.items))
            self._send("PUT", "", content=body, content_type=JSON_TYPE)
        else:
            logger.info("starting remote planner url=%s items=%s", self._endpoint, len(state.items))
            self._send("POST", "", content=body, content_type=JSON_TYPE)
        self._state = target
        return self

    def stop(self) -> "PlannerClient":
        """Stop the remote planner; stopping twice only logs a warning."""
        if self._state is LifecycleState.STOPPED:
            logger.warning("planner already stopped url=%s", self._endpoint)
            return self

        if self._state is LifecycleState.RUNNING:
            logger.info("stopping remote planner url=%s", self._endpoint)
        # Locally stopped even when the DELETE below fails.
        self._state = self._advance(Operation.STOP)
        self._send("DELETE", "")
        return self

    def __enter__(self) -> "PlannerClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._state is not LifecycleState.RUNNING:
            return
        logger.warning("planner still running at scope exit, stopping url=%s", self._endpoint)
        try:
            self.stop()
        except Exception:  # noqa: BLE001
            logger.exception("failed to stop planner url=%s", self._endpoint)

    def __repr__(self) -> str:
        return f"PlannerClient(name={self._name!r}, url={str(self._endpoint)!r}, state={self._state.value})"

    def _advance(self, op: Operation) -> LifecycleState:
        target = TRANSITIONS.get((self._state, op))
        if target is None:
            raise IllegalLifecycle(_FORBIDDEN_MESSAGES[op], self._state)
        return target

    def _url(self, suffix: str) -> httpx.URL:
        return self._endpoint.join(PREFIX + suffix)

    def _send(
        self,
        method: str,
        suffix: str,
        content: Optional[bytes] = None,
        accept: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> httpx.Response:
        """Issue one request and raise TransportFailure on network or 4xx/5xx errors."""
        url = self._url(suffix)
        headers = {}
        if accept is not None:
            headers["Accept"] = accept
        if content_type is not None:
            headers["Content-Type"] = content_type
        try:
            resp = self._http.request(method, url, content=content, headers=headers)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise TransportFailure(f"{method} {url} failed: {exc}") from exc
        except RuntimeError as exc:
            # httpx raises RuntimeError once the shared client is closed.
            if not self._http.is_closed:
                raise
            raise TransportFailure(f"{method} {url} failed: {exc}") from exc
        return resp


@contextmanager
def planner_session(
    endpoint: str | httpx.URL,
    http: Optional[httpx.Client] = None,
) -> Iterator[PlannerClient]:
    """Yield a PlannerClient that is stopped on every exit path.

    When no http client is given, one is built from settings and closed
    together with the session.
    """
    owned = http is None
    client = build_http_client() if owned else http
    try:
        with PlannerClient(endpoint, client) as planner:
            yield planner
    finally:
        if owned:
            client.close()
