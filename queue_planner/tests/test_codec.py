import json

import pytest

from queue_planner.codec import build_query, extract_assignments, extract_identity, extract_score
from queue_planner.errors import MalformedResponse
from queue_planner.schemas import Item, Node, NodeAssignments, QueueState


def _state():
    return QueueState(
        nodes=[
            Node(name="slave-b", executors=2, labels=["linux", "jdk8"]),
            Node(name="master", executors=1),
        ],
        items=[
            Item(id=7, name="job-b", priority=1),
            Item(id=3, name="job-a", priority=5, labels=["linux"]),
        ],
    )


def test_identity_returns_captured_name():
    assert extract_identity("hudson-queue-planning : alpha on URL http://host/") == "alpha"


def test_identity_requires_banner_at_start():
    assert extract_identity("not a planner") is None
    assert extract_identity("x hudson-queue-planning : alpha on URL http://host/") is None


def test_extract_score_object_and_bare_int():
    assert extract_score('{"score": 42}') == 42
    assert extract_score(b"-3") == -3


@pytest.mark.parametrize("body", ["", "<html>oops</html>", '{"points": 1}', '{"score": "high"}', '{"score": "42"}', '{"score": true}', "[1]"])
def test_extract_score_malformed(body):
    with pytest.raises(MalformedResponse):
        extract_score(body)


def test_extract_assignments():
    body = json.dumps({"solution": [{"id": 3, "node": "master"}, {"id": 7, "node": "slave-b"}]})
    assignments = extract_assignments(body)
    assert len(assignments) == 2
    assert assignments.get(3) == "master"
    assert assignments.get(7) == "slave-b"
    assert assignments.get(99) is None


def test_extract_assignments_malformed():
    with pytest.raises(MalformedResponse):
        extract_assignments("garbage")
    with pytest.raises(MalformedResponse):
        extract_assignments('{"solution": [{"id": "x"}]}')


def test_build_query_is_deterministic_and_ordered():
    assignments = NodeAssignments({7: "master", 3: "slave-b"})
    first = build_query(_state(), assignments)
    second = build_query(_state(), NodeAssignments({3: "slave-b", 7: "master"}))
    assert first == second

    payload = json.loads(first)
    assert [n["name"] for n in payload["nodes"]] == ["master", "slave-b"]
    assert payload["nodes"][1]["labels"] == ["jdk8", "linux"]
    assert [i["id"] for i in payload["items"]] == [3, 7]
    assert payload["assignments"] == [{"id": 3, "node": "slave-b"}, {"id": 7, "node": "master"}]


def test_extract_assignments_rejects_duplicate_ids():
    body = '{"solution": [{"id": 1, "node": "a"}, {"id": 1, "node": "b"}]}'
    with pytest.raises(MalformedResponse):
        extract_assignments(body)
