import httpx

from queue_planner import main as entrypoint


def _client(banner: str):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=banner)

    return lambda cfg: httpx.Client(transport=httpx.MockTransport(handler))


def test_main_reports_planner(monkeypatch, caplog):
    monkeypatch.setattr(entrypoint, "build_http_client", _client("hudson-queue-planning : alpha on URL x"))
    with caplog.at_level("INFO", logger="queue-planner"):
        assert entrypoint.main() == 0
    assert "name=alpha" in caplog.text


def test_main_fails_for_non_planner(monkeypatch):
    monkeypatch.setattr(entrypoint, "build_http_client", _client("not a planner"))
    assert entrypoint.main() == 1
