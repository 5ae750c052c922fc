import httpx

from queue_planner.settings import Settings, build_http_client


def test_build_http_client_applies_timeouts():
    cfg = Settings(planner_url="http://planner:8080/", connect_timeout_s=1.5, read_timeout_s=9.0)
    with build_http_client(cfg) as client:
        assert isinstance(client, httpx.Client)
        assert client.timeout.connect == 1.5
        assert client.timeout.read == 9.0
