from __future__ import annotations

"""
File: queue_planner/main.py
Purpose: Probe the configured planner endpoint and report its identity.
Key entrypoints:
- main()
Config/env vars:
- PLANNER_URL, PLANNER_CONNECT_TIMEOUT_S, PLANNER_READ_TIMEOUT_S, LOG_LEVEL
"""

import logging
import sys

from queue_planner.errors import PlannerError
from queue_planner.planner_client import PlannerClient
from queue_planner.settings import build_http_client, settings

logger = logging.getLogger("queue-planner")


def main() -> int:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s queue-planner %(message)s",
    )
    with build_http_client(settings) as http:
        try:
            planner = PlannerClient(settings.planner_url, http)
        except PlannerError as exc:
            logger.error("planner probe failed url=%s err=%s", settings.planner_url, exc)
            return 1
    logger.info("planner available name=%s url=%s", planner.name, planner.remote_url)
    return 0


if __name__ == "__main__":
    sys.exit(main())
