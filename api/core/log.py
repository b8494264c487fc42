from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.setLevel(level)
    # Uvicorn reloads and repeated create_app() calls must not stack handlers.
    if any(getattr(h, "_posts_api", False) for h in root.handlers):
        return None
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._posts_api = True  # type: ignore[attr-defined]
    root.addHandler(handler)
