"""FastAPI dashboard over a StatusStore snapshot."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import datetime, timedelta, timezone
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from sitewatch.config import SitewatchConfig
from sitewatch.core.history import encode_status
from sitewatch.core.store import StatusStore
from sitewatch.models import StatusClass, TargetStatus

logger = logging.getLogger("sitewatch.web")

WEB_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = WEB_DIR / "templates"
DEFAULT_STATIC_DIR = WEB_DIR / "static"


def status_class(code: int) -> str:
    """CSS class for a status code; empty when the code has no classification."""
    cls = StatusClass.for_code(code)
    return f"status-{cls.value}" if cls is not StatusClass.NONE else ""


def latency_ms(latency: timedelta) -> str:
    return f"{latency / timedelta(milliseconds=1):.1f} ms"


def ordered_statuses(
    snapshot: Mapping[str, TargetStatus], order: Sequence[str] = ()
) -> list[TargetStatus]:
    """Configured targets first (in configured order), then any others by URL."""
    rank = {t: i for i, t in enumerate(order)}
    return sorted(
        snapshot.values(),
        key=lambda s: (rank.get(s.target, len(rank)), s.target),
    )


def create_app(store: StatusStore, config: SitewatchConfig | None = None) -> FastAPI:
    """Build the dashboard application bound to ``store``."""
    config = config or SitewatchConfig()
    static_dir = Path(config.server.static_dir) if config.server.static_dir else DEFAULT_STATIC_DIR
    if not static_dir.is_dir():
        raise RuntimeError(f"Static directory does not exist: {static_dir}")

    app = FastAPI(title="sitewatch")
    app.mount("/static", StaticFiles(directory=static_dir), name="static")

    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
    templates.env.filters["status_class"] = status_class
    templates.env.filters["latency_ms"] = latency_ms

    @app.get("/", response_class=HTMLResponse)
    def index(request: Request):
        statuses = ordered_statuses(store.snapshot(), config.poll.targets)
        return templates.TemplateResponse(
            request,
            "index.html",
            {
                "statuses": statuses,
                "history": {s.target: encode_status(s)["history"] for s in statuses},
                "interval": config.poll.interval_seconds,
            },
        )

    @app.get("/api/status", response_class=JSONResponse)
    def api_status():
        statuses = ordered_statuses(store.snapshot(), config.poll.targets)
        return {
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "targets": [
                {**encode_status(s), "status_class": s.status_class.value}
                for s in statuses
            ],
        }

    return app
