"""the beautiful world start from here."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from commitmail.config import settings
from commitmail.db import init_db
from commitmail.routers import harness, hook, info

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

init_db()

app = FastAPI(title="GitHub → mail (push & commit comment notifications)")

app.include_router(info.router)
app.include_router(hook.router)
app.include_router(harness.router)
