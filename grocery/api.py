"""
FastAPI app entry point aggregating routers under grocery/routes.
Keep as `uvicorn grocery.api:app`.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI

from .db import seed_demo_data_enabled
from .logs import ensure_log_schema, LogContext
from .migrations.grocery_list_item_schema import bootstrap
from .routes.base import APP_NAME, APP_VERSION

logger = logging.getLogger(__name__)

app = FastAPI(title=APP_NAME, version=APP_VERSION)


@app.on_event("startup")
def on_startup():
    ensure_log_schema()
    try:
        res = bootstrap(seed=seed_demo_data_enabled())
        logger.info(f"grocery_list_item schema ready, seeded={res['seeded']}")
    except Exception as e:
        LogContext("STARTUP").write("ERROR", f"grocery_list_item_bootstrap_failed: {e}")
        raise


from .routes import base as base_routes
from .routes import grocery_list_items as grocery_list_items_routes
from .routes import logs as logs_routes

app.include_router(base_routes.router)
app.include_router(grocery_list_items_routes.router)
app.include_router(logs_routes.router)
