import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.config import settings
from app.db import ensure_schema
from app.planner.errors import PlanError
from app.planner.router import router as planner_router

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    if settings.store_auto_create:
        await ensure_schema()
    yield


app = FastAPI(title="FitForge Planner", version="0.1.0", lifespan=lifespan)
app.include_router(planner_router)


@app.exception_handler(PlanError)
async def plan_error_handler(request: Request, exc: PlanError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", exc.__class__.__name__, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.get("/")
async def root() -> dict:
    return {
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "planner": {
            "options": "/planner/options",
            "generate": "/planner/generate",
            "days": "/planner/days",
            "summary": "/planner/summary",
            "plan": "/planner/plan",
            "plan_days": "/planner/plan/days",
            "plan_summary": "/planner/plan/summary",
            "profile": "/planner/profile",
            "state": "/planner/state",
        },
    }


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
