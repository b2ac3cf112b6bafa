"""Planner HTTP router — generate, aggregate, and rehydrate plans."""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from functools import lru_cache
from typing import Any, TypeVar

from fastapi import APIRouter, Body, Depends, HTTPException, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import Caller, require_caller
from app.config import settings
from app.db import get_session
from app.planner.aggregator import aggregate, summarize_plan
from app.planner.catalog import list_equipment, list_goals
from app.planner.client import OpenAIPlanClient, PlanGenerator
from app.planner.errors import InvalidProfile
from app.planner.models import DayAggregate, ErrorResponse, RawPlan, UserProfile, WeeklySummary
from app.planner.pipeline import generate_plan
from app.planner.request_builder import profile_from_payload
from app.planner.store import PLAN_SLOT, PROFILE_SLOT, PlanStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/planner", tags=["planner"])

T = TypeVar("T")

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Incomplete or invalid profile"},
    502: {"model": ErrorResponse, "description": "Generation failed or returned an unusable plan"},
    503: {"model": ErrorResponse, "description": "Generation service not configured or unreachable"},
    504: {"model": ErrorResponse, "description": "Generation timed out"},
}


@lru_cache(maxsize=1)
def get_plan_generator() -> PlanGenerator:
    """One client per process so the SDK's connection pool is shared."""
    return OpenAIPlanClient.from_settings()


async def get_plan_store(
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(require_caller),
) -> PlanStore:
    return PlanStore(session, caller.client_id)


async def _best_effort(op: Awaitable[T], what: str) -> T | None:
    """Run a store operation; a database failure degrades to None."""
    try:
        return await op
    except (SQLAlchemyError, OSError):
        logger.warning("Plan store unavailable while handling %s", what, exc_info=True)
        return None


async def _stored_plan(store: PlanStore) -> RawPlan:
    plan = await _best_effort(store.load_plan(), "load plan")
    if plan is None:
        raise HTTPException(status_code=404, detail="No saved plan")
    return plan


# ---------------------------------------------------------------------------
# /planner/options
# ---------------------------------------------------------------------------


@router.get("/options")
async def options(
    _: Caller = Depends(require_caller),
) -> dict:
    return {
        "goals": [{"value": g.value.value, "label": g.label, "description": g.description} for g in list_goals()],
        "equipment": [{"value": e.value, "label": e.label} for e in list_equipment()],
    }


# ---------------------------------------------------------------------------
# /planner/generate
# ---------------------------------------------------------------------------


@router.post("/generate", response_model=RawPlan, responses=ERROR_RESPONSES)
async def generate(
    response: Response,
    payload: Any = Body(...),
    generator: PlanGenerator = Depends(get_plan_generator),
    store: PlanStore = Depends(get_plan_store),
) -> RawPlan:
    profile = profile_from_payload(payload)
    missing = profile.missing_fields()
    if missing:
        raise InvalidProfile(missing)

    await _best_effort(store.save_profile(profile), "save profile")

    parsed = await generate_plan(
        profile,
        generator,
        deficit_kcal=settings.fat_loss_deficit_kcal,
        timeout=settings.openai_timeout_seconds,
    )

    await _best_effort(store.save_plan(parsed.plan), "save plan")
    response.headers["X-Plan-Dropped-Entries"] = str(parsed.dropped)
    return parsed.plan


# ---------------------------------------------------------------------------
# Aggregation of a caller-supplied plan
# ---------------------------------------------------------------------------


@router.post("/days", response_model=list[DayAggregate])
async def days(
    plan: RawPlan,
    _: Caller = Depends(require_caller),
) -> list[DayAggregate]:
    return aggregate(plan)


@router.post("/summary", response_model=WeeklySummary)
async def summary(
    plan: RawPlan,
    _: Caller = Depends(require_caller),
) -> WeeklySummary:
    return summarize_plan(plan)


# ---------------------------------------------------------------------------
# Stored plan / profile
# ---------------------------------------------------------------------------


@router.get("/plan", response_model=RawPlan)
async def latest_plan(
    store: PlanStore = Depends(get_plan_store),
) -> RawPlan:
    return await _stored_plan(store)


@router.get("/plan/days", response_model=list[DayAggregate])
async def latest_plan_days(
    store: PlanStore = Depends(get_plan_store),
) -> list[DayAggregate]:
    return aggregate(await _stored_plan(store))


@router.get("/plan/summary", response_model=WeeklySummary)
async def latest_plan_summary(
    store: PlanStore = Depends(get_plan_store),
) -> WeeklySummary:
    return summarize_plan(await _stored_plan(store))


@router.delete("/plan", status_code=204)
async def clear_plan(
    store: PlanStore = Depends(get_plan_store),
) -> Response:
    await _best_effort(store.remove(PLAN_SLOT), "clear plan")
    return Response(status_code=204)


@router.get("/profile", response_model=UserProfile)
async def latest_profile(
    store: PlanStore = Depends(get_plan_store),
) -> UserProfile:
    profile = await _best_effort(store.load_profile(), "load profile")
    if profile is None:
        raise HTTPException(status_code=404, detail="No saved profile")
    return profile


@router.delete("/profile", status_code=204)
async def clear_profile(
    store: PlanStore = Depends(get_plan_store),
) -> Response:
    await _best_effort(store.remove(PROFILE_SLOT), "clear profile")
    return Response(status_code=204)


@router.delete("/state", status_code=204)
async def clear_state(
    store: PlanStore = Depends(get_plan_store),
) -> Response:
    await _best_effort(store.clear(), "clear state")
    return Response(status_code=204)
