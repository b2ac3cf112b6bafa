"""Generation pipeline: build → generate → validate.

The generation call is the only await. Nothing is returned (and so nothing
can be persisted) until the generated text has been validated; a caller that
cancels mid-flight gets CancelledError and no partial plan.
"""

from __future__ import annotations

import asyncio
import logging

from app.planner.client import PlanGenerator
from app.planner.errors import GenerationTimeout
from app.planner.models import UserProfile
from app.planner.request_builder import DEFAULT_DEFICIT_KCAL, build_request
from app.planner.validator import ParsedPlan, parse_plan

logger = logging.getLogger(__name__)


async def generate_plan(
    profile: UserProfile,
    generator: PlanGenerator,
    *,
    deficit_kcal: float = DEFAULT_DEFICIT_KCAL,
    timeout: float | None = None,
) -> ParsedPlan:
    request = build_request(profile, deficit_kcal=deficit_kcal)

    logger.info("Generating plan (goal=%s)", profile.goal.value)
    try:
        raw_text = await asyncio.wait_for(
            generator.generate(request.instructions, request.user_message),
            timeout=timeout,
        )
    except asyncio.TimeoutError as exc:
        raise GenerationTimeout(f"No response within {timeout:g}s.") from exc

    parsed = parse_plan(raw_text)
    if parsed.dropped:
        logger.warning("Plan generated with %d dropped entries", parsed.dropped)
    return parsed
