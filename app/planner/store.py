"""Plan store — last profile and last plan per client, in planner_state.

Table: planner_state
  client_id (text), slot (text), payload (text, JSON), updated_at (timestamptz)
  PRIMARY KEY (client_id, slot)

Best-effort: a missing or corrupt slot reads as None, never raises.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.planner.models import RawPlan, UserProfile

logger = logging.getLogger(__name__)

PROFILE_SLOT = "profile"
PLAN_SLOT = "plan"
DEFAULT_CLIENT_ID = "default"


class PlanStore:
    def __init__(self, session: AsyncSession, client_id: str = DEFAULT_CLIENT_ID) -> None:
        self.session = session
        self.client_id = client_id

    async def get(self, slot: str) -> Any | None:
        """Decoded JSON payload for a slot; None when absent or not valid JSON."""
        result = await self.session.execute(
            text("SELECT payload FROM planner_state WHERE client_id = :client_id AND slot = :slot"),
            {"client_id": self.client_id, "slot": slot},
        )
        row = result.fetchone()
        if row is None:
            return None
        try:
            return json.loads(row[0])
        except (TypeError, ValueError):
            logger.warning("Discarding corrupt %s slot for client %s", slot, self.client_id)
            await self.remove(slot)
            return None

    async def set(self, slot: str, value: Any) -> None:
        await self.session.execute(
            text(
                "INSERT INTO planner_state (client_id, slot, payload, updated_at) "
                "VALUES (:client_id, :slot, :payload, now()) "
                "ON CONFLICT (client_id, slot) "
                "DO UPDATE SET payload = EXCLUDED.payload, updated_at = now()"
            ),
            {"client_id": self.client_id, "slot": slot, "payload": json.dumps(value)},
        )
        await self.session.commit()

    async def remove(self, slot: str) -> None:
        await self.session.execute(
            text("DELETE FROM planner_state WHERE client_id = :client_id AND slot = :slot"),
            {"client_id": self.client_id, "slot": slot},
        )
        await self.session.commit()

    # -- typed slots ---------------------------------------------------------

    async def _load(self, slot: str, model: type[UserProfile] | type[RawPlan]) -> Any | None:
        data = await self.get(slot)
        if data is None:
            return None
        try:
            return model.model_validate(data)
        except ValidationError:
            logger.warning("Stored %s for client %s no longer validates; discarding", slot, self.client_id)
            await self.remove(slot)
            return None

    async def load_profile(self) -> UserProfile | None:
        return await self._load(PROFILE_SLOT, UserProfile)

    async def save_profile(self, profile: UserProfile) -> None:
        await self.set(PROFILE_SLOT, profile.model_dump(mode="json"))

    async def load_plan(self) -> RawPlan | None:
        return await self._load(PLAN_SLOT, RawPlan)

    async def save_plan(self, plan: RawPlan) -> None:
        await self.set(PLAN_SLOT, plan.model_dump(mode="json", by_alias=True))

    async def clear(self) -> None:
        """Forget everything stored for this client."""
        await self.session.execute(
            text("DELETE FROM planner_state WHERE client_id = :client_id AND slot IN (:profile, :plan)"),
            {"client_id": self.client_id, "profile": PROFILE_SLOT, "plan": PLAN_SLOT},
        )
        await self.session.commit()
