"""Shared fixtures for the test suite."""

from __future__ import annotations

import json
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from app.db import get_session
from app.main import app
from app.planner.router import get_plan_generator


# ---------------------------------------------------------------------------
# Fake DB session (no real Postgres needed)
# ---------------------------------------------------------------------------

class FakeSession:
    """Minimal stand-in for AsyncSession backing planner_state with a dict.

    Understands the three statement shapes PlanStore issues
    (SELECT / INSERT ... ON CONFLICT / DELETE) keyed by (client_id, slot).
    """

    def __init__(self, rows: dict[tuple[str, str], str] | None = None):
        self.rows = rows if rows is not None else {}
        self.statements: list[str] = []
        self.commits = 0

    async def execute(self, stmt, params=None):
        sql = str(stmt)
        params = params or {}
        self.statements.append(sql)
        key = (params.get("client_id"), params.get("slot"))
        if sql.startswith("SELECT"):
            if key in self.rows:
                return FakeResult([{"payload": self.rows[key]}])
            return FakeResult([])
        if sql.startswith("INSERT"):
            self.rows[key] = params["payload"]
        elif sql.startswith("DELETE"):
            slots = [v for k, v in params.items() if k != "client_id"]
            for slot in slots:
                self.rows.pop((params.get("client_id"), slot), None)
        return FakeResult([])

    async def commit(self):
        self.commits += 1

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        pass


class FakeResult:
    def __init__(self, rows: list[dict[str, Any]]):
        self._rows = rows
        self._keys = list(rows[0].keys()) if rows else []

    def keys(self):
        return self._keys

    def fetchall(self):
        return [tuple(r[k] for k in self._keys) for r in self._rows]

    def fetchone(self):
        rows = self.fetchall()
        return rows[0] if rows else None


# ---------------------------------------------------------------------------
# Fake generation capability
# ---------------------------------------------------------------------------

class FakePlanGenerator:
    """Returns canned text (or raises) and records every request."""

    def __init__(self, text: str | None = None, error: Exception | None = None):
        self.text = text
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def generate(self, instructions: str, user_message: str) -> str:
        self.calls.append((instructions, user_message))
        if self.error is not None:
            raise self.error
        return self.text or ""


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------

def make_workout(day: str = "Mon", burn: float | None = 300, title: str = "Legs", **overrides) -> dict[str, Any]:
    workout: dict[str, Any] = {
        "day": day,
        "title": title,
        "exercises": [{"name": "Squat", "sets": 3, "reps": "10"}],
    }
    if burn is not None:
        workout["burn_kcal_est"] = burn
    workout.update(overrides)
    return workout


def make_meal(
    day: str = "Mon",
    meal: str = "Lunch",
    kcal: float = 400,
    p: float = 30,
    c: float = 40,
    f: float = 10,
    item: str = "Chicken rice bowl",
) -> dict[str, Any]:
    return {"day": day, "meal": meal, "item": item, "kcal": kcal, "macros": {"p": p, "c": c, "f": f}}


def make_plan_payload() -> dict[str, Any]:
    """A small but realistic generated plan: three training days, two days of meals."""
    return {
        "workouts": [
            make_workout("Mon", 300, "Legs"),
            make_workout("Wed", 250, "Push", exercises=[
                {"name": "Push-up", "sets": 4, "reps": "AMRAP"},
                {"name": "Dumbbell press", "sets": 3, "reps": 12},
            ]),
            make_workout("Fri", None, "Mobility"),
        ],
        "meals": [
            make_meal("Mon", "Breakfast", 350, 25, 40, 8, "Greek-yoghurt bowl"),
            make_meal("Mon", "Lunch", 600, 45, 60, 15),
            make_meal("Tue", "Dinner", 700, 50, 70, 20, "Salmon and potatoes"),
        ],
    }


VALID_PROFILE = {"height": 180, "weight": 82.5, "goal": "fat_loss", "equipment": ["dumbbells", "kettlebells"]}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def fake_session():
    """Return an empty FakeSession (seed ``rows`` in tests if needed)."""
    return FakeSession()


@pytest.fixture()
def fake_generator():
    return FakePlanGenerator(text=json.dumps(make_plan_payload()))


@pytest.fixture()
def override_deps(fake_session, fake_generator):
    """Override the FastAPI dependencies so no DB or model service is needed."""
    async def _session():
        yield fake_session

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_plan_generator] = lambda: fake_generator
    yield fake_session
    app.dependency_overrides.clear()


@pytest.fixture()
async def client(override_deps):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
