"""Shared fixtures: both repository backends, a fake AI client and an API client."""
from __future__ import annotations

import random
import sys
import threading
import time
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# make the financeai package importable during local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from financeai.core.config import Settings  # noqa: E402
from financeai.db import models  # noqa: E402
from financeai.db.session import build_engine, build_sessionmaker  # noqa: E402
from financeai.domain.models import ChartData, ChartDataset, InvestmentPlan  # noqa: E402
from financeai.repositories import MemoryRepository, SQLRepository  # noqa: E402
from financeai.services.content_client import (  # noqa: E402
    GeneratedBlogContent,
    GeneratedBudgetPlan,
    GeneratedFinanceAdvice,
    GeneratedStockAnalysis,
    GenerationError,
)


class TickingClock:
    """Returns a strictly increasing timestamp on every call."""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(seconds=1)) -> None:
        self._now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)
        self._step = step
        self._lock = threading.Lock()

    def __call__(self) -> datetime:
        with self._lock:
            self._now += self._step
            return self._now


class FakeContentClient:
    """ContentClient double that records calls and never touches the network."""

    def __init__(self, *, fail: bool = False, delay: float = 0.0) -> None:
        self.fail = fail
        self.delay = delay
        self.calls: dict[str, int] = {}
        self._lock = threading.Lock()

    def _record(self, name: str) -> None:
        with self._lock:
            self.calls[name] = self.calls.get(name, 0) + 1
        if self.delay:
            time.sleep(self.delay)
        if self.fail:
            raise GenerationError(f"Failed to generate {name}")

    def generate_blog_post(self, topic, category):
        self._record("blog")
        return GeneratedBlogContent(
            title=f"A guide to {topic}",
            excerpt=f"Everything about {topic} for Indian investors.",
            content="<h2>Intro</h2>" + "x" * 1000,
            tags=[category.lower(), "india"],
        )

    def generate_finance_advice(self, request):
        self._record("advice")
        return GeneratedFinanceAdvice(
            advice=f"Save {request.income - request.expenses} every month.",
            investment_plan=InvestmentPlan(
                emergency="Six months of expenses in a liquid fund",
                short_term="Short duration debt funds",
                long_term="Index fund SIP",
                tax_saving="ELSS up to the 80C limit",
            ),
        )

    def generate_stock_analysis(self, request):
        self._record("stock")
        return GeneratedStockAnalysis(
            analysis=f"{request.company_name} looks steady.",
            recommendation="HOLD",
            risk_level="MEDIUM",
            target_price=1234.6,
        )

    def generate_budget_plan(self, request):
        self._record("budget")
        labels = list(request.expenses) + ["Savings"]
        data = list(request.expenses.values()) + [request.savings_target]
        return GeneratedBudgetPlan(
            recommendations="Trim discretionary spending.",
            chart_data=ChartData(
                labels=labels,
                datasets=[ChartDataset(label="Monthly Budget (₹)", data=data, background_color=["#3B82F6"] * len(data))],
            ),
        )


def make_settings(**overrides) -> Settings:
    values = dict(
        app_env="test",
        storage_backend="memory",
        database_url="",
        enforce_unique=False,
        seed_admin=False,
        gemini_api_key="",
        gemini_model="gemini-2.5-pro",
        stock_analysis_dedupe=True,
        log_level="WARNING",
        cors_origins=(),
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture()
def clock():
    return TickingClock()


@pytest.fixture()
def sql_session_factory(tmp_path):
    """Temporary SQLite database with all tables; engine disposed on teardown."""
    db_file = tmp_path / "test.db"
    engine = build_engine(f"sqlite:///{db_file}")
    models.Base.metadata.create_all(bind=engine)
    yield build_sessionmaker(engine)
    models.Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def repo(request, clock):
    if request.param == "memory":
        yield MemoryRepository(seed_admin=False, clock=clock)
        return
    factory = request.getfixturevalue("sql_session_factory")
    yield SQLRepository(factory, clock=clock)


@pytest.fixture()
def fake_client():
    return FakeContentClient()


@pytest.fixture()
def api(clock, fake_client):
    from fastapi.testclient import TestClient

    from financeai.app import create_app

    app = create_app(
        make_settings(),
        repository=MemoryRepository(seed_admin=False, clock=clock),
        content_client=fake_client,
        rng=random.Random(7),
    )
    with TestClient(app) as client:
        yield client
