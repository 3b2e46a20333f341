from __future__ import annotations

import random
import threading

import pytest

from financeai.domain.validation import BudgetPlanRequest, FinanceAdviceRequest, StockAnalysisRequest
from financeai.repositories import MemoryRepository
from financeai.services.ai_tools_service import AIToolsService
from financeai.services.content_client import GenerationError

from conftest import FakeContentClient


def _service(repo, client, **kwargs):
    return AIToolsService(repo, client, rng=random.Random(3), **kwargs)


def test_stock_analysis_reuses_stored_record(repo, fake_client):
    service = _service(repo, fake_client)

    first = service.stock_analysis(StockAnalysisRequest(symbol="reliance", company_name="Reliance Industries"))
    second = service.stock_analysis(StockAnalysisRequest(symbol="RELIANCE", company_name="Reliance Industries"))

    assert first.symbol == "RELIANCE"
    assert second.id == first.id
    assert fake_client.calls == {"stock": 1}
    assert 100 <= first.current_price < 1100
    assert first.target_price == 1235


def _hammer(service, symbol, workers=6):
    barrier = threading.Barrier(workers)
    results = []

    def worker():
        barrier.wait()
        results.append(service.stock_analysis(StockAnalysisRequest(symbol=symbol, company_name="HDFC Bank")))

    threads = [threading.Thread(target=worker) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return results


def test_concurrent_requests_for_new_symbol_generate_once(clock):
    repo = MemoryRepository(seed_admin=False, clock=clock)
    client = FakeContentClient(delay=0.05)
    service = _service(repo, client, dedupe=True)

    results = _hammer(service, "HDFCBANK")

    assert client.calls == {"stock": 1}
    assert len({r.id for r in results}) == 1
    assert len(repo.get_all_stock_analyses()) == 1


def test_without_dedupe_concurrent_requests_may_duplicate(clock):
    # the unlocked read-then-generate path: every racing request reaches the model
    repo = MemoryRepository(seed_admin=False, clock=clock)
    client = FakeContentClient(delay=0.05)
    service = _service(repo, client, dedupe=False)

    _hammer(service, "HDFCBANK")

    assert client.calls["stock"] > 1
    assert len(repo.get_all_stock_analyses()) == client.calls["stock"]


def test_finance_advice_is_persisted(repo, fake_client):
    service = _service(repo, fake_client)

    advice = service.finance_advice(
        FinanceAdviceRequest(income=100000, expenses=55000.4, savings_goal=1000000, risk_tolerance="high"),
        user_id="u42",
    )

    assert advice.expenses == 55000
    assert advice.investment_plan.long_term == "Index fund SIP"
    assert repo.get_finance_advice_by_user_id("u42")[0].id == advice.id


def test_budget_plan_is_persisted_with_chart(repo, fake_client):
    service = _service(repo, fake_client)

    plan = service.budget_plan(
        BudgetPlanRequest(monthly_income=75000, expenses={"rent": 20000, "food": 10000}, savings_target=20000)
    )

    assert plan.monthly_income == 75000
    assert plan.chart_data.labels == ["rent", "food", "Savings"]
    assert plan.chart_data.datasets[0].data == [20000, 10000, 20000]


def test_generation_failure_persists_nothing(repo):
    service = _service(repo, FakeContentClient(fail=True))

    with pytest.raises(GenerationError):
        service.stock_analysis(StockAnalysisRequest(symbol="ITC", company_name="ITC Ltd"))

    assert repo.get_all_stock_analyses() == []


def test_symbol_locks_are_released_after_analysis(clock):
    repo = MemoryRepository(seed_admin=False, clock=clock)
    service = _service(repo, FakeContentClient(), dedupe=True)

    service.stock_analysis(StockAnalysisRequest(symbol="TCS", company_name="Tata Consultancy Services"))
    assert len(service._symbol_locks) == 0

    failing = _service(repo, FakeContentClient(fail=True), dedupe=True)
    with pytest.raises(GenerationError):
        failing.stock_analysis(StockAnalysisRequest(symbol="INFY", company_name="Infosys"))
    assert len(failing._symbol_locks) == 0
