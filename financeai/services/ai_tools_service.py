"""
AI calculators: finance advice, stock analysis and budget planning.

Generated results are persisted before being returned. Stock analyses are
reused per symbol; with ``dedupe`` on, concurrent requests for the same
unseen symbol wait on a per-symbol lock so the model is called once per
process.
"""

from __future__ import annotations

import logging
import random
import threading
import weakref
from typing import Optional

from financeai.domain.models import (
    BudgetPlan,
    BudgetPlanCreate,
    FinanceAdvice,
    FinanceAdviceCreate,
    StockAnalysis,
    StockAnalysisCreate,
)
from financeai.domain.validation import BudgetPlanRequest, FinanceAdviceRequest, StockAnalysisRequest
from financeai.repositories import Repository
from financeai.services.content_client import ContentClient

logger = logging.getLogger(__name__)

MOCK_PRICE_MIN = 100
MOCK_PRICE_SPAN = 1000


class AIToolsService:
    def __init__(
        self,
        repository: Repository,
        content_client: ContentClient,
        *,
        dedupe: bool = True,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.repository = repository
        self.content_client = content_client
        self.dedupe = dedupe
        self._rng = rng or random.Random()
        self._symbol_locks: weakref.WeakValueDictionary[str, threading.Lock] = weakref.WeakValueDictionary()
        self._locks_guard = threading.Lock()

    def finance_advice(self, request: FinanceAdviceRequest, user_id: Optional[str] = None) -> FinanceAdvice:
        generated = self.content_client.generate_finance_advice(request)
        return self.repository.create_finance_advice(
            FinanceAdviceCreate(
                user_id=user_id,
                income=round(request.income),
                expenses=round(request.expenses),
                savings_goal=round(request.savings_goal),
                risk_tolerance=request.risk_tolerance,
                advice=generated.advice,
                investment_plan=generated.investment_plan,
            )
        )

    def _symbol_lock(self, symbol: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._symbol_locks.get(symbol)
            if lock is None:
                lock = self._symbol_locks[symbol] = threading.Lock()
            return lock

    def stock_analysis(self, request: StockAnalysisRequest) -> StockAnalysis:
        existing = self.repository.get_stock_analysis(request.symbol)
        if existing:
            return existing
        if not self.dedupe:
            return self._analyse(request)
        with self._symbol_lock(request.symbol.upper()):
            existing = self.repository.get_stock_analysis(request.symbol)
            if existing:
                return existing
            return self._analyse(request)

    def _analyse(self, request: StockAnalysisRequest) -> StockAnalysis:
        generated = self.content_client.generate_stock_analysis(request)
        analysis = self.repository.create_stock_analysis(
            StockAnalysisCreate(
                symbol=request.symbol.upper(),
                company_name=request.company_name,
                # no market data source; the price shown next to the analysis is synthetic
                current_price=self._rng.randrange(MOCK_PRICE_SPAN) + MOCK_PRICE_MIN,
                analysis=generated.analysis,
                recommendation=generated.recommendation,
                risk_level=generated.risk_level,
                target_price=round(generated.target_price),
            )
        )
        logger.info("Stored stock analysis for %s", analysis.symbol)
        return analysis

    def list_stock_analyses(self) -> list[StockAnalysis]:
        return self.repository.get_all_stock_analyses()

    def budget_plan(self, request: BudgetPlanRequest, user_id: Optional[str] = None) -> BudgetPlan:
        generated = self.content_client.generate_budget_plan(request)
        return self.repository.create_budget_plan(
            BudgetPlanCreate(
                user_id=user_id,
                monthly_income=round(request.monthly_income),
                expenses=dict(request.expenses),
                savings_target=round(request.savings_target),
                recommendations=generated.recommendations,
                chart_data=generated.chart_data,
            )
        )
