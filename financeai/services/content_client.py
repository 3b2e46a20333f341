"""
Generative-AI content client.

Each operation builds a prompt, asks the model for JSON matching a fixed
response schema and parses the text into a typed result. Every failure mode
(remote error, empty text, malformed JSON, schema mismatch) surfaces as a
single GenerationError.
"""

from __future__ import annotations

import json
import logging
from typing import Optional, Protocol, TypeVar

import google.generativeai as genai
from pydantic import BaseModel, Field, ValidationError

from financeai.domain.models import CamelModel, ChartData, InvestmentPlan, Recommendation, RiskLevel
from financeai.domain.validation import BudgetPlanRequest, FinanceAdviceRequest, StockAnalysisRequest

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class GenerationError(Exception):
    """Raised when the model call or the parsing of its answer fails."""


class GeneratedBlogContent(CamelModel):
    title: str
    excerpt: str
    content: str
    tags: list[str] = Field(default_factory=list)


class GeneratedFinanceAdvice(CamelModel):
    advice: str
    investment_plan: InvestmentPlan


class GeneratedStockAnalysis(CamelModel):
    analysis: str
    recommendation: Recommendation
    risk_level: RiskLevel
    target_price: float


class GeneratedBudgetPlan(CamelModel):
    recommendations: str
    chart_data: ChartData


class ContentClient(Protocol):
    def generate_blog_post(self, topic: str, category: str) -> GeneratedBlogContent: ...

    def generate_finance_advice(self, request: FinanceAdviceRequest) -> GeneratedFinanceAdvice: ...

    def generate_stock_analysis(self, request: StockAnalysisRequest) -> GeneratedStockAnalysis: ...

    def generate_budget_plan(self, request: BudgetPlanRequest) -> GeneratedBudgetPlan: ...


def _string() -> dict:
    return {"type": "STRING"}


def _array(items: dict) -> dict:
    return {"type": "ARRAY", "items": items}


def _object(properties: dict) -> dict:
    return {"type": "OBJECT", "properties": properties, "required": list(properties)}


BLOG_SCHEMA = _object(
    {
        "title": _string(),
        "excerpt": _string(),
        "content": _string(),
        "tags": _array(_string()),
    }
)

FINANCE_ADVICE_SCHEMA = _object(
    {
        "advice": _string(),
        "investmentPlan": _object(
            {
                "emergency": _string(),
                "shortTerm": _string(),
                "longTerm": _string(),
                "taxSaving": _string(),
            }
        ),
    }
)

STOCK_ANALYSIS_SCHEMA = _object(
    {
        "analysis": _string(),
        "recommendation": {"type": "STRING", "enum": ["BUY", "SELL", "HOLD"]},
        "riskLevel": {"type": "STRING", "enum": ["LOW", "MEDIUM", "HIGH"]},
        "targetPrice": {"type": "NUMBER"},
    }
)

BUDGET_PLAN_SCHEMA = _object(
    {
        "recommendations": _string(),
        "chartData": _object(
            {
                "labels": _array(_string()),
                "datasets": _array(
                    _object(
                        {
                            "label": _string(),
                            "data": _array({"type": "NUMBER"}),
                            "backgroundColor": _array(_string()),
                        }
                    )
                ),
            }
        ),
    }
)


def parse_generated(raw: Optional[str], result_type: type[T]) -> T:
    """Parse model output text into ``result_type`` or raise GenerationError."""
    if not raw or not raw.strip():
        raise GenerationError("Empty response from AI model")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise GenerationError("AI model returned invalid JSON") from exc
    try:
        return result_type.model_validate(payload)
    except ValidationError as exc:
        raise GenerationError("AI model response did not match the expected schema") from exc


def _rupees(amount: float) -> str:
    return f"₹{amount:,.0f}"


def blog_prompt(topic: str, category: str) -> str:
    return (
        f'Write a comprehensive finance blog post for Indian investors about "{topic}" '
        f"in the {category} category.\n\n"
        "Requirements:\n"
        "- Clear, engaging style for beginner to intermediate investors\n"
        "- Examples from the Indian market (NSE, BSE, Indian companies, INR amounts)\n"
        "- Relevant Indian instruments (SIP, ELSS, PPF, EPF, etc.)\n"
        "- Practical, actionable tips; explain complex terms\n"
        "- Clear headings and sections, 800-1200 words\n\n"
        "Respond as JSON with: title (max 60 characters, SEO friendly), excerpt (150-200 "
        "characters), content (HTML with headings and paragraphs), tags (list of strings)."
    )


def finance_advice_prompt(request: FinanceAdviceRequest) -> str:
    monthly_savings = request.income - request.expenses
    return (
        "As a financial advisor for Indian investors, give personalised advice for:\n\n"
        f"Monthly Income: {_rupees(request.income)}\n"
        f"Monthly Expenses: {_rupees(request.expenses)}\n"
        f"Monthly Savings: {_rupees(monthly_savings)}\n"
        f"Savings Goal: {_rupees(request.savings_goal)}\n"
        f"Risk Tolerance: {request.risk_tolerance}\n\n"
        "Cover emergency fund planning (3-6 months of expenses), tax-saving investments "
        "(80C, ELSS, PPF), short-term options (1-3 years), long-term wealth creation "
        "(5+ years), mutual fund categories with SIP amounts, and asset allocation for "
        "the stated risk tolerance. Use INR amounts.\n\n"
        "Respond as JSON with: advice (500-800 words) and investmentPlan with emergency, "
        "shortTerm, longTerm and taxSaving."
    )


def stock_analysis_prompt(request: StockAnalysisRequest) -> str:
    return (
        "As a stock analyst specialising in Indian markets, analyse:\n\n"
        f"Company: {request.company_name}\n"
        f"Stock Symbol: {request.symbol}\n\n"
        "Cover business fundamentals, financial health, growth prospects, risks and "
        "valuation for Indian retail investors. Be objective and balanced.\n\n"
        "Respond as JSON with: analysis (400-600 words), recommendation (BUY, SELL or "
        "HOLD), riskLevel (LOW, MEDIUM or HIGH) and targetPrice in rupees."
    )


def budget_plan_prompt(request: BudgetPlanRequest) -> str:
    total_expenses = sum(request.expenses.values())
    current_savings = request.monthly_income - total_expenses
    return (
        "As a financial planner, create a budget plan for an Indian household:\n\n"
        f"Monthly Income: {_rupees(request.monthly_income)}\n"
        f"Current Expenses: {_rupees(total_expenses)}\n"
        f"Expense Breakdown: {json.dumps(request.expenses)}\n"
        f"Current Savings: {_rupees(current_savings)}\n"
        f"Savings Target: {_rupees(request.savings_target)}\n\n"
        "Analyse spending, suggest optimisations and strategies to reach the savings "
        "target, emergency fund planning and where to invest any surplus.\n\n"
        "Respond as JSON with: recommendations (400-600 words) and chartData with labels "
        "(expense categories plus Savings) and one dataset labelled 'Monthly Budget (₹)' "
        "holding the amounts and a backgroundColor hex colour per label."
    )


class GeminiContentClient:
    """ContentClient backed by the Google Gemini API."""

    def __init__(self, api_key: str, model_name: str = "gemini-2.5-pro", model=None) -> None:
        if model is None:
            genai.configure(api_key=api_key)
            model = genai.GenerativeModel(model_name)
        self._model = model

    def _generate(self, prompt: str, schema: dict, result_type: type[T], what: str) -> T:
        try:
            response = self._model.generate_content(
                prompt,
                generation_config=genai.GenerationConfig(
                    response_mime_type="application/json",
                    response_schema=schema,
                ),
            )
            raw = response.text
        except Exception as exc:
            logger.exception("%s generation request failed", what)
            raise GenerationError(f"Failed to generate {what}") from exc
        try:
            return parse_generated(raw, result_type)
        except GenerationError:
            logger.exception("%s generation returned unusable output", what)
            raise

    def generate_blog_post(self, topic: str, category: str) -> GeneratedBlogContent:
        return self._generate(blog_prompt(topic, category), BLOG_SCHEMA, GeneratedBlogContent, "blog content")

    def generate_finance_advice(self, request: FinanceAdviceRequest) -> GeneratedFinanceAdvice:
        return self._generate(
            finance_advice_prompt(request), FINANCE_ADVICE_SCHEMA, GeneratedFinanceAdvice, "finance advice"
        )

    def generate_stock_analysis(self, request: StockAnalysisRequest) -> GeneratedStockAnalysis:
        return self._generate(
            stock_analysis_prompt(request), STOCK_ANALYSIS_SCHEMA, GeneratedStockAnalysis, "stock analysis"
        )

    def generate_budget_plan(self, request: BudgetPlanRequest) -> GeneratedBudgetPlan:
        return self._generate(budget_plan_prompt(request), BUDGET_PLAN_SCHEMA, GeneratedBudgetPlan, "budget plan")
