from __future__ import annotations

import json

import pytest

from financeai.domain.validation import BudgetPlanRequest, StockAnalysisRequest
from financeai.services.content_client import (
    GeminiContentClient,
    GeneratedBudgetPlan,
    GeneratedStockAnalysis,
    GenerationError,
    budget_plan_prompt,
    parse_generated,
)


class _Response:
    def __init__(self, text):
        self.text = text


class _Model:
    """Stands in for genai.GenerativeModel."""

    def __init__(self, text=None, error: Exception | None = None):
        self.text = text
        self.error = error
        self.prompts: list[str] = []
        self.configs: list = []

    def generate_content(self, prompt, generation_config=None):
        self.prompts.append(prompt)
        self.configs.append(generation_config)
        if self.error:
            raise self.error
        return _Response(self.text)


STOCK_JSON = json.dumps(
    {"analysis": "Strong franchise", "recommendation": "BUY", "riskLevel": "LOW", "targetPrice": 1850.5}
)


def test_parse_generated_reads_camel_case_payload():
    result = parse_generated(STOCK_JSON, GeneratedStockAnalysis)

    assert result.recommendation == "BUY"
    assert result.risk_level == "LOW"
    assert result.target_price == 1850.5


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_parse_generated_rejects_empty_text(raw):
    with pytest.raises(GenerationError):
        parse_generated(raw, GeneratedStockAnalysis)


def test_parse_generated_rejects_invalid_json():
    with pytest.raises(GenerationError):
        parse_generated("{not json", GeneratedStockAnalysis)


def test_parse_generated_rejects_schema_mismatch():
    payload = json.dumps({"analysis": "x", "recommendation": "STRONG BUY", "riskLevel": "LOW", "targetPrice": 1})
    with pytest.raises(GenerationError):
        parse_generated(payload, GeneratedStockAnalysis)


def test_client_requests_json_and_embeds_parameters():
    model = _Model(STOCK_JSON)
    client = GeminiContentClient("key", model=model)

    result = client.generate_stock_analysis(StockAnalysisRequest(symbol="INFY", company_name="Infosys"))

    assert result.analysis == "Strong franchise"
    assert "INFY" in model.prompts[0]
    assert "Infosys" in model.prompts[0]
    assert model.configs[0].response_mime_type == "application/json"


def test_client_wraps_remote_failure():
    client = GeminiContentClient("key", model=_Model(error=RuntimeError("quota exceeded")))

    with pytest.raises(GenerationError):
        client.generate_blog_post("ELSS funds", "tax")


def test_client_wraps_empty_response():
    client = GeminiContentClient("key", model=_Model(""))

    with pytest.raises(GenerationError):
        client.generate_blog_post("ELSS funds", "tax")


def test_budget_plan_is_parsed_with_chart_data():
    payload = {
        "recommendations": "Spend less on food",
        "chartData": {
            "labels": ["Rent", "Savings"],
            "datasets": [{"label": "Monthly Budget (₹)", "data": [20000, 20000], "backgroundColor": ["#3B82F6", "#059669"]}],
        },
    }
    client = GeminiContentClient("key", model=_Model(json.dumps(payload)))

    plan = client.generate_budget_plan(
        BudgetPlanRequest(monthly_income=75000, expenses={"rent": 20000}, savings_target=20000)
    )

    assert isinstance(plan, GeneratedBudgetPlan)
    assert plan.chart_data.datasets[0].background_color == ["#3B82F6", "#059669"]


def test_budget_prompt_reports_totals():
    prompt = budget_plan_prompt(
        BudgetPlanRequest(monthly_income=75000, expenses={"rent": 20000, "food": 10000}, savings_target=20000)
    )

    assert "₹30,000" in prompt
    assert "₹45,000" in prompt
