from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Request

from financeai.domain.models import BlogPost, BudgetPlan, FinanceAdvice, StockAnalysis
from financeai.domain.validation import (
    BudgetPlanRequest,
    FinanceAdviceRequest,
    GenerateBlogRequest,
    Invalid,
    StockAnalysisRequest,
    validate_payload,
)
from financeai.routers.common import get_service, invalid_response, message_response
from financeai.services.ai_tools_service import AIToolsService
from financeai.services.blog_service import BlogService, SlugTakenError
from financeai.services.content_client import GenerationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["ai"])


def _tools(request: Request) -> AIToolsService:
    return get_service(request, "ai_tools_service")


@router.post("/generate-blog", response_model=BlogPost, status_code=201)
def generate_blog(request: Request, payload: Any = Body(None)):
    result = validate_payload(GenerateBlogRequest, payload)
    if isinstance(result, Invalid):
        return invalid_response(result, "Topic and category are required")
    blog_service: BlogService = get_service(request, "blog_service")
    try:
        return blog_service.generate_post(result.value.topic, result.value.category)
    except (GenerationError, SlugTakenError):
        logger.exception("Blog generation error")
        return message_response("Failed to generate blog post", 500)


@router.post("/finance-advice", response_model=FinanceAdvice)
def finance_advice(request: Request, payload: Any = Body(None)):
    result = validate_payload(FinanceAdviceRequest, payload)
    if isinstance(result, Invalid):
        return invalid_response(result, "Invalid finance advice request")
    try:
        return _tools(request).finance_advice(result.value)
    except GenerationError:
        logger.exception("Finance advice error")
        return message_response("Failed to generate finance advice", 500)


@router.post("/stock-analysis", response_model=StockAnalysis)
def stock_analysis(request: Request, payload: Any = Body(None)):
    result = validate_payload(StockAnalysisRequest, payload)
    if isinstance(result, Invalid):
        return invalid_response(result, "Invalid stock analysis request")
    try:
        return _tools(request).stock_analysis(result.value)
    except GenerationError:
        logger.exception("Stock analysis error")
        return message_response("Failed to generate stock analysis", 500)


@router.get("/stock-analyses", response_model=list[StockAnalysis])
def list_stock_analyses(request: Request):
    return _tools(request).list_stock_analyses()


@router.post("/budget-plan", response_model=BudgetPlan)
def budget_plan(request: Request, payload: Any = Body(None)):
    result = validate_payload(BudgetPlanRequest, payload)
    if isinstance(result, Invalid):
        return invalid_response(result, "Invalid budget plan request")
    try:
        return _tools(request).budget_plan(result.value)
    except GenerationError:
        logger.exception("Budget planning error")
        return message_response("Failed to generate budget plan", 500)
