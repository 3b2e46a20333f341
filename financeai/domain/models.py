"""Records exchanged between repositories, services and routers.

Field names are snake_case in Python and camelCase on the wire; every model
shares the same alias generator so a record serializes exactly as the
frontend expects (``readTime``, ``createdAt``, ``chartData`` ...).
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Literal, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

RiskTolerance = Literal["low", "medium", "high"]
Recommendation = Literal["BUY", "SELL", "HOLD"]
RiskLevel = Literal["LOW", "MEDIUM", "HIGH"]

DEFAULT_AUTHOR = "AI Assistant"
DEFAULT_READ_TIME = 5


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive values; stored timestamps are always UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UTCDateTime = Annotated[datetime, AfterValidator(_as_utc)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# -------------------------- users --------------------------
class UserCreate(CamelModel):
    username: str
    email: str
    password: str
    is_admin: bool = False


class User(UserCreate):
    id: str
    created_at: UTCDateTime


class PublicUser(CamelModel):
    """User as returned over HTTP (no password)."""

    id: str
    username: str
    email: str
    is_admin: bool
    created_at: UTCDateTime


# -------------------------- blog --------------------------
class BlogPostCreate(CamelModel):
    title: str
    slug: str
    excerpt: str
    content: str
    category: str
    tags: list[str] = Field(default_factory=list)
    author: str = DEFAULT_AUTHOR
    featured: bool = False
    published: bool = True
    read_time: int = DEFAULT_READ_TIME
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None


class BlogPostUpdate(CamelModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    excerpt: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[list[str]] = None
    author: Optional[str] = None
    featured: Optional[bool] = None
    published: Optional[bool] = None
    read_time: Optional[int] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None


class BlogPost(BlogPostCreate):
    id: str
    created_at: UTCDateTime
    updated_at: UTCDateTime


# -------------------------- finance advice --------------------------
class InvestmentPlan(CamelModel):
    emergency: str
    short_term: str
    long_term: str
    tax_saving: str


class FinanceAdviceCreate(CamelModel):
    user_id: Optional[str] = None
    income: int
    expenses: int
    savings_goal: int
    risk_tolerance: RiskTolerance
    advice: str
    investment_plan: Optional[InvestmentPlan] = None


class FinanceAdvice(FinanceAdviceCreate):
    id: str
    created_at: UTCDateTime


# -------------------------- stock analysis --------------------------
class StockAnalysisCreate(CamelModel):
    symbol: str
    company_name: str
    current_price: int
    analysis: str
    recommendation: Recommendation
    risk_level: RiskLevel
    target_price: Optional[int] = None


class StockAnalysis(StockAnalysisCreate):
    id: str
    created_at: UTCDateTime


# -------------------------- budget plans --------------------------
class ChartDataset(CamelModel):
    label: str
    data: list[float]
    background_color: list[str] = Field(default_factory=list)


class ChartData(CamelModel):
    labels: list[str]
    datasets: list[ChartDataset]


class BudgetPlanCreate(CamelModel):
    user_id: Optional[str] = None
    monthly_income: int
    expenses: dict[str, float]
    savings_target: int
    recommendations: str
    chart_data: Optional[ChartData] = None


class BudgetPlan(BudgetPlanCreate):
    id: str
    created_at: UTCDateTime


# -------------------------- newsletter --------------------------
class NewsletterCreate(CamelModel):
    email: str
    subscribed: bool = True


class NewsletterSubscription(NewsletterCreate):
    id: str
    created_at: UTCDateTime
