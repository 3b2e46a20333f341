"""Boundary validation of request bodies.

``validate_payload`` never raises: it returns either ``Valid`` carrying the
parsed schema instance or ``Invalid`` carrying a list of error strings.
Routers branch on the tag and turn ``Invalid`` into a 400.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .blog import is_valid_slug
from .models import RiskTolerance

T = TypeVar("T", bound=BaseModel)


@dataclass(frozen=True)
class Valid(Generic[T]):
    value: T
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class Invalid:
    errors: list[str]
    ok: bool = field(default=False, init=False)


ValidationResult = Union[Valid[T], Invalid]


def _format_error(err: dict) -> str:
    loc = ".".join(str(part) for part in err.get("loc", ()))
    return f"{loc}: {err.get('msg', 'invalid')}" if loc else str(err.get("msg", "invalid"))


def validate_payload(schema: type[T], payload: Any) -> ValidationResult:
    if not isinstance(payload, dict):
        return Invalid(["body: expected a JSON object"])
    try:
        return Valid(schema.model_validate(payload))
    except ValidationError as exc:
        return Invalid([_format_error(err) for err in exc.errors()])


def _slug(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.lower()
    if not is_valid_slug(value):
        raise ValueError("slug must be lowercase words separated by single dashes")
    return value


class RequestModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)


class FinanceAdviceRequest(RequestModel):
    income: float = Field(ge=0)
    expenses: float = Field(ge=0)
    savings_goal: float = Field(ge=0)
    risk_tolerance: RiskTolerance


class StockAnalysisRequest(RequestModel):
    symbol: str = Field(min_length=1)
    company_name: str = Field(min_length=1)


class BudgetPlanRequest(RequestModel):
    monthly_income: float = Field(ge=0)
    expenses: dict[str, float]
    savings_target: float = Field(ge=0)


class GenerateBlogRequest(RequestModel):
    topic: str = Field(min_length=1)
    category: str = Field(min_length=1)


class NewsletterRequest(RequestModel):
    email: EmailStr


class UserRequest(RequestModel):
    username: str = Field(min_length=3, max_length=64)
    email: EmailStr
    password: str = Field(min_length=8)


class BlogPostRequest(RequestModel):
    title: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    excerpt: str = Field(min_length=1)
    content: str = Field(min_length=1)
    category: str = Field(min_length=1)
    tags: list[str] = Field(default_factory=list)
    author: Optional[str] = None
    featured: bool = False
    published: bool = True
    read_time: Optional[int] = Field(default=None, ge=1)
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None

    @field_validator("slug")
    @classmethod
    def check_slug(cls, value):
        return _slug(value)


class BlogPostPatchRequest(RequestModel):
    title: Optional[str] = Field(default=None, min_length=1)
    slug: Optional[str] = Field(default=None, min_length=1)
    excerpt: Optional[str] = Field(default=None, min_length=1)
    content: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = Field(default=None, min_length=1)
    tags: Optional[list[str]] = None
    author: Optional[str] = None
    featured: Optional[bool] = None
    published: Optional[bool] = None
    read_time: Optional[int] = Field(default=None, ge=1)
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None

    @field_validator("slug")
    @classmethod
    def check_slug(cls, value):
        return _slug(value)
