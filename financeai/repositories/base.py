"""Repository interface shared by the memory and SQL backends."""
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, Optional

from financeai.domain.models import (
    BlogPost,
    BlogPostCreate,
    BlogPostUpdate,
    BudgetPlan,
    BudgetPlanCreate,
    FinanceAdvice,
    FinanceAdviceCreate,
    NewsletterCreate,
    NewsletterSubscription,
    StockAnalysis,
    StockAnalysisCreate,
    User,
    UserCreate,
)

Clock = Callable[[], datetime]

FEATURED_LIMIT = 3


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RepositoryError(Exception):
    """Base class for persistence errors."""


class DuplicateRecordError(RepositoryError):
    """Raised when a unique field (slug, username, email) is already taken."""

    def __init__(self, entity: str, field: str, value: str):
        super().__init__(f"{entity} with {field}={value!r} already exists")
        self.entity = entity
        self.field = field
        self.value = value


class Repository(ABC):
    """CRUD and lookup operations for every record set.

    Lookups return None (or an empty list) when nothing matches. Lists are
    ordered by creation time, newest first.
    """

    backend: str = "abstract"

    # -------------------------- users --------------------------
    @abstractmethod
    def get_user(self, user_id: str) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]: ...

    @abstractmethod
    def create_user(self, data: UserCreate) -> User: ...

    # -------------------------- blog posts --------------------------
    @abstractmethod
    def get_all_blog_posts(self) -> list[BlogPost]:
        """Published posts only."""

    @abstractmethod
    def get_blog_post(self, post_id: str) -> Optional[BlogPost]: ...

    @abstractmethod
    def get_blog_post_by_slug(self, slug: str) -> Optional[BlogPost]: ...

    @abstractmethod
    def create_blog_post(self, data: BlogPostCreate) -> BlogPost: ...

    @abstractmethod
    def update_blog_post(self, post_id: str, changes: BlogPostUpdate) -> Optional[BlogPost]: ...

    @abstractmethod
    def delete_blog_post(self, post_id: str) -> bool: ...

    @abstractmethod
    def get_featured_blog_posts(self) -> list[BlogPost]:
        """At most FEATURED_LIMIT posts that are both featured and published."""

    @abstractmethod
    def get_blog_posts_by_category(self, category: str) -> list[BlogPost]: ...

    @abstractmethod
    def search_blog_posts(self, query: str) -> list[BlogPost]: ...

    # -------------------------- finance advice --------------------------
    @abstractmethod
    def create_finance_advice(self, data: FinanceAdviceCreate) -> FinanceAdvice: ...

    @abstractmethod
    def get_finance_advice_by_user_id(self, user_id: str) -> list[FinanceAdvice]: ...

    # -------------------------- stock analysis --------------------------
    @abstractmethod
    def create_stock_analysis(self, data: StockAnalysisCreate) -> StockAnalysis: ...

    @abstractmethod
    def get_stock_analysis(self, symbol: str) -> Optional[StockAnalysis]:
        """Most recent analysis for ``symbol`` (case-insensitive)."""

    @abstractmethod
    def get_all_stock_analyses(self) -> list[StockAnalysis]: ...

    # -------------------------- budget plans --------------------------
    @abstractmethod
    def create_budget_plan(self, data: BudgetPlanCreate) -> BudgetPlan: ...

    @abstractmethod
    def get_budget_plans_by_user_id(self, user_id: str) -> list[BudgetPlan]: ...

    # -------------------------- newsletter --------------------------
    @abstractmethod
    def subscribe_to_newsletter(self, data: NewsletterCreate) -> NewsletterSubscription: ...

    @abstractmethod
    def get_newsletter_subscription(self, email: str) -> Optional[NewsletterSubscription]: ...

    @abstractmethod
    def get_newsletter_subscribers(self) -> list[NewsletterSubscription]:
        """Active (subscribed) records only."""

    @abstractmethod
    def unsubscribe_from_newsletter(self, email: str) -> bool: ...


def blog_defaults(data: BlogPostCreate) -> dict:
    """Creation payload with SEO fields falling back to title/excerpt."""
    values = data.model_dump()
    values["seo_title"] = data.seo_title or data.title
    values["seo_description"] = data.seo_description or data.excerpt
    values["tags"] = list(data.tags or [])
    return values
