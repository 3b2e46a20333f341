"""In-process persistence adapter: one dict per record set, keyed by id."""
from __future__ import annotations

import threading
import uuid
from typing import Iterable, Optional, TypeVar

from financeai.core.security import hash_password
from financeai.domain.blog import matches_query
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

from .base import FEATURED_LIMIT, Clock, DuplicateRecordError, Repository, blog_defaults, utc_now

R = TypeVar("R")

ADMIN_USERNAME = "admin"
ADMIN_EMAIL = "admin@financeai.com"
ADMIN_PASSWORD = "admin123"


def _newest_first(records: Iterable[R]) -> list[R]:
    # dicts keep insertion order; reversing first keeps later inserts ahead on equal timestamps
    return sorted(reversed(list(records)), key=lambda r: r.created_at, reverse=True)


class MemoryRepository(Repository):
    """Repository kept in plain dicts.

    ``enforce_unique`` is off by default: duplicate slugs, usernames and
    emails are stored side by side, and slug/email lookups return the first
    match. Turn it on to get the same DuplicateRecordError the SQL backend
    raises.
    """

    backend = "memory"

    def __init__(self, *, enforce_unique: bool = False, seed_admin: bool = True, clock: Clock | None = None) -> None:
        self.enforce_unique = enforce_unique
        self._clock = clock or utc_now
        self._lock = threading.RLock()
        self._users: dict[str, User] = {}
        self._blog_posts: dict[str, BlogPost] = {}
        self._finance_advice: dict[str, FinanceAdvice] = {}
        self._stock_analyses: dict[str, StockAnalysis] = {}
        self._budget_plans: dict[str, BudgetPlan] = {}
        self._newsletter: dict[str, NewsletterSubscription] = {}
        if seed_admin:
            self._seed_admin()

    def _seed_admin(self) -> None:
        self.create_user(
            UserCreate(
                username=ADMIN_USERNAME,
                email=ADMIN_EMAIL,
                password=hash_password(ADMIN_PASSWORD),
                is_admin=True,
            )
        )

    @staticmethod
    def _new_id() -> str:
        return str(uuid.uuid4())

    def _check_unique(self, entity: str, records: Iterable, field: str, value: str, exclude_id: str | None = None) -> None:
        if not self.enforce_unique:
            return
        for record in records:
            if getattr(record, field) == value and record.id != exclude_id:
                raise DuplicateRecordError(entity, field, value)

    # -------------------------- users --------------------------
    def get_user(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return next((u for u in list(self._users.values()) if u.username == username), None)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return next((u for u in list(self._users.values()) if u.email == email), None)

    def create_user(self, data: UserCreate) -> User:
        with self._lock:
            self._check_unique("user", self._users.values(), "username", data.username)
            self._check_unique("user", self._users.values(), "email", data.email)
            user = User(**data.model_dump(), id=self._new_id(), created_at=self._clock())
            self._users[user.id] = user
            return user

    # -------------------------- blog posts --------------------------
    def _published(self) -> list[BlogPost]:
        return [p for p in list(self._blog_posts.values()) if p.published]

    def get_all_blog_posts(self) -> list[BlogPost]:
        return _newest_first(self._published())

    def get_blog_post(self, post_id: str) -> Optional[BlogPost]:
        return self._blog_posts.get(post_id)

    def get_blog_post_by_slug(self, slug: str) -> Optional[BlogPost]:
        return next((p for p in list(self._blog_posts.values()) if p.slug == slug), None)

    def create_blog_post(self, data: BlogPostCreate) -> BlogPost:
        with self._lock:
            self._check_unique("blog post", self._blog_posts.values(), "slug", data.slug)
            now = self._clock()
            post = BlogPost(**blog_defaults(data), id=self._new_id(), created_at=now, updated_at=now)
            self._blog_posts[post.id] = post
            return post

    def update_blog_post(self, post_id: str, changes: BlogPostUpdate) -> Optional[BlogPost]:
        with self._lock:
            existing = self._blog_posts.get(post_id)
            if not existing:
                return None
            values = changes.model_dump(exclude_unset=True)
            if values.get("slug") is not None:
                self._check_unique("blog post", self._blog_posts.values(), "slug", values["slug"], exclude_id=post_id)
            updated = existing.model_copy(update={**values, "updated_at": self._clock()})
            self._blog_posts[post_id] = updated
            return updated

    def delete_blog_post(self, post_id: str) -> bool:
        with self._lock:
            return self._blog_posts.pop(post_id, None) is not None

    def get_featured_blog_posts(self) -> list[BlogPost]:
        return _newest_first(p for p in self._published() if p.featured)[:FEATURED_LIMIT]

    def get_blog_posts_by_category(self, category: str) -> list[BlogPost]:
        return _newest_first(p for p in self._published() if p.category == category)

    def search_blog_posts(self, query: str) -> list[BlogPost]:
        return _newest_first(
            p
            for p in self._published()
            if matches_query(query, title=p.title, excerpt=p.excerpt, content=p.content, tags=p.tags)
        )

    # -------------------------- finance advice --------------------------
    def create_finance_advice(self, data: FinanceAdviceCreate) -> FinanceAdvice:
        with self._lock:
            advice = FinanceAdvice(**data.model_dump(), id=self._new_id(), created_at=self._clock())
            self._finance_advice[advice.id] = advice
            return advice

    def get_finance_advice_by_user_id(self, user_id: str) -> list[FinanceAdvice]:
        return _newest_first(a for a in list(self._finance_advice.values()) if a.user_id == user_id)

    # -------------------------- stock analysis --------------------------
    def create_stock_analysis(self, data: StockAnalysisCreate) -> StockAnalysis:
        with self._lock:
            analysis = StockAnalysis(**data.model_dump(), id=self._new_id(), created_at=self._clock())
            self._stock_analyses[analysis.id] = analysis
            return analysis

    def get_stock_analysis(self, symbol: str) -> Optional[StockAnalysis]:
        wanted = (symbol or "").lower()
        matches = [a for a in list(self._stock_analyses.values()) if a.symbol.lower() == wanted]
        return _newest_first(matches)[0] if matches else None

    def get_all_stock_analyses(self) -> list[StockAnalysis]:
        return _newest_first(self._stock_analyses.values())

    # -------------------------- budget plans --------------------------
    def create_budget_plan(self, data: BudgetPlanCreate) -> BudgetPlan:
        with self._lock:
            plan = BudgetPlan(**data.model_dump(), id=self._new_id(), created_at=self._clock())
            self._budget_plans[plan.id] = plan
            return plan

    def get_budget_plans_by_user_id(self, user_id: str) -> list[BudgetPlan]:
        return _newest_first(p for p in list(self._budget_plans.values()) if p.user_id == user_id)

    # -------------------------- newsletter --------------------------
    def subscribe_to_newsletter(self, data: NewsletterCreate) -> NewsletterSubscription:
        with self._lock:
            self._check_unique("newsletter", self._newsletter.values(), "email", data.email)
            sub = NewsletterSubscription(**data.model_dump(), id=self._new_id(), created_at=self._clock())
            self._newsletter[sub.id] = sub
            return sub

    def get_newsletter_subscription(self, email: str) -> Optional[NewsletterSubscription]:
        return next((s for s in list(self._newsletter.values()) if s.email == email), None)

    def get_newsletter_subscribers(self) -> list[NewsletterSubscription]:
        return _newest_first(s for s in list(self._newsletter.values()) if s.subscribed)

    def unsubscribe_from_newsletter(self, email: str) -> bool:
        with self._lock:
            sub = self.get_newsletter_subscription(email)
            if not sub:
                return False
            self._newsletter[sub.id] = sub.model_copy(update={"subscribed": False})
            return True
