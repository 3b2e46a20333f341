"""Repository backed by SQLAlchemy (SQLite in tests, Postgres in production)."""
from __future__ import annotations

import uuid
from contextlib import AbstractContextManager
from typing import Callable, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from financeai.db.models import (
    BlogPostRow,
    BudgetPlanRow,
    FinanceAdviceRow,
    NewsletterRow,
    StockAnalysisRow,
    UserRow,
)
from financeai.db.session import SessionFactory, get_session, session_scope
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


class SQLRepository(Repository):
    """CRUD helpers wrapping the SQLAlchemy session.

    Pass ``session_factory`` (a ``sessionmaker``) to bind the repository to a
    specific engine; without it the engine configured by DATABASE_URL is used.
    """

    backend = "sql"

    def __init__(self, session_factory: SessionFactory | None = None, *, clock: Clock | None = None) -> None:
        self._session_factory = session_factory
        self._clock = clock or utc_now

    def _session(self) -> AbstractContextManager[Session]:
        if self._session_factory is None:
            return get_session()
        return session_scope(self._session_factory)

    @staticmethod
    def _new_id() -> str:
        return str(uuid.uuid4())

    def _insert(self, row, entity: str, unique: dict[str, str] | None = None):
        """Add ``row`` after checking ``unique`` columns; returns the refreshed row."""
        with self._session() as session:
            for column, value in (unique or {}).items():
                stmt = select(type(row).id).where(getattr(type(row), column) == value).limit(1)
                if session.execute(stmt).first() is not None:
                    raise DuplicateRecordError(entity, column, value)
            session.add(row)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                column, value = next(iter((unique or {"id": row.id}).items()))
                raise DuplicateRecordError(entity, column, value) from exc
            session.refresh(row)
            return row

    def _fetch_all(self, stmt, model: Callable) -> list:
        with self._session() as session:
            return [model(row) for row in session.execute(stmt).scalars().all()]

    def _fetch_one(self, stmt, model: Callable):
        with self._session() as session:
            row = session.execute(stmt).scalars().first()
            return model(row) if row is not None else None

    # -------------------------- users --------------------------
    def get_user(self, user_id: str) -> Optional[User]:
        with self._session() as session:
            row = session.get(UserRow, user_id)
            return User.model_validate(row) if row else None

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self._fetch_one(select(UserRow).where(UserRow.username == username), User.model_validate)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self._fetch_one(select(UserRow).where(UserRow.email == email), User.model_validate)

    def create_user(self, data: UserCreate) -> User:
        row = UserRow(**data.model_dump(), id=self._new_id(), created_at=self._clock())
        row = self._insert(row, "user", {"username": data.username, "email": data.email})
        return User.model_validate(row)

    # -------------------------- blog posts --------------------------
    @staticmethod
    def _published():
        return select(BlogPostRow).where(BlogPostRow.published.is_(True))

    def get_all_blog_posts(self) -> list[BlogPost]:
        stmt = self._published().order_by(BlogPostRow.created_at.desc())
        return self._fetch_all(stmt, BlogPost.model_validate)

    def get_blog_post(self, post_id: str) -> Optional[BlogPost]:
        with self._session() as session:
            row = session.get(BlogPostRow, post_id)
            return BlogPost.model_validate(row) if row else None

    def get_blog_post_by_slug(self, slug: str) -> Optional[BlogPost]:
        return self._fetch_one(select(BlogPostRow).where(BlogPostRow.slug == slug), BlogPost.model_validate)

    def create_blog_post(self, data: BlogPostCreate) -> BlogPost:
        now = self._clock()
        row = BlogPostRow(**blog_defaults(data), id=self._new_id(), created_at=now, updated_at=now)
        row = self._insert(row, "blog post", {"slug": data.slug})
        return BlogPost.model_validate(row)

    def update_blog_post(self, post_id: str, changes: BlogPostUpdate) -> Optional[BlogPost]:
        values = changes.model_dump(exclude_unset=True)
        with self._session() as session:
            row = session.get(BlogPostRow, post_id)
            if not row:
                return None
            new_slug = values.get("slug")
            if new_slug is not None and new_slug != row.slug:
                stmt = select(BlogPostRow.id).where(BlogPostRow.slug == new_slug).limit(1)
                if session.execute(stmt).first() is not None:
                    raise DuplicateRecordError("blog post", "slug", new_slug)
            for column, value in values.items():
                setattr(row, column, value)
            row.updated_at = self._clock()
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                if new_slug is None:
                    raise
                raise DuplicateRecordError("blog post", "slug", new_slug) from exc
            session.refresh(row)
            return BlogPost.model_validate(row)

    def delete_blog_post(self, post_id: str) -> bool:
        with self._session() as session:
            result = session.execute(delete(BlogPostRow).where(BlogPostRow.id == post_id))
            session.commit()
            return (result.rowcount or 0) > 0

    def get_featured_blog_posts(self) -> list[BlogPost]:
        stmt = (
            self._published()
            .where(BlogPostRow.featured.is_(True))
            .order_by(BlogPostRow.created_at.desc())
            .limit(FEATURED_LIMIT)
        )
        return self._fetch_all(stmt, BlogPost.model_validate)

    def get_blog_posts_by_category(self, category: str) -> list[BlogPost]:
        stmt = self._published().where(BlogPostRow.category == category).order_by(BlogPostRow.created_at.desc())
        return self._fetch_all(stmt, BlogPost.model_validate)

    def search_blog_posts(self, query: str) -> list[BlogPost]:
        # SQL lower()/LIKE is ASCII-only on SQLite; match in Python over the published set
        stmt = self._published().order_by(BlogPostRow.created_at.desc())
        return [
            p
            for p in self._fetch_all(stmt, BlogPost.model_validate)
            if matches_query(query, title=p.title, excerpt=p.excerpt, content=p.content, tags=p.tags)
        ]

    # -------------------------- finance advice --------------------------
    def create_finance_advice(self, data: FinanceAdviceCreate) -> FinanceAdvice:
        row = FinanceAdviceRow(**data.model_dump(), id=self._new_id(), created_at=self._clock())
        return FinanceAdvice.model_validate(self._insert(row, "finance advice"))

    def get_finance_advice_by_user_id(self, user_id: str) -> list[FinanceAdvice]:
        stmt = (
            select(FinanceAdviceRow)
            .where(FinanceAdviceRow.user_id == user_id)
            .order_by(FinanceAdviceRow.created_at.desc())
        )
        return self._fetch_all(stmt, FinanceAdvice.model_validate)

    # -------------------------- stock analysis --------------------------
    def create_stock_analysis(self, data: StockAnalysisCreate) -> StockAnalysis:
        row = StockAnalysisRow(**data.model_dump(), id=self._new_id(), created_at=self._clock())
        return StockAnalysis.model_validate(self._insert(row, "stock analysis"))

    def get_stock_analysis(self, symbol: str) -> Optional[StockAnalysis]:
        stmt = (
            select(StockAnalysisRow)
            .where(func.lower(StockAnalysisRow.symbol) == (symbol or "").lower())
            .order_by(StockAnalysisRow.created_at.desc())
            .limit(1)
        )
        return self._fetch_one(stmt, StockAnalysis.model_validate)

    def get_all_stock_analyses(self) -> list[StockAnalysis]:
        stmt = select(StockAnalysisRow).order_by(StockAnalysisRow.created_at.desc())
        return self._fetch_all(stmt, StockAnalysis.model_validate)

    # -------------------------- budget plans --------------------------
    def create_budget_plan(self, data: BudgetPlanCreate) -> BudgetPlan:
        row = BudgetPlanRow(**data.model_dump(), id=self._new_id(), created_at=self._clock())
        return BudgetPlan.model_validate(self._insert(row, "budget plan"))

    def get_budget_plans_by_user_id(self, user_id: str) -> list[BudgetPlan]:
        stmt = (
            select(BudgetPlanRow)
            .where(BudgetPlanRow.user_id == user_id)
            .order_by(BudgetPlanRow.created_at.desc())
        )
        return self._fetch_all(stmt, BudgetPlan.model_validate)

    # -------------------------- newsletter --------------------------
    def subscribe_to_newsletter(self, data: NewsletterCreate) -> NewsletterSubscription:
        row = NewsletterRow(**data.model_dump(), id=self._new_id(), created_at=self._clock())
        row = self._insert(row, "newsletter", {"email": data.email})
        return NewsletterSubscription.model_validate(row)

    def get_newsletter_subscription(self, email: str) -> Optional[NewsletterSubscription]:
        stmt = select(NewsletterRow).where(NewsletterRow.email == email)
        return self._fetch_one(stmt, NewsletterSubscription.model_validate)

    def get_newsletter_subscribers(self) -> list[NewsletterSubscription]:
        stmt = (
            select(NewsletterRow)
            .where(NewsletterRow.subscribed.is_(True))
            .order_by(NewsletterRow.created_at.desc())
        )
        return self._fetch_all(stmt, NewsletterSubscription.model_validate)

    def unsubscribe_from_newsletter(self, email: str) -> bool:
        with self._session() as session:
            row = session.execute(select(NewsletterRow).where(NewsletterRow.email == email)).scalars().first()
            if not row:
                return False
            row.subscribed = False
            session.commit()
            return True
