"""SQLAlchemy tables for the six record sets."""
from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Integer,
    String,
    Text,
    JSON,
    func,
)

from .session import Base


class UserRow(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    username = Column(String(255), unique=True, nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password = Column(Text, nullable=False)
    is_admin = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class BlogPostRow(Base):
    __tablename__ = "blog_posts"

    id = Column(String(36), primary_key=True)
    title = Column(Text, nullable=False)
    slug = Column(String(255), unique=True, nullable=False)
    excerpt = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    category = Column(String(128), nullable=False, index=True)
    tags = Column(JSON, default=list, nullable=False)
    author = Column(String(255), default="AI Assistant", nullable=False)
    featured = Column(Boolean, default=False, nullable=False)
    published = Column(Boolean, default=True, nullable=False)
    read_time = Column(Integer, default=5, nullable=False)
    seo_title = Column(Text, nullable=True)
    seo_description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class FinanceAdviceRow(Base):
    __tablename__ = "finance_advice"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), nullable=True, index=True)
    income = Column(Integer, nullable=False)
    expenses = Column(Integer, nullable=False)
    savings_goal = Column(Integer, nullable=False)
    risk_tolerance = Column(String(16), nullable=False)
    advice = Column(Text, nullable=False)
    investment_plan = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class StockAnalysisRow(Base):
    __tablename__ = "stock_analysis"

    id = Column(String(36), primary_key=True)
    symbol = Column(String(32), nullable=False, index=True)
    company_name = Column(Text, nullable=False)
    current_price = Column(Integer, nullable=False)
    analysis = Column(Text, nullable=False)
    recommendation = Column(String(8), nullable=False)
    risk_level = Column(String(8), nullable=False)
    target_price = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class BudgetPlanRow(Base):
    __tablename__ = "budget_plans"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), nullable=True, index=True)
    monthly_income = Column(Integer, nullable=False)
    expenses = Column(JSON, default=dict, nullable=False)
    savings_target = Column(Integer, nullable=False)
    recommendations = Column(Text, nullable=False)
    chart_data = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class NewsletterRow(Base):
    __tablename__ = "newsletter"

    id = Column(String(36), primary_key=True)
    email = Column(String(255), unique=True, nullable=False)
    subscribed = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
