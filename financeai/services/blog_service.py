"""Blog use cases: listing with filters, creation, AI generation, edits."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from financeai.domain.blog import estimate_read_time, generated_slug
from financeai.domain.models import DEFAULT_AUTHOR, DEFAULT_READ_TIME, BlogPost, BlogPostCreate, BlogPostUpdate
from financeai.domain.validation import BlogPostPatchRequest, BlogPostRequest
from financeai.repositories import DuplicateRecordError, Repository
from financeai.services.content_client import ContentClient

logger = logging.getLogger(__name__)


class BlogError(Exception):
    """Base exception for blog workflows."""


class SlugTakenError(BlogError):
    """Raised when the slug already belongs to another post."""


class BlogPostNotFoundError(BlogError):
    pass


@dataclass
class BlogFilters:
    featured: bool = False
    category: Optional[str] = None
    search: Optional[str] = None


class BlogService:
    def __init__(self, repository: Repository, content_client: ContentClient) -> None:
        self.repository = repository
        self.content_client = content_client

    def list_posts(self, filters: BlogFilters) -> list[BlogPost]:
        """Featured wins over category, category over search, else every published post."""
        if filters.featured:
            return self.repository.get_featured_blog_posts()
        if filters.category:
            return self.repository.get_blog_posts_by_category(filters.category)
        if filters.search:
            return self.repository.search_blog_posts(filters.search)
        return self.repository.get_all_blog_posts()

    def get_by_slug(self, slug: str) -> BlogPost:
        post = self.repository.get_blog_post_by_slug(slug)
        if not post:
            raise BlogPostNotFoundError(slug)
        return post

    def create_post(self, request: BlogPostRequest) -> BlogPost:
        data = BlogPostCreate(
            **request.model_dump(exclude_none=True, exclude={"author", "read_time"}),
            author=request.author or DEFAULT_AUTHOR,
            read_time=request.read_time or DEFAULT_READ_TIME,
        )
        return self._save(data)

    def _save(self, data: BlogPostCreate) -> BlogPost:
        try:
            return self.repository.create_blog_post(data)
        except DuplicateRecordError as exc:
            raise SlugTakenError(data.slug) from exc

    def generate_post(self, topic: str, category: str) -> BlogPost:
        generated = self.content_client.generate_blog_post(topic, category)
        post = self._save(
            BlogPostCreate(
                title=generated.title,
                slug=generated_slug(topic),
                excerpt=generated.excerpt,
                content=generated.content,
                category=category,
                tags=generated.tags,
                author=DEFAULT_AUTHOR,
                featured=False,
                published=True,
                read_time=estimate_read_time(generated.content),
                seo_title=generated.title,
                seo_description=generated.excerpt,
            )
        )
        logger.info("Generated blog post %s for topic %r", post.slug, topic)
        return post

    def update_post(self, post_id: str, request: BlogPostPatchRequest) -> BlogPost:
        changes = BlogPostUpdate(**request.model_dump(exclude_unset=True, exclude_none=True))
        try:
            post = self.repository.update_blog_post(post_id, changes)
        except DuplicateRecordError as exc:
            raise SlugTakenError(exc.value) from exc
        if not post:
            raise BlogPostNotFoundError(post_id)
        return post

    def delete_post(self, post_id: str) -> None:
        if not self.repository.delete_blog_post(post_id):
            raise BlogPostNotFoundError(post_id)
