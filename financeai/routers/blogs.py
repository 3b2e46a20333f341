from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Request, Response

from financeai.domain.models import BlogPost
from financeai.domain.validation import BlogPostPatchRequest, BlogPostRequest, Invalid, validate_payload
from financeai.routers.common import get_service, invalid_response, message_response
from financeai.services.blog_service import BlogFilters, BlogPostNotFoundError, BlogService, SlugTakenError

router = APIRouter(prefix="/api/blogs", tags=["blogs"])


def _blog_service(request: Request) -> BlogService:
    return get_service(request, "blog_service")


@router.get("", response_model=list[BlogPost])
def list_blogs(
    request: Request,
    featured: Optional[str] = None,
    category: Optional[str] = None,
    search: Optional[str] = None,
):
    filters = BlogFilters(featured=featured == "true", category=category or None, search=search or None)
    return _blog_service(request).list_posts(filters)


@router.get("/{slug}", response_model=BlogPost)
def get_blog(slug: str, request: Request):
    try:
        return _blog_service(request).get_by_slug(slug)
    except BlogPostNotFoundError:
        return message_response("Blog post not found", 404)


@router.post("", response_model=BlogPost, status_code=201)
def create_blog(request: Request, payload: Any = Body(None)):
    result = validate_payload(BlogPostRequest, payload)
    if isinstance(result, Invalid):
        return invalid_response(result, "Invalid blog post data")
    try:
        return _blog_service(request).create_post(result.value)
    except SlugTakenError:
        return message_response("A blog post with this slug already exists", 400)


@router.put("/{post_id}", response_model=BlogPost)
def update_blog(post_id: str, request: Request, payload: Any = Body(None)):
    result = validate_payload(BlogPostPatchRequest, payload)
    if isinstance(result, Invalid):
        return invalid_response(result, "Invalid blog post data")
    try:
        return _blog_service(request).update_post(post_id, result.value)
    except BlogPostNotFoundError:
        return message_response("Blog post not found", 404)
    except SlugTakenError:
        return message_response("A blog post with this slug already exists", 400)


@router.delete("/{post_id}", status_code=204)
def delete_blog(post_id: str, request: Request):
    try:
        _blog_service(request).delete_post(post_id)
    except BlogPostNotFoundError:
        return message_response("Blog post not found", 404)
    return Response(status_code=204)
