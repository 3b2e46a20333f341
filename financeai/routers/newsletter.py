from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Request

from financeai.domain.validation import Invalid, NewsletterRequest, validate_payload
from financeai.routers.common import get_service, invalid_response, message_response
from financeai.services.newsletter_service import (
    AlreadySubscribedError,
    NewsletterService,
    SubscriptionNotFoundError,
)

router = APIRouter(prefix="/api/newsletter", tags=["newsletter"])


def _newsletter(request: Request) -> NewsletterService:
    return get_service(request, "newsletter_service")


@router.post("/subscribe", status_code=201)
def subscribe(request: Request, payload: Any = Body(None)):
    result = validate_payload(NewsletterRequest, payload)
    if isinstance(result, Invalid):
        return invalid_response(result, "Invalid email address")
    try:
        _newsletter(request).subscribe(result.value.email)
    except AlreadySubscribedError:
        return message_response("Email already subscribed", 400)
    return {"message": "Successfully subscribed to newsletter"}


@router.post("/unsubscribe")
def unsubscribe(request: Request, payload: Any = Body(None)):
    result = validate_payload(NewsletterRequest, payload)
    if isinstance(result, Invalid):
        return invalid_response(result, "Invalid email address")
    try:
        _newsletter(request).unsubscribe(result.value.email)
    except SubscriptionNotFoundError:
        return message_response("Email not subscribed", 404)
    return {"message": "Successfully unsubscribed from newsletter"}


@router.get("/count")
def subscriber_count(request: Request):
    return {"count": _newsletter(request).active_count()}
