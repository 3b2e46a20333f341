from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Request

from financeai.domain.models import PublicUser
from financeai.domain.validation import Invalid, UserRequest, validate_payload
from financeai.routers.common import get_service, invalid_response, message_response
from financeai.services.user_service import UserExistsError, UserService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("", response_model=PublicUser, status_code=201)
def register_user(request: Request, payload: Any = Body(None)):
    result = validate_payload(UserRequest, payload)
    if isinstance(result, Invalid):
        return invalid_response(result, "Invalid user data")
    service: UserService = get_service(request, "user_service")
    try:
        return service.register(result.value)
    except UserExistsError as exc:
        return message_response(f"{exc.field.capitalize()} already registered", 400)
