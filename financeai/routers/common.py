"""Response helpers shared by the routers."""
from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from financeai.domain.validation import Invalid

logger = logging.getLogger(__name__)


def message_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"message": message}, status_code=status_code)


def invalid_response(result: Invalid, message: str) -> JSONResponse:
    logger.info("Rejected request body: %s", "; ".join(result.errors))
    return message_response(message, 400)


def get_service(request: Request, name: str):
    svc = getattr(getattr(request.app, "state", None), name, None)
    if svc is None:
        raise RuntimeError(f"{name} is not configured")
    return svc
