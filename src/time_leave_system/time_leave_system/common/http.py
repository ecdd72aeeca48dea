"""JSON helpers shared by the Flask controllers."""

from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Any, Callable, Optional

from flask import jsonify, request

from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    InvalidInputError,
    InvalidTransitionError,
    NotFoundError,
    OverlapError,
)
from ..employees.model import Employee
from .datetime_utils import parse_any_date

logger = logging.getLogger(__name__)

ACTOR_HEADER = "X-Employee-Id"

_STATUS_BY_ERROR: tuple[tuple[type[DomainError], int], ...] = (
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (OverlapError, 409),
    (InvalidTransitionError, 409),
)


def status_for(error: DomainError) -> int:
    for kind, status in _STATUS_BY_ERROR:
        if isinstance(error, kind):
            return status
    return 400


def error_response(error: DomainError):
    return jsonify({"success": False, **error.to_dict()}), status_for(error)


def json_endpoint(view: Callable) -> Callable:
    """Render domain errors as JSON and hide unexpected failures behind a 500."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Unhandled error in %s %s", request.method, request.path)
            return jsonify({"success": False, "error": "internal_error", "detail": "Internal server error"}), 500

    return wrapper


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidInputError("Request body must be a JSON object")
    return data


def int_value(value: Any, field: str, *, required: bool = False) -> Optional[int]:
    if value is None or value == "":
        if required:
            raise InvalidInputError(f"{field} is required", field=field)
        return None
    if isinstance(value, bool):
        raise InvalidInputError(f"{field} must be an integer", field=field)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{field} must be an integer", field=field)


def date_arg(name: str, default: Optional[date] = None) -> Optional[date]:
    raw = request.args.get(name)
    if not raw:
        return default
    return parse_any_date(raw)


def current_actor(employee_service) -> Employee:
    """Acting employee named by the X-Employee-Id header (authenticated upstream)."""

    actor_id = int_value(request.headers.get(ACTOR_HEADER), ACTOR_HEADER)
    if actor_id is None:
        raise AuthorizationError("Missing acting employee", header=ACTOR_HEADER)
    try:
        actor = employee_service.get(actor_id)
    except NotFoundError:
        raise AuthorizationError("Unknown acting employee", actor_id=actor_id)
    if not actor.is_active:
        raise AuthorizationError("Acting employee is disabled", actor_id=actor_id)
    return actor
