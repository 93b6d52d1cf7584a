from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional

from flask import current_app, jsonify, request, session

from ..core.exceptions import (
    AuthorizationError,
    BackendError,
    CompanyNotSelectedError,
    NotFoundError,
    ValidationError,
)
from .payload import to_primitive

logger = logging.getLogger(__name__)


def json_ok(data: Any = None, status: int = 200, **extra):
    body = {"success": True, "data": to_primitive(data)}
    body.update({k: to_primitive(v) for k, v in extra.items()})
    return jsonify(body), status


def json_error(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Corpo da requisição inválido")
    return data


def current_user_id() -> Optional[str]:
    user_id = session.get("user_id")
    return str(user_id) if user_id else None


def current_company_id() -> str:
    company_id = session.get("company_id")
    if not company_id:
        raise CompanyNotSelectedError()
    return str(company_id)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return json_error("Usuário não autenticado", 401)
        return view(*args, **kwargs)

    return wrapper


def api_view(failure_message: str):
    """Map domain errors raised by a view onto JSON responses.

    ``failure_message`` is the localized text shown when the action fails,
    e.g. "Erro ao criar lançamento".
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except (ValidationError, CompanyNotSelectedError) as e:
                return json_error(str(e), 400)
            except NotFoundError as e:
                return json_error(str(e), 404)
            except AuthorizationError as e:
                return json_error(str(e), 403)
            except BackendError as e:
                logger.warning("%s: %s", failure_message, e)
                return json_error(f"{failure_message}: {e}", 502)
            except Exception as e:
                logger.exception("%s", failure_message)
                if bool(current_app.config.get("DEBUG", False)):
                    return json_error(f"{failure_message}: {e}", 500)
                return json_error(failure_message, 500)

        return wrapper

    return decorator
