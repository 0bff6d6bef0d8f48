"""
Shared helpers for the JSON route handlers.

The session token is read from the X-Session-Id header, falling back to the
Flask cookie session set by /api/login.
"""

from typing import Any, Dict, Optional

from flask import current_app, request, session

from core.context import ShopContext
from models.account import Account

SESSION_HEADER = "X-Session-Id"
SESSION_KEY = "session_id"


def get_context() -> ShopContext:
    return current_app.config["SHOP_CONTEXT"]


def current_session_id() -> Optional[str]:
    return request.headers.get(SESSION_HEADER) or session.get(SESSION_KEY)


def require_account() -> Account:
    """Account of the current session; raises InvalidSessionError if there is none."""
    return get_context().sessions.require_session(current_session_id())


def require_admin() -> Account:
    return get_context().sessions.require_admin(current_session_id())


def json_body() -> Dict[str, Any]:
    """Request JSON object, or an empty dict for a missing or non-object body."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
