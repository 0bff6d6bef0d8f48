"""
Authentication routes.

Handles:
- /api/login   - Exchange username/password for a session token
- /api/logout  - End the current session
- /api/session - Who am I
"""

from flask import Blueprint, jsonify, session

from logging_config import get_logger
from routes.helpers import SESSION_KEY, current_session_id, get_context, json_body, require_account

logger = get_logger(__name__)

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/api/login", methods=["POST"])
def login():
    data = json_body()
    result = get_context().sessions.authenticate_user(data.get("username"), data.get("password"))
    if not result.success:
        return jsonify(result.to_dict()), 401
    session[SESSION_KEY] = result.session_id
    return jsonify(result.to_dict())


@auth_bp.route("/api/logout", methods=["POST"])
def logout():
    ended = get_context().sessions.invalidate_session(current_session_id())
    session.pop(SESSION_KEY, None)
    return jsonify({"success": ended})


@auth_bp.route("/api/session", methods=["GET"])
def whoami():
    account = require_account()
    return jsonify({"account": account.to_dict()})
