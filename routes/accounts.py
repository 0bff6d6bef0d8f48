"""
Account routes.

Handles:
- POST   /api/accounts                      - Register
- GET    /api/accounts                      - List accounts (admin)
- DELETE /api/accounts/<username>           - Remove an account (admin)
- POST   /api/accounts/password             - Change own password
- POST   /api/accounts/<username>/password  - Reset a user's password (admin)
- POST   /api/accounts/password/strength    - Score a candidate password
- GET    /api/accounts/password/suggest     - Generate a strong password
"""

from flask import Blueprint, jsonify

from models.account import Role
from modules.password_security import generate_secure_password, validate_password_strength
from routes.helpers import current_session_id, get_context, json_body, require_admin

accounts_bp = Blueprint("accounts", __name__)


@accounts_bp.route("/api/accounts", methods=["POST"])
def register():
    """
    Create an account.

    Self-registration creates customers only; an admin session may pick any role.
    """
    data = json_body()
    context = get_context()
    role = data.get("role", Role.CUSTOMER.value)
    if Role.parse(role) not in (Role.CUSTOMER, None) and not context.sessions.is_admin_session(current_session_id()):
        return jsonify({"success": False, "message": "Admin privileges required to assign roles"}), 403

    result = context.account_service.create_account(
        data.get("username"), data.get("email"), data.get("password"), role
    )
    if not result.success:
        body = result.to_dict()
        if isinstance(result.payload, list):
            body["errors"] = result.payload
        return jsonify(body), 400
    return jsonify({"success": True, "account": result.payload.to_dict()}), 201


@accounts_bp.route("/api/accounts", methods=["GET"])
def list_accounts():
    require_admin()
    return jsonify({"accounts": [a.to_dict() for a in get_context().accounts.list()]})


@accounts_bp.route("/api/accounts/<username>", methods=["DELETE"])
def remove_account(username: str):
    result = get_context().account_service.remove_account(current_session_id(), username)
    return jsonify(result.to_dict()), (200 if result.success else 400)


@accounts_bp.route("/api/accounts/password", methods=["POST"])
def change_password():
    data = json_body()
    result = get_context().account_service.change_password(
        current_session_id(), data.get("current_password", ""), data.get("new_password", "")
    )
    return jsonify(result.to_dict()), (200 if result.success else 400)


@accounts_bp.route("/api/accounts/<username>/password", methods=["POST"])
def reset_password(username: str):
    require_admin()
    result = get_context().account_service.reset_password(
        current_session_id(), username, json_body().get("new_password", "")
    )
    return jsonify(result.to_dict()), (200 if result.success else 400)


@accounts_bp.route("/api/accounts/password/strength", methods=["POST"])
def password_strength():
    return jsonify(validate_password_strength(json_body().get("password")).to_dict())


@accounts_bp.route("/api/accounts/password/suggest", methods=["GET"])
def suggest_password():
    return jsonify({"password": generate_secure_password()})
