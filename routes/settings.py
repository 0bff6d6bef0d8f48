"""
System configuration routes (admin only except for reading).

Handles:
- GET  /api/config        - Current pricing and limit parameters
- PUT  /api/config        - Change parameters; rejected keys are reported
- POST /api/config/reset  - Restore defaults ({"clear_orders": true} also
                            drops every order and the queue)
"""

from flask import Blueprint, jsonify

from routes.helpers import get_context, json_body, require_account, require_admin

config_bp = Blueprint("config", __name__)


@config_bp.route("/api/config", methods=["GET"])
def get_config():
    require_account()
    config = get_context().config
    return jsonify({"config": config.to_dict(), "summary": config.summary()})


@config_bp.route("/api/config", methods=["PUT"])
def update_config():
    require_admin()
    config = get_context().config
    rejected = config.update_from_dict(json_body())
    status = 200 if not rejected else 400
    return jsonify({"config": config.to_dict(), "rejected": rejected}), status


@config_bp.route("/api/config/reset", methods=["POST"])
def reset_config():
    require_admin()
    context = get_context()
    if json_body().get("clear_orders"):
        context.reset_all()
    else:
        context.config.reset_to_defaults()
    return jsonify({"config": context.config.to_dict(), "orders": len(context.orders)})
