"""
Main routes (health check).
"""

from flask import Blueprint, jsonify

from routes.helpers import get_context

main_bp = Blueprint("main", __name__)


@main_bp.route("/health", methods=["GET"])
def health():
    """Liveness probe with a few counters."""
    context = get_context()
    return jsonify({
        "status": "ok",
        "materials": len(context.catalog),
        "accounts": len(context.accounts),
        "orders": len(context.orders),
        "queued": context.orders.queue_size(),
        "sessions": context.sessions.active_session_count(),
    })
