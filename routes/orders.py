"""
Order, queue and invoice routes.

Handles:
- POST /api/orders                    - Submit an order
- GET  /api/orders                    - Own orders (all orders for admins)
- GET  /api/orders/<id>               - One order
- PUT  /api/orders/<id>/status        - Change status (admin)
- PUT  /api/orders/<id>/priority      - Change priority (owner or admin)
- POST /api/orders/<id>/invoice       - Issue an invoice
- GET  /api/orders/<id>/invoice       - Latest invoice
- GET  /api/queue                     - Queued orders, oldest first
- POST /api/queue/next                - Start the next queued order (admin)
- POST /api/orders/<id>/complete      - Mark an order completed (admin)
"""

from flask import Blueprint, jsonify

from core.exceptions import PermissionDeniedError
from models.account import Account
from models.order import Order
from routes.helpers import get_context, json_body, require_account, require_admin
from routes.inventory import resolve_material

orders_bp = Blueprint("orders", __name__)


def _owned_order(order_id: int, account: Account) -> Order:
    """Order visible to the account, or raise OrderNotFoundError / PermissionDeniedError."""
    order = get_context().order_service.get_order_or_raise(order_id)
    if not account.is_admin and order.account.username != account.username:
        raise PermissionDeniedError("admin")
    return order


@orders_bp.route("/api/orders", methods=["POST"])
def submit_order():
    account = require_account()
    data = json_body()
    context = get_context()
    submission = context.order_service.submit_order(
        account=account,
        material=resolve_material(data),
        dimensions=data.get("dimensions"),
        quantity=data.get("quantity"),
        material_grams=data.get("material_grams"),
        special_instructions=data.get("special_instructions", ""),
        priority=data.get("priority"),
    )
    if not submission.success:
        return jsonify(submission.to_dict()), 400
    body = submission.to_dict()
    body["order"] = submission.order.to_dict(context.config)
    return jsonify(body), 201


@orders_bp.route("/api/orders", methods=["GET"])
def list_orders():
    account = require_account()
    context = get_context()
    orders = context.order_service.list_orders(account)
    return jsonify({"orders": [o.to_dict(context.config) for o in orders]})


@orders_bp.route("/api/orders/<int:order_id>", methods=["GET"])
def get_order(order_id: int):
    order = _owned_order(order_id, require_account())
    return jsonify({"order": order.to_dict(get_context().config)})


@orders_bp.route("/api/orders/<int:order_id>/status", methods=["PUT"])
def update_status(order_id: int):
    require_admin()
    service = get_context().order_service
    service.get_order_or_raise(order_id)
    status = json_body().get("status")
    if not service.update_status(order_id, status):
        return jsonify({"success": False, "message": f"Status change to {status!r} rejected"}), 400
    return jsonify({"success": True, "order": service.get_order(order_id).to_dict()})


@orders_bp.route("/api/orders/<int:order_id>/priority", methods=["PUT"])
def set_priority(order_id: int):
    _owned_order(order_id, require_account())
    service = get_context().order_service
    priority = json_body().get("priority")
    if not service.set_priority(order_id, priority):
        return jsonify({"success": False, "message": f"Priority {priority!r} not available"}), 400
    return jsonify({"success": True, "order": service.get_order(order_id).to_dict(get_context().config)})


@orders_bp.route("/api/orders/<int:order_id>/complete", methods=["POST"])
def complete_order(order_id: int):
    require_admin()
    service = get_context().order_service
    service.get_order_or_raise(order_id)
    service.complete_order(order_id)
    return jsonify({"success": True, "order": service.get_order(order_id).to_dict()})


@orders_bp.route("/api/orders/<int:order_id>/invoice", methods=["POST"])
def generate_invoice(order_id: int):
    _owned_order(order_id, require_account())
    invoice = get_context().order_service.generate_invoice(order_id)
    body = invoice.to_dict()
    body["text"] = invoice.export_text()
    return jsonify(body), 201


@orders_bp.route("/api/orders/<int:order_id>/invoice", methods=["GET"])
def view_invoice(order_id: int):
    _owned_order(order_id, require_account())
    invoice = get_context().order_service.view_invoice(order_id)
    if invoice is None:
        return jsonify({"error": f"No invoice issued for order {order_id}", "details": {}}), 404
    body = invoice.to_dict()
    body["text"] = invoice.export_text()
    return jsonify(body)


@orders_bp.route("/api/queue", methods=["GET"])
def queue():
    require_account()
    service = get_context().order_service
    return jsonify({
        "size": service.queue_size(),
        "orders": [o.to_dict() for o in service.queued_orders()],
    })


@orders_bp.route("/api/queue/next", methods=["POST"])
def start_next():
    require_admin()
    order = get_context().order_service.start_next_order()
    if order is None:
        return jsonify({"success": False, "message": "Queue is empty"}), 404
    return jsonify({"success": True, "order": order.to_dict()})
