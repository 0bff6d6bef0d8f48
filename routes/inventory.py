"""
Material catalog and inventory routes.

Handles:
- GET  /api/materials            - Catalog with stock levels
- POST /api/materials            - Add a material (admin)
- GET  /api/inventory            - Stock per material
- PUT  /api/inventory            - Set a stock level (admin)
- POST /api/inventory/replenish  - Add grams to a stock level (admin)
"""

from typing import Any, Dict, Optional

from flask import Blueprint, jsonify

from logging_config import get_logger
from models.material import Material, MaterialKey
from modules.validator import validate_material
from routes.helpers import get_context, json_body, require_account, require_admin

logger = get_logger(__name__)

inventory_bp = Blueprint("inventory", __name__)


def resolve_material(data: Dict[str, Any]) -> Optional[Material]:
    """
    Find a catalog material from request fields.

    Accepts brand/type/color, a display name ('PLA - Overture (Black)') or
    the legacy 'Brand Type' name under "material".
    """
    catalog = get_context().catalog
    if data.get("brand") and data.get("type") and data.get("color"):
        return catalog.get(MaterialKey(data["brand"], data["type"], data["color"]))
    name = data.get("material")
    if not isinstance(name, str):
        return None
    return catalog.find_by_display_name(name) or catalog.find_by_name(name)


def _stock_row(material: Material) -> Dict[str, Any]:
    row = material.to_dict()
    row["stock_grams"] = get_context().inventory.get_stock(material)
    return row


@inventory_bp.route("/api/materials", methods=["GET"])
def list_materials():
    require_account()
    return jsonify({"materials": [_stock_row(m) for m in get_context().catalog.list()]})


@inventory_bp.route("/api/materials", methods=["POST"])
def add_material():
    require_admin()
    data = json_body()
    try:
        material = Material.from_dict(data)
    except (TypeError, ValueError):
        return jsonify({"success": False, "message": "cost_per_gram and print_temp must be numbers"}), 400
    if not (material.brand and material.type and material.color) or not validate_material(material).is_valid:
        return jsonify({"success": False, "message": "brand, type, color and a non-negative cost are required"}), 400

    stock = data.get("stock_grams")
    if stock is not None and (not isinstance(stock, int) or isinstance(stock, bool) or stock < 0):
        return jsonify({"success": False, "message": "stock_grams must be a non-negative whole number"}), 400

    context = get_context()
    context.catalog.add(material)
    if stock is not None:
        context.inventory.set_stock(material, stock)
    logger.info(f"Material added: {material.display_name}")
    return jsonify({"success": True, "material": _stock_row(material)}), 201


@inventory_bp.route("/api/inventory", methods=["GET"])
def inventory():
    require_account()
    return jsonify({
        "default_stock": get_context().inventory.default_stock,
        "inventory": [_stock_row(m) for m in get_context().catalog.list()],
    })


@inventory_bp.route("/api/inventory", methods=["PUT"])
def set_stock():
    require_admin()
    data = json_body()
    material = resolve_material(data)
    if material is None:
        return jsonify({"success": False, "message": "Unknown material"}), 404
    grams = data.get("grams")
    if not isinstance(grams, int) or not get_context().inventory.set_stock(material, grams):
        return jsonify({"success": False, "message": "grams must be a non-negative whole number"}), 400
    return jsonify({"success": True, "material": _stock_row(material)})


@inventory_bp.route("/api/inventory/replenish", methods=["POST"])
def replenish():
    require_admin()
    data = json_body()
    material = resolve_material(data)
    if material is None:
        return jsonify({"success": False, "message": "Unknown material"}), 404
    grams = data.get("grams")
    if not isinstance(grams, int) or not get_context().inventory.replenish(material, grams):
        return jsonify({"success": False, "message": "grams must be a positive whole number"}), 400
    return jsonify({"success": True, "material": _stock_row(material)})
