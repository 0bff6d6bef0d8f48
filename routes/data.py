"""
Data file routes (admin only).

Handles:
- POST /api/data/save           - Write every data file
- POST /api/data/load           - Reload every data file
- POST /api/data/backup         - Timestamped copy of the data files
- GET  /api/data/backups        - Available backups
- POST /api/data/restore        - Restore the newest backup
- POST /api/data/factory-reset  - Wipe state and seed defaults
"""

from flask import Blueprint, current_app, jsonify

from routes.helpers import get_context, require_admin

data_bp = Blueprint("data", __name__)


@data_bp.route("/api/data/save", methods=["POST"])
def save():
    require_admin()
    ok = get_context().data.save_all()
    return jsonify({"success": ok}), (200 if ok else 500)


@data_bp.route("/api/data/load", methods=["POST"])
def load():
    require_admin()
    context = get_context()
    ok = context.data.load_all()
    return jsonify({"success": ok, "files": context.data.file_status()}), (200 if ok else 500)


@data_bp.route("/api/data/backup", methods=["POST"])
def backup():
    require_admin()
    path = get_context().data.backup_all()
    if path is None:
        return jsonify({"success": False}), 500
    return jsonify({"success": True, "backup": path.name}), 201


@data_bp.route("/api/data/backups", methods=["GET"])
def backups():
    require_admin()
    return jsonify({"backups": [p.name for p in get_context().data.list_backups()]})


@data_bp.route("/api/data/restore", methods=["POST"])
def restore():
    require_admin()
    ok = get_context().data.restore_latest()
    return jsonify({"success": ok}), (200 if ok else 400)


@data_bp.route("/api/data/factory-reset", methods=["POST"])
def factory_reset():
    require_admin()
    config = current_app.config
    ok = get_context().data.factory_reset(
        config["DEFAULT_ADMIN_USERNAME"],
        config["DEFAULT_ADMIN_EMAIL"],
        config["DEFAULT_ADMIN_PASSWORD"],
    )
    return jsonify({"success": ok}), (200 if ok else 500)
