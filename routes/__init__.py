"""
Flask route blueprints for PrintShop Desk.

This module contains all route handlers organized by functionality:
- main: Health check
- auth: Login, logout, current session
- accounts: Registration and password management
- inventory: Material catalog and stock levels
- orders: Order intake, queue and invoices
- settings: System configuration
- data: Saving, loading and backing up data files

Each blueprint is registered with the Flask app in create_app().
"""

from .main import main_bp
from .auth import auth_bp
from .accounts import accounts_bp
from .inventory import inventory_bp
from .orders import orders_bp
from .settings import config_bp
from .data import data_bp

__all__ = [
    "main_bp",
    "auth_bp",
    "accounts_bp",
    "inventory_bp",
    "orders_bp",
    "config_bp",
    "data_bp",
]


def register_blueprints(app):
    """
    Register all blueprints with the Flask app.

    Args:
        app: Flask application instance
    """
    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(accounts_bp)
    app.register_blueprint(inventory_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(config_bp)
    app.register_blueprint(data_bp)
