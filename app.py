"""
PrintShop Desk - Flask Application Entry Point.

This is a slim app factory that:
1. Loads .env and the Config class
2. Sets up logging
3. Builds the ShopContext (registries + services) and loads saved data
4. Registers route blueprints
5. Sets up JSON error handlers and the shutdown autosave

ARCHITECTURE:
    Flask request threads
    └── routes/* -> ShopContext services -> registries (lock-protected)

    Shutdown
    └── atexit autosave of every data file (if AUTOSAVE_DATA)
"""

from __future__ import annotations

import atexit
import logging
import os
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from core.context import ShopContext
from core.exceptions import PrintShopError
from logging_config import setup_logging, get_logger
from routes import register_blueprints


# Module logger (configured after setup_logging)
logger = get_logger(__name__)

BASE_DIR = Path(__file__).parent


def create_app(config_object: Union[str, type] = "config.Config",
               context: Optional[ShopContext] = None) -> Flask:
    """
    Application factory - creates and configures Flask app.

    Args:
        config_object: Config class or its import path
        context: Pre-built ShopContext (tests); built from config if None

    Returns:
        Configured Flask application
    """
    # .env next to the executable wins over the shell environment
    env_file = BASE_DIR / '.env'
    if env_file.exists():
        load_dotenv(env_file, override=True)
    else:
        load_dotenv(override=True)

    app = Flask(__name__)
    app.config.from_object(config_object)

    # Configure logging
    log_level = logging.DEBUG if app.config.get("DEBUG") else logging.INFO
    enable_file_logging = app.config.get("ENVIRONMENT") == "production"

    root_logger = setup_logging(
        app_name="print_shop",
        log_level=log_level,
        enable_file_logging=enable_file_logging
    )

    app.logger.handlers = root_logger.handlers
    app.logger.setLevel(log_level)

    logger.info(f"Starting PrintShop Desk in {app.config.get('ENVIRONMENT')} mode")

    # =========================================================================
    # SHOP STATE
    # =========================================================================

    if context is None:
        context = ShopContext.from_config(app.config)

    if app.config.get("AUTOLOAD_DATA"):
        if not context.data.load_all():
            logger.warning("Started with partially loaded data, see errors above")

    # A fresh installation gets the starter materials and an admin account
    if len(context.accounts) == 0:
        context.data.seed_defaults(
            app.config["DEFAULT_ADMIN_USERNAME"],
            app.config["DEFAULT_ADMIN_EMAIL"],
            app.config["DEFAULT_ADMIN_PASSWORD"],
        )
        logger.info(f"Seeded default data with admin account '{app.config['DEFAULT_ADMIN_USERNAME']}'")

    app.config["SHOP_CONTEXT"] = context

    # =========================================================================
    # CLEANUP REGISTRATION
    # =========================================================================

    if app.config.get("AUTOSAVE_DATA"):
        def autosave():
            """Save every data file on interpreter shutdown."""
            logger.info("Shutting down, saving data...")
            context.data.save_all()

        atexit.register(autosave)

    # =========================================================================
    # REGISTER BLUEPRINTS
    # =========================================================================

    register_blueprints(app)

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    @app.errorhandler(PrintShopError)
    def handle_shop_error(e: PrintShopError):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"error": e.name, "details": {"description": e.description}}), e.code

    @app.errorhandler(500)
    def handle_server_error(e):
        logger.error(f"500 error: {e}", exc_info=True)
        return jsonify({"error": "Internal server error", "details": {}}), 500

    logger.info("Application initialized successfully")
    return app


if __name__ == "__main__":
    app = create_app()
    debug_mode = os.environ.get("FLASK_DEBUG", "1") == "1"
    app.run(debug=debug_mode)
