"""
Application context holding the shop's shared state.

One ShopContext is built at startup and handed to every service and route.
Nothing in the domain layer is a module-level singleton, so tests build a
fresh context per test.

Usage:
    context = ShopContext.from_config(app.config)
    context.data.load_all()
    result = context.sessions.authenticate_user("admin", "...")
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional, Union

from logging_config import get_logger
from modules.accounts import AccountRegistry
from modules.catalog import MaterialCatalog
from modules.file_store import FileStore
from modules.inventory import DEFAULT_STOCK_GRAMS, InventoryLedger
from modules.order_registry import OrderRegistry
from modules.system_config import SystemConfig
from services.account_service import AccountService
from services.data_manager import DataManager
from services.order_service import OrderService
from services.session_manager import (
    DEFAULT_MAX_SESSIONS_PER_USER,
    DEFAULT_SESSION_ID_LENGTH,
    DEFAULT_TIMEOUT_MINUTES,
    SessionManager,
)

logger = get_logger(__name__)


class ShopContext:
    """Owns every registry and service of one running shop."""

    def __init__(
        self,
        data_dir: Union[str, Path] = "data",
        backup_dir: Optional[Union[str, Path]] = None,
        default_stock: Optional[int] = DEFAULT_STOCK_GRAMS,
        strict_status_transitions: bool = False,
        session_timeout_minutes: int = DEFAULT_TIMEOUT_MINUTES,
        max_sessions_per_user: int = DEFAULT_MAX_SESSIONS_PER_USER,
        session_id_length: int = DEFAULT_SESSION_ID_LENGTH,
        clock=None,
    ):
        self.config = SystemConfig()
        self.catalog = MaterialCatalog()
        self.inventory = InventoryLedger(default_stock=default_stock)
        self.accounts = AccountRegistry()
        self.orders = OrderRegistry()

        session_kwargs = {"clock": clock} if clock is not None else {}
        self.sessions = SessionManager(
            self.accounts,
            timeout_minutes=session_timeout_minutes,
            max_sessions_per_user=max_sessions_per_user,
            session_id_length=session_id_length,
            **session_kwargs,
        )
        self.account_service = AccountService(self.accounts, self.sessions)
        self.order_service = OrderService(
            self.orders,
            self.inventory,
            self.config,
            strict_status_transitions=strict_status_transitions,
        )
        self.data = DataManager(self, FileStore(data_dir, backup_dir))

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "ShopContext":
        """Build a context from a Flask config mapping."""
        return cls(
            data_dir=config.get("DATA_DIR", "data"),
            backup_dir=config.get("BACKUP_DIR"),
            default_stock=config.get("DEFAULT_STOCK_GRAMS", DEFAULT_STOCK_GRAMS),
            strict_status_transitions=config.get("STRICT_STATUS_TRANSITIONS", False),
            session_timeout_minutes=config.get("SESSION_TIMEOUT_MINUTES", DEFAULT_TIMEOUT_MINUTES),
            max_sessions_per_user=config.get("MAX_SESSIONS_PER_USER", DEFAULT_MAX_SESSIONS_PER_USER),
            session_id_length=config.get("SESSION_ID_LENGTH", DEFAULT_SESSION_ID_LENGTH),
        )

    def reset_all(self) -> None:
        """Restore default settings and drop every order, queue entry and invoice."""
        self.config.reset_to_defaults()
        self.orders.clear()
        self.order_service.clear_invoices()
        logger.info("Configuration and order state reset")

    def clear_state(self) -> None:
        """Forget everything held in memory (used before reloading from disk)."""
        self.reset_all()
        self.catalog.clear()
        self.inventory.clear()
        self.accounts.clear()
        self.sessions.clear()
