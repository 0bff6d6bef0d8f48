"""
Persistence of the shop's state to the data directory.

Files written by save_all() (all pipe-delimited except the config):
    materials.txt, users.txt, inventory.txt, orders.txt, order_queue.txt,
    system_config.txt

Load order matters: materials are loaded before inventory because
inventory lines name a material that must already be in the catalog.

Every public method logs failures and returns a success flag; FileStore's
DataFileError never escapes this class.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from core.exceptions import DataFileError
from logging_config import get_logger
from models.account import Account, Role
from models.material import Material
from models.order import OrderStatus
from modules import record_codec as codec
from modules.file_store import FileStore
from modules.system_config import CONFIG_FILENAME

if TYPE_CHECKING:
    from core.context import ShopContext

logger = get_logger(__name__)

MATERIALS_FILE = "materials.txt"
USERS_FILE = "users.txt"
INVENTORY_FILE = "inventory.txt"
ORDERS_FILE = "orders.txt"
QUEUE_FILE = "order_queue.txt"

DATA_FILES = (MATERIALS_FILE, USERS_FILE, INVENTORY_FILE, ORDERS_FILE, QUEUE_FILE, CONFIG_FILENAME)

# Seed data for an empty installation: (brand, type, cost/g, temp, color, grams)
DEFAULT_MATERIALS = (
    ("Generic", "PLA", 0.05, 200, "Blue", 5000),
    ("Generic", "ABS", 0.08, 250, "Red", 3000),
    ("Generic", "PETG", 0.07, 240, "Clear", 2000),
)


def _document(header: str, title: str, lines: List[str]) -> str:
    stamp = datetime.now().isoformat(timespec="seconds")
    body = "\n".join(lines)
    return f"# {title}\n{header}\n# Generated: {stamp}\n\n{body}\n"


class DataManager:
    """Saves and loads a ShopContext through a FileStore."""

    def __init__(self, context: "ShopContext", store: FileStore):
        self._context = context
        self.store = store

    # ------------------------------------------------------------------
    # Whole-state operations
    # ------------------------------------------------------------------

    def save_all(self) -> bool:
        results = [
            self.save_materials(),
            self.save_users(),
            self.save_inventory(),
            self.save_orders(),
            self.save_config(),
        ]
        ok = all(results)
        if ok:
            logger.info(f"All data saved to {self.store.data_dir}")
        else:
            logger.error("Some data files could not be saved")
        return ok

    def load_all(self) -> bool:
        """
        Replace the in-memory state with the contents of the data directory.

        Catalog, stock, accounts, orders, invoices and sessions are cleared
        first, so anything not saved is dropped. When the directory holds no
        data files at all the current state is left untouched.
        """
        if not any(self.file_status().values()):
            logger.info(f"No data files in {self.store.data_dir}, keeping current state")
            return True
        self._context.clear_state()
        results = [
            self.load_config(),
            self.load_materials(),
            self.load_users(),
            self.load_inventory(),
            self.load_orders(),
        ]
        ok = all(results)
        if ok:
            logger.info(f"All data loaded from {self.store.data_dir}")
        else:
            logger.error("Some data files could not be loaded")
        return ok

    # ------------------------------------------------------------------
    # Materials
    # ------------------------------------------------------------------

    def save_materials(self) -> bool:
        lines = [codec.encode_material(m) for m in self._context.catalog.list()]
        return self._write(MATERIALS_FILE, _document(codec.MATERIALS_HEADER, "Material Data", lines))

    def load_materials(self) -> bool:
        return self._load(MATERIALS_FILE, self._apply_materials)

    def _apply_materials(self, text: str) -> None:
        count = 0
        for line in codec.iter_records(text):
            material = codec.decode_material(line)
            if material is not None:
                self._context.catalog.add(material)
                count += 1
        logger.info(f"Loaded {count} material(s)")

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def save_users(self) -> bool:
        lines = [codec.encode_account(a) for a in self._context.accounts.list()]
        return self._write(USERS_FILE, _document(codec.USERS_HEADER, "User Data", lines))

    def load_users(self) -> bool:
        return self._load(USERS_FILE, self._apply_users)

    def _apply_users(self, text: str) -> None:
        count = 0
        for line in codec.iter_records(text):
            account = codec.decode_account(line)
            if account is not None:
                self._context.accounts.put(account)
                count += 1
        logger.info(f"Loaded {count} account(s)")

    # ------------------------------------------------------------------
    # Inventory
    # ------------------------------------------------------------------

    def save_inventory(self) -> bool:
        catalog = self._context.catalog
        lines = []
        for key, grams in self._context.inventory.items().items():
            material = catalog.get(key)
            name = material.display_name if material else key.display_name
            lines.append(codec.encode_inventory_entry(name, grams))
        return self._write(INVENTORY_FILE, _document(codec.INVENTORY_HEADER, "Inventory Data", lines))

    def load_inventory(self) -> bool:
        """Inventory lines may name a material by display name or legacy 'Brand Type' name."""
        return self._load(INVENTORY_FILE, self._apply_inventory)

    def _apply_inventory(self, text: str) -> None:
        catalog = self._context.catalog
        for line in codec.iter_records(text):
            entry = codec.decode_inventory_entry(line)
            if entry is None:
                continue
            name, grams = entry
            material = catalog.find_by_display_name(name) or catalog.find_by_name(name)
            if material is None:
                logger.warning(f"Inventory entry for unknown material skipped: {name}")
                continue
            self._context.inventory.set_stock(material, grams)

    # ------------------------------------------------------------------
    # Orders and queue
    # ------------------------------------------------------------------

    def save_orders(self) -> bool:
        registry = self._context.orders
        order_lines = [codec.encode_order(o) for o in registry.list()]
        queue_lines = [str(order_id) for order_id in registry.queued_ids()]
        orders_ok = self._write(ORDERS_FILE, _document(codec.ORDERS_HEADER, "Order Data", order_lines))
        queue_ok = self._write(QUEUE_FILE, _document(codec.QUEUE_HEADER, "Order Queue", queue_lines))
        return orders_ok and queue_ok

    def load_orders(self) -> bool:
        """
        Load orders and the queue.

        Without order_queue.txt, pending orders are queued in id order.
        """
        return self._load(ORDERS_FILE, self._apply_orders)

    def _apply_orders(self, text: str) -> None:
        registry = self._context.orders
        loaded = []
        for line in codec.iter_records(text):
            order = codec.decode_order(line)
            if order is not None:
                registry.register(order, enqueue=False)
                loaded.append(order)

        queue_text = self.store.read_text(QUEUE_FILE)
        if queue_text is None:
            registry.restore_queue(
                sorted(o.order_id for o in loaded if o.status is OrderStatus.PENDING)
            )
        else:
            ids = (codec.decode_queue_entry(line) for line in codec.iter_records(queue_text))
            registry.restore_queue(i for i in ids if i is not None)
        logger.info(f"Loaded {len(loaded)} order(s), {registry.queue_size()} queued")

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def save_config(self) -> bool:
        return self._context.config.save_to_file(self.store.path(CONFIG_FILENAME))

    def load_config(self) -> bool:
        return self._context.config.load_from_file(self.store.path(CONFIG_FILENAME))

    # ------------------------------------------------------------------
    # Backups and reset
    # ------------------------------------------------------------------

    def backup_all(self) -> Optional[Path]:
        try:
            return self.store.backup(DATA_FILES)
        except DataFileError as e:
            logger.error(f"Backup failed: {e}")
            return None

    def list_backups(self) -> List[Path]:
        return self.store.list_backups()

    def prune_backups(self, keep: int = 5) -> int:
        try:
            return self.store.prune_backups(keep)
        except DataFileError as e:
            logger.error(f"Backup cleanup failed: {e}")
            return 0

    def restore_latest(self) -> bool:
        """Copy the newest backup into the data directory and reload everything."""
        backups = self.store.list_backups()
        if not backups:
            logger.warning("No backups available to restore")
            return False
        try:
            self.store.restore(backups[-1], DATA_FILES)
        except DataFileError as e:
            logger.error(f"Restore failed: {e}")
            return False
        return self.load_all()

    def seed_defaults(self, admin_username: str, admin_email: str, admin_password: str) -> None:
        """Add the starter materials, their stock and the admin account if missing."""
        context = self._context
        for brand, material_type, cost, temp, color, grams in DEFAULT_MATERIALS:
            material = Material(brand, material_type, cost, temp, color)
            if material.key not in context.catalog:
                context.catalog.add(material)
                context.inventory.set_stock(material, grams)
        if context.accounts.get(admin_username) is None:
            context.accounts.add(Account.create(admin_username, admin_email, Role.ADMIN, admin_password))

    def factory_reset(self, admin_username: str, admin_email: str, admin_password: str) -> bool:
        """
        Wipe all state, restore default settings and seed the starter data.

        A backup of the current files is taken first.
        """
        self.backup_all()
        self._context.clear_state()
        self.seed_defaults(admin_username, admin_email, admin_password)
        logger.warning("Factory reset performed")
        return self.save_all()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _write(self, filename: str, content: str) -> bool:
        try:
            self.store.write_text(filename, content)
        except DataFileError as e:
            logger.error(str(e))
            return False
        return True

    def _load(self, filename: str, apply: Callable[[str], None]) -> bool:
        """
        Read a file and hand its text to `apply`.

        A missing file is not an error. Returns False only on a read failure.
        """
        try:
            text = self.store.read_text(filename)
            if text is not None:
                apply(text)
        except DataFileError as e:
            logger.error(str(e))
            return False
        return True

    def file_status(self) -> Dict[str, bool]:
        return {filename: self.store.exists(filename) for filename in DATA_FILES}
