"""
Unit tests for DataManager persistence, backups and factory reset.
"""

import pytest

from core.context import ShopContext
from models.account import Account, Role
from models.material import Material
from models.order import OrderStatus
from services.data_manager import (
    INVENTORY_FILE,
    MATERIALS_FILE,
    ORDERS_FILE,
    QUEUE_FILE,
    USERS_FILE,
)

PASSWORD = "Str0ng!Pass"


# Fixtures

@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


@pytest.fixture
def make_context(data_dir, tmp_path):
    def _make():
        return ShopContext(data_dir=data_dir, backup_dir=tmp_path / "backups")
    return _make


@pytest.fixture
def populated(make_context):
    """Context with one material, two accounts, stock and three orders."""
    context = make_context()
    pla = Material("Overture", "PLA", 0.02, 210, "Black")
    context.catalog.add(pla)
    context.inventory.set_stock(pla, 1000)
    alice = Account.create("alice", "alice@example.com", Role.CUSTOMER, PASSWORD)
    context.accounts.add(alice)
    context.accounts.add(Account("legacy", "legacy@example.com", Role.USER, ""))
    context.config.tax_rate = 0.1

    for _ in range(3):
        context.order_service.submit_order(alice, pla, "10x10x5", 2, 25.5)
    context.order_service.start_next_order()
    return context


class TestSaveLoad:

    def test_save_writes_every_file(self, populated, data_dir):
        assert populated.data.save_all()
        for name in (MATERIALS_FILE, USERS_FILE, INVENTORY_FILE, ORDERS_FILE, QUEUE_FILE, "system_config.txt"):
            assert (data_dir / name).is_file()

    def test_round_trip(self, populated, make_context):
        populated.data.save_all()

        restored = make_context()
        assert restored.data.load_all()

        pla = restored.catalog.find_by_name("Overture PLA")
        assert pla is not None
        assert restored.inventory.get_stock(pla) == 1000 - 3 * 51
        assert restored.accounts.get("alice").verify_password(PASSWORD)
        assert not restored.accounts.get("legacy").has_password
        assert restored.config.tax_rate == 0.1

        orders = restored.orders.list()
        assert [o.order_id for o in orders] == [1000, 1001, 1002]
        assert orders[0].status is OrderStatus.PROCESSING
        assert orders[1].material_grams == 25.5
        assert restored.orders.queued_ids() == [1001, 1002]

    def test_loaded_ids_advance_sequence(self, populated, make_context):
        populated.data.save_all()
        restored = make_context()
        restored.data.load_all()
        assert restored.orders.next_order_id() == 1003

    def test_inventory_file_uses_display_name(self, populated, data_dir):
        populated.data.save_inventory()
        assert "PLA - Overture (Black)|847" in (data_dir / INVENTORY_FILE).read_text()

    def test_legacy_inventory_name_accepted(self, make_context, data_dir):
        data_dir.mkdir(parents=True)
        (data_dir / MATERIALS_FILE).write_text("Overture|PLA|0.02|210|Black\n")
        (data_dir / INVENTORY_FILE).write_text("# stock\nOverture PLA|321\nUnknown Thing|5\n")
        context = make_context()
        assert context.data.load_all()
        pla = context.catalog.find_by_name("Overture PLA")
        assert context.inventory.get_stock(pla) == 321

    def test_missing_queue_file_queues_pending(self, populated, make_context, data_dir):
        populated.data.save_all()
        (data_dir / QUEUE_FILE).unlink()
        restored = make_context()
        restored.data.load_all()
        assert restored.orders.queued_ids() == [1001, 1002]

    def test_load_replaces_unsaved_state(self, populated):
        populated.data.save_all()
        pla = populated.catalog.find_by_name("Overture PLA")
        alice = populated.accounts.get("alice")
        populated.order_service.submit_order(alice, pla, "10x10x5", 1, 10.0)
        assert len(populated.orders) == 4

        assert populated.data.load_all()

        assert [o.order_id for o in populated.orders.list()] == [1000, 1001, 1002]
        assert populated.orders.queued_ids() == [1001, 1002]
        pla = populated.catalog.find_by_name("Overture PLA")
        assert populated.inventory.get_stock(pla) == 1000 - 3 * 51
        assert populated.orders.next_order_id() == 1003

    def test_load_without_files_keeps_state(self, populated):
        assert populated.data.load_all()
        assert len(populated.orders) == 3

    def test_empty_directory_loads(self, make_context):
        assert make_context().data.load_all()

    def test_unreadable_file_reported(self, make_context, data_dir):
        (data_dir / USERS_FILE).mkdir(parents=True)
        assert not make_context().data.load_users()


class TestBackups:

    def test_backup_and_restore_latest(self, populated, data_dir):
        populated.data.save_all()
        backup = populated.data.backup_all()
        assert backup is not None
        assert (backup / ORDERS_FILE).is_file()
        assert populated.data.list_backups() == [backup]

        (data_dir / ORDERS_FILE).write_text("# wiped\n")
        populated.orders.clear()

        assert populated.data.restore_latest()
        assert len(populated.orders) == 3

    def test_restore_without_backups(self, make_context):
        assert not make_context().data.restore_latest()

    def test_prune(self, populated):
        for _ in range(4):
            populated.data.backup_all()
        assert populated.data.prune_backups(keep=2) == 2
        assert len(populated.data.list_backups()) == 2


class TestFactoryReset:

    def test_factory_reset(self, populated, data_dir):
        populated.data.save_all()
        assert populated.data.factory_reset("admin", "admin@example.com", "Adm1n!Secret")

        assert len(populated.orders) == 0
        assert populated.accounts.get("alice") is None
        assert populated.accounts.get("admin").is_admin
        assert populated.config.tax_rate == 0.08
        assert len(populated.catalog) == 3
        assert populated.data.list_backups()
