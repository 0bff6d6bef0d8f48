"""
Pipe-delimited record codec for the data files.

Formats (one record per line, '#' comments and blank lines ignored):
    materials.txt   brand|type|costPerGram|printTemp|color
                    (legacy: name|costPerGram|printTemp|color, name split
                    on its first space into brand and type)
    users.txt       username|email|role|passwordHash
    inventory.txt   materialName|stockGrams
    orders.txt      orderID|username|email|role|materialName|costPerGram|
                    printTemp|color|dimensions|quantity|instructions|
                    status|priority|estimatedHours[|materialGramsPerUnit]
    order_queue.txt orderID

Decoders return None for a malformed line and log why; the caller skips it.
Orders are denormalized: the decoded order carries stand-in Account and
Material objects built from its own fields.
"""

from __future__ import annotations

import re
from typing import Iterator, List, Optional, Tuple

from logging_config import get_logger
from models.account import Account, Role
from models.material import Material
from models.order import Order, OrderPriority, OrderStatus

logger = get_logger(__name__)

FIELD_SEPARATOR = "|"
COMMENT_PREFIX = "#"
ORDER_FIELD_COUNT = 14
DEFAULT_GRAMS_PER_UNIT = 10.0

_UNSAFE = re.compile(r"[|\r\n]+")

MATERIALS_HEADER = "# Format: brand|type|costPerGram|printTemp|color"
USERS_HEADER = "# Format: username|email|role|passwordHash"
INVENTORY_HEADER = "# Format: materialName|stockGrams"
ORDERS_HEADER = (
    "# Format: orderID|username|email|role|materialName|costPerGram|printTemp|color|"
    "dimensions|quantity|specialInstructions|status|priority|estimatedHours|materialGramsPerUnit"
)
QUEUE_HEADER = "# Format: orderID"


def clean_field(value: object) -> str:
    """Replace separators and line breaks so a value fits in one field."""
    return _UNSAFE.sub(" ", str(value)).strip()


def join_fields(*values: object) -> str:
    return FIELD_SEPARATOR.join(clean_field(v) for v in values)


def iter_records(text: str) -> Iterator[str]:
    """Yield the data lines of a file, skipping comments and blanks."""
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith(COMMENT_PREFIX):
            continue
        yield line


def split_record(line: str) -> List[str]:
    return [part.strip() for part in line.split(FIELD_SEPARATOR)]


def split_legacy_name(name: str) -> Tuple[str, str]:
    """'Overture PLA' -> ('Overture', 'PLA'). A single word becomes both."""
    name = name.strip()
    if " " in name:
        brand, material_type = name.split(" ", 1)
        return brand, material_type.strip()
    return name, name


# ----------------------------------------------------------------------
# Materials
# ----------------------------------------------------------------------

def encode_material(material: Material) -> str:
    return join_fields(
        material.brand,
        material.type,
        repr(float(material.cost_per_gram)),
        material.print_temp,
        material.color,
    )


def decode_material(line: str) -> Optional[Material]:
    parts = split_record(line)
    try:
        if len(parts) >= 5:
            brand, material_type, cost, temp, color = parts[:5]
        elif len(parts) == 4:
            name, cost, temp, color = parts
            brand, material_type = split_legacy_name(name)
        else:
            logger.warning(f"Skipping material record with {len(parts)} fields: {line!r}")
            return None
        material = Material(
            brand=brand,
            type=material_type,
            cost_per_gram=float(cost),
            print_temp=int(temp),
            color=color,
        )
    except ValueError as e:
        logger.warning(f"Skipping malformed material record {line!r}: {e}")
        return None
    if material.cost_per_gram < 0:
        logger.warning(f"Skipping material with negative cost: {line!r}")
        return None
    return material


# ----------------------------------------------------------------------
# Users
# ----------------------------------------------------------------------

def encode_account(account: Account) -> str:
    return join_fields(account.username, account.email, account.role.value, account.password_hash)


def decode_account(line: str) -> Optional[Account]:
    parts = split_record(line)
    if len(parts) < 3 or not parts[0]:
        logger.warning(f"Skipping malformed user record: {line!r}")
        return None
    role = Role.parse(parts[2])
    if role is None:
        logger.warning(f"Skipping user {parts[0]} with unknown role {parts[2]!r}")
        return None
    password_hash = parts[3] if len(parts) > 3 else ""
    return Account(username=parts[0], email=parts[1], role=role, password_hash=password_hash)


# ----------------------------------------------------------------------
# Inventory
# ----------------------------------------------------------------------

def encode_inventory_entry(material_name: str, grams: int) -> str:
    return join_fields(material_name, int(grams))


def decode_inventory_entry(line: str) -> Optional[Tuple[str, int]]:
    parts = split_record(line)
    if len(parts) < 2 or not parts[0]:
        logger.warning(f"Skipping malformed inventory record: {line!r}")
        return None
    try:
        grams = int(parts[1])
    except ValueError:
        logger.warning(f"Skipping inventory record with bad stock value: {line!r}")
        return None
    if grams < 0:
        logger.warning(f"Skipping inventory record with negative stock: {line!r}")
        return None
    return parts[0], grams


# ----------------------------------------------------------------------
# Orders
# ----------------------------------------------------------------------

def encode_order(order: Order) -> str:
    account = order.account
    material = order.material
    return join_fields(
        order.order_id,
        account.username,
        account.email,
        account.role.value,
        material.name,
        repr(float(material.cost_per_gram)),
        material.print_temp,
        material.color,
        order.dimensions,
        order.quantity,
        order.special_instructions,
        order.status.value,
        order.priority.value,
        repr(round(order.estimate_print_time_hours(), 4)),
        repr(float(order.material_grams)),
    )


def decode_order(line: str) -> Optional[Order]:
    """
    Rebuild an order from its denormalized record.

    The estimated hours field is informational and recomputed on demand.
    Records without the grams-per-unit field get DEFAULT_GRAMS_PER_UNIT.
    """
    parts = split_record(line)
    if len(parts) < ORDER_FIELD_COUNT:
        logger.warning(f"Skipping order record with {len(parts)} fields: {line!r}")
        return None
    try:
        order_id = int(parts[0])
        brand, material_type = split_legacy_name(parts[4])
        material = Material(
            brand=brand,
            type=material_type,
            cost_per_gram=float(parts[5]),
            print_temp=int(parts[6]),
            color=parts[7],
        )
        quantity = int(parts[9])
        grams = DEFAULT_GRAMS_PER_UNIT
        if len(parts) > ORDER_FIELD_COUNT and parts[ORDER_FIELD_COUNT]:
            grams = float(parts[ORDER_FIELD_COUNT])
    except ValueError as e:
        logger.warning(f"Skipping malformed order record {line!r}: {e}")
        return None

    account = Account(
        username=parts[1],
        email=parts[2],
        role=Role.parse(parts[3]) or Role.CUSTOMER,
    )
    status = OrderStatus.parse(parts[11])
    if status is None:
        logger.warning(f"Order {order_id} has unknown status {parts[11]!r}, using pending")
        status = OrderStatus.PENDING
    priority = OrderPriority.parse(parts[12]) or OrderPriority.NORMAL

    return Order(
        order_id=order_id,
        account=account,
        material=material,
        dimensions=parts[8],
        quantity=quantity,
        material_grams=grams,
        special_instructions=parts[10],
        status=status,
        priority=priority,
    )


def decode_queue_entry(line: str) -> Optional[int]:
    try:
        return int(line.strip())
    except ValueError:
        logger.warning(f"Skipping malformed queue entry: {line!r}")
        return None
