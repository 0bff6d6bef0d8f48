"""Domain building blocks for PrintShop Desk."""

__all__ = [
    "accounts",
    "catalog",
    "file_store",
    "inventory",
    "order_registry",
    "password_security",
    "record_codec",
    "system_config",
    "validator",
]
