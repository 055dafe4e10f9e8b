"""Building blocks for ink story runtimes: values, restorable stacks, strings and snapshots."""

__version__ = "0.1.0"

__all__ = [
    "hashing",
    "inklecate",
    "restorable_stack",
    "snapshot",
    "string_operations",
    "string_table",
    "string_utils",
    "value",
]