from __future__ import annotations

from .serials import SerialStore, read_inventory

__all__ = ["SerialStore", "read_inventory"]
