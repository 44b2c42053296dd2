"""
PATH: core/models/__init__.py

Core models export surface (warehouse reference data).
"""

from .reference import PackType, ProductSubType, ProductType, Room

__all__ = [
    "PackType",
    "ProductSubType",
    "ProductType",
    "Room",
]
