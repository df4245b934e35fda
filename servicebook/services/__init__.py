"""Service layer for ServiceBook.

This package contains business logic that sits between the Flask
route handlers and the store adapters. Nothing in this package
performs any HTTP handling; services return model objects or plain
Python data and raise the exceptions defined in
``servicebook.errors`` when something goes wrong.
"""

from .order_keys import next_order, resequence
from .ordered_collection import OrderedCollectionService
from .soft_delete_service import soft_delete_item

__all__ = [
    "next_order",
    "resequence",
    "OrderedCollectionService",
    "soft_delete_item",
]
