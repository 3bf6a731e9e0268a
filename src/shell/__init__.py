"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- Notification service client (HTTP)
- Subscription stores (Firestore, in-memory)
- Configuration loading (environment/files)

Keep this layer thin and simple. All business logic should be in core.
"""

from src.shell.notify_client import NotifyClient
from src.shell.firestore_client import FirestoreSubscriptionStore
from src.shell.subscription_store import InMemorySubscriptionStore, SubscriptionStore
from src.shell.config_loader import load_config, load_config_from_env

__all__ = [
    "NotifyClient",
    "FirestoreSubscriptionStore",
    "InMemorySubscriptionStore",
    "SubscriptionStore",
    "load_config",
    "load_config_from_env",
]
