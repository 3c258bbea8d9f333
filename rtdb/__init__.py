"""
Store Access
Firebase Realtime Database REST client, realtime subscriptions and command writes
"""
from .firebase_client import FirebaseClient, FirebaseError, client_from_config
from .stream import StoreSubscription
from .commands import CommandWriter, CommandResult

__all__ = [
    'FirebaseClient',
    'FirebaseError',
    'client_from_config',
    'StoreSubscription',
    'CommandWriter',
    'CommandResult'
]
