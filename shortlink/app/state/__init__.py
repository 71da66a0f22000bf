from .collection import CollectionManager, CollectionState
from .creation import CreationFlowController, CreationState
from .qr import QrRevealController, QrState
from .store import Store


__all__ = [
    "CollectionManager",
    "CollectionState",
    "CreationFlowController",
    "CreationState",
    "QrRevealController",
    "QrState",
    "Store",
]
