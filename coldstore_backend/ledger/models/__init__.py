from .ledger import Ledger, MovementDirection

__all__ = ["Ledger", "MovementDirection"]
