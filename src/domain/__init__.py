"""Domain models and types for the UnPack token ledger.

This package contains the in-memory (Pydantic) token models, the pure
allocation and tax functions, and the ledger itself. They are independent
from persistence models so that business logic and testing can evolve without
DB coupling.
"""

__all__ = [
    "allocation",
    "tax",
    "token",
    "token_ledger",
]
