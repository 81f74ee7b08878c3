from .store import TripleStore

__all__ = [
    "TripleStore",
]
