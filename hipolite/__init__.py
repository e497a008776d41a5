"""HIPO-style schema dictionaries, banks, composite nodes, events, file headers and event indexes."""

__version__ = "0.1.0"

__all__ = [
    "bank",
    "datastream",
    "dictionary",
    "event",
    "header",
    "index",
    "node",
    "structure",
]