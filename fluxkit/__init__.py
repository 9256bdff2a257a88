"""A Flux-style application framework: dispatcher, stores, listeners, action creators and middleware."""

__version__ = "1.1.0"

__all__ = [
    "actioncreator",
    "applistener",
    "dispatcher",
    "filter",
    "hook",
    "hydrate",
    "keytable",
    "listener",
    "middleware",
    "store",
]