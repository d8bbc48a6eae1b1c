"""
services/exceptions.py – Structured custom exception hierarchy for ItemDex.

All service-level errors derive from ItemDexError so callers can catch broadly
or specifically depending on context.
"""


class ItemDexError(Exception):
    """Base class for all ItemDex exceptions."""


class BulkLoadError(ItemDexError):
    """
    Raised when the catalogue listing cannot be fetched or parsed.

    Fatal for the whole view: nothing is rendered and no detail is fetched.
    """


class DetailFetchError(ItemDexError):
    """
    Raised when a single item's detail record cannot be fetched or parsed.

    Attributes
    ----------
    name : Listing name of the item whose detail failed.
    """

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        super().__init__(message)
