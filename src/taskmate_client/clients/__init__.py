from .base import BaseClient
from .dealerships import DealershipsApi
from .session import SessionApi

__all__ = [
    "BaseClient",
    "DealershipsApi",
    "SessionApi",
]
