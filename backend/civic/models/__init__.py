from .base import Base
from .account import Account
from .content_item import ContentItemRecord

__all__ = [
    "Base",
    "Account",
    "ContentItemRecord",
]
