"""Global enums: values are the wire strings the web client sends and reads."""

from enum import Enum


class ItemRarity(str, Enum):
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"
    MYTHIC = "mythic"


class TradeStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class NotificationType(str, Enum):
    TRADE = "trade"
    REVIEW = "review"
    SYSTEM = "system"


class SortOrder(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    RATING = "rating"
