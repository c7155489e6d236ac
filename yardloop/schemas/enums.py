from enum import Enum


# https://github.com/fastapi/sqlmodel/issues/96#issuecomment-921179607
class ItemCondition(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class PreferredContact(str, Enum):
    EMAIL = "email"
    PHONE = "phone"
    MESSAGES = "messages"
