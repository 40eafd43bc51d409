"""Database models package."""
from sportshub.db.models.user import User, RoleEnum
from sportshub.db.models.event import Event
from sportshub.db.models.sport import Sport, SportLevel
from sportshub.db.models.review import Review

__all__ = ["User", "RoleEnum", "Event", "Sport", "SportLevel", "Review"]
