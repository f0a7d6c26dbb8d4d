"""Database models."""
from regain.models.session_record import WeeklySessionRecord
from regain.models.user import User
from regain.models.variation import Variation

__all__ = ["User", "Variation", "WeeklySessionRecord"]
