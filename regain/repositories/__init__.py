"""Repositories package."""
from regain.repositories.base import Repository
from regain.repositories.profile_repository import ProfileRepository
from regain.repositories.session_record_repository import SessionRecordRepository
from regain.repositories.variation_repository import VariationRepository

__all__ = [
    "Repository",
    "ProfileRepository",
    "SessionRecordRepository",
    "VariationRepository",
]
