"""SQLAlchemy models for the application."""
from app.models.user import User
from app.models.pet import Pet
from app.models.application import Application

__all__ = [
    "User",
    "Pet",
    "Application",
]
