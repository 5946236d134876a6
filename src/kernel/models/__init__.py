"""
Kernel Data Models

SQLAlchemy models for identity records.
"""

from src.kernel.models.base import Base
from src.kernel.models.user import User, Address, Phone

__all__ = [
    "Base",
    "User",
    "Address",
    "Phone",
]
