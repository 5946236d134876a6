"""
Persisted identity records: users and the addresses and phones filed under them.
"""

from typing import List, Optional

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.kernel.models.base import Base


class User(Base):
    """User account model."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    # Sub-records reference the user by foreign key only; they hold no
    # reference back to the User object.
    addresses: Mapped[List["Address"]] = relationship(
        "Address",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="Address.id",
    )
    phones: Mapped[List["Phone"]] = relationship(
        "Phone",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="Phone.id",
    )

    def __repr__(self) -> str:
        return f"<User {self.email}>"


class Address(Base):
    """Postal address owned by a user."""

    __tablename__ = "addresses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    street: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    number: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    complement: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    postal_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Address {self.id} user={self.user_id}>"


class Phone(Base):
    """Phone number owned by a user."""

    __tablename__ = "phones"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    number: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    area_code: Mapped[Optional[str]] = mapped_column(String(3), nullable=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Phone {self.id} user={self.user_id}>"
