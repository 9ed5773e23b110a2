"""Application model for adoption requests."""
import uuid
from datetime import datetime
from typing import Optional, TYPE_CHECKING

from sqlalchemy import String, Text, DateTime, ForeignKey, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.enums import ApplicationStatus

if TYPE_CHECKING:
    from app.models.pet import Pet


class Application(Base):
    """
    Adoption application submitted by a user for a pet.

    user_name, user_email, pet_name and reviewed_by_name are snapshots taken
    when the row is written and are not kept in sync with the source records.
    One row per (pet, user): any earlier application blocks a new one.
    """
    __tablename__ = "applications"
    __mapper_args__ = {"eager_defaults": True}
    __table_args__ = (
        UniqueConstraint("pet_id", "user_id", name="uq_applications_pet_id_user_id"),
    )

    # Primary key
    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
        nullable=False
    )

    # Foreign keys
    pet_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("pets.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    reviewed_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )

    # Denormalized snapshots
    user_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False
    )
    user_email: Mapped[str] = mapped_column(
        String(255),
        nullable=False
    )
    pet_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False
    )
    reviewed_by_name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True
    )

    # Application content
    message: Mapped[str] = mapped_column(
        Text,
        nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(20),
        default=ApplicationStatus.PENDING.value,
        nullable=False,
        index=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        onupdate=func.now(),
        nullable=True
    )

    # Relationships
    pet: Mapped["Pet"] = relationship(
        "Pet",
        lazy="selectin"
    )

    def __repr__(self) -> str:
        return (
            f"<Application(id={self.id}, pet_id={self.pet_id}, "
            f"user_id={self.user_id}, status={self.status})>"
        )
