"""Pet model for the adoption catalog."""
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import String, Text, Float, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.enums import PetStatus


class Pet(Base):
    """
    Pet model representing an animal listed for adoption.

    The status column is maintained by the application lifecycle
    (see app.services.adoption_service); catalog edits never write it.
    """
    __tablename__ = "pets"
    # Load server-generated timestamps during flush; no lazy IO afterwards
    __mapper_args__ = {"eager_defaults": True}

    # Primary key
    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
        nullable=False
    )

    # Basic information
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False
    )
    species: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        index=True
    )
    breed: Mapped[str] = mapped_column(
        String(255),
        nullable=False
    )
    age: Mapped[float] = mapped_column(
        Float,
        nullable=False
    )
    description: Mapped[str] = mapped_column(
        Text,
        nullable=False
    )
    image: Mapped[str] = mapped_column(
        String(1000),
        nullable=False
    )

    status: Mapped[str] = mapped_column(
        String(20),
        default=PetStatus.AVAILABLE.value,
        nullable=False,
        index=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        onupdate=func.now(),
        nullable=True
    )

    def __repr__(self) -> str:
        return f"<Pet(id={self.id}, name={self.name}, status={self.status})>"
