from __future__ import annotations
import uuid
import datetime
from sqlalchemy import Text, Date, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from catalog.models.base import Base


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


#Author
class Author(Base):
    __tablename__: str = "authors"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name: Mapped[str] = mapped_column(Text, nullable=False)
    family_name: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    date_of_birth: Mapped[datetime.date | None] = mapped_column(Date, nullable=True)
    date_of_death: Mapped[datetime.date | None] = mapped_column(Date, nullable=True)
    # tie-breaker for listing order
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    @property
    def name(self) -> str:
        return f"{self.family_name}, {self.first_name}"

    @property
    def lifespan(self) -> str:
        born = self.date_of_birth.isoformat() if self.date_of_birth else ""
        died = self.date_of_death.isoformat() if self.date_of_death else ""
        return f"{born} - {died}"
