"""
School Models

Schools participating in the symposium. Created by an advisor during
registration or picked from the bundled reference list.
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from symposium.modules.shared import BaseModel


class School(BaseModel):
    """A participating school."""

    __tablename__ = "schools"

    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<School(id={self.id}, name={self.name})>"
