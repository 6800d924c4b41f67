"""
Portfolio Backend: Project SQLAlchemy Model
=============================================

What:  ORM model for the `projects` table.
Who:   Read by PersistenceGateway. Rows are seeded out-of-band; this service
       never writes them.

The "Show Code" / "Show Website" label is not a column. It is derived from
`url` at read time (see services.gateway.action_label).
"""

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from portfolio_api.database import Base


class Project(Base):
    """A portfolio project card."""

    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    url: Mapped[str] = mapped_column(String(2048), nullable=False)

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, title='{self.title}')>"
