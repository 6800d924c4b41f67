"""
Portfolio Backend: Review SQLAlchemy Model
============================================

What:  ORM model for the `reviews` table.
Who:   Read and inserted by PersistenceGateway; never updated or deleted.

Table Design:
    - id: integer primary key assigned by the store (autoincrement)
    - company / name: short strings shown as the review byline
    - review: free-text body (TEXT, no length limit)
"""

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from portfolio_api.database import Base


class Review(Base):
    """A testimonial left by a colleague or client."""

    __tablename__ = "reviews"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    company: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    review: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<Review(id={self.id}, company='{self.company}', name='{self.name}')>"
