"""
Eats Server: Place SQLAlchemy Model
======================================

What:  ORM model representing the `places` table.
Who:   Used by PlaceStore for CRUD operations and by Alembic / create_tables().

Table Design:
    - Integer primary key assigned by the database (SERIAL on PostgreSQL,
      ROWID alias on SQLite); never accepted from clients.
    - Every content column is NOT NULL.
    - approved defaults to false on both the Python and the server side, so
      rows inserted outside the ORM also start out as "requested".
    - Partial listing queries filter on approved and order by id; the
      (approved, id) index serves both moderation listings.
"""

from sqlalchemy import Boolean, Index, Integer, Text, false
from sqlalchemy.orm import Mapped, mapped_column

from eats.database import Base


class Place(Base):
    """
    A suggested food venue.

    Lifecycle:
        1. Created by POST /places (approved = false)
        2. Content fields edited by PUT /places/{id}
        3. approved toggled only by PATCH .../approve and .../disapprove
        4. Hard-deleted by DELETE /places/{id}
    """

    __tablename__ = "places"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(Text, nullable=False)
    budget: Mapped[int] = mapped_column(Integer, nullable=False)
    location: Mapped[str] = mapped_column(Text, nullable=False)
    mood: Mapped[str] = mapped_column(Text, nullable=False)
    cuisine: Mapped[str] = mapped_column(Text, nullable=False)
    mealtime: Mapped[str] = mapped_column(Text, nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)

    # Moderation state: false = requested, true = approved
    approved: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    __table_args__ = (
        Index("idx_places_approved_id", "approved", "id"),
    )

    # Columns a general update may overwrite; id and approved are excluded
    CONTENT_FIELDS = ("name", "budget", "location", "mood", "cuisine", "mealtime", "rating")

    def __repr__(self) -> str:
        return f"<Place(id={self.id}, name='{self.name}', approved={self.approved})>"
