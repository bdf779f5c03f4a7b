"""
VisitorBook Backend: Visitor Counter Model
============================================

What:  ORM model for the `visitors` table, which holds exactly one row.
How:   The row has the fixed primary key COUNTER_ID; a check constraint
       rejects any other id, so a second counter row cannot exist.
Who:   Seeded by Database.init(); read and incremented by VisitorService.

Lifecycle:
    1. Inserted once at startup if absent (count = 0)
    2. Mutated only by `UPDATE ... SET count = count + 1`
    3. Never deleted
"""

from sqlalchemy import CheckConstraint, Integer, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base

# Primary key of the one and only counter row
COUNTER_ID = 1


class Visitor(Base):
    """The site-wide visitor counter."""

    __tablename__ = "visitors"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=False,
        comment="Always 1; enforced by ck_visitors_single_row",
    )

    count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
        comment="Number of recorded visits",
    )

    __table_args__ = (
        CheckConstraint(f"id = {COUNTER_ID}", name="ck_visitors_single_row"),
        CheckConstraint("count >= 0", name="ck_visitors_count_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Visitor(id={self.id}, count={self.count})>"
