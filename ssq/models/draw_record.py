"""Historical Double Color Ball draws.

One row per issue. Red numbers are stored twice: ``red_1..red_6`` sorted
ascending and ``red_1_order..red_6_order`` in the order they were drawn.
"""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Index, Integer, SmallInteger, String, func
from sqlalchemy.orm import Mapped, mapped_column

from ssq.models.base import Base

SYNTHETIC_SOURCE = "synthetic"


class DrawRecord(Base):
    """One historical draw (issue)."""

    __tablename__ = "lottery_history"
    __table_args__ = (
        Index("ix_lottery_history_combination", "red_1", "red_2", "red_3", "red_4", "red_5", "red_6", "blue"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    issue_number: Mapped[str] = mapped_column(String(7), unique=True, nullable=False)

    red_1: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    red_2: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    red_3: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    red_4: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    red_5: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    red_6: Mapped[int] = mapped_column(SmallInteger, nullable=False)

    red_1_order: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    red_2_order: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    red_3_order: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    red_4_order: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    red_5_order: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    red_6_order: Mapped[int] = mapped_column(SmallInteger, nullable=False)

    blue: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    draw_date: Mapped[date] = mapped_column(Date, nullable=False)

    prize_pool: Mapped[str | None] = mapped_column(String(64), nullable=True)
    first_prize_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    first_prize_amount: Mapped[str | None] = mapped_column(String(64), nullable=True)

    # Stage name that produced the row; SYNTHETIC_SOURCE for fallback data,
    # which a real draw with the same issue or date later replaces.
    source: Mapped[str] = mapped_column(String(32), nullable=False, default="unknown")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())

    @property
    def red_numbers(self) -> list[int]:
        return [self.red_1, self.red_2, self.red_3, self.red_4, self.red_5, self.red_6]

    @property
    def red_numbers_order(self) -> list[int]:
        return [
            self.red_1_order,
            self.red_2_order,
            self.red_3_order,
            self.red_4_order,
            self.red_5_order,
            self.red_6_order,
        ]
