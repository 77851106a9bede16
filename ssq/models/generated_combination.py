"""Combinations generated on user request."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, SmallInteger, func
from sqlalchemy.orm import Mapped, mapped_column

from ssq.models.base import Base


class GeneratedCombination(Base):
    __tablename__ = "user_numbers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    red_1: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    red_2: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    red_3: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    red_4: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    red_5: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    red_6: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    blue: Mapped[int] = mapped_column(SmallInteger, nullable=False)

    generated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())

    @property
    def red_numbers(self) -> list[int]:
        return [self.red_1, self.red_2, self.red_3, self.red_4, self.red_5, self.red_6]
