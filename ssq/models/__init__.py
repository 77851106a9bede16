"""ORM models."""

from ssq.models.draw_record import DrawRecord
from ssq.models.generated_combination import GeneratedCombination

__all__ = ["DrawRecord", "GeneratedCombination"]
