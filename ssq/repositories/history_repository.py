"""Repository layer for draw history and the user generation log.

Inserts commit one record at a time: a failure on one record never undoes the
records committed before it. Rows are never updated; the only deletion is of
synthetic fallback rows once a real draw for the same issue or date arrives.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date

from sqlalchemy import delete, exists, func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ssq.errors import ConflictError, StoreError, ValidationError
from ssq.models.draw_record import SYNTHETIC_SOURCE, DrawRecord
from ssq.models.generated_combination import GeneratedCombination
from ssq.rules import canonical_reds, is_valid_issue, validate_blue


def _check_draw_record(record: DrawRecord) -> None:
    try:
        canonical = canonical_reds(record.red_numbers)
        validate_blue(record.blue)
    except ValueError as exc:
        raise ValidationError(message=str(exc), details={"issue": record.issue_number}) from exc

    if not is_valid_issue(record.issue_number):
        raise ValidationError(message="Invalid issue number", details={"issue": record.issue_number})
    if list(canonical) != record.red_numbers:
        raise ValidationError(message="Red numbers must be stored ascending", details={"issue": record.issue_number})
    if sorted(record.red_numbers_order) != record.red_numbers:
        raise ValidationError(
            message="Reveal order is not a permutation of the red numbers",
            details={"issue": record.issue_number},
        )


class HistoryRepository:
    """Persistence for historical draws (append-only) and generated numbers."""

    def exists_issue(self, session: Session, issue: str) -> bool:
        stmt = select(exists().where(DrawRecord.issue_number == str(issue)))
        return bool(session.scalar(stmt))

    def exists_combination(self, session: Session, reds: Iterable[int], blue: int) -> bool:
        r = sorted(int(n) for n in reds)
        stmt = select(
            exists().where(
                DrawRecord.red_1 == r[0],
                DrawRecord.red_2 == r[1],
                DrawRecord.red_3 == r[2],
                DrawRecord.red_4 == r[3],
                DrawRecord.red_5 == r[4],
                DrawRecord.red_6 == r[5],
                DrawRecord.blue == int(blue),
            )
        )
        return bool(session.scalar(stmt))

    def insert(self, session: Session, record: DrawRecord) -> DrawRecord:
        """Commit one draw.

        Raises:
            ValidationError: the record breaks a draw invariant.
            ConflictError: the issue is already stored.
            StoreError: any other persistence failure.
        """

        _check_draw_record(record)
        issue = record.issue_number

        session.add(record)
        try:
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            if self.exists_issue(session, issue):
                raise ConflictError(message=f"Issue {issue} already exists", details={"issue": issue}) from exc
            raise StoreError(message=f"Failed to store issue {issue}", details={"issue": issue}) from exc
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError(message=f"Failed to store issue {issue}", details={"issue": issue}) from exc
        return record

    def discard_synthetic(self, session: Session, issue: str, draw_date: date) -> int:
        """Delete synthetic rows sharing ``issue`` or ``draw_date``; returns how many."""

        stmt = delete(DrawRecord).where(
            DrawRecord.source == SYNTHETIC_SOURCE,
            or_(DrawRecord.issue_number == str(issue), DrawRecord.draw_date == draw_date),
        )
        try:
            removed = session.execute(stmt).rowcount
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError(
                message=f"Failed to replace synthetic draws for issue {issue}",
                details={"issue": issue},
            ) from exc
        return int(removed or 0)

    def list_history(self, session: Session, limit: int = 100, offset: int = 0) -> Sequence[DrawRecord]:
        """Newest issue first."""

        stmt = (
            select(DrawRecord)
            .order_by(DrawRecord.issue_number.desc())
            .limit(int(limit))
            .offset(int(offset))
        )
        return list(session.scalars(stmt).all())

    def latest_issue(self, session: Session) -> str | None:
        stmt = select(DrawRecord.issue_number).order_by(DrawRecord.issue_number.desc()).limit(1)
        return session.scalar(stmt)

    def count(self, session: Session) -> int:
        return int(session.scalar(select(func.count()).select_from(DrawRecord)) or 0)

    def insert_generated(self, session: Session, user_id: int, reds: Sequence[int], blue: int) -> GeneratedCombination:
        r = sorted(int(n) for n in reds)
        row = GeneratedCombination(
            user_id=int(user_id),
            red_1=r[0],
            red_2=r[1],
            red_3=r[2],
            red_4=r[3],
            red_5=r[4],
            red_6=r[5],
            blue=int(blue),
        )
        session.add(row)
        try:
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError(message="Failed to store generated numbers", details={"user_id": user_id}) from exc
        return row

    def list_generated(self, session: Session, user_id: int, limit: int = 50) -> Sequence[GeneratedCombination]:
        stmt = (
            select(GeneratedCombination)
            .where(GeneratedCombination.user_id == int(user_id))
            .order_by(GeneratedCombination.id.desc())
            .limit(int(limit))
        )
        return list(session.scalars(stmt).all())
