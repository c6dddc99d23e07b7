"""
Reservation ledger: which declared fields of a series are real and which are reserved.

A ledger is built from one SeriesInfo snapshot and is immutable. It answers two
questions for the schema manager:
- which of the requested field names are new to the series, and
- which reserved slots those new names should be claimed into.

Claim rules
- New fields keep the order in which the caller supplied them.
- Reserved slots are consumed lowest ordinal first and never reused.
- If there are more new fields than reserved slots, nothing is claimed
  (FieldsExhaustedError).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from rrdb.core.errors import FieldsExhaustedError
from rrdb.core.schema import SeriesInfo


@dataclass(frozen=True, slots=True)
class Claim:
    """
    Rename of one reserved slot to a real field.

    Attributes:
        reserved (str): Reserved slot being consumed (e.g., "_reserved0").
        field (str): Sanitized name it becomes.
    """

    reserved: str
    field: str


@dataclass(frozen=True, slots=True)
class ReservationLedger:
    """
    Snapshot of real vs. reserved fields of a series.

    Attributes:
        real (tuple[str, ...]): Real fields in storage order.
        reserved (tuple[str, ...]): Reserved slots, lowest ordinal first.
    """

    real: tuple[str, ...]
    reserved: tuple[str, ...]

    @classmethod
    def from_info(cls, info: SeriesInfo) -> ReservationLedger:
        return cls(real=tuple(info.real_fields()), reserved=tuple(info.reserved_fields()))

    def new_fields(self, field_names: Iterable[str]) -> list[str]:
        """Names not yet real in the series, in the order given, without duplicates."""
        known = set(self.real)
        out: list[str] = []
        for name in field_names:
            if name not in known:
                known.add(name)
                out.append(name)
        return out

    def plan_claims(self, field_names: Iterable[str]) -> list[Claim]:
        """
        Pair each new field with the lowest-ordinal free reserved slot.

        Returns:
            list[Claim]: Empty when every name is already a real field.

        Raises:
            FieldsExhaustedError: If there are more new fields than reserved slots.
        """
        new = self.new_fields(field_names)
        if len(new) > len(self.reserved):
            raise FieldsExhaustedError(requested=len(new), available=len(self.reserved))
        return [Claim(reserved=slot, field=name) for name, slot in zip(new, self.reserved)]
