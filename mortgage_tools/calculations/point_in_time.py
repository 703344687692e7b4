"""
Point in time ("age of mortgage") at which a loan is evaluated.

A point in time is one of:
1. Deposit - before any payment has been made
2. First payment - exactly one payment period has elapsed
3. Year N - N whole years of payments have elapsed

Presets saved by older versions of the calculator stored this value either as
a plain tag ("deposit", "first", "5") or as a serialized object such as
{"_type": "5", "_ageYears": 5} or {"type": "custom", "ageYears": 7}.
`PointInTime.parse` accepts all of these.
"""

import enum
import math
from dataclasses import dataclass
from typing import Any, Union


class PointInTimeKind(str, enum.Enum):
    """Tag of a point in time."""

    deposit = "deposit"
    first = "first"
    year = "year"


@dataclass(frozen=True)
class PointInTime:
    """A tagged point in time with an optional number of elapsed years."""

    kind: PointInTimeKind
    years: float = 0

    @classmethod
    def deposit(cls) -> "PointInTime":
        """Point before any payment has been made."""
        return cls(PointInTimeKind.deposit, 0)

    @classmethod
    def first_payment(cls) -> "PointInTime":
        """Point right after the first payment."""
        return cls(PointInTimeKind.first, 0)

    @classmethod
    def year(cls, years: float) -> "PointInTime":
        """Point after `years` whole years of payments. Year 0 is the deposit."""
        if not math.isfinite(years):
            raise ValueError(f"Age of mortgage must be a finite number: {years}")
        if years < 0:
            raise ValueError(f"Age of mortgage cannot be negative: {years}")
        if years == 0:
            return cls.deposit()
        return cls(PointInTimeKind.year, years)

    @classmethod
    def parse(cls, value: Union["PointInTime", str, int, float, dict, Any]) -> "PointInTime":
        """
        Build a point in time from a tag, a number of years or a serialized object.

        Raises:
            ValueError: If the value is not a recognised age of mortgage
        """
        if isinstance(value, PointInTime):
            return value
        if isinstance(value, bool) or value is None:
            raise ValueError(f"Unknown age of mortgage: {value!r}")
        if isinstance(value, (int, float)):
            return cls.year(value)
        if isinstance(value, dict):
            tag = value.get("type", value.get("_type"))
            if tag == "custom":
                age_years = value.get("ageYears", value.get("_ageYears")) or 0
                return cls.year(_to_number(age_years, value))
            return cls.parse(tag)
        if isinstance(value, str):
            tag = value.strip().lower()
            if tag == PointInTimeKind.deposit.value:
                return cls.deposit()
            if tag == PointInTimeKind.first.value:
                return cls.first_payment()
            if tag.startswith("year"):
                tag = tag[len("year"):].strip()
            return cls.year(_to_number(tag, value))
        raise ValueError(f"Unknown age of mortgage: {value!r}")

    def exceeds_term(self, term_years: float) -> bool:
        """True if this point lies after the end of a loan of `term_years`."""
        return self.kind == PointInTimeKind.year and self.years > term_years

    @property
    def label(self) -> str:
        if self.kind == PointInTimeKind.deposit:
            return "deposit only"
        if self.kind == PointInTimeKind.first:
            return "first payment"
        return f"year {_format_years(self.years)}"

    def to_json(self) -> Union[str, dict]:
        """Serialize to the plain tag form, falling back to a custom object."""
        if self.kind != PointInTimeKind.year:
            return self.kind.value
        if float(self.years).is_integer():
            return str(int(self.years))
        return {"type": "custom", "ageYears": self.years}


def _to_number(raw: Any, original: Any) -> float:
    try:
        number = float(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Unknown age of mortgage: {original!r}") from exc
    return int(number) if number.is_integer() else number


def _format_years(years: float) -> str:
    return str(int(years)) if float(years).is_integer() else f"{years:g}"
