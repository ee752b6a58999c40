"""
Date, amount and table utilities for the benefit engine.

This module provides the small building blocks shared by every calculator:
lenient parsing of birthdate masks, whole-year ages at a reference date,
monthly/annual conversions and a floor lookup over monotonic bracket tables.
"""

import re
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Generic, List, Optional, Sequence, Tuple, TypeVar

import numpy as np

T = TypeVar("T")

MONTHS_PER_YEAR = 12

_MASK_PATTERN = re.compile(r"^(\d{1,2})[.\-/ ](\d{1,2})[.\-/ ](\d{4})$")
_ISO_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def parse_date_mask(value: Optional[str]) -> Optional[date]:
    """
    Parse a birthdate mask into a date.

    Accepts "dd.MM.yyyy" (other separators tolerated), "ddMMyyyy" and ISO
    "yyyy-MM-dd". Years outside 1900-2100 and impossible calendar dates are
    rejected.

    Args:
        value: The raw mask

    Returns:
        The parsed date, or None when the mask is missing or invalid
    """
    if not value:
        return None

    text = str(value).strip()
    iso = _ISO_PATTERN.match(text)
    if iso:
        year, month, day = (int(part) for part in iso.groups())
    else:
        mask = _MASK_PATTERN.match(text)
        if mask:
            day, month, year = (int(part) for part in mask.groups())
        else:
            digits = re.sub(r"\D", "", text)
            if len(digits) != 8:
                return None
            day, month, year = int(digits[:2]), int(digits[2:4]), int(digits[4:])

    if not 1900 <= year <= 2100:
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def age_on(birth: Optional[date], at: date) -> int:
    """Whole years between birth and the reference date (0 when birth is unknown)."""
    if birth is None:
        return 0
    age = at.year - birth.year
    if (at.month, at.day) < (birth.month, birth.day):
        age -= 1
    return age


def age_on_mask(mask: Optional[str], at: date) -> int:
    """Whole-year age at a reference date from a birthdate mask."""
    return age_on(parse_date_mask(mask), at)


def year_from_mask(mask: Optional[str]) -> Optional[int]:
    """Calendar year of a birthdate mask."""
    parsed = parse_date_mask(mask)
    return parsed.year if parsed else None


def monthly_to_annual(amount: float) -> float:
    """Convert a monthly amount to an annual one, rounded to the cent."""
    return round_chf(amount * MONTHS_PER_YEAR, 2)


def annual_to_monthly(amount: float) -> float:
    """Convert an annual amount to a monthly one, rounded to the cent."""
    return round_chf(amount / MONTHS_PER_YEAR, 2)


def round_chf(amount: float, decimals: int = 0) -> float:
    """Round a CHF amount half-up for display."""
    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(str(amount)).quantize(quantum, rounding=ROUND_HALF_UP))


def clamp(value: float, lower: float, upper: float) -> float:
    """Bound a value to [lower, upper]."""
    return max(lower, min(upper, value))


class FloorTable(Generic[T]):
    """
    Monotonic bracket table with floor selection.

    Each entry is keyed by the lower bound of its bracket. A lookup returns the
    entry with the highest bound that is <= the requested value; values below
    the first bound select nothing.
    """

    def __init__(self, entries: Sequence[Tuple[float, T]]):
        if not entries:
            raise ValueError("FloorTable requires at least one bracket")

        ordered = sorted(entries, key=lambda entry: entry[0])
        self._bounds = np.array([bound for bound, _ in ordered], dtype=np.float64)
        self._values: List[T] = [value for _, value in ordered]

    def lookup(self, value: float) -> Optional[T]:
        """
        Select the entry whose bound is the highest one <= value.

        Args:
            value: The value to place in a bracket

        Returns:
            The bracket entry, or None if value is below the lowest bound
        """
        if np.isnan(value):
            return None
        index = int(np.searchsorted(self._bounds, value, side="right")) - 1
        if index < 0:
            return None
        return self._values[index]

    @property
    def bounds(self) -> List[float]:
        """Lower bounds of the brackets, ascending."""
        return self._bounds.tolist()

    def __len__(self) -> int:
        return len(self._values)
