"""
Shift Classifier - decides whether a shift code counts as a worked day.
"""
from typing import FrozenSet, Iterable, Optional

from roster_app.domain.entities import ShiftDefinition

# Morning, afternoon, third and night shifts
DEFAULT_WORK_SHIFT_CODES: FrozenSet[str] = frozenset({"1", "2", "3", "ดึก"})


def is_working_shift(code: str) -> bool:
    """Classify against the fixed reference set of working codes."""
    return code in DEFAULT_WORK_SHIFT_CODES


class ShiftClassifier:
    """
    Lookup of working shift codes.

    Normally built from the stored shift types via from_shift_types();
    the fixed code set only applies when no shift types exist.
    """

    def __init__(self, work_codes: Optional[Iterable[str]] = None):
        codes = DEFAULT_WORK_SHIFT_CODES if work_codes is None else work_codes
        self.work_codes: FrozenSet[str] = frozenset(str(c) for c in codes)

    @classmethod
    def from_shift_types(
        cls,
        shift_types: Iterable[ShiftDefinition],
        fallback_codes: Optional[Iterable[str]] = None
    ) -> 'ShiftClassifier':
        """
        Build a classifier from shift type records.

        Args:
            shift_types: Stored shift definitions
            fallback_codes: Codes used when shift_types is empty

        Returns:
            ShiftClassifier
        """
        shift_types = list(shift_types)
        if not shift_types:
            return cls(fallback_codes)
        return cls(s.code for s in shift_types if s.is_work_shift)

    def is_working_shift(self, code: str) -> bool:
        return code in self.work_codes

    def __contains__(self, code: str) -> bool:
        return self.is_working_shift(code)
