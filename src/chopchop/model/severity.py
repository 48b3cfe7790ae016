"""Severity scale - Ordered risk levels attached to every check."""

from enum import Enum


class Severity(Enum):
    """Severity levels for checks, ordered from least to most severe."""

    INFORMATIONAL = "Informational"
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        return _ORDER.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, label: "str | Severity") -> "Severity":
        """Parse a severity label case-insensitively.

        Raises:
            ValueError: If the label is not one of the four known levels.
        """
        if isinstance(label, Severity):
            return label
        text = str(label).strip().lower()
        for level in cls:
            if level.value.lower() == text:
                return level
        valid = " / ".join(s.value for s in _ORDER)
        raise ValueError(f"Unknown severity type: {label!r}. Only {valid} are valid severity types.")

    @classmethod
    def labels(cls) -> list[str]:
        return [s.value for s in _ORDER]


_ORDER = [Severity.INFORMATIONAL, Severity.LOW, Severity.MEDIUM, Severity.HIGH]
