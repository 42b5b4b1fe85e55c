"""Closed vocabularies for the categorical admission fields."""
from enum import Enum
from typing import Dict, List, Optional

from losreport.errors import InvalidInputError


class AdmissionType(Enum):
    EMERGENCY = "Emergency"
    URGENT = "Urgent"
    TRAUMA = "Trauma"


class IllnessSeverity(Enum):
    MINOR = "Minor"
    MODERATE = "Moderate"
    EXTREME = "Extreme"

    @property
    def code(self) -> int:
        return SEVERITY_CODES[self]


class StayBucket(Enum):
    DAYS_0_10 = "0-10"
    DAYS_11_20 = "11-20"
    DAYS_21_30 = "21-30"
    DAYS_31_40 = "31-40"
    DAYS_41_50 = "41-50"
    DAYS_51_60 = "51-60"
    DAYS_61_70 = "61-70"
    DAYS_71_80 = "71-80"
    DAYS_81_90 = "81-90"
    DAYS_91_100 = "91-100"
    MORE_THAN_100 = "More than 100 Days"

    @property
    def midpoint(self) -> float:
        return STAY_MIDPOINTS[self.value]


SEVERITY_CODES: Dict[IllnessSeverity, int] = {
    IllnessSeverity.MINOR: 1,
    IllnessSeverity.MODERATE: 2,
    IllnessSeverity.EXTREME: 3,
}

# Open-ended bucket is pinned at 105
STAY_MIDPOINTS: Dict[str, float] = {
    "0-10": 5.0,
    "11-20": 15.0,
    "21-30": 25.0,
    "31-40": 35.0,
    "41-50": 45.0,
    "51-60": 55.0,
    "61-70": 65.0,
    "71-80": 75.0,
    "81-90": 85.0,
    "91-100": 95.0,
    "More than 100 Days": 105.0,
}

BED_GRADES: List[int] = [1, 2, 3, 4]


def strip_text(values):
    """Strip surrounding whitespace from the string entries of a column."""
    return values.map(lambda v: v.strip() if isinstance(v, str) else v)


def category_values(enum_cls) -> List[str]:
    """Raw string values accepted for a categorical field, in declaration order."""
    return [member.value for member in enum_cls]


def parse_category(enum_cls, value, column: Optional[str] = None):
    """
    Convert a raw string into a member of a closed vocabulary.

    Surrounding whitespace is ignored; anything else must match exactly.

    Raises:
        InvalidInputError: If the value is not part of the vocabulary.
    """
    if isinstance(value, enum_cls):
        return value
    raw = value.strip() if isinstance(value, str) else value
    try:
        return enum_cls(raw)
    except ValueError:
        where = f" in column '{column}'" if column else ""
        raise InvalidInputError(
            f"Unrecognized {enum_cls.__name__} value{where}: {value!r}. "
            f"Expected one of {category_values(enum_cls)}"
        ) from None
