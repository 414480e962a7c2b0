from __future__ import annotations

import re
from typing import Any, Dict, Mapping, Optional

CaseRecord = Dict[str, Any]

STATE = "State"
DATE = "Date"
CONFIRMED = "Confirmed"
ACTIVE = "Active"
RECOVERED = "Recovered"
DEATHS = "Deaths"
GENDER = "Gender"
AGE = "Age"

COUNTER_FIELDS = (CONFIRMED, ACTIVE, RECOVERED, DEATHS)
EXPECTED_FIELDS = (STATE, DATE, CONFIRMED, ACTIVE, RECOVERED, DEATHS, GENDER, AGE)

_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def field_value(record: Optional[Mapping[str, Any]], field: str, default: Any = None) -> Any:
    """Return ``record[field]`` when it is present and truthy, else ``default``.

    The stat cards and the gender chart read fields through this helper so that a missing column,
    an empty cell or a ``None`` all degrade the same way.
    """
    if not record:
        return default
    value = record.get(field)
    if not value:
        return default
    return value


def parse_leading_int(value: object) -> Optional[int]:
    """Parse the leading base-10 integer of ``value``.

    ``"42"`` -> 42, ``" 7 years"`` -> 7, ``"3.9"`` -> 3, ``"x"`` -> None.

    Only ASCII digits count, so ``"٣٥"`` and full-width ``"２５"`` give None.
    There is no radix detection: ``"0x1A"`` parses as 0, where a browser's
    ``parseInt`` without a radix would read it as hex 26.
    """
    if value is None or isinstance(value, bool):
        return None
    m = _LEADING_INT.match(str(value))
    if not m:
        return None
    return int(m.group(1))
