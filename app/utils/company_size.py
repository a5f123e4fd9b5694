"""
Company size range helpers.

Converts between the ordered company-size buckets shown in the UI and the
single range string persisted in segment filters, e.g.

    ["1-10 employees", "11-50 employees"]  ->  "1-50 employees"
    "501-10,000 employees"  ->  ["501-1000 employees",
                                 "1001-5000 employees",
                                 "5001-10,000 employees"]

Merging is lossy for non-contiguous selections: ["1-10 employees",
"1001-5000 employees"] becomes "1-5,000 employees", which splits back into
every bucket in between.
"""

import re
from typing import Iterable, List, NamedTuple, Optional, Sequence

# Ordered catalog (matches the option_company_sizes table, no Self-Employed)
COMPANY_SIZE_OPTIONS = (
    "1-10 employees",
    "11-50 employees",
    "51-200 employees",
    "201-500 employees",
    "501-1000 employees",
    "1001-5000 employees",
    "5001-10,000 employees",
    "10,001+ employees",
)

_NUMBER = r"\d+(?:,\d{3})*"
_RANGE_RE = re.compile(rf"^({_NUMBER})\s*-\s*({_NUMBER})$")
_PLUS_RE = re.compile(rf"^({_NUMBER})\+$")
_SINGLE_RE = re.compile(rf"^({_NUMBER})$")

_PERSISTED_PLUS_RE = re.compile(r"^([\d,]+)\+\s*employees$", re.IGNORECASE)
_PERSISTED_RANGE_RE = re.compile(r"^([\d,]+)-([\d,]+)\s*employees$", re.IGNORECASE)

_EMPLOYEES_WORD_RE = re.compile(r"employees", re.IGNORECASE)


class SizeRange(NamedTuple):
    """Inclusive employee range; max is None when there is no upper bound."""

    min: int
    max: Optional[int]


def _to_int(value: str) -> int:
    digits = value.replace(",", "")
    return int(digits) if digits else 0


def parse_bucket_range(label: str) -> SizeRange:
    """
    Parse a size label such as "1-10 employees" or "10,001+ employees".

    A bare number N parses as N..N. Anything unrecognised yields (0, None),
    which callers treat as "no constraint".
    """
    cleaned = _EMPLOYEES_WORD_RE.sub("", label or "").strip()

    match = _RANGE_RE.match(cleaned)
    if match:
        return SizeRange(_to_int(match.group(1)), _to_int(match.group(2)))

    match = _PLUS_RE.match(cleaned)
    if match:
        return SizeRange(_to_int(match.group(1)), None)

    match = _SINGLE_RE.match(cleaned)
    if match:
        number = _to_int(match.group(1))
        return SizeRange(number, number)

    return SizeRange(0, None)


def bucket_index(label: str, options: Sequence[str] = COMPANY_SIZE_OPTIONS) -> int:
    """Index of a bucket label in the catalog, or -1."""
    try:
        return list(options).index(label)
    except ValueError:
        return -1


def buckets_between(
    start_index: int,
    end_index: int,
    options: Sequence[str] = COMPANY_SIZE_OPTIONS,
) -> List[str]:
    """All catalog buckets between two indices, inclusive, in catalog order."""
    start = min(start_index, end_index)
    end = max(start_index, end_index)
    return list(options[start:end + 1])


def merge_selections(labels: Sequence[str]) -> str:
    """
    Merge selected bucket labels into one persisted range string.

    A single selection is returned as-is. Otherwise the lowest non-zero
    lower bound is combined with the highest upper bound, or with "+" when
    any selected bucket is unbounded.
    """
    if not labels:
        return ""
    if len(labels) == 1:
        return labels[0] or ""

    ranges = [parse_bucket_range(label) for label in labels]
    mins = [r.min for r in ranges if r.min > 0]
    if not mins:
        return ""

    low = min(mins)
    if any(r.max is None for r in ranges):
        return f"{low:,}+ employees"

    maxes = [r.max for r in ranges if r.max and r.max > 0]
    if not maxes:
        return f"{low:,}+ employees"
    return f"{low:,}-{max(maxes):,} employees"


def split_range_to_selections(persisted: str) -> List[str]:
    """
    Expand a persisted range string back into catalog bucket labels.

    Strings that match neither a catalog label nor an "N+" / "N-M" range
    come back unchanged as a single label.
    """
    if not persisted or not persisted.strip():
        return []

    trimmed = persisted.strip()
    if trimmed in COMPANY_SIZE_OPTIONS:
        return [trimmed]

    match = _PERSISTED_PLUS_RE.match(trimmed)
    if match:
        floor = _to_int(match.group(1))
        result = [
            option for option in COMPANY_SIZE_OPTIONS
            if parse_bucket_range(option).min >= floor
        ]
        return result or [trimmed]

    match = _PERSISTED_RANGE_RE.match(trimmed)
    if match:
        floor = _to_int(match.group(1))
        ceiling = _to_int(match.group(2))
        result = []
        for option in COMPANY_SIZE_OPTIONS:
            bucket = parse_bucket_range(option)
            if bucket.max is None:
                # Top bucket: kept whenever it starts inside the range
                if bucket.min <= ceiling or ceiling == 0:
                    result.append(option)
            elif bucket.min >= floor and bucket.max <= ceiling:
                result.append(option)
        return result or [trimmed]

    return [persisted]


def is_endpoint_removable(bucket: str, selections: Iterable[str]) -> bool:
    """
    Whether a bucket chip can be removed from the current selection.

    With several buckets selected only the lowest and highest may go, so
    the remaining selection stays contiguous.
    """
    selections = list(selections)
    if len(selections) <= 1:
        return True

    indices = sorted(i for i in (bucket_index(s) for s in selections) if i != -1)
    if not indices:
        return True

    option_index = bucket_index(bucket)
    return option_index in (indices[0], indices[-1])
