"""Per-type display numbering for markers ("AP1", "C2", ...).

Numbers are derived from marker ids on every render and never stored, so
deleting a marker renumbers the rest of its type with no gaps.
"""
import re
from collections import defaultdict
from typing import Dict, Iterable, Optional

from shared.enums import MarkerType

SEQUENCE_PREFIXES = {
    MarkerType.ACCESS_POINT: 'AP',
    MarkerType.CAMERA: 'C',
    MarkerType.ELEVATOR: 'E',
    MarkerType.INTERCOM: 'I',
    MarkerType.NOTE: 'N',
}

TRAILING_NUMBER = re.compile(r'(\d+)\s*$')


def explicit_number(label: Optional[str]) -> Optional[int]:
    """Return the number a label ends with, if any."""
    if not label:
        return None
    match = TRAILING_NUMBER.search(label)
    return int(match.group(1)) if match else None


def sequence_numbers(markers: Iterable) -> Dict[int, int]:
    """Map each marker id to its 1-based position among markers of its type, by id."""
    by_type = defaultdict(list)
    for marker in markers:
        by_type[MarkerType(marker.marker_type)].append(marker.id)

    numbers = {}
    for ids in by_type.values():
        for index, marker_id in enumerate(sorted(ids), start=1):
            numbers[marker_id] = index
    return numbers


def sequence_labels(markers: Iterable) -> Dict[int, str]:
    """Map each marker id to its display label.

    A number at the end of the marker's own label wins over the computed
    ordinal.
    """
    markers = list(markers)
    numbers = sequence_numbers(markers)
    labels = {}
    for marker in markers:
        number = explicit_number(marker.label)
        if number is None:
            number = numbers[marker.id]
        labels[marker.id] = f"{SEQUENCE_PREFIXES[MarkerType(marker.marker_type)]}{number}"
    return labels
