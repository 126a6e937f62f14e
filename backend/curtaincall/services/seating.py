"""
Hall layout and seat selection rules

The hall has an orchestra split in three blocks in front of the stage and a
mezzanine split in two blocks behind it. Seat ids are ``<row letter><number>``
with numbers running continuously across the blocks of a row.
"""
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Set, Tuple

SEAT_AVAILABLE = "available"
SEAT_SELECTED = "selected"
SEAT_BOOKED = "booked"

_SEAT_RE = re.compile(r"^([A-Z]+)(\d+)$")


@dataclass(frozen=True)
class HallSection:
    key: str
    label: str
    rows: Tuple[str, ...]
    first_seat: int
    seats_per_row: int

    def seat_ids(self, row: str) -> List[str]:
        return [f"{row}{n}" for n in range(self.first_seat, self.first_seat + self.seats_per_row)]


ORCHESTRA = (
    HallSection("orchestra_left", "Orchestra Left", ("A", "B", "C", "D"), 1, 6),
    HallSection("orchestra_center", "Orchestra Center", ("A", "B", "C", "D", "E"), 7, 10),
    HallSection("orchestra_right", "Orchestra Right", ("A", "B", "C", "D"), 17, 6),
)
MEZZANINE = (
    HallSection("mezzanine_left", "Mezzanine Left", ("F", "G", "H"), 1, 8),
    HallSection("mezzanine_right", "Mezzanine Right", ("F", "G", "H"), 9, 8),
)
SECTIONS = ORCHESTRA + MEZZANINE

# Placeholder holds that make the hall look partially sold
_HOUSE_HOLDS = [
    "A3", "A4", "B5", "B6", "C1", "C12", "D8", "D9", "D10", "E5",
    "E6", "E7", "B2", "F1", "F8", "G3", "G4", "G12", "H7", "H8",
]


def all_seat_ids() -> List[str]:
    return [seat for section in SECTIONS for row in section.rows for seat in section.seat_ids(row)]


_ALL_SEATS = frozenset(all_seat_ids())


def is_valid_seat(seat_id: str) -> bool:
    return seat_id in _ALL_SEATS


def seat_sort_key(seat_id: str) -> Tuple[str, int]:
    match = _SEAT_RE.match(seat_id)
    if not match:
        return (seat_id, 0)
    return (match.group(1), int(match.group(2)))


def sort_seats(seats: Iterable[str]) -> List[str]:
    return sorted(set(seats), key=seat_sort_key)


def normalize_seats(raw) -> List[str]:
    """Accept a list or a comma-separated string; upper-case and trim each id"""
    if raw is None:
        return []
    if isinstance(raw, str):
        raw = raw.split(",")
    return [s.strip().upper() for s in raw if s and s.strip()]


def house_booked_seats(schedule: datetime) -> Set[str]:
    """Seats held by the box office for a performance, varying with its date"""
    day = schedule.day
    held = list(_HOUSE_HOLDS)
    if day % 2 == 0:
        held += ["C7", "C8", "G9", "G10"]
    if day % 3 == 0:
        held = held[5:] + ["A1", "A10", "E1", "E15"]
    # Some placeholder ids (E1, E5, E6) fall outside the hall
    return {s for s in held if s in _ALL_SEATS}


def seat_status(seat_id: str, booked: Set[str], selected: Iterable[str]) -> str:
    if seat_id in booked:
        return SEAT_BOOKED
    if seat_id in set(selected):
        return SEAT_SELECTED
    return SEAT_AVAILABLE


def toggle_seat(selected: List[str], seat_id: str, max_seats: int) -> Tuple[List[str], bool]:
    """
    Select or deselect a seat

    Returns:
        (new selection sorted, True if the seat was refused because the limit was reached)
    """
    current = sort_seats(selected)
    if seat_id in current:
        return [s for s in current if s != seat_id], False
    if len(current) >= max_seats:
        return current, True
    return sort_seats(current + [seat_id]), False


def layout(booked: Set[str], selected: Iterable[str]) -> Dict[str, List[dict]]:
    """
    Seat map for rendering

    Returns:
        ``{"orchestra": [...sections], "mezzanine": [...sections]}`` where each
        section is ``{"key", "label", "rows": [{"row", "seats": [{"id", "number", "status"}]}]}``
    """
    selected = list(selected)

    def render(section: HallSection) -> dict:
        rows = []
        for row in section.rows:
            seats = []
            for seat_id in section.seat_ids(row):
                seats.append({
                    "id": seat_id,
                    "number": seat_sort_key(seat_id)[1],
                    "status": seat_status(seat_id, booked, selected),
                })
            rows.append({"row": row, "seats": seats})
        return {"key": section.key, "label": section.label, "rows": rows}

    return {
        "orchestra": [render(s) for s in ORCHESTRA],
        "mezzanine": [render(s) for s in MEZZANINE],
    }
