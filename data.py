# data.py
# Read-only JSON loaders & record lookups (nothing is written back)

import json
import logging
from typing import Dict, List, Optional, Sequence, Type, TypeVar
from pathlib import Path

from pydantic import BaseModel, ValidationError

from config import DATA_DIR, PERSONS_FILE, EVENTS_FILE, EVENT_DETAILS_FILE, LOCATIONS_FILE
from models import AttendeeDetail, Event, Location, Person

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _read_json(path: Path, default):
    if not path.exists():
        return json.loads(json.dumps(default))
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to read {path}: {e}")
        return json.loads(json.dumps(default))

def _load_records(path: Path, model: Type[M]) -> List[M]:
    raw = _read_json(path, [])
    if not isinstance(raw, list):
        logger.error(f"Expected a list of records in {path}, got {type(raw).__name__}")
        return []
    out = []
    for i, item in enumerate(raw):
        try:
            out.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping invalid {model.__name__} #{i} in {path.name}: {e.error_count()} error(s)")
    return out

def load_persons(data_dir: Path = DATA_DIR) -> List[Person]:
    return _load_records(Path(data_dir) / PERSONS_FILE, Person)

def load_events(data_dir: Path = DATA_DIR) -> List[Event]:
    return _load_records(Path(data_dir) / EVENTS_FILE, Event)

def load_details(data_dir: Path = DATA_DIR) -> List[AttendeeDetail]:
    return _load_records(Path(data_dir) / EVENT_DETAILS_FILE, AttendeeDetail)

def load_locations(data_dir: Path = DATA_DIR) -> List[Location]:
    return _load_records(Path(data_dir) / LOCATIONS_FILE, Location)

# ---------- Lookups ----------
def details_for_event(details: Sequence[AttendeeDetail], event_id: int) -> List[AttendeeDetail]:
    """Details of one event, in stored order."""
    return [d for d in details if d.event_id == event_id]

def details_by_event(details: Sequence[AttendeeDetail]) -> Dict[int, List[AttendeeDetail]]:
    grouped: Dict[int, List[AttendeeDetail]] = {}
    for d in details:
        grouped.setdefault(d.event_id, []).append(d)
    return grouped

def find_person_by_identifier(persons: Sequence[Person], identifier: str) -> Optional[Person]:
    """Match on email first, then on name (both trimmed, case-insensitive)."""
    normalized = identifier.strip().lower()
    if not normalized:
        return None
    for p in persons:
        if (p.email or "").strip().lower() == normalized:
            return p
    for p in persons:
        if (p.name or "").strip().lower() == normalized:
            return p
    return None

def sorted_events(events: Sequence[Event]) -> List[Event]:
    """Newest first; ISO date strings sort chronologically."""
    return sorted(events, key=lambda e: e.date, reverse=True)

def latest_event(events: Sequence[Event]) -> Optional[Event]:
    ordered = sorted_events(events)
    return ordered[0] if ordered else None

def get_event(events: Sequence[Event], event_id: int) -> Optional[Event]:
    for e in events:
        if e.id == event_id:
            return e
    return None

def resolve_location(event: Event, locations: Sequence[Location]) -> Optional[str]:
    """The event's free-text location, else the name of its linked location."""
    if event.location and event.location.strip():
        return event.location.strip()
    if event.location_id is None:
        return None
    for loc in locations:
        if loc.id == event.location_id:
            return loc.name
    return None
