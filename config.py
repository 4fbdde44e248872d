# config.py
# Paths, placeholder labels & money constants

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent
DATA_DIR = Path(os.environ.get("ASADO_DATA_DIR", BASE_DIR / "data"))

PERSONS_FILE = "persons.json"
EVENTS_FILE = "events.json"
EVENT_DETAILS_FILE = "event_details.json"
LOCATIONS_FILE = "locations.json"

# Fallback labels when a referenced record is missing
UNKNOWN_PERSON = "Unknown person"
UNKNOWN_ASADOR = "Unknown asador"
UNSPECIFIED_LOCATION = "Unspecified"
DEFAULT_EVENT_NAME = "Event"

CENTS_PER_UNIT = 100
CURRENCY_SYMBOL = "$"
