# stats.py
# Group statistics over the event history (rankings & attendance series)

from typing import Dict, List, Sequence

import pandas as pd

from config import UNKNOWN_PERSON, UNKNOWN_ASADOR, UNSPECIFIED_LOCATION
from models import AttendeeDetail, Event, Person

STAT_COLS = ["label", "value", "secondary", "avatar_url"]
CONTRIBUTION_COLS = ["label", "value", "food", "drink", "secondary", "avatar_url"]

DetailsMap = Dict[int, List[AttendeeDetail]]


def _rank(df: pd.DataFrame) -> pd.DataFrame:
    """Count descending, then label ascending."""
    return df.sort_values(["value", "label"], ascending=[False, True], kind="mergesort").reset_index(drop=True)

def _person_rows(counts: pd.Series, persons: Sequence[Person], fallback: str) -> pd.DataFrame:
    """Turn a person_id -> count series into labelled stat rows."""
    by_id = {p.id: p for p in persons}
    rows = []
    for person_id, value in counts.items():
        person = by_id.get(person_id)
        rows.append({
            "label": person.name if person else fallback,
            "value": int(value),
            "secondary": person.alias if person else None,
            "avatar_url": person.photo if person else None,
        })
    return pd.DataFrame(rows, columns=STAT_COLS)

# ---------- Rankings ----------
def attendance_rows(events: Sequence[Event], details_map: DetailsMap, persons: Sequence[Person]) -> pd.DataFrame:
    """Number of events each person attended."""
    person_ids = [
        d.person_id
        for evt in events if evt.id is not None
        for d in details_map.get(evt.id, [])
    ]
    if not person_ids:
        return pd.DataFrame(columns=STAT_COLS)
    counts = pd.Series(person_ids).value_counts(sort=False)
    return _rank(_person_rows(counts, persons, UNKNOWN_PERSON))

def location_rows(events: Sequence[Event]) -> pd.DataFrame:
    if not events:
        return pd.DataFrame(columns=STAT_COLS)
    labels = pd.Series([(evt.location or UNSPECIFIED_LOCATION).strip() or UNSPECIFIED_LOCATION for evt in events])
    counts = labels.value_counts(sort=False)
    df = pd.DataFrame({"label": counts.index, "value": counts.values.astype(int)})
    df["secondary"] = None
    df["avatar_url"] = None
    return _rank(df[STAT_COLS])

def asador_rows(events: Sequence[Event], persons: Sequence[Person]) -> pd.DataFrame:
    """Number of events each person grilled at."""
    ids = [evt.asador_id for evt in events if evt.asador_id is not None]
    if not ids:
        return pd.DataFrame(columns=STAT_COLS)
    counts = pd.Series(ids).value_counts(sort=False)
    return _rank(_person_rows(counts, persons, UNKNOWN_ASADOR))

def contribution_rows(details_map: DetailsMap, persons: Sequence[Person]) -> pd.DataFrame:
    """
    Per person, how many events they put money into food and drinks.
    A category counts when it has a positive cost or an explicit include flag.
    """
    records = []
    for details in details_map.values():
        for d in details:
            spent_food = (d.food_cost or 0) > 0 or d.include_food is True
            spent_drink = (d.drink_cost or 0) > 0 or d.include_drink is True
            if not spent_food and not spent_drink:
                continue
            records.append({"person_id": d.person_id, "food": int(spent_food), "drink": int(spent_drink)})
    if not records:
        return pd.DataFrame(columns=CONTRIBUTION_COLS)

    g = pd.DataFrame(records).groupby("person_id", sort=False)[["food", "drink"]].sum()
    by_id = {p.id: p for p in persons}
    rows = []
    for person_id, r in g.iterrows():
        person = by_id.get(person_id)
        rows.append({
            "label": person.name if person else UNKNOWN_PERSON,
            "value": int(r["food"] + r["drink"]),
            "food": int(r["food"]),
            "drink": int(r["drink"]),
            "secondary": person.alias if person else None,
            "avatar_url": person.photo if person else None,
        })
    return _rank(pd.DataFrame(rows, columns=CONTRIBUTION_COLS))

# ---------- Series ----------
def attendance_series(events: Sequence[Event], details_map: DetailsMap) -> pd.Series:
    """
    Attendees per event in ascending date order.
    Falls back to the stored attendee count when no details were recorded.
    """
    ordered = sorted((e for e in events if e.id is not None), key=lambda e: e.date)
    values = [len(details_map.get(e.id, [])) or e.attendee_count or 0 for e in ordered]
    return pd.Series(values, index=[e.date for e in ordered], name="attendees", dtype="int64")
