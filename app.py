# app.py
# Event settlement report: loads the local JSON records, settles one event
# and prints who owes whom. --stats prints the group rankings instead.

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import pandas as pd

from config import DATA_DIR, DEFAULT_EVENT_NAME
from data import (
    load_persons, load_events, load_details, load_locations,
    details_for_event, details_by_event, find_person_by_identifier,
    latest_event, get_event, resolve_location,
)
from helpers import format_money
from models import EventReport, Event, Person, AttendeeDetail
from settlement import settle_event
from stats import attendance_rows, location_rows, asador_rows, contribution_rows, attendance_series

logger = logging.getLogger(__name__)


def render_report(report: EventReport, location: Optional[str] = None, person_id: Optional[int] = None) -> str:
    """
    Plain-text event report.
    With person_id set, only transfers paid or received by that person are listed.
    """
    event = report.event
    split = report.split
    lines = [f"{event.name or DEFAULT_EVENT_NAME} on {event.date}"]
    count = report.totals.attendee_count
    header = f"{count} attendee{'' if count == 1 else 's'}"
    location = location or event.location
    if location:
        header += f" · {location}"
    lines.append(header)
    if report.asador_name:
        lines.append(f"Asador: {report.asador_name}")
    lines.append(
        f"Food: {format_money(report.totals.total_food_cost)} · "
        f"Drinks: {format_money(report.totals.total_drink_cost)}"
    )
    lines.append("")

    if not report.attendees:
        lines.append("No attendees recorded for this event.")
        return "\n".join(lines)

    for a in report.attendees:
        name = a.name + (f" ({a.alias})" if a.alias else "")
        flags = "/".join(f for f, on in (("food", a.include_food), ("drinks", a.include_drink)) if on) or "nothing"
        detail = a.note or f"Food: {format_money(a.food_cost)} · Drinks: {format_money(a.drink_cost)}"
        lines.append(f"  - {name} [{flags}] {detail}")
    lines.append("")

    dash = "—"
    lines.append("Settlements")
    lines.append(f"  Equal split (food only): {format_money(split.food_share) if split.food_people else dash}")
    lines.append(f"  Equal split (drinks only): {format_money(split.drink_share) if split.drink_people else dash}")
    lines.append(f"  Equal split (both): {format_money(split.both_share) if split.both_people else dash}")
    lines.append(f"  Overall equal split per person: {format_money(report.settlement.share)}")

    transfers = report.settlement.transfers
    if person_id is not None:
        transfers = [t for t in transfers if person_id in (t.from_person_id, t.to_person_id)]
    if not report.settlement.transfers:
        lines.append("All settled. No transfers needed.")
    elif not transfers:
        lines.append("Nothing to pay or collect.")
    else:
        for t in transfers:
            alias = f" (alias: {t.to_alias})" if t.to_alias else ""
            lines.append(f"  {t.from_name} -> {t.to_name}: {format_money(t.amount)}{alias}")
    return "\n".join(lines)

def _ranking(title: str, df: pd.DataFrame) -> List[str]:
    lines = [title]
    if df.empty:
        lines.append("  No data yet")
    for r in df.itertuples(index=False):
        extra = f" (food {r.food}, drinks {r.drink})" if "food" in df.columns else ""
        lines.append(f"  {r.label}: {r.value}{extra}")
    return lines

def render_stats(events: List[Event], details: List[AttendeeDetail], persons: List[Person]) -> str:
    """Group rankings and the attendance series over the whole history."""
    details_map = details_by_event(details)
    lines = []
    lines += _ranking("Attendance", attendance_rows(events, details_map, persons))
    lines += _ranking("Locations", location_rows(events))
    lines += _ranking("Asadores", asador_rows(events, persons))
    lines += _ranking("Contributions", contribution_rows(details_map, persons))
    lines.append("Attendees per event")
    series = attendance_series(events, details_map)
    if series.empty:
        lines.append("  No data yet")
    for day, value in series.items():
        lines.append(f"  {day}: {value}")
    return "\n".join(lines)

def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Settle food & drink costs for an event")
    parser.add_argument("--data-dir", "-d", default=str(DATA_DIR), help="directory holding the JSON records")
    parser.add_argument("--event-id", "-e", type=int, default=None, help="event to settle (default: latest)")
    parser.add_argument("--person", "-p", default=None, help="only show transfers for this person (email or name)")
    parser.add_argument("--json", action="store_true", help="print the report as JSON")
    parser.add_argument("--stats", action="store_true", help="print group statistics instead of an event report")
    args = parser.parse_args(argv)

    data_dir = Path(args.data_dir)
    events = load_events(data_dir)
    persons = load_persons(data_dir)

    if args.stats:
        print(render_stats(events, load_details(data_dir), persons))
        return 0

    if args.event_id is not None:
        event = get_event(events, args.event_id)
    else:
        event = latest_event(events)
    if event is None:
        logger.error(f"No event found in {data_dir}" + (f" with id {args.event_id}" if args.event_id is not None else ""))
        return 1

    person_id = None
    if args.person:
        person = find_person_by_identifier(persons, args.person)
        if person is None:
            logger.error(f"No person matches {args.person!r}")
            return 1
        person_id = person.id

    details = details_for_event(load_details(data_dir), event.id) if event.id is not None else []
    report = settle_event(event, details, persons)

    if args.json:
        print(json.dumps(report.model_dump(mode="json", by_alias=True), ensure_ascii=False, indent=2))
    else:
        print(render_report(report, resolve_location(event, load_locations(data_dir)), person_id))
    return 0


if __name__ == "__main__":
    sys.exit(main())
