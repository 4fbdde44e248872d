# settlement.py
# Settlement engine: attendee normalization, equal splits, cent-exact transfers

from typing import Dict, List, Optional, Sequence
from decimal import Decimal
import logging

from config import UNKNOWN_PERSON, CENTS_PER_UNIT
from helpers import to_cents, cents_to_amount, round_money
from models import (
    Attendee, AttendeeDetail, Event, EventReport, EventTotals,
    Person, Settlement, SplitInfo, Transfer,
)

logger = logging.getLogger(__name__)


def _person_index(persons: Sequence[Person]) -> Dict[int, Person]:
    return {p.id: p for p in persons if p.id is not None}

# ---------- Step A: attendees ----------
def build_attendees(event: Event, details: Sequence[AttendeeDetail], persons: Sequence[Person]) -> List[Attendee]:
    """
    Normalize detail records into attendees, keeping input order.
    Include flags default to True unless explicitly False; an excluded
    category's cost is zeroed whatever the stored value.
    """
    by_id = _person_index(persons)
    attendees = []
    for detail in details:
        person = by_id.get(detail.person_id)
        include_food = detail.include_food is not False
        include_drink = detail.include_drink is not False
        food_cost = (detail.food_cost or 0.0) if include_food else 0.0
        drink_cost = (detail.drink_cost or 0.0) if include_drink else 0.0
        if food_cost < 0 or drink_cost < 0:
            logger.debug(f"Negative cost on detail {detail.id} of event {event.id}")
        attendees.append(Attendee(
            id=str(detail.id) if detail.id is not None else f"{detail.event_id}-{detail.person_id}",
            person_id=detail.person_id,
            name=person.name if person else UNKNOWN_PERSON,
            alias=person.alias if person else None,
            note=detail.note or "",
            food_cost=food_cost,
            drink_cost=drink_cost,
            total_paid=food_cost + drink_cost,
            include_food=include_food,
            include_drink=include_drink,
        ))
    return attendees

# ---------- Step B: display splits ----------
def compute_split_info(attendees: Sequence[Attendee]) -> SplitInfo:
    """Float equal-split figures for display; not used for settlement."""
    food_people = [a for a in attendees if a.include_food]
    drink_people = [a for a in attendees if a.include_drink]
    both_people = [a for a in attendees if a.include_food and a.include_drink]

    total_food = sum(a.food_cost for a in food_people)
    total_drink = sum(a.drink_cost for a in drink_people)

    food_share = total_food / len(food_people) if food_people else 0.0
    drink_share = total_drink / len(drink_people) if drink_people else 0.0
    both_share = food_share + drink_share if both_people else 0.0

    return SplitInfo(
        food_share=food_share,
        drink_share=drink_share,
        both_share=both_share,
        food_people=len(food_people),
        drink_people=len(drink_people),
        both_people=len(both_people),
    )

# ---------- Step C: exact settlement ----------
def compute_targets(attendees: Sequence[Attendee]) -> List[int]:
    """
    Fair-share target per attendee, in cents.
    Each category is split base + remainder; the first `rem` included
    attendees in list order get one extra cent.
    """
    food_cents = sum(to_cents(a.food_cost) for a in attendees if a.include_food)
    drink_cents = sum(to_cents(a.drink_cost) for a in attendees if a.include_drink)
    food_count = sum(1 for a in attendees if a.include_food)
    drink_count = sum(1 for a in attendees if a.include_drink)

    food_base, food_rem = divmod(food_cents, food_count) if food_count else (0, 0)
    drink_base, drink_rem = divmod(drink_cents, drink_count) if drink_count else (0, 0)

    food_idx = drink_idx = 0
    targets = []
    for a in attendees:
        target = 0
        if a.include_food:
            target += food_base + (1 if food_idx < food_rem else 0)
            food_idx += 1
        if a.include_drink:
            target += drink_base + (1 if drink_idx < drink_rem else 0)
            drink_idx += 1
        targets.append(target)
    return targets

def compute_transfers(attendees: Sequence[Attendee], targets: Sequence[int]) -> List[Transfer]:
    """
    Greedy settlement: the largest remaining debtor pays the largest
    remaining creditor until one side runs out.
    """
    debtors, creditors = [], []
    for a, target in zip(attendees, targets):
        net = to_cents(a.total_paid) - target
        if net < 0:
            debtors.append([a, -net])
        elif net > 0:
            creditors.append([a, net])

    # list.sort is stable, so equal balances keep attendee order
    debtors.sort(key=lambda x: x[1], reverse=True)
    creditors.sort(key=lambda x: x[1], reverse=True)

    transfers = []
    i = j = 0
    while i < len(debtors) and j < len(creditors):
        debtor, owed = debtors[i]
        creditor, due = creditors[j]
        pay = min(owed, due)
        transfers.append(Transfer(
            from_name=debtor.name,
            to_name=creditor.name,
            from_alias=debtor.alias,
            to_alias=creditor.alias,
            from_person_id=debtor.person_id,
            to_person_id=creditor.person_id,
            amount_cents=pay,
            amount=cents_to_amount(pay),
        ))
        debtors[i][1] -= pay
        creditors[j][1] -= pay
        if debtors[i][1] == 0:
            i += 1
        if creditors[j][1] == 0:
            j += 1
    return transfers

def compute_settlement(attendees: Sequence[Attendee]) -> Settlement:
    if not attendees:
        return Settlement(share=0.0, transfers=[])

    targets = compute_targets(attendees)
    share = Decimal(sum(targets)) / len(attendees) / CENTS_PER_UNIT
    transfers = compute_transfers(attendees, targets)
    if not transfers:
        logger.debug("All settled, no transfers needed")
    return Settlement(share=round_money(share), transfers=transfers)

# ---------- Event-level ----------
def event_totals(attendees: Sequence[Attendee]) -> EventTotals:
    """Recompute the event's stored totals from its attendees."""
    return EventTotals(
        attendee_count=len(attendees),
        total_food_cost=cents_to_amount(sum(to_cents(a.food_cost) for a in attendees if a.include_food)),
        total_drink_cost=cents_to_amount(sum(to_cents(a.drink_cost) for a in attendees if a.include_drink)),
    )

def resolve_asador(event: Event, persons: Sequence[Person]) -> Optional[str]:
    if event.asador_id is None:
        return None
    person = _person_index(persons).get(event.asador_id)
    return person.name if person else None

def settle_event(event: Event, details: Sequence[AttendeeDetail], persons: Sequence[Person]) -> EventReport:
    """
    Run the whole engine for one event.
    Returns attendees (input order), display splits, transfers & totals.
    """
    attendees = build_attendees(event, details, persons)
    report = EventReport(
        event=event,
        attendees=attendees,
        split=compute_split_info(attendees),
        settlement=compute_settlement(attendees),
        totals=event_totals(attendees),
        asador_name=resolve_asador(event, persons),
    )
    logger.info(
        f"Settled event {event.id}: {len(attendees)} attendees, "
        f"{len(report.settlement.transfers)} transfers"
    )
    return report
