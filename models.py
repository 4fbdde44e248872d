from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Record(BaseModel):
    # Stored records use camelCase keys; snake_case is accepted too.
    # NaN/Infinity amounts are rejected so they never reach the cent math.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False)


class Person(Record):
    id: int
    name: str
    alias: Optional[str] = None
    photo: Optional[str] = None
    email: Optional[str] = None
    birthdate: Optional[str] = None


class Location(Record):
    id: int
    name: str
    address: Optional[str] = None
    maps_url: Optional[str] = None


class Event(Record):
    id: Optional[int] = None
    name: Optional[str] = None
    date: str
    location: Optional[str] = None
    location_id: Optional[int] = None
    asador_id: Optional[int] = None
    attendee_count: int = 0
    total_food_cost: float = 0.0
    total_drink_cost: float = 0.0
    photo: Optional[str] = None


class AttendeeDetail(Record):
    id: Optional[int] = None
    event_id: int
    person_id: int
    # None means "not recorded", which counts as included
    include_food: Optional[bool] = None
    include_drink: Optional[bool] = None
    food_cost: Optional[float] = None
    drink_cost: Optional[float] = None
    note: Optional[str] = None


class Attendee(Record):
    id: str
    person_id: int
    name: str
    alias: Optional[str] = None
    note: str = ""
    food_cost: float = 0.0
    drink_cost: float = 0.0
    total_paid: float = 0.0
    include_food: bool = True
    include_drink: bool = True


class SplitInfo(Record):
    food_share: float = 0.0
    drink_share: float = 0.0
    both_share: float = 0.0
    food_people: int = 0
    drink_people: int = 0
    both_people: int = 0


class Transfer(Record):
    from_name: str = Field(alias="from")
    to_name: str = Field(alias="to")
    from_alias: Optional[str] = None
    to_alias: Optional[str] = None
    from_person_id: Optional[int] = None
    to_person_id: Optional[int] = None
    amount_cents: int
    amount: float


class Settlement(Record):
    share: float = 0.0
    transfers: List[Transfer] = Field(default_factory=list)


class EventTotals(Record):
    attendee_count: int = 0
    total_food_cost: float = 0.0
    total_drink_cost: float = 0.0


class EventReport(Record):
    event: Event
    attendees: List[Attendee] = Field(default_factory=list)
    split: SplitInfo = Field(default_factory=SplitInfo)
    settlement: Settlement = Field(default_factory=Settlement)
    totals: EventTotals = Field(default_factory=EventTotals)
    asador_name: Optional[str] = None
