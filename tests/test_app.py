import json
import pytest
from app import main, render_report
from models import AttendeeDetail, Event, Person
from settlement import settle_event


@pytest.fixture
def data_dir(tmp_path):
    (tmp_path / "persons.json").write_text(json.dumps([
        {"id": 1, "name": "Ana", "alias": "ana.mp"},
        {"id": 2, "name": "Bruno"},
        {"id": 3, "name": "Carla"},
    ]), encoding="utf-8")
    (tmp_path / "events.json").write_text(json.dumps([
        {"id": 1, "name": "Kickoff", "date": "2024-01-12"},
        {"id": 2, "name": "Asado", "date": "2024-03-09", "location": "Quincho", "asadorId": 1},
    ]), encoding="utf-8")
    (tmp_path / "event_details.json").write_text(json.dumps([
        {"id": 1, "eventId": 2, "personId": 1, "foodCost": 30, "drinkCost": 15},
        {"id": 2, "eventId": 2, "personId": 2},
        {"id": 3, "eventId": 2, "personId": 3},
        {"id": 4, "eventId": 1, "personId": 1, "foodCost": 10, "includeDrink": False},
    ]), encoding="utf-8")
    return tmp_path

def test_report_for_latest_event(data_dir, capsys):
    assert main(["--data-dir", str(data_dir)]) == 0
    out = capsys.readouterr().out
    assert "Asado on 2024-03-09" in out
    assert "3 attendees · Quincho" in out
    assert "Asador: Ana" in out
    assert "Bruno -> Ana: $15.00 (alias: ana.mp)" in out
    assert "Carla -> Ana: $15.00" in out
    assert "Overall equal split per person: $15.00" in out

def test_report_all_settled(data_dir, capsys):
    assert main(["--data-dir", str(data_dir), "--event-id", "1"]) == 0
    out = capsys.readouterr().out
    assert "1 attendee\n" in out
    assert "Equal split (drinks only): —" in out
    assert "All settled. No transfers needed." in out

def test_json_output(data_dir, capsys):
    assert main(["--data-dir", str(data_dir), "--event-id", "2", "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    transfers = payload["settlement"]["transfers"]
    assert [(t["from"], t["to"], t["amount"]) for t in transfers] == [("Bruno", "Ana", 15.0), ("Carla", "Ana", 15.0)]
    assert payload["split"]["foodShare"] == 10.0
    assert payload["asadorName"] == "Ana"

def test_unknown_event(data_dir):
    assert main(["--data-dir", str(data_dir), "--event-id", "99"]) == 1

def test_no_events(tmp_path):
    assert main(["--data-dir", str(tmp_path)]) == 1

def test_render_without_attendees():
    report = settle_event(Event(id=5, date="2024-05-01"), [], [Person(id=1, name="Ana")])
    text = render_report(report)
    assert text.startswith("Event on 2024-05-01")
    assert "No attendees recorded for this event." in text

def test_bad_cost_row_skipped(data_dir, capsys):
    (data_dir / "event_details.json").write_text(
        '[{"id": 1, "eventId": 2, "personId": 1, "foodCost": 20},'
        ' {"id": 2, "eventId": 2, "personId": 2},'
        ' {"id": 3, "eventId": 2, "personId": 3, "foodCost": NaN}]',
        encoding="utf-8",
    )
    assert main(["--data-dir", str(data_dir)]) == 0
    out = capsys.readouterr().out
    assert "2 attendees" in out
    assert "Bruno -> Ana: $10.00" in out

def test_location_from_linked_record(data_dir, capsys):
    (data_dir / "locations.json").write_text(json.dumps([{"id": 4, "name": "Club Nautico"}]), encoding="utf-8")
    (data_dir / "events.json").write_text(json.dumps([
        {"id": 2, "name": "Asado", "date": "2024-03-09", "locationId": 4},
    ]), encoding="utf-8")
    assert main(["--data-dir", str(data_dir)]) == 0
    assert "3 attendees · Club Nautico" in capsys.readouterr().out

def test_person_filter(data_dir, capsys):
    assert main(["--data-dir", str(data_dir), "--person", "carla"]) == 0
    out = capsys.readouterr().out
    assert "Carla -> Ana: $15.00" in out
    assert "Bruno -> Ana" not in out

def test_person_filter_without_transfers(data_dir, capsys):
    (data_dir / "persons.json").write_text(json.dumps([
        {"id": 1, "name": "Ana"}, {"id": 2, "name": "Bruno"}, {"id": 3, "name": "Carla"},
        {"id": 4, "name": "Dario", "email": "dario@example.com"},
    ]), encoding="utf-8")
    assert main(["--data-dir", str(data_dir), "--person", "DARIO@example.com"]) == 0
    assert "Nothing to pay or collect." in capsys.readouterr().out

def test_unknown_person_filter(data_dir):
    assert main(["--data-dir", str(data_dir), "--person", "nobody"]) == 1

def test_stats_report(data_dir, capsys):
    assert main(["--data-dir", str(data_dir), "--stats"]) == 0
    out = capsys.readouterr().out
    assert "Attendance\n  Ana: 2\n  Bruno: 1\n  Carla: 1" in out
    assert "Locations\n  Quincho: 1\n  Unspecified: 1" in out
    assert "Asadores\n  Ana: 1" in out
    # Bruno and Carla put in nothing and left both flags unset
    assert "Contributions\n  Ana: 3 (food 2, drinks 1)\nAttendees per event" in out
    assert "Attendees per event\n  2024-01-12: 1\n  2024-03-09: 3" in out

def test_stats_report_empty(tmp_path, capsys):
    assert main(["--data-dir", str(tmp_path), "--stats"]) == 0
    out = capsys.readouterr().out
    assert out.count("No data yet") == 5
