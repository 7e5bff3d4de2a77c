import json
from datetime import date, datetime, timezone

import pytest

from clinic_router.models.records import SLOT_DURATION, SlotMode
from clinic_router.services.clock import get_time_data, resolve_timezone
from clinic_router.services.identity import new_id, normalize_key
from clinic_router.services.masking import mask_contact, mask_email, mask_phone
from clinic_router.services.seed import build_seed_slots, generate_slots, make_slot, parse_timestamp
from clinic_router.testing.conftest import make_settings


# --- identity ---

def test_new_id_is_unique():
    ids = {new_id() for _ in range(1000)}
    assert len(ids) == 1000


@pytest.mark.parametrize("record, key", [
    ({"phone": "555-0100", "email": "A@B.com", "name": "Ann", "id": "X1"}, "555-0100"),
    ({"phone": "", "email": "A@B.com", "name": "Ann", "id": "X1"}, "a@b.com"),
    ({"phone": None, "name": "Ann Lee", "id": "X1"}, "ann lee"),
    ({"id": "X1"}, "x1"),
])
def test_normalize_key_priority(record, key):
    assert normalize_key(record) == key
    assert normalize_key(record) == normalize_key(dict(record))


# --- seed ---

def test_parse_timestamp_variants():
    assert parse_timestamp("2030-01-07T09:00:00Z") == datetime(2030, 1, 7, 9, tzinfo=timezone.utc)
    assert parse_timestamp("2030-01-07T09:00:00") == datetime(2030, 1, 7, 9, tzinfo=timezone.utc)
    assert parse_timestamp("2030-01-07T04:00:00-05:00") == datetime(2030, 1, 7, 9, tzinfo=timezone.utc)
    assert parse_timestamp("2030-01-07T09:00:00.5Z") == datetime(2030, 1, 7, 9, 0, 0, 500000, tzinfo=timezone.utc)
    assert parse_timestamp("20300107T090000") == datetime(2030, 1, 7, 9, tzinfo=timezone.utc)
    assert parse_timestamp("yesterday") is None
    assert parse_timestamp(42) is None


def test_make_slot_has_fixed_duration():
    slot = make_slot("Dr. Chen", "telehealth", "2030-01-07T09:00:00Z")
    assert slot.mode is SlotMode.TELEHEALTH
    assert slot.end - slot.start == SLOT_DURATION
    assert slot.to_dict()["mode"] == "telehealth"


def test_make_slot_rejects_bad_mode():
    with pytest.raises(ValueError):
        make_slot("Dr. Chen", "carrier_pigeon", "2030-01-07T09:00:00Z")


def test_generate_slots_skips_weekends():
    # 2030-01-05 is a Saturday
    slots = generate_slots(["Dr. A", "Dr. B"], days=1, start_hour=9, end_hour=10, first_day=date(2030, 1, 5))
    assert len(slots) == 4
    assert {s.start.date() for s in slots} == {date(2030, 1, 7)}
    assert {s.mode for s in slots if s.provider == "Dr. A"} == {SlotMode.IN_PERSON, SlotMode.TELEHEALTH}


def test_build_seed_slots_from_file(tmp_path):
    path = tmp_path / "slots.json"
    path.write_text(json.dumps([
        {"provider": "Dr. Chen", "mode": "in_person", "start": "2030-02-01T15:00:00Z"},
    ]))
    slots = build_seed_slots(make_settings(seed_slots_path=str(path)))
    assert len(slots) == 1
    assert slots[0].provider == "Dr. Chen"


def test_build_seed_slots_generates_when_file_missing(tmp_path):
    settings = make_settings(seed_slots_path=str(tmp_path / "missing.json"), seed_providers="Dr. X", seed_days=2)
    slots = build_seed_slots(settings)
    # 9:00-17:00 in 30 minute slots
    assert len(slots) == 2 * 16
    assert {s.provider for s in slots} == {"Dr. X"}


# --- masking ---

def test_mask_phone_keeps_format():
    assert mask_phone("(484) 982-0184") == "(484) 982-0000"


def test_mask_email_is_deterministic():
    masked = mask_email("jane.doe@mail.com")
    assert masked.endswith("@anon.example")
    assert masked == mask_email("jane.doe@mail.com")
    assert "jane" not in masked


def test_mask_contact_dispatch():
    assert mask_contact(None) is None
    assert mask_contact("911") != "911"
    assert mask_contact("555-0100") == "555-0000"


# --- clock ---

def test_resolve_timezone():
    assert resolve_timezone("Europe/Paris", "America/Chicago") == "Europe/Paris"
    assert resolve_timezone("CST", "America/Chicago") == "America/Chicago"
    assert resolve_timezone(None, "America/Chicago") == "America/Chicago"


def test_get_time_data_shape():
    now = datetime(2030, 1, 7, 15, 4, 5, tzinfo=timezone.utc)
    data = get_time_data("America/Chicago", now=now)
    assert data["iso_utc"] == "2030-01-07T15:04:05.000Z"
    assert data["unix_ms"] == int(now.timestamp() * 1000)
    assert data["parts"] == {"date": "2030-01-07", "time_24h": "09:04:05"}
    assert data["local_pretty"] == "Mon, Jan 07, 2030, 09:04:05 AM"
