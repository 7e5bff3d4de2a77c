import json
import logging
import os
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, List, Optional

from clinic_router.models.records import SLOT_DURATION, Slot, SlotMode
from clinic_router.services.identity import new_id

logger = logging.getLogger(__name__)


def parse_timestamp(value) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp string. Naive values are taken as UTC.
    Returns None when the value can't be parsed.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def make_slot(provider: str, mode, start) -> Slot:
    start_dt = parse_timestamp(start)
    if start_dt is None:
        raise ValueError(f"Invalid slot start: {start!r}")
    return Slot(
        id=new_id(),
        provider=provider,
        mode=SlotMode(mode),
        start=start_dt,
        end=start_dt + SLOT_DURATION,
    )


def generate_slots(
    providers: Iterable[str],
    days: int,
    start_hour: int = 9,
    end_hour: int = 17,
    first_day: Optional[date] = None,
) -> List[Slot]:
    """
    Build a grid of slots: every provider, every weekday for `days` business
    days starting at `first_day`, one slot per SLOT_DURATION between the start
    and end hour (UTC). Modes alternate so each provider offers both.
    """
    providers = list(providers)
    day = first_day or (datetime.now(timezone.utc).date() + timedelta(days=1))
    slots: List[Slot] = []
    modes = [SlotMode.IN_PERSON, SlotMode.TELEHEALTH]

    seeded_days = 0
    while seeded_days < days:
        if day.weekday() < 5:
            cursor = datetime.combine(day, time(hour=start_hour), tzinfo=timezone.utc)
            day_end = datetime.combine(day, time(hour=end_hour), tzinfo=timezone.utc)
            i = 0
            while cursor + SLOT_DURATION <= day_end:
                for p_index, provider in enumerate(providers):
                    slots.append(make_slot(provider, modes[(i + p_index) % 2], cursor))
                cursor += SLOT_DURATION
                i += 1
            seeded_days += 1
        day += timedelta(days=1)

    return slots


def load_slots_file(path: str) -> List[Slot]:
    """Load seed slots from a JSON list of {provider, mode, start}"""
    with open(path, "r") as f:
        entries = json.load(f)
    return [make_slot(e["provider"], e["mode"], e["start"]) for e in entries]


def build_seed_slots(settings) -> List[Slot]:
    if settings.seed_slots_path and os.path.exists(settings.seed_slots_path):
        slots = load_slots_file(settings.seed_slots_path)
        logger.info("✅ Loaded %d seed slots from %s", len(slots), settings.seed_slots_path)
        return slots

    if settings.seed_slots_path:
        logger.warning("⚠️ %s not found, generating seed slots instead", settings.seed_slots_path)

    slots = generate_slots(
        settings.providers,
        settings.seed_days,
        settings.seed_day_start_hour,
        settings.seed_day_end_hour,
    )
    logger.info("✅ Generated %d seed slots for %d providers", len(slots), len(settings.providers))
    return slots
