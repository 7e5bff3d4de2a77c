"""
Tool handlers.

Each handler takes the tool context and the caller's argument bundle, reads or
mutates the store, and returns either a result dict or a ToolFailure. Domain
errors are returned, never raised; the router turns them into envelopes.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Union

from clinic_router.models.records import Appointment
from clinic_router.services.identity import new_id, normalize_key
from clinic_router.services.masking import mask_contact
from clinic_router.services.notifications import LogNotifier
from clinic_router.services.seed import parse_timestamp
from clinic_router.services.store import ClinicStore

logger = logging.getLogger(__name__)

NOT_FOUND = 404
INVALID_ARGUMENT = 400
CONFLICT = 409

FALLBACK_CRISIS_LINE = "+18002738255"
COPAY_ESTIMATE = 35
MIN_MEMBER_ID_LENGTH = 6


@dataclass(frozen=True)
class ToolFailure:
    message: str
    code: int = INVALID_ARGUMENT


@dataclass
class ToolContext:
    store: ClinicStore
    settings: Any
    notifier: LogNotifier


Outcome = Union[Dict[str, Any], ToolFailure]
Handler = Callable[[ToolContext, Dict[str, Any]], Outcome]


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _slot_taken(ctx: ToolContext, slot_id: str, ignore_appointment: Optional[str] = None) -> bool:
    if not ctx.settings.enforce_single_booking:
        return False
    holders = ctx.store.appointments_for_slot(slot_id)
    return any(a.id != ignore_appointment for a in holders)


def appt_search(ctx: ToolContext, args: Dict[str, Any]) -> Outcome:
    """
    Slots matching every supplied filter. `after` is compared with the slot
    start and `before` with the slot end, both inclusive.
    """
    provider = args.get("provider")
    mode = args.get("mode")
    after_raw = args.get("after")
    before_raw = args.get("before")

    after = parse_timestamp(after_raw) if after_raw else None
    before = parse_timestamp(before_raw) if before_raw else None
    # An unreadable timestamp filter matches nothing.
    if (after_raw and after is None) or (before_raw and before is None):
        return {"slots": []}

    slots = []
    for slot in ctx.store.list_slots():
        if provider and slot.provider != provider:
            continue
        if mode and slot.mode.value != mode:
            continue
        if after and slot.start < after:
            continue
        if before and slot.end > before:
            continue
        slots.append(slot.to_dict())

    return {"slots": slots}


def appt_book(ctx: ToolContext, args: Dict[str, Any]) -> Outcome:
    slot_id = args.get("slotId")
    slot = ctx.store.get_slot(slot_id)
    if slot is None:
        return ToolFailure(f"Slot not found: {slot_id}", NOT_FOUND)

    if _slot_taken(ctx, slot.id):
        return ToolFailure(f"Slot already booked: {slot_id}", CONFLICT)

    appointment = Appointment(
        id=new_id(),
        slot=slot,
        patient_id=args.get("patientId"),
        reason=args.get("reason"),
        contact=args.get("contact"),
        created_at=_now_iso(),
    )
    ctx.store.add_appointment(appointment)
    logger.info("📅 Booked appointment %s on slot %s", appointment.id, slot.id)

    return {"appointment": appointment.to_dict()}


def appt_modify(ctx: ToolContext, args: Dict[str, Any]) -> Outcome:
    """Cancel or reschedule an existing appointment"""
    appointment_id = args.get("appointmentId")
    appointment = ctx.store.get_appointment(appointment_id)
    if appointment is None:
        return ToolFailure(f"Appointment not found: {appointment_id}", NOT_FOUND)

    action = args.get("action")

    if action == "cancel":
        ctx.store.remove_appointment(appointment.id)
        logger.info("🗑️ Cancelled appointment %s", appointment.id)
        return {"cancelled": True, "appointmentId": appointment.id}

    if action == "reschedule":
        new_slot_id = args.get("newSlotId")
        slot = ctx.store.get_slot(new_slot_id)
        if slot is None:
            return ToolFailure(f"Slot not found: {new_slot_id}", NOT_FOUND)
        if _slot_taken(ctx, slot.id, ignore_appointment=appointment.id):
            return ToolFailure(f"Slot already booked: {new_slot_id}", CONFLICT)

        updated = ctx.store.replace_appointment_slot(appointment.id, slot)
        logger.info("🔁 Rescheduled appointment %s to slot %s", appointment.id, slot.id)
        return {"appointment": updated.to_dict()}

    return ToolFailure(f"Unsupported action: {action}", INVALID_ARGUMENT)


def intake_save(ctx: ToolContext, args: Dict[str, Any]) -> Outcome:
    """Save intake fields as a patient record; same key means last write wins"""
    record = dict(args)
    record["id"] = new_id()
    record["createdAt"] = _now_iso()

    key = normalize_key(record)
    ctx.store.save_patient(key, record)
    logger.info("🧾 Saved intake for %s", mask_contact(key))

    return {"patient": record, "key": key}


def insurance_verify(ctx: ToolContext, args: Dict[str, Any]) -> Outcome:
    carrier = args.get("carrier")
    member_id = args.get("memberId")

    eligible = bool(carrier) and bool(member_id) and len(str(member_id)) >= MIN_MEMBER_ID_LENGTH

    return {
        "eligible": eligible,
        "copayEstimate": COPAY_ESTIMATE if eligible else None,
    }


def refill_create(ctx: ToolContext, args: Dict[str, Any]) -> Outcome:
    ticket = dict(args)
    ticket.update({
        "id": new_id(),
        "type": "refill",
        "status": "open",
        "createdAt": _now_iso(),
    })
    ctx.store.append_ticket(ticket)
    logger.info("💊 Opened refill ticket %s", ticket["id"])

    return {"ticket": ticket}


def message_send(ctx: ToolContext, args: Dict[str, Any]) -> Outcome:
    queued = ctx.notifier.send(args.get("to"), args.get("channel"), args.get("body"))
    return {"queued": queued}


def emergency_transfer(ctx: ToolContext, args: Dict[str, Any]) -> Outcome:
    """
    Resolve where an emergency call is forwarded:
    988 -> configured crisis line (or the fallback number), 911 -> 911,
    anything else -> the caller-supplied phone.
    """
    target = args.get("target")
    target = str(target) if target is not None else None

    if target == "988":
        destination = ctx.settings.crisis_line_number or FALLBACK_CRISIS_LINE
    elif target == "911":
        destination = "911"
    else:
        destination = args.get("phone")

    if not destination:
        return ToolFailure("No forwarding destination: unknown target and no phone", INVALID_ARGUMENT)

    logger.warning("🚨 Emergency transfer (target=%s) to %s", target, mask_contact(destination))
    return {"forwardedTo": destination}


def voicemail_save(ctx: ToolContext, args: Dict[str, Any]) -> Outcome:
    note = {
        "id": new_id(),
        "type": "voicemail",
        "status": "open",
        "caller": args.get("caller"),
        "audioUrl": args.get("audioUrl"),
        "transcript": args.get("transcript"),
        "createdAt": _now_iso(),
    }
    ctx.store.append_ticket(note)
    logger.info("📼 Saved voicemail %s", note["id"])

    return {"saved": True, "note": note}


HANDLERS: Dict[str, Handler] = {
    "appt.search": appt_search,
    "appt.book": appt_book,
    "appt.modify": appt_modify,
    "intake.save": intake_save,
    "insurance.verify": insurance_verify,
    "refill.create": refill_create,
    "message.send": message_send,
    "emergency.transfer": emergency_transfer,
    "voicemail.save": voicemail_save,
}
