import threading
from typing import Any, Dict, Iterable, List, Optional

from clinic_router.models.records import Appointment, Slot


class ClinicStore:
    """In-memory collections for slots, appointments, patients and tickets"""

    def __init__(self, slots: Iterable[Slot] = ()):
        self.lock = threading.RLock()
        self.slots: Dict[str, Slot] = {slot.id: slot for slot in slots}
        self.appointments: Dict[str, Appointment] = {}
        self.patients: Dict[str, Dict[str, Any]] = {}  # normalized key -> record
        self.tickets: List[Dict[str, Any]] = []

    # --- slots ---

    def list_slots(self) -> List[Slot]:
        """All seeded slots, in seed order"""
        with self.lock:
            return list(self.slots.values())

    def get_slot(self, slot_id: Any) -> Optional[Slot]:
        with self.lock:
            if not isinstance(slot_id, str):
                return None
            return self.slots.get(slot_id)

    # --- appointments ---

    def add_appointment(self, appointment: Appointment) -> Appointment:
        with self.lock:
            self.appointments[appointment.id] = appointment
            return appointment

    def get_appointment(self, appointment_id: Any) -> Optional[Appointment]:
        with self.lock:
            if not isinstance(appointment_id, str):
                return None
            return self.appointments.get(appointment_id)

    def list_appointments(self) -> List[Appointment]:
        with self.lock:
            return list(self.appointments.values())

    def appointments_for_slot(self, slot_id: str) -> List[Appointment]:
        """Appointments currently holding the given slot"""
        with self.lock:
            return [a for a in self.appointments.values() if a.slot.id == slot_id]

    def replace_appointment_slot(self, appointment_id: str, slot: Slot) -> Optional[Appointment]:
        """Point an existing appointment at a different slot, keeping its ID"""
        with self.lock:
            appointment = self.appointments.get(appointment_id)
            if appointment is None:
                return None
            appointment.slot = slot
            return appointment

    def remove_appointment(self, appointment_id: str) -> bool:
        with self.lock:
            return self.appointments.pop(appointment_id, None) is not None

    # --- patients ---

    def save_patient(self, key: str, record: Dict[str, Any]) -> Dict[str, Any]:
        """Store a patient record under its key, replacing whatever was there"""
        with self.lock:
            self.patients[key] = record
            return record

    def get_patient(self, key: str) -> Optional[Dict[str, Any]]:
        with self.lock:
            return self.patients.get(key)

    def list_patients(self) -> List[Dict[str, Any]]:
        with self.lock:
            return list(self.patients.values())

    # --- tickets ---

    def append_ticket(self, ticket: Dict[str, Any]) -> Dict[str, Any]:
        with self.lock:
            self.tickets.append(ticket)
            return ticket

    def list_tickets(self, ticket_type: Optional[str] = None) -> List[Dict[str, Any]]:
        with self.lock:
            if ticket_type is None:
                return list(self.tickets)
            return [t for t in self.tickets if t.get("type") == ticket_type]
