import functools
import logging
from typing import Any, Callable, Dict, List, NamedTuple

from .errors import (
    ClinicError, ForeignKeyError, RecordNotFoundError,
    RecordValidationError,
)
from .models import (
    Appointment, Doctor, Gender, OutcomeStatus, Patient, Record, ServiceResult,
)
from .store import RecordStore
from . import validators
from ..config import Settings

logger = logging.getLogger(__name__)


class FieldRule(NamedTuple):
    field: str
    check: Callable[[Any], bool]
    message: str


def reports_outcome(func):
    """Turn any ClinicError raised by a service operation into a ServiceResult.

    Store failures are prefixed with what was being done, e.g.
    "Error saving patients: ...".
    """
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> ServiceResult:
        try:
            return func(self, *args, **kwargs)
        except (RecordValidationError, ForeignKeyError, RecordNotFoundError) as e:
            logger.debug("%s.%s rejected: %s", type(self).__name__, func.__name__, e)
            return ServiceResult(status=OutcomeStatus(e.status), message=str(e))
        except ClinicError as e:
            message = f"Error {getattr(e, 'operation', 'saving')} {self.plural}: {e}"
            logger.error(message)
            return ServiceResult(status=OutcomeStatus.ERROR, message=message)
    return wrapper


class RecordService:
    """Add / update / delete / list for one record type.

    Subclasses declare the record type, their labels and the ordered
    validation rules; the first failing rule is the one reported.
    """
    record_type = Record
    label = "Record"
    plural = "records"
    rules: List[FieldRule] = []
    deleted_verb = "deleted"

    def __init__(self, store: RecordStore):
        self.store = store

    def validate(self, values: Dict[str, Any]) -> None:
        for rule in self.rules:
            if rule.field in values and not rule.check(values[rule.field]):
                raise RecordValidationError(rule.field, rule.message)

    def prepare(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """Hook to normalise validated values before they are stored."""
        return values

    def require(self, record_id: int) -> Record:
        record = self.store.get_by_id(record_id)
        if record is None:
            raise RecordNotFoundError(f"{self.label} not found.")
        return record

    def create(self, **values) -> ServiceResult:
        self.validate(values)
        values = self.prepare(values)
        record = self.store.add_new(lambda record_id: self.record_type(id=record_id, **values))
        record_id = record.id
        logger.info("Added %s %d", self.label.lower(), record_id)
        return ServiceResult(
            status=OutcomeStatus.SUCCESS,
            message=self.added_message(record_id),
            record_id=record_id,
        )

    def modify(self, record_id: int, **values) -> ServiceResult:
        with self.store.locked():
            record = self.require(record_id)
            self.validate(values)
            updated = record.model_copy(update=self.prepare(values))
            self.store.update(updated)
        return ServiceResult(
            status=OutcomeStatus.SUCCESS,
            message=f"{self.label} updated successfully.",
            record_id=record_id,
        )

    def added_message(self, record_id: int) -> str:
        return f"{self.label} added successfully with ID: {record_id}"

    @reports_outcome
    def delete(self, record_id: int) -> ServiceResult:
        with self.store.locked():
            self.require(record_id)
            self.store.delete(record_id)
        return ServiceResult(
            status=OutcomeStatus.SUCCESS,
            message=f"{self.label} {self.deleted_verb} successfully.",
            record_id=record_id,
        )

    @reports_outcome
    def list(self) -> ServiceResult:
        records = self.store.load_all()
        if not records:
            return ServiceResult(status=OutcomeStatus.SUCCESS, message=f"No {self.plural} found.")
        return ServiceResult(
            status=OutcomeStatus.SUCCESS,
            message=f"{self.label} List:",
            lines=[self.describe(record) for record in records],
        )

    def describe(self, record: Record) -> str:
        return f"ID: {record.id}"


class PatientService(RecordService):
    record_type = Patient
    label = "Patient"
    plural = "patients"
    rules = [
        FieldRule("name", validators.is_valid_name, "Invalid name."),
        FieldRule("age", validators.is_valid_age, "Invalid age."),
        FieldRule("gender", validators.is_valid_gender, "Invalid gender."),
        FieldRule("contact", validators.is_valid_contact, "Invalid contact number."),
    ]

    def prepare(self, values):
        values = dict(values)
        values["gender"] = Gender.parse(values["gender"])
        return values

    @reports_outcome
    def add(self, name: str, age: int, gender: str, contact: str) -> ServiceResult:
        return self.create(name=name, age=age, gender=gender, contact=contact)

    @reports_outcome
    def update(self, patient_id: int, name: str, age: int, gender: str, contact: str) -> ServiceResult:
        return self.modify(patient_id, name=name, age=age, gender=gender, contact=contact)

    def describe(self, patient: Patient) -> str:
        return (f"ID: {patient.id}, Name: {patient.name}, Age: {patient.age}, "
                f"Gender: {patient.gender.value}, Contact: {patient.contact}")


class DoctorService(RecordService):
    record_type = Doctor
    label = "Doctor"
    plural = "doctors"
    rules = [
        FieldRule("name", validators.is_valid_name, "Invalid name."),
        FieldRule("specialization", validators.is_valid_specialization, "Invalid specialization."),
        FieldRule("contact", validators.is_valid_contact, "Invalid contact number."),
    ]

    @reports_outcome
    def add(self, name: str, specialization: str, contact: str) -> ServiceResult:
        return self.create(name=name, specialization=specialization, contact=contact)

    @reports_outcome
    def update(self, doctor_id: int, name: str, specialization: str, contact: str) -> ServiceResult:
        return self.modify(doctor_id, name=name, specialization=specialization, contact=contact)

    def describe(self, doctor: Doctor) -> str:
        return (f"ID: {doctor.id}, Name: {doctor.name}, "
                f"Specialization: {doctor.specialization}, Contact: {doctor.contact}")


class AppointmentService(RecordService):
    record_type = Appointment
    label = "Appointment"
    plural = "appointments"
    deleted_verb = "cancelled"
    rules = [
        FieldRule("date", validators.is_valid_date, "Invalid date format. Use YYYY-MM-DD."),
        FieldRule("time", validators.is_valid_time, "Invalid time format. Use HH:MM."),
    ]

    def __init__(self, store: RecordStore, patients: RecordStore, doctors: RecordStore):
        super().__init__(store)
        self.patients = patients
        self.doctors = doctors

    def added_message(self, record_id: int) -> str:
        return f"Appointment scheduled successfully with ID: {record_id}"

    @reports_outcome
    def add(self, patient_id: int, doctor_id: int, date: str, time: str) -> ServiceResult:
        # References are checked before the date and time.
        if self.patients.get_by_id(patient_id) is None:
            raise ForeignKeyError("patient_id", "Invalid patient ID.")
        if self.doctors.get_by_id(doctor_id) is None:
            raise ForeignKeyError("doctor_id", "Invalid doctor ID.")
        return self.create(patient_id=patient_id, doctor_id=doctor_id, date=date, time=time)

    @reports_outcome
    def update(self, appointment_id: int, date: str, time: str) -> ServiceResult:
        return self.modify(appointment_id, date=date, time=time)

    def _name_of(self, store: RecordStore, record_id: int) -> str:
        record = store.get_by_id(record_id)
        return record.name if record is not None else "Unknown"

    def describe(self, appointment: Appointment) -> str:
        return (f"ID: {appointment.id}, "
                f"Patient: {self._name_of(self.patients, appointment.patient_id)}, "
                f"Doctor: {self._name_of(self.doctors, appointment.doctor_id)}, "
                f"Date: {appointment.date}, Time: {appointment.time}")


class ClinicServices:
    """The three services wired to stores under one data directory."""

    def __init__(self, patients: PatientService, doctors: DoctorService,
                 appointments: AppointmentService):
        self.patients = patients
        self.doctors = doctors
        self.appointments = appointments

    @classmethod
    def from_settings(cls, settings: Settings) -> "ClinicServices":
        def store(path, record_type):
            return RecordStore(
                path, record_type,
                delimiter=settings.delimiter,
                malformed=settings.malformed_lines,
                lock_timeout=settings.lock_timeout,
            )

        patient_store = store(settings.patients_file, Patient)
        doctor_store = store(settings.doctors_file, Doctor)
        appointment_store = store(settings.appointments_file, Appointment)
        return cls(
            patients=PatientService(patient_store),
            doctors=DoctorService(doctor_store),
            appointments=AppointmentService(appointment_store, patient_store, doctor_store),
        )
