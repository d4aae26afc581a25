from enum import Enum
from typing import ClassVar, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import SAVING, MalformedRecordError


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: str) -> "Gender":
        """Case-insensitive lookup, e.g. 'female' -> Gender.FEMALE."""
        for member in cls:
            if member.value.lower() == value.strip().lower():
                return member
        raise ValueError(f"Unknown gender: {value!r}")


class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    INVALID = "invalid"
    NOT_FOUND = "not_found"
    FOREIGN_KEY = "foreign_key"
    ERROR = "error"


class Record(BaseModel):
    """Base for every stored record.

    FIELDS is the positional column order used in the backing file.
    """
    FIELDS: ClassVar[Tuple[str, ...]] = ("id",)

    id: int


class Patient(Record):
    FIELDS: ClassVar[Tuple[str, ...]] = ("id", "name", "age", "gender", "contact")

    name: str
    age: int
    gender: Gender
    contact: str


class Doctor(Record):
    FIELDS: ClassVar[Tuple[str, ...]] = ("id", "name", "specialization", "contact")

    name: str
    specialization: str
    contact: str


class Appointment(Record):
    FIELDS: ClassVar[Tuple[str, ...]] = ("id", "patient_id", "doctor_id", "date", "time")

    patient_id: int
    doctor_id: int
    date: str
    time: str


class ServiceResult(BaseModel):
    status: OutcomeStatus
    message: str
    record_id: Optional[int] = None
    lines: List[str] = []

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS

    def render(self) -> str:
        """Message followed by any listing lines, one per row."""
        return "\n".join([self.message, *self.lines])


R = TypeVar("R", bound=Record)


def serialize_record(record: Record, delimiter: str = ",") -> str:
    """Join the record's fields in declared order, without escaping."""
    data = record.model_dump(mode="json")
    values = []
    for field in record.FIELDS:
        value = str(data[field])
        if delimiter in value or "\n" in value or "\r" in value:
            raise MalformedRecordError(
                f"{type(record).__name__} {field} {value!r} cannot be stored: "
                f"it contains the delimiter or a line break",
                operation=SAVING,
            )
        values.append(value)
    return delimiter.join(values)


def parse_record(record_type: Type[R], line: str, delimiter: str = ",") -> R:
    parts = line.split(delimiter)
    if len(parts) != len(record_type.FIELDS):
        raise MalformedRecordError(
            f"expected {len(record_type.FIELDS)} fields for {record_type.__name__}, got {len(parts)}"
        )
    values = dict(zip(record_type.FIELDS, parts))
    if "gender" in values:
        try:
            values["gender"] = Gender.parse(values["gender"])
        except ValueError as e:
            raise MalformedRecordError(str(e)) from e
    try:
        return record_type(**values)
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
        raise MalformedRecordError(f"invalid {record_type.__name__} value(s) for: {fields}") from e
