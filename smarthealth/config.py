import os
from enum import Enum
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()


DELIMITERS = (",", "|", ";", "\t")


class MalformedLinePolicy(str, Enum):
    STRICT = "strict"  # fail the whole load
    SKIP = "skip"  # log the line and keep going


class Settings(BaseModel):
    data_dir: Path = Path("data")
    delimiter: str = ","
    malformed_lines: MalformedLinePolicy = MalformedLinePolicy.STRICT
    lock_timeout: float = Field(10.0, ge=0)
    log_level: str = "WARNING"

    @field_validator("delimiter")
    @classmethod
    def validate_delimiter(cls, v):
        # Characters that can appear in a valid name, date or time are excluded.
        if v not in DELIMITERS:
            raise ValueError(f"Delimiter must be one of {DELIMITERS!r}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        return v.upper()

    @property
    def patients_file(self) -> Path:
        return self.data_dir / "patients.txt"

    @property
    def doctors_file(self) -> Path:
        return self.data_dir / "doctors.txt"

    @property
    def appointments_file(self) -> Path:
        return self.data_dir / "appointments.txt"


ENV_VARS = {
    "data_dir": "SMARTHEALTH_DATA_DIR",
    "delimiter": "SMARTHEALTH_DELIMITER",
    "malformed_lines": "SMARTHEALTH_MALFORMED_LINES",
    "lock_timeout": "SMARTHEALTH_LOCK_TIMEOUT",
    "log_level": "SMARTHEALTH_LOG_LEVEL",
}


def load_settings(**overrides: Any) -> Settings:
    """Build settings from the environment; explicit non-None overrides win."""
    values = {}
    for field, env_var in ENV_VARS.items():
        value = os.getenv(env_var)
        if value:
            values[field] = value
    values.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**values)
