import re

NAME_PATTERN = re.compile(r"[A-Za-z ]{2,50}")
CONTACT_PATTERN = re.compile(r"[0-9]{10}")
DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
TIME_PATTERN = re.compile(r"\d{2}:\d{2}", re.ASCII)

GENDERS = ("male", "female", "other")


def _matches(pattern: re.Pattern, value) -> bool:
    return isinstance(value, str) and pattern.fullmatch(value) is not None


def is_valid_name(name) -> bool:
    """Letters and spaces only, 2 to 50 characters."""
    return _matches(NAME_PATTERN, name)


def is_valid_contact(contact) -> bool:
    return _matches(CONTACT_PATTERN, contact)


def is_valid_gender(gender) -> bool:
    return isinstance(gender, str) and gender.lower() in GENDERS


def is_valid_age(age) -> bool:
    if isinstance(age, bool) or not isinstance(age, int):
        return False
    return 0 < age < 120


def is_valid_specialization(specialization) -> bool:
    return isinstance(specialization, str) and len(specialization) >= 2


def is_valid_date(date) -> bool:
    # Format only; 2024-99-99 is accepted.
    return _matches(DATE_PATTERN, date)


def is_valid_time(time) -> bool:
    # Format only; 99:99 is accepted.
    return _matches(TIME_PATTERN, time)
