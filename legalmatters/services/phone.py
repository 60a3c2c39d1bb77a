"""US phone number handling.

Customers store phone numbers as 10 raw digits; the API always exchanges the
``(XXX) XXX-XXXX`` form.
"""

import re

_NON_DIGITS = re.compile(r"\D", re.ASCII)


class PhoneNumberError(ValueError):
    pass


def normalize_phone(phone_number: str) -> str:
    """Strip formatting and an optional leading country code "1".

    Raises PhoneNumberError unless exactly 10 digits remain.
    """
    if phone_number is None or not phone_number.strip():
        raise PhoneNumberError("Phone number cannot be empty")

    normalized = _NON_DIGITS.sub("", phone_number)

    if len(normalized) == 11 and normalized[0] == "1":
        normalized = normalized[1:]

    if len(normalized) != 10:
        raise PhoneNumberError(f"Phone number must be 10 digits: {phone_number}")

    return normalized


def format_phone(normalized: str) -> str:
    return f"({normalized[:3]}) {normalized[3:6]}-{normalized[6:]}"
