"""Form field validators shared by checkout and payment."""

import re


_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
_ZIP_RE = re.compile(r"\d{5}(-\d{4})?")
_CARD_RE = re.compile(r"\d{16}")
_CVV_RE = re.compile(r"\d{3,4}")
_EXPIRY_RE = re.compile(r"\d{2}/\d{2}")


def validate_email(email: str) -> bool:
    return bool(_EMAIL_RE.fullmatch(email))


def validate_password(password: str) -> bool:
    return len(password) >= 6


def validate_card_number(card_number: str) -> bool:
    """Accept 16 digits, ignoring whitespace (``4242 4242 4242 4242``)."""
    return bool(_CARD_RE.fullmatch(re.sub(r"\s", "", card_number)))


def validate_cvv(cvv: str) -> bool:
    return bool(_CVV_RE.fullmatch(cvv))


def validate_zip_code(zip_code: str) -> bool:
    """Accept US ZIP and ZIP+4."""
    return bool(_ZIP_RE.fullmatch(zip_code))


def validate_phone(phone: str) -> bool:
    """Accept any formatting with exactly ten digits."""
    return len(re.sub(r"\D", "", phone)) == 10


def validate_expiry_date(expiry: str) -> bool:
    """Accept ``MM/YY``. Only the shape is checked."""
    return bool(_EXPIRY_RE.fullmatch(expiry))
