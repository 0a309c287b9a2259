"""Custom validators shared by request schemas"""

import re
from datetime import date
from typing import Optional

# Digits with an optional leading +, separators stripped first
PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{0,15}$")
PHONE_SEPARATORS = re.compile(r"[\s\-\(\)]")

def validate_phone_number(phone: str) -> str:
    """Validate and normalize phone number"""
    normalized = PHONE_SEPARATORS.sub("", phone)
    if not PHONE_PATTERN.match(normalized):
        raise ValueError("Phone number is not valid")
    return normalized

def validate_min_length(value: Optional[str], length: int, message: str) -> Optional[str]:
    """Strip and require ``length`` characters when a value is given"""
    if value is None:
        return value
    value = value.strip()
    if len(value) < length:
        raise ValueError(message)
    return value

def validate_birth_date(value: Optional[date]) -> Optional[date]:
    if value is not None and value > date.today():
        raise ValueError("Birth date is not valid")
    return value
