# cargoplan/utils/__init__.py
import math
import secrets
import string

def unique_string(length: int) -> str:
    """Random alphanumeric key, used for the access/refresh keys stored on UserToken."""
    alphabet = string.ascii_letters + string.digits
    return ''.join(secrets.choice(alphabet) for _ in range(length))

def parse_number(value):
    """
    Coerces client input ("12", 12, 12.5) to a float.
    Returns None for anything that is not a finite number, booleans included.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None
