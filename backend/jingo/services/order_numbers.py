"""
Human-readable order numbers: JJ-<year>-<6 chars>

The alphabet leaves out look-alike characters (0/O, 1/I/L); 31^6 codes per
year keeps collisions negligible at our volume.
"""
import secrets
from datetime import datetime, timezone
from typing import Optional

ORDER_NUMBER_ALPHABET = "ABCDEFGHJKMNPQRSTUVWXYZ23456789"
ORDER_NUMBER_LENGTH = 6


def generate_order_number(now: Optional[datetime] = None) -> str:
    year = (now or datetime.now(timezone.utc)).year
    code = "".join(secrets.choice(ORDER_NUMBER_ALPHABET) for _ in range(ORDER_NUMBER_LENGTH))
    return f"JJ-{year}-{code}"
