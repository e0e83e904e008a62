import math
import re
from typing import Any, Optional, Tuple

__all__ = ["EARTH_RADIUS_MILES", "haversine_miles", "is_valid_zip_code", "normalize_zip_code"]

EARTH_RADIUS_MILES = 3958.76

_ZIP_RE = re.compile(r"[0-9]{5}", re.ASCII)

Coordinates = Tuple[float, float]


def normalize_zip_code(value: Any) -> Optional[str]:
    """Return the trimmed 5-digit ZIP code, or None when ``value`` is not one."""
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not _ZIP_RE.fullmatch(text):
        return None
    return text


def is_valid_zip_code(value: Any) -> bool:
    return normalize_zip_code(value) is not None


def haversine_miles(
    origin: Optional[Coordinates],
    destination: Optional[Coordinates],
) -> Optional[float]:
    """Return the great-circle distance in miles between two (lat, lon) pairs."""
    if origin is None or destination is None:
        return None
    try:
        lat1, lon1 = (float(v) for v in origin)
        lat2, lon2 = (float(v) for v in destination)
    except (TypeError, ValueError):
        return None

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    sin_dphi = math.sin(dphi / 2.0)
    sin_dlambda = math.sin(dlambda / 2.0)
    a = sin_dphi * sin_dphi + math.cos(phi1) * math.cos(phi2) * sin_dlambda * sin_dlambda
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(max(0.0, 1 - a)))
    return float(EARTH_RADIUS_MILES * c)
