"""US ZIP code to coordinate lookup backed by the ``zipcodes`` dataset."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional, Tuple

import zipcodes

from ..utils.geo import normalize_zip_code

LOGGER = logging.getLogger("uvicorn.error")

Coordinates = Tuple[float, float]


@lru_cache(maxsize=4096)
def _lookup_cached(zip_code: str) -> Optional[Coordinates]:
    matches = zipcodes.matching(zip_code)
    for entry in matches:
        try:
            return float(entry["lat"]), float(entry["long"])
        except (KeyError, TypeError, ValueError):
            continue
    return None


class ZipCodeLookup:
    """Resolve postal codes to ``(lat, lon)``; None means unknown."""

    def lookup(self, zip_code: Optional[str]) -> Optional[Coordinates]:
        normalized = normalize_zip_code(zip_code)
        if normalized is None:
            return None
        coords = _lookup_cached(normalized)
        if coords is None:
            LOGGER.debug("ZIP code %s not found in lookup table", normalized)
        return coords


_default_lookup = ZipCodeLookup()


def get_zip_code_lookup() -> ZipCodeLookup:
    return _default_lookup


__all__ = ["Coordinates", "ZipCodeLookup", "get_zip_code_lookup"]
