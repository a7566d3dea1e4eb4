"""
Land/Sea Validator - Reject points that fall in open ocean.

Uses the BigDataCloud client reverse-geocoding endpoint (free, no key),
with a coarse ocean-box check when the service cannot be reached.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

import requests

from core.config import Settings, get_settings

log = logging.getLogger(__name__)


@dataclass
class LandValidationResult:
    """Outcome of a land/sea check."""
    is_land: bool
    confidence: str  # "high", "medium", "low"
    source: str
    message: str = ""

    def to_dict(self) -> Dict:
        return {
            "is_land": self.is_land,
            "confidence": self.confidence,
            "source": self.source,
            "message": self.message,
        }


def is_likely_on_land(lat: float, lon: float) -> bool:
    """Rough check against the central ocean basins."""
    # Central Pacific, both sides of the antimeridian
    if -30 < lat < 30 and (lon > 160 or lon < -120):
        return False
    # Central Atlantic
    if -20 < lat < 20 and -50 < lon < -10:
        return False
    # Central Indian
    if -30 < lat < 10 and 60 < lon < 95:
        return False
    # Southern Ocean and central Arctic
    if lat < -65 or lat > 80:
        return False
    return True


class LandSeaValidator:
    """Validate that a coordinate is on land before running an analysis."""

    def __init__(self, settings: Optional[Settings] = None, timeout: float = 5.0):
        self.settings = settings or get_settings()
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def _reverse_geocode(self, lat: float, lon: float) -> LandValidationResult:
        params = {"latitude": lat, "longitude": lon, "localityLanguage": "en"}
        response = self.session.get(self.settings.land_sea_url, params=params, timeout=self.timeout)
        response.raise_for_status()
        data = response.json()

        has_country = bool(data.get("countryCode"))
        locality = (data.get("locality") or "").lower()
        is_ocean = (
            "ocean" in locality
            or "sea" in locality
            or (data.get("city") == "" and data.get("principalSubdivision") == "")
        )
        is_land = has_country and not is_ocean

        if is_land:
            message = f"Located in {data.get('countryName') or 'land'}"
        else:
            message = "Point is in an ocean area"
        return LandValidationResult(is_land, "high", "BigDataCloud", message)

    def validate_land_point(self, lat: float, lon: float) -> LandValidationResult:
        """
        Check whether a point is on land.

        Extreme coordinates are rejected without a request; a failed request
        falls back to the ocean-box check with low confidence.
        """
        if abs(lat) > 85 or abs(lon) > 180:
            return LandValidationResult(False, "high", "CoordinateValidation", "Invalid coordinates")

        try:
            return self._reverse_geocode(lat, lon)
        except (requests.RequestException, ValueError) as e:
            log.warning(f"Land/sea lookup failed for ({lat}, {lon}), using basic check: {e}")
            return LandValidationResult(
                is_land=is_likely_on_land(lat, lon),
                confidence="low",
                source="BasicValidation",
                message="External service unavailable, used basic validation",
            )


# Singleton
_validator: Optional[LandSeaValidator] = None

def get_land_validator() -> LandSeaValidator:
    """Get singleton land/sea validator."""
    global _validator
    if _validator is None:
        _validator = LandSeaValidator()
    return _validator
