"""
Elevation Loader - Elevation, slope and aspect for a point.

Uses Open-Elevation, falling back to the USGS Elevation Point Query Service
for single points. Slope and aspect come from Horn's method on a 3x3 grid.
"""

import math
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np
import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from core.config import Settings, get_settings
from core.errors import ProviderUnavailable
from core.models import AspectDirection, TerrainMeasurement

log = logging.getLogger(__name__)

# Approximate meters per degree of latitude
METERS_PER_DEGREE = 111000.0

# ~111 m at the equator
DEFAULT_CELL_SIZE = 0.001

# (upper bound in degrees, class), strict
SLOPE_CLASSES = [
    (2, "Flat"),
    (5, "Gentle"),
    (10, "Moderate"),
    (15, "Moderately steep"),
    (30, "Steep"),
]

_ASPECT_SECTORS = [
    AspectDirection.NE,
    AspectDirection.E,
    AspectDirection.SE,
    AspectDirection.S,
    AspectDirection.SW,
    AspectDirection.W,
    AspectDirection.NW,
]


@dataclass
class ElevationResult:
    """Elevation data for a point."""
    latitude: float
    longitude: float
    elevation_meters: float
    data_source: str
    missing: bool = False


@dataclass
class TerrainProfile:
    """Terrain analysis for a point."""
    latitude: float
    longitude: float
    elevation: float
    slope: float                     # degrees
    aspect: float                    # degrees, 0 = north, clockwise
    aspect_direction: AspectDirection
    missing: List[str] = field(default_factory=list)

    @property
    def slope_class(self) -> str:
        return classify_slope(self.slope)

    def to_measurement(self) -> TerrainMeasurement:
        return TerrainMeasurement(
            elevation=self.elevation,
            slope=self.slope,
            aspect=self.aspect_direction,
            missing=tuple(self.missing),
        )


def classify_slope(slope: float) -> str:
    for limit, name in SLOPE_CLASSES:
        if slope < limit:
            return name
    return "Very steep"


def aspect_to_direction(aspect: float) -> AspectDirection:
    """Map degrees to one of eight 45° sectors centred on north."""
    if aspect >= 337.5 or aspect < 22.5:
        return AspectDirection.N
    for index, direction in enumerate(_ASPECT_SECTORS):
        low = 22.5 + 45 * index
        if low <= aspect < low + 45:
            return direction
    return AspectDirection.N


def horn_slope_aspect(elevations: List[float], cell_size: float = DEFAULT_CELL_SIZE) -> Tuple[float, float]:
    """
    Slope and aspect in degrees from a 3x3 elevation window.

    Args:
        elevations: Nine values, row-major; rows run north to south,
            columns west to east
        cell_size: Grid spacing in degrees

    Returns:
        (slope, aspect) with aspect in [0, 360)
    """
    z = np.asarray(elevations, dtype=float).reshape(3, 3)
    spacing = 8 * cell_size * METERS_PER_DEGREE

    dz_dx = ((z[0, 2] + 2 * z[1, 2] + z[2, 2]) - (z[0, 0] + 2 * z[1, 0] + z[2, 0])) / spacing
    dz_dy = ((z[2, 0] + 2 * z[2, 1] + z[2, 2]) - (z[0, 0] + 2 * z[0, 1] + z[0, 2])) / spacing

    slope = float(np.degrees(np.arctan(np.hypot(dz_dx, dz_dy))))

    aspect = math.degrees(math.atan2(float(dz_dy), -float(dz_dx)))
    if aspect < 0:
        aspect = 90.0 - aspect
    elif aspect > 90.0:
        aspect = 360.0 - aspect + 90.0
    else:
        aspect = 90.0 - aspect

    return slope, aspect


class ElevationLoader:
    """
    Fetch elevation data and derive terrain metrics.

    API Documentation:
    https://github.com/Jorl17/open-elevation/blob/master/docs/api.md
    https://apps.nationalmap.gov/epqs/
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": self.settings.user_agent})

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=5),
        retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
        reraise=True,
    )
    def _make_request(self, url: str, params: Dict) -> Dict:
        response = self.session.get(url, params=params, timeout=self.settings.http_timeout)
        response.raise_for_status()
        return response.json()

    def _open_elevation(self, points: List[Tuple[float, float]]) -> List[Optional[float]]:
        locations = "|".join(f"{lat},{lon}" for lat, lon in points)
        data = self._make_request(self.settings.open_elevation_url, {"locations": locations})
        results = data["results"]
        if len(results) != len(points):
            raise ValueError(f"expected {len(points)} results, got {len(results)}")
        return [r.get("elevation") for r in results]

    def _usgs_elevation(self, lat: float, lon: float) -> ElevationResult:
        params = {"x": lon, "y": lat, "units": "Meters", "output": "json"}
        try:
            data = self._make_request(self.settings.usgs_elevation_url, params)
        except requests.RequestException as e:
            log.error(f"USGS elevation request failed for ({lat}, {lon}): {e}")
            raise ProviderUnavailable("USGS EPQS", str(e)) from e
        except ValueError as e:
            raise ProviderUnavailable("USGS EPQS", f"invalid JSON: {e}") from e

        try:
            elevation = float(data.get("value"))
        except (TypeError, ValueError):
            elevation = None

        # USGS answers -9999 or similar for points outside coverage
        if elevation is None or math.isnan(elevation) or elevation < -1000:
            log.warning(f"No USGS elevation for ({lat}, {lon}); using 0")
            return ElevationResult(lat, lon, 0.0, "USGS_3DEP", missing=True)

        return ElevationResult(lat, lon, elevation, "USGS_3DEP")

    def get_elevation(self, lat: float, lon: float) -> ElevationResult:
        """
        Get elevation for a single point.

        Open-Elevation first; any failure there falls back to USGS.

        Raises:
            ProviderUnavailable: if both services fail
        """
        try:
            value = self._open_elevation([(lat, lon)])[0]
        except (requests.RequestException, ValueError, KeyError, TypeError) as e:
            log.warning(f"Open-Elevation failed for ({lat}, {lon}), trying USGS: {e}")
            return self._usgs_elevation(lat, lon)

        if value is None:
            log.warning(f"Open-Elevation has no value for ({lat}, {lon}), trying USGS")
            return self._usgs_elevation(lat, lon)

        log.debug(f"Elevation at ({lat:.4f}, {lon:.4f}): {value:.1f}m")
        return ElevationResult(lat, lon, float(value), "Open-Elevation")

    def get_elevations_batch(self, points: List[Tuple[float, float]]) -> List[Optional[float]]:
        """
        Get elevations for multiple points in one Open-Elevation request.

        Raises:
            ProviderUnavailable: on any request or response failure
        """
        try:
            return self._open_elevation(points)
        except (requests.RequestException, ValueError, KeyError, TypeError) as e:
            log.error(f"Open-Elevation batch request failed ({len(points)} points): {e}")
            raise ProviderUnavailable("Open-Elevation", str(e)) from e

    def slope_and_aspect(
        self, lat: float, lon: float, cell_size: float = DEFAULT_CELL_SIZE
    ) -> Tuple[float, float, bool]:
        """
        Slope and aspect around a point.

        Returns:
            (slope, aspect, complete); complete is False when some grid
            elevations were missing and defaulted to 0
        """
        points = [
            (lat + i * cell_size, lon + j * cell_size)
            for i in (1, 0, -1)
            for j in (-1, 0, 1)
        ]
        raw = self.get_elevations_batch(points)
        complete = all(v is not None for v in raw)
        elevations = [0.0 if v is None else float(v) for v in raw]
        slope, aspect = horn_slope_aspect(elevations, cell_size)
        return slope, aspect, complete

    def analyze_terrain(self, lat: float, lon: float) -> TerrainProfile:
        """Full terrain analysis for a point."""
        elevation = self.get_elevation(lat, lon)
        slope, aspect, complete = self.slope_and_aspect(lat, lon)

        missing = []
        if elevation.missing:
            missing.append("elevation")
        if not complete:
            log.warning(f"Incomplete elevation grid around ({lat}, {lon}); gaps set to 0")
            missing.extend(["slope", "aspect"])

        return TerrainProfile(
            latitude=lat,
            longitude=lon,
            elevation=elevation.elevation_meters,
            slope=slope,
            aspect=aspect,
            aspect_direction=aspect_to_direction(aspect),
            missing=missing,
        )

    def evaluate(self, lat: float, lon: float) -> TerrainMeasurement:
        """Terrain measurement ready for scoring."""
        return self.analyze_terrain(lat, lon).to_measurement()


# Singleton
_loader: Optional[ElevationLoader] = None

def get_elevation_loader() -> ElevationLoader:
    """Get singleton elevation loader."""
    global _loader
    if _loader is None:
        _loader = ElevationLoader()
    return _loader
