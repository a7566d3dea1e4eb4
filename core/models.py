"""
Core data models for the Quinoa Suitability Engine.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple

from core.errors import InvalidCoordinate


# ═══════════════════════════════════════════════════════════════════════════
# ENUMERATIONS
# ═══════════════════════════════════════════════════════════════════════════
class Hemisphere(Enum):
    NORTH = "north"
    SOUTH = "south"

    @classmethod
    def from_latitude(cls, latitude: float) -> "Hemisphere":
        return cls.SOUTH if latitude < 0 else cls.NORTH


class SoilTexture(Enum):
    """Simplified USDA texture classes."""
    SANDY = "Sandy"
    CLAYEY = "Clayey"
    SILTY = "Silty"
    SANDY_LOAM = "Sandy Loam"
    SILTY_LOAM = "Silty Loam"
    CLAY_LOAM = "Clay Loam"
    LOAM = "Loam"


class Drainage(Enum):
    GOOD = "Good"
    MODERATE = "Moderate"
    POOR = "Poor"


class AspectDirection(Enum):
    N = "N"
    NE = "NE"
    E = "E"
    SE = "SE"
    S = "S"
    SW = "SW"
    W = "W"
    NW = "NW"


class CategoryTier(Enum):
    """3-tier classification applied to each category on its own."""
    HIGHLY_SUITABLE = "Highly suitable"
    MODERATELY_SUITABLE = "Moderately suitable"
    POORLY_SUITABLE = "Poorly suitable"


class OverallTier(Enum):
    """5-tier classification of the combined score."""
    HIGHLY_SUITABLE = "Highly suitable"
    SUITABLE = "Suitable"
    MODERATELY_SUITABLE = "Moderately suitable"
    MARGINALLY_SUITABLE = "Marginally suitable"
    UNSUITABLE = "Unsuitable"


# ═══════════════════════════════════════════════════════════════════════════
# LOCATION AND WINDOW
# ═══════════════════════════════════════════════════════════════════════════
@dataclass(frozen=True)
class Coordinate:
    """A WGS84 point. Raises InvalidCoordinate when out of domain."""
    latitude: float
    longitude: float

    def __post_init__(self):
        lat, lon = self.latitude, self.longitude
        if math.isnan(lat) or not -90.0 <= lat <= 90.0:
            raise InvalidCoordinate(f"Latitude {lat} outside [-90, 90]")
        if math.isnan(lon) or not -180.0 <= lon <= 180.0:
            raise InvalidCoordinate(f"Longitude {lon} outside [-180, 180]")

    @property
    def hemisphere(self) -> Hemisphere:
        return Hemisphere.from_latitude(self.latitude)


@dataclass(frozen=True)
class AnalysisWindow:
    """Date range over which climate statistics are aggregated."""
    start: date
    end: date

    def compact(self) -> Tuple[str, str]:
        """Start and end as YYYYMMDD strings."""
        return self.start.strftime("%Y%m%d"), self.end.strftime("%Y%m%d")


# ═══════════════════════════════════════════════════════════════════════════
# MEASUREMENTS
# ═══════════════════════════════════════════════════════════════════════════
@dataclass(frozen=True)
class ClimateMeasurement:
    """
    Climate statistics over the analysis window.

    Temperatures in °C, precipitation and evapotranspiration in mm,
    solar radiation as a daily mean in MJ/m²/day.
    """
    temperature_mean: float
    temperature_min: float
    temperature_max: float
    precipitation_annual: float
    precipitation_mean_daily: float
    solar_radiation_mean: float
    aridity_index: float
    evapotranspiration_total: float = 0.0
    missing: Tuple[str, ...] = ()

    @property
    def aridity_class(self) -> str:
        ai = self.aridity_index
        if ai < 0.05:
            return "Hyper-arid"
        if ai < 0.2:
            return "Arid"
        if ai < 0.5:
            return "Semi-arid"
        if ai < 0.65:
            return "Dry sub-humid"
        return "Humid"


@dataclass(frozen=True)
class SoilMeasurement:
    """Topsoil properties. Organic matter in g/kg."""
    texture: SoilTexture
    ph: float
    organic_matter: float
    drainage: Drainage
    missing: Tuple[str, ...] = ()


@dataclass(frozen=True)
class TerrainMeasurement:
    """Elevation in meters, slope in degrees."""
    elevation: float
    slope: float
    aspect: AspectDirection
    missing: Tuple[str, ...] = ()


# ═══════════════════════════════════════════════════════════════════════════
# SCORES
# ═══════════════════════════════════════════════════════════════════════════
@dataclass(frozen=True)
class CategoryScore:
    """
    Per-criterion scores (0-10) for one category.

    The tier here is the 3-tier per-category ladder, not the overall one.
    """
    category: str
    subscores: Mapping[str, int]
    max_score: int

    def __post_init__(self):
        object.__setattr__(self, "subscores", MappingProxyType(dict(self.subscores)))

    @property
    def total(self) -> int:
        return sum(self.subscores.values())

    @property
    def suitability_percent(self) -> float:
        return 100.0 * self.total / self.max_score

    @property
    def tier(self) -> CategoryTier:
        percent = self.suitability_percent
        if percent >= 75:
            return CategoryTier.HIGHLY_SUITABLE
        if percent >= 50:
            return CategoryTier.MODERATELY_SUITABLE
        return CategoryTier.POORLY_SUITABLE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scores": dict(self.subscores),
            "total": self.total,
            "max_score": self.max_score,
            "suitability_percent": self.suitability_percent,
            "suitability": self.tier.value,
        }


@dataclass(frozen=True)
class CategoryAssessment:
    """A measurement paired with the score computed from it."""
    measurement: Any
    score: CategoryScore


@dataclass(frozen=True)
class OverallAssessment:
    total_score: int
    max_score: int
    suitability_percent: float
    tier: OverallTier
    recommendation: str
    strengths: Tuple[str, ...] = ()
    limitations: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "strengths", tuple(self.strengths))
        object.__setattr__(self, "limitations", tuple(self.limitations))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_score": self.total_score,
            "max_score": self.max_score,
            "suitability_percent": self.suitability_percent,
            "suitability": self.tier.value,
            "recommendation": self.recommendation,
            "strengths": list(self.strengths),
            "limitations": list(self.limitations),
        }


@dataclass(frozen=True)
class SuitabilityAnalysis:
    """
    Complete quinoa suitability assessment for one coordinate.

    Built fresh for every (coordinate, invocation time) pair.
    """
    coordinate: Coordinate
    window: AnalysisWindow
    generated_at: datetime
    climate: CategoryAssessment
    soil: CategoryAssessment
    terrain: CategoryAssessment
    overall: OverallAssessment

    @property
    def missing_measurements(self) -> List[str]:
        """Fields that a provider could not supply and were defaulted to 0."""
        missing = []
        for name in ("climate", "soil", "terrain"):
            assessment = getattr(self, name)
            missing.extend(f"{name}.{f}" for f in assessment.measurement.missing)
        return missing

    @property
    def partial_data(self) -> bool:
        return bool(self.missing_measurements)

    def to_dict(self) -> Dict[str, Any]:
        climate = self.climate.measurement
        soil = self.soil.measurement
        terrain = self.terrain.measurement
        return {
            "location": {
                "latitude": self.coordinate.latitude,
                "longitude": self.coordinate.longitude,
            },
            "window": {
                "start": self.window.start.isoformat(),
                "end": self.window.end.isoformat(),
            },
            "generated_at": self.generated_at.isoformat(),
            "climate": {
                "temperature": {
                    "mean": climate.temperature_mean,
                    "min": climate.temperature_min,
                    "max": climate.temperature_max,
                },
                "precipitation": {
                    "annual": climate.precipitation_annual,
                    "mean": climate.precipitation_mean_daily,
                },
                "solar_radiation": {"mean": climate.solar_radiation_mean},
                "aridity_index": climate.aridity_index,
                "aridity_class": climate.aridity_class,
                **self.climate.score.to_dict(),
            },
            "soil": {
                "texture": soil.texture.value,
                "ph": soil.ph,
                "organic_matter": soil.organic_matter,
                "drainage": soil.drainage.value,
                **self.soil.score.to_dict(),
            },
            "terrain": {
                "elevation": terrain.elevation,
                "slope": terrain.slope,
                "aspect": terrain.aspect.value,
                **self.terrain.score.to_dict(),
            },
            "overall": self.overall.to_dict(),
            "partial_data": self.partial_data,
            "missing_measurements": self.missing_measurements,
        }
