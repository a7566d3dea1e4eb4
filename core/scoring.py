"""
Category Scoring Module

Maps raw climate, soil and terrain measurements to discrete 0-10
sub-scores for quinoa cultivation:
- Nested inclusive ladders (narrowest band checked first)
- Set membership for categorical properties
- Hemisphere-aware aspect preference
"""

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Tuple

from core.models import (
    AspectDirection,
    CategoryScore,
    ClimateMeasurement,
    Drainage,
    Hemisphere,
    SoilMeasurement,
    SoilTexture,
    TerrainMeasurement,
)

log = logging.getLogger(__name__)

CLIMATE_MAX_SCORE = 40
SOIL_MAX_SCORE = 40
TERRAIN_MAX_SCORE = 30


# ═══════════════════════════════════════════════════════════════════════════
# LADDERS
# ═══════════════════════════════════════════════════════════════════════════
@dataclass(frozen=True)
class Ladder:
    """
    Inclusive [low, high] bands evaluated in order.

    The first band containing the value wins; values outside every band
    receive the floor score.
    """
    bands: Tuple[Tuple[float, float, int], ...]
    floor: int

    def score(self, value: float) -> int:
        for low, high, points in self.bands:
            if low <= value <= high:
                return points
        return self.floor


@dataclass(frozen=True)
class Threshold:
    """Strictly-above cut points evaluated in order (value > cut)."""
    cuts: Tuple[Tuple[float, int], ...]
    floor: int

    def score(self, value: float) -> int:
        for cut, points in self.cuts:
            if value > cut:
                return points
        return self.floor


TEMPERATURE_LADDER = Ladder(
    bands=((10, 20, 10), (5, 25, 7), (0, 30, 4)),
    floor=1,
)

PRECIPITATION_LADDER = Ladder(
    bands=((300, 800, 10), (200, 1000, 7), (150, 1200, 4)),
    floor=1,
)

# Semi-arid to dry sub-humid preferred
ARIDITY_LADDER = Ladder(
    bands=((0.20, 0.65, 10), (0.15, 0.80, 7)),
    floor=4,
)

SOLAR_THRESHOLD = Threshold(cuts=((15, 10), (12, 7)), floor=4)

ORGANIC_MATTER_THRESHOLD = Threshold(cuts=((20, 10), (10, 7)), floor=4)

PREFERRED_TEXTURES: FrozenSet[SoilTexture] = frozenset({
    SoilTexture.LOAM,
    SoilTexture.SANDY_LOAM,
    SoilTexture.SILTY_LOAM,
})

SECONDARY_TEXTURES: FrozenSet[SoilTexture] = frozenset({
    SoilTexture.SANDY,
    SoilTexture.CLAY_LOAM,
})

DRAINAGE_SCORES: Dict[Drainage, int] = {
    Drainage.GOOD: 10,
    Drainage.MODERATE: 7,
}

# Slopes are compared with strict upper bounds
SLOPE_STEPS: List[Tuple[float, int]] = [(5, 10), (10, 8), (15, 6), (30, 3)]

PREFERRED_ASPECTS: Dict[Hemisphere, FrozenSet[AspectDirection]] = {
    Hemisphere.SOUTH: frozenset({
        AspectDirection.N, AspectDirection.NE, AspectDirection.E, AspectDirection.NW,
    }),
    Hemisphere.NORTH: frozenset({
        AspectDirection.S, AspectDirection.SE, AspectDirection.SW, AspectDirection.E,
    }),
}


# ═══════════════════════════════════════════════════════════════════════════
# CRITERION SCORERS
# ═══════════════════════════════════════════════════════════════════════════
def score_texture(texture: SoilTexture) -> int:
    if texture in PREFERRED_TEXTURES:
        return 10
    if texture in SECONDARY_TEXTURES:
        return 6
    return 3


def score_ph(ph: float) -> int:
    """
    Optimal band 6.0-8.5.

    The middle rung accepts a value satisfying either bound on its own,
    so in practice only NaN reaches the floor.
    """
    if 6.0 <= ph <= 8.5:
        return 10
    if ph >= 5.5 or ph <= 9.0:
        return 6
    return 3


def score_drainage(drainage: Drainage) -> int:
    return DRAINAGE_SCORES.get(drainage, 3)


def score_elevation(elevation: float) -> int:
    """Optimal band 2500-4000 m. Third rung uses the same either-bound test as pH."""
    if 2500 <= elevation <= 4000:
        return 10
    if 2000 <= elevation <= 4500:
        return 7
    if elevation >= 1500 or elevation <= 5000:
        return 4
    return 1


def score_slope(slope: float) -> int:
    for limit, points in SLOPE_STEPS:
        if slope < limit:
            return points
    return 1


def score_aspect(aspect: AspectDirection, hemisphere: Hemisphere) -> int:
    return 10 if aspect in PREFERRED_ASPECTS[hemisphere] else 6


# ═══════════════════════════════════════════════════════════════════════════
# CATEGORY SCORERS
# ═══════════════════════════════════════════════════════════════════════════
def score_climate(climate: ClimateMeasurement) -> CategoryScore:
    """Score temperature, precipitation, aridity and solar radiation (max 40)."""
    subscores = {
        "temperature": TEMPERATURE_LADDER.score(climate.temperature_mean),
        "precipitation": PRECIPITATION_LADDER.score(climate.precipitation_annual),
        "aridity": ARIDITY_LADDER.score(climate.aridity_index),
        "solar": SOLAR_THRESHOLD.score(climate.solar_radiation_mean),
    }
    log.debug(f"Climate subscores: {subscores}")
    return CategoryScore("climate", subscores, CLIMATE_MAX_SCORE)


def score_soil(soil: SoilMeasurement) -> CategoryScore:
    """Score texture, pH, organic matter and drainage (max 40)."""
    subscores = {
        "texture": score_texture(soil.texture),
        "ph": score_ph(soil.ph),
        "organic_matter": ORGANIC_MATTER_THRESHOLD.score(soil.organic_matter),
        "drainage": score_drainage(soil.drainage),
    }
    log.debug(f"Soil subscores: {subscores}")
    return CategoryScore("soil", subscores, SOIL_MAX_SCORE)


def score_terrain(terrain: TerrainMeasurement, hemisphere: Hemisphere) -> CategoryScore:
    """
    Score elevation, slope and aspect (max 30).

    Args:
        terrain: Terrain measurement at the point
        hemisphere: Decides which aspects count as sun-facing
    """
    subscores = {
        "elevation": score_elevation(terrain.elevation),
        "slope": score_slope(terrain.slope),
        "aspect": score_aspect(terrain.aspect, hemisphere),
    }
    log.debug(f"Terrain subscores: {subscores}")
    return CategoryScore("terrain", subscores, TERRAIN_MAX_SCORE)
