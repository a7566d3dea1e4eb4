import math
import itertools
import pytest

from core.models import (
    AspectDirection,
    CategoryScore,
    CategoryTier,
    ClimateMeasurement,
    Drainage,
    Hemisphere,
    SoilMeasurement,
    SoilTexture,
    TerrainMeasurement,
)
from core.scoring import (
    ARIDITY_LADDER,
    ORGANIC_MATTER_THRESHOLD,
    PRECIPITATION_LADDER,
    SOLAR_THRESHOLD,
    TEMPERATURE_LADDER,
    score_aspect,
    score_climate,
    score_drainage,
    score_elevation,
    score_ph,
    score_slope,
    score_soil,
    score_terrain,
    score_texture,
)


def _climate(temp=15.0, precip=500.0, aridity=0.4, solar=18.0):
    return ClimateMeasurement(
        temperature_mean=temp,
        temperature_min=temp - 10,
        temperature_max=temp + 10,
        precipitation_annual=precip,
        precipitation_mean_daily=precip / 365,
        solar_radiation_mean=solar,
        aridity_index=aridity,
    )


# ── Climate ────────────────────────────────────────────────────────────────
def test_optimal_climate_scores_full_marks():
    """15°C, 500 mm, AI 0.4, 18 MJ/m² scores 40/40."""
    score = score_climate(_climate())
    assert score.subscores == {"temperature": 10, "precipitation": 10, "aridity": 10, "solar": 10}
    assert score.total == 40
    assert score.max_score == 40
    assert score.suitability_percent == 100.0
    assert score.tier == CategoryTier.HIGHLY_SUITABLE


@pytest.mark.parametrize("value,expected", [
    (10, 10), (20, 10), (15, 10),
    (9.99, 7), (5, 7), (25, 7), (20.01, 7),
    (4.99, 4), (0, 4), (30, 4), (25.01, 4),
    (-0.01, 1), (30.01, 1), (-20, 1),
])
def test_temperature_ladder(value, expected):
    assert TEMPERATURE_LADDER.score(value) == expected


@pytest.mark.parametrize("value,expected", [
    (300, 10), (800, 10),
    (200, 7), (1000, 7), (299.9, 7),
    (150, 4), (1200, 4), (1000.1, 4),
    (149.9, 1), (1200.1, 1), (0, 1),
])
def test_precipitation_ladder(value, expected):
    assert PRECIPITATION_LADDER.score(value) == expected


@pytest.mark.parametrize("value,expected", [
    (0.20, 10), (0.65, 10),
    (0.15, 7), (0.80, 7), (0.19, 7),
    (0.14, 4), (0.81, 4), (0.0, 4), (3.0, 4),
])
def test_aridity_ladder_has_no_one_point_floor(value, expected):
    assert ARIDITY_LADDER.score(value) == expected


@pytest.mark.parametrize("value,expected", [
    (15.01, 10), (15, 7), (12.01, 7), (12, 4), (0, 4),
])
def test_solar_threshold_is_strict(value, expected):
    assert SOLAR_THRESHOLD.score(value) == expected


def test_nan_falls_to_ladder_floor():
    assert TEMPERATURE_LADDER.score(math.nan) == 1
    assert SOLAR_THRESHOLD.score(math.nan) == 4


# ── Soil ───────────────────────────────────────────────────────────────────
def test_optimal_soil_scores_full_marks(optimal_soil):
    """Loam, pH 7.0, 25 g/kg OM, good drainage scores 40/40."""
    score = score_soil(optimal_soil)
    assert score.subscores == {"texture": 10, "ph": 10, "organic_matter": 10, "drainage": 10}
    assert score.suitability_percent == 100.0


@pytest.mark.parametrize("texture,expected", [
    (SoilTexture.LOAM, 10),
    (SoilTexture.SANDY_LOAM, 10),
    (SoilTexture.SILTY_LOAM, 10),
    (SoilTexture.SANDY, 6),
    (SoilTexture.CLAY_LOAM, 6),
    (SoilTexture.CLAYEY, 3),
    (SoilTexture.SILTY, 3),
])
def test_texture_sets(texture, expected):
    assert score_texture(texture) == expected


@pytest.mark.parametrize("ph,expected", [
    (6.0, 10), (8.5, 10), (7.2, 10),
    (5.9, 6), (8.6, 6),
    # Either-bound middle rung: far outside values still score 6
    (3.0, 6), (11.0, 6), (0.0, 6),
])
def test_ph_middle_rung_accepts_either_bound(ph, expected):
    assert score_ph(ph) == expected


def test_ph_floor_only_reached_by_nan():
    assert score_ph(math.nan) == 3


@pytest.mark.parametrize("om,expected", [(25, 10), (20.01, 10), (20, 7), (10.01, 7), (10, 4), (0, 4)])
def test_organic_matter_threshold(om, expected):
    assert ORGANIC_MATTER_THRESHOLD.score(om) == expected


@pytest.mark.parametrize("drainage,expected", [
    (Drainage.GOOD, 10), (Drainage.MODERATE, 7), (Drainage.POOR, 3),
])
def test_drainage_scores(drainage, expected):
    assert score_drainage(drainage) == expected


# ── Terrain ────────────────────────────────────────────────────────────────
def test_optimal_southern_terrain_scores_full_marks(optimal_terrain):
    """3000 m, 3°, north-facing in the southern hemisphere scores 30/30."""
    score = score_terrain(optimal_terrain, Hemisphere.SOUTH)
    assert score.subscores == {"elevation": 10, "slope": 10, "aspect": 10}
    assert score.total == 30
    assert score.max_score == 30
    assert score.suitability_percent == 100.0


@pytest.mark.parametrize("elevation,expected", [
    (2500, 10), (4000, 10),
    (2000, 7), (4500, 7), (2499, 7),
    # Either-bound third rung
    (1000, 4), (0, 4), (6000, 4), (-50, 4),
])
def test_elevation_ladder(elevation, expected):
    assert score_elevation(elevation) == expected


def test_elevation_floor_only_reached_by_nan():
    assert score_elevation(math.nan) == 1


@pytest.mark.parametrize("slope,expected", [
    (0, 10), (4.99, 10), (5, 8), (9.99, 8), (10, 6), (14.99, 6), (15, 3), (29.99, 3), (30, 1), (60, 1),
])
def test_slope_steps(slope, expected):
    assert score_slope(slope) == expected


@pytest.mark.parametrize("aspect", [AspectDirection.N, AspectDirection.NE, AspectDirection.E, AspectDirection.NW])
def test_southern_hemisphere_preferred_aspects(aspect):
    assert score_aspect(aspect, Hemisphere.SOUTH) == 10


@pytest.mark.parametrize("aspect", [AspectDirection.S, AspectDirection.SE, AspectDirection.SW, AspectDirection.E])
def test_northern_hemisphere_preferred_aspects(aspect):
    assert score_aspect(aspect, Hemisphere.NORTH) == 10


def test_aspect_preference_flips_with_hemisphere():
    assert score_aspect(AspectDirection.N, Hemisphere.NORTH) == 6
    assert score_aspect(AspectDirection.S, Hemisphere.SOUTH) == 6
    assert score_aspect(AspectDirection.W, Hemisphere.NORTH) == 6
    assert score_aspect(AspectDirection.W, Hemisphere.SOUTH) == 6


# ── Bounds ─────────────────────────────────────────────────────────────────
TEMPS = [-40, -0.5, 0, 4, 7, 12, 22, 27, 31, 45]
PRECIPS = [0, 149, 160, 250, 500, 900, 1100, 1300, 4000]
ARIDITIES = [0.0, 0.1, 0.17, 0.3, 0.7, 0.9, 2.0]
SOLARS = [0, 11, 13, 16, 30]


def test_climate_scores_stay_on_ladder_and_in_bounds():
    for temp, precip, ai, solar in itertools.product(TEMPS, PRECIPS, ARIDITIES, SOLARS):
        score = score_climate(_climate(temp, precip, ai, solar))
        assert score.subscores["temperature"] in {10, 7, 4, 1}
        assert score.subscores["precipitation"] in {10, 7, 4, 1}
        assert score.subscores["aridity"] in {10, 7, 4}
        assert score.subscores["solar"] in {10, 7, 4}
        assert 10 <= score.total <= 40


def test_soil_totals_in_bounds():
    for texture, ph, om, drainage in itertools.product(
        list(SoilTexture), [0, 3, 5.6, 7, 9, 14], [0, 5, 15, 40], list(Drainage)
    ):
        score = score_soil(SoilMeasurement(texture, ph, om, drainage))
        assert 13 <= score.total <= 40


def test_terrain_totals_in_bounds():
    for elevation, slope, aspect, hemisphere in itertools.product(
        [-100, 0, 1800, 2200, 3000, 4200, 6000], [0, 7, 12, 20, 45], list(AspectDirection), list(Hemisphere)
    ):
        score = score_terrain(TerrainMeasurement(elevation, slope, aspect), hemisphere)
        assert 8 <= score.total <= 30


# ── Category tier ──────────────────────────────────────────────────────────
@pytest.mark.parametrize("total,expected", [
    (40, CategoryTier.HIGHLY_SUITABLE),
    (30, CategoryTier.HIGHLY_SUITABLE),   # 75%
    (29, CategoryTier.MODERATELY_SUITABLE),
    (20, CategoryTier.MODERATELY_SUITABLE),  # 50%
    (19, CategoryTier.POORLY_SUITABLE),
])
def test_category_tier_boundaries(total, expected):
    score = CategoryScore("soil", {"only": total}, 40)
    assert score.tier == expected
