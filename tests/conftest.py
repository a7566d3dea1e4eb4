import pytest
from datetime import date, datetime, timezone

from core.models import (
    AnalysisWindow,
    AspectDirection,
    ClimateMeasurement,
    Coordinate,
    Drainage,
    SoilMeasurement,
    SoilTexture,
    TerrainMeasurement,
)
from core.orchestrator import SuitabilityAnalyzer
from core.config import Settings

# La Paz altiplano
LA_PAZ = (-16.5, -68.15)
FIXED_NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def optimal_climate():
    return ClimateMeasurement(
        temperature_mean=15.0,
        temperature_min=-2.5,
        temperature_max=24.0,
        precipitation_annual=500.0,
        precipitation_mean_daily=1.37,
        solar_radiation_mean=18.0,
        aridity_index=0.4,
        evapotranspiration_total=1250.0,
    )


@pytest.fixture
def optimal_soil():
    return SoilMeasurement(
        texture=SoilTexture.LOAM,
        ph=7.0,
        organic_matter=25.0,
        drainage=Drainage.GOOD,
    )


@pytest.fixture
def optimal_terrain():
    return TerrainMeasurement(elevation=3000.0, slope=3.0, aspect=AspectDirection.N)


@pytest.fixture
def optimal_analysis(optimal_climate, optimal_soil, optimal_terrain):
    analyzer = SuitabilityAnalyzer(
        climate=object(), soil=object(), terrain=object(), settings=Settings()
    )
    return analyzer.assemble(
        Coordinate(*LA_PAZ),
        AnalysisWindow(date(2025, 10, 4), date(2026, 10, 4)),
        FIXED_NOW,
        optimal_climate,
        optimal_soil,
        optimal_terrain,
    )
