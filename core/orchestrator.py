"""
Suitability Analysis Orchestrator

Fetches climate, soil and terrain data for a coordinate in parallel,
scores each category and aggregates the result:
- Trailing one-year climate window ending 15 days ago
- Fail-fast fan-out (any provider failure aborts the analysis)
- No retries here; providers own their retry policy
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from core.analyzer import SuitabilityAggregator
from core.config import Settings, get_settings
from core.errors import AnalysisError, InvalidCoordinate, ProviderUnavailable
from core.models import (
    AnalysisWindow,
    CategoryAssessment,
    ClimateMeasurement,
    Coordinate,
    SoilMeasurement,
    SuitabilityAnalysis,
    TerrainMeasurement,
)
from core.scoring import score_climate, score_soil, score_terrain

log = logging.getLogger(__name__)

# Providers publish recent days late
RECENCY_OFFSET_DAYS = 15
WINDOW_YEARS = 1


def analysis_window(now: datetime) -> AnalysisWindow:
    """
    Climate window for an analysis started at `now`.

    end = now - 15 days; start = the same calendar day one year earlier
    (29 February maps to 28 February).
    """
    end = (now - timedelta(days=RECENCY_OFFSET_DAYS)).date()
    try:
        start = end.replace(year=end.year - WINDOW_YEARS)
    except ValueError:
        start = end.replace(year=end.year - WINDOW_YEARS, day=28)
    return AnalysisWindow(start=start, end=end)


class SuitabilityAnalyzer:
    """
    Runs a complete quinoa suitability analysis for one point.

    Usage:
        analyzer = SuitabilityAnalyzer()
        analysis = analyzer.analyze(-16.5, -68.15)
        print(render_report(analysis))

    Providers default to the loaders package singletons; pass any object
    with the same methods to replace one.
    """

    def __init__(
        self,
        climate=None,
        soil=None,
        terrain=None,
        land_validator=None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self._climate = climate
        self._soil = soil
        self._terrain = terrain
        self.land_validator = land_validator
        self.aggregator = SuitabilityAggregator()

    @property
    def climate(self):
        """Lazy-load climate loader."""
        if self._climate is None:
            from loaders.climate import get_climate_loader
            self._climate = get_climate_loader()
        return self._climate

    @property
    def soil(self):
        """Lazy-load soil loader."""
        if self._soil is None:
            from loaders.soil import get_soil_loader
            self._soil = get_soil_loader()
        return self._soil

    @property
    def terrain(self):
        """Lazy-load elevation loader."""
        if self._terrain is None:
            from loaders.elevation import get_elevation_loader
            self._terrain = get_elevation_loader()
        return self._terrain

    def analyze(
        self,
        latitude: float,
        longitude: float,
        now: Optional[datetime] = None,
    ) -> SuitabilityAnalysis:
        """
        Analyze a coordinate.

        Args:
            latitude: Latitude in decimal degrees
            longitude: Longitude in decimal degrees
            now: Invocation time; defaults to the current UTC time

        Returns:
            SuitabilityAnalysis

        Raises:
            InvalidCoordinate: out-of-domain point, or sea per the land validator
            ProviderUnavailable: any provider failed
        """
        coordinate = Coordinate(latitude, longitude)
        self._check_land(coordinate)

        now = now or datetime.now(timezone.utc)
        window = analysis_window(now)
        log.info(
            f"Analyzing ({latitude}, {longitude}) over {window.start.isoformat()}"
            f"..{window.end.isoformat()}"
        )

        climate, soil, terrain = self._fetch_parallel(coordinate, window)
        analysis = self.assemble(coordinate, window, now, climate, soil, terrain)

        if analysis.partial_data:
            log.warning(f"Analysis used defaulted values: {analysis.missing_measurements}")
        log.info(
            f"({latitude}, {longitude}): {analysis.overall.tier.name} "
            f"({analysis.overall.suitability_percent:.1f}%)"
        )
        return analysis

    def assemble(
        self,
        coordinate: Coordinate,
        window: AnalysisWindow,
        now: datetime,
        climate: ClimateMeasurement,
        soil: SoilMeasurement,
        terrain: TerrainMeasurement,
    ) -> SuitabilityAnalysis:
        """Score already-fetched measurements into an analysis."""
        climate_score = score_climate(climate)
        soil_score = score_soil(soil)
        terrain_score = score_terrain(terrain, coordinate.hemisphere)
        overall = self.aggregator.aggregate(climate_score, soil_score, terrain_score)

        return SuitabilityAnalysis(
            coordinate=coordinate,
            window=window,
            generated_at=now,
            climate=CategoryAssessment(climate, climate_score),
            soil=CategoryAssessment(soil, soil_score),
            terrain=CategoryAssessment(terrain, terrain_score),
            overall=overall,
        )

    def _check_land(self, coordinate: Coordinate):
        if self.land_validator is None:
            return
        result = self.land_validator.validate_land_point(coordinate.latitude, coordinate.longitude)
        if not result.is_land:
            raise InvalidCoordinate(
                f"({coordinate.latitude}, {coordinate.longitude}) is not on land: {result.message}"
            )

    def _fetch_parallel(
        self, coordinate: Coordinate, window: AnalysisWindow
    ) -> Tuple[ClimateMeasurement, SoilMeasurement, TerrainMeasurement]:
        """Fetch all three providers in parallel; the first failure wins."""
        lat, lon = coordinate.latitude, coordinate.longitude
        start, end = window.compact()

        def fetch_climate():
            return self.climate.get_climate_statistics(lat, lon, start, end)

        def fetch_soil():
            return self.soil.evaluate(lat, lon)

        def fetch_terrain():
            return self.terrain.evaluate(lat, lon)

        executor = ThreadPoolExecutor(max_workers=self.settings.max_workers)
        results = {}
        try:
            futures = {
                executor.submit(fetch_climate): "climate",
                executor.submit(fetch_soil): "soil",
                executor.submit(fetch_terrain): "terrain",
            }
            for future in as_completed(futures):
                source = futures[future]
                try:
                    results[source] = future.result()
                except AnalysisError as e:
                    log.error(f"Error fetching {source}: {e}")
                    raise
                except Exception as e:
                    log.error(f"Error fetching {source}: {e}")
                    raise ProviderUnavailable(source, str(e)) from e
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        return results["climate"], results["soil"], results["terrain"]


# Singleton
_analyzer: Optional[SuitabilityAnalyzer] = None

def get_analyzer() -> SuitabilityAnalyzer:
    """Get singleton analyzer."""
    global _analyzer
    if _analyzer is None:
        _analyzer = SuitabilityAnalyzer()
    return _analyzer


def analyze(latitude: float, longitude: float) -> SuitabilityAnalysis:
    """Analyze a coordinate with the default providers."""
    return get_analyzer().analyze(latitude, longitude)
