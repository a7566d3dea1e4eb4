"""
Core module for the Quinoa Suitability Engine.
Contains data models, category scorers, the aggregator, report rendering
and the analysis orchestrator.
"""

from core.errors import AnalysisError, ProviderUnavailable, InvalidCoordinate
from core.models import (
    Coordinate,
    Hemisphere,
    SoilTexture,
    Drainage,
    AspectDirection,
    CategoryTier,
    OverallTier,
    AnalysisWindow,
    ClimateMeasurement,
    SoilMeasurement,
    TerrainMeasurement,
    CategoryScore,
    CategoryAssessment,
    OverallAssessment,
    SuitabilityAnalysis,
)
from core.scoring import score_climate, score_soil, score_terrain
from core.analyzer import SuitabilityAggregator, classify_overall
from core.report import render_report
from core.config import Settings, get_settings
from core.orchestrator import SuitabilityAnalyzer, get_analyzer, analyze, analysis_window

__all__ = [
    # Errors
    "AnalysisError",
    "ProviderUnavailable",
    "InvalidCoordinate",
    # Models
    "Coordinate",
    "Hemisphere",
    "SoilTexture",
    "Drainage",
    "AspectDirection",
    "CategoryTier",
    "OverallTier",
    "AnalysisWindow",
    "ClimateMeasurement",
    "SoilMeasurement",
    "TerrainMeasurement",
    "CategoryScore",
    "CategoryAssessment",
    "OverallAssessment",
    "SuitabilityAnalysis",
    # Scoring
    "score_climate",
    "score_soil",
    "score_terrain",
    "SuitabilityAggregator",
    "classify_overall",
    "render_report",
    # Configuration
    "Settings",
    "get_settings",
    # Orchestration
    "SuitabilityAnalyzer",
    "get_analyzer",
    "analyze",
    "analysis_window",
]
