"""
Data loaders for the Quinoa Suitability Engine.

Includes:
- Climate statistics (NASA POWER)
- Soil properties (ISRIC SoilGrids)
- Elevation, slope and aspect (Open-Elevation, USGS fallback)
- Land/sea validation (BigDataCloud)
"""

from loaders.climate import ClimateLoader, get_climate_loader, SeriesStats
from loaders.soil import SoilLoader, get_soil_loader, SoilProfile
from loaders.elevation import ElevationLoader, get_elevation_loader, ElevationResult, TerrainProfile
from loaders.land_sea import LandSeaValidator, get_land_validator, LandValidationResult

__all__ = [
    "ClimateLoader",
    "get_climate_loader",
    "SeriesStats",
    "SoilLoader",
    "get_soil_loader",
    "SoilProfile",
    "ElevationLoader",
    "get_elevation_loader",
    "ElevationResult",
    "TerrainProfile",
    "LandSeaValidator",
    "get_land_validator",
    "LandValidationResult",
]
