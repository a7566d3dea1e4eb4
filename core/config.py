"""
Runtime settings for the Quinoa Suitability Engine.

Values come from QUINOA_* environment variables, falling back to the
public endpoints of each data provider.
"""

import os
import logging
from dataclasses import dataclass, asdict
from typing import Dict, Mapping, Optional

log = logging.getLogger(__name__)

ENV_PREFIX = "QUINOA_"


@dataclass
class Settings:
    """Provider endpoints and HTTP/worker tuning."""

    nasa_power_url: str = "https://power.larc.nasa.gov/api/temporal/daily/point"
    soilgrids_url: str = "https://rest.isric.org/soilgrids/v2.0/properties/query"
    open_elevation_url: str = "https://api.open-elevation.com/api/v1/lookup"
    usgs_elevation_url: str = "https://epqs.nationalmap.gov/v1/json"
    land_sea_url: str = "https://api.bigdatacloud.net/data/reverse-geocode-client"

    http_timeout: float = 30.0
    user_agent: str = "QuinoaSuitabilityEngine/1.0"
    max_workers: int = 3
    log_level: str = "INFO"

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from the environment.

        Args:
            environ: Mapping to read instead of os.environ

        Raises:
            ValueError: if a numeric variable cannot be parsed or is not positive
        """
        env = os.environ if environ is None else environ
        settings = cls()

        for name, default in asdict(settings).items():
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is None or raw == "":
                continue
            if isinstance(default, (int, float)):
                try:
                    value = type(default)(raw)
                except ValueError:
                    raise ValueError(f"{ENV_PREFIX}{name.upper()} must be numeric, got {raw!r}") from None
                if value <= 0:
                    raise ValueError(f"{ENV_PREFIX}{name.upper()} must be positive, got {raw!r}")
            else:
                value = raw
            setattr(settings, name, value)

        settings.log_level = settings.log_level.upper()
        return settings


# Singleton
_settings: Optional[Settings] = None

def get_settings() -> Settings:
    """Get singleton settings, read from the environment on first use."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
        log.debug(f"Loaded settings: {_settings.to_dict()}")
    return _settings
