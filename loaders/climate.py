"""
Climate Loader - Daily climate statistics from NASA POWER.

Uses the POWER daily point API with the agricultural (AG) community, which
reports solar radiation in MJ/m²/day.

API Documentation:
https://power.larc.nasa.gov/docs/services/api/
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import pandas as pd
import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from core.config import Settings, get_settings
from core.errors import ProviderUnavailable
from core.models import ClimateMeasurement

log = logging.getLogger(__name__)

PROVIDER = "NASA POWER"

# POWER marks missing days with this fill value
FILL_VALUE = -999

SOLAR_RADIATION = "ALLSKY_SFC_SW_DWN"
TEMPERATURE = "T2M"
TEMP_MAX = "T2M_MAX"
TEMP_MIN = "T2M_MIN"
PRECIPITATION = "PRECTOTCORR"
EVAPOTRANSPIRATION = "EVPTRNS"

CLIMATE_PARAMETERS = [
    SOLAR_RADIATION,
    TEMPERATURE,
    TEMP_MAX,
    TEMP_MIN,
    PRECIPITATION,
    EVAPOTRANSPIRATION,
]


@dataclass
class SeriesStats:
    """Summary of one daily parameter series."""
    mean: float
    min: float
    max: float
    sum: float
    days: int


class ClimateLoader:
    """
    Fetch daily climate series from NASA POWER and reduce them to
    the statistics the climate scorer consumes.
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
    def _make_request(self, params: Dict) -> Dict:
        """Make a request, retrying transient transport failures."""
        response = self.session.get(
            self.settings.nasa_power_url, params=params, timeout=self.settings.http_timeout
        )
        response.raise_for_status()
        return response.json()

    def fetch_parameters(
        self,
        lat: float,
        lon: float,
        start: str,
        end: str,
        parameters: List[str],
    ) -> Dict:
        """
        Fetch raw daily series.

        Args:
            lat: Latitude
            lon: Longitude
            start: First day, YYYYMMDD
            end: Last day, YYYYMMDD
            parameters: POWER parameter names

        Returns:
            The decoded POWER response

        Raises:
            ProviderUnavailable: on transport, status or decoding failure
        """
        params = {
            "latitude": lat,
            "longitude": lon,
            "start": start,
            "end": end,
            "parameters": ",".join(parameters),
            "community": "AG",
            "format": "JSON",
        }
        log.debug(f"POWER request for ({lat}, {lon}) {start}-{end}: {parameters}")

        try:
            return self._make_request(params)
        except requests.RequestException as e:
            log.error(f"POWER request failed for ({lat}, {lon}): {e}")
            raise ProviderUnavailable(PROVIDER, str(e)) from e
        except ValueError as e:
            log.error(f"POWER returned an undecodable body for ({lat}, {lon}): {e}")
            raise ProviderUnavailable(PROVIDER, f"invalid JSON: {e}") from e

    def series_statistics(self, data: Dict) -> Dict[str, Optional[SeriesStats]]:
        """
        Summarize every parameter in a POWER response.

        Fill values are dropped first; a parameter with no valid day maps to None.
        """
        parameter_block = (data.get("properties") or {}).get("parameter") or {}
        frame = pd.DataFrame(parameter_block, dtype=float)
        frame = frame.mask(frame == FILL_VALUE)

        stats: Dict[str, Optional[SeriesStats]] = {}
        for name in CLIMATE_PARAMETERS:
            if name not in frame.columns:
                stats[name] = None
                continue
            series = frame[name].dropna()
            if series.empty:
                stats[name] = None
                continue
            stats[name] = SeriesStats(
                mean=float(series.mean()),
                min=float(series.min()),
                max=float(series.max()),
                sum=float(series.sum()),
                days=int(series.size),
            )
        return stats

    def get_climate_statistics(self, lat: float, lon: float, start: str, end: str) -> ClimateMeasurement:
        """
        Get climate statistics for a point over [start, end].

        Parameters without valid data default to 0 and are listed in
        ClimateMeasurement.missing.
        """
        data = self.fetch_parameters(lat, lon, start, end, CLIMATE_PARAMETERS)
        stats = self.series_statistics(data)
        missing: List[str] = []

        def pick(name: str, attr: str, field_name: str) -> float:
            summary = stats.get(name)
            if summary is None:
                if field_name not in missing:
                    missing.append(field_name)
                return 0.0
            return getattr(summary, attr)

        precipitation_total = pick(PRECIPITATION, "sum", "precipitation_annual")
        evapotranspiration_total = pick(EVAPOTRANSPIRATION, "sum", "evapotranspiration_total")
        aridity, aridity_ok = compute_aridity_index(precipitation_total, evapotranspiration_total)
        if not aridity_ok:
            missing.append("aridity_index")

        measurement = ClimateMeasurement(
            temperature_mean=pick(TEMPERATURE, "mean", "temperature_mean"),
            temperature_min=pick(TEMP_MIN, "min", "temperature_min"),
            temperature_max=pick(TEMP_MAX, "max", "temperature_max"),
            precipitation_annual=precipitation_total,
            precipitation_mean_daily=pick(PRECIPITATION, "mean", "precipitation_mean_daily"),
            solar_radiation_mean=pick(SOLAR_RADIATION, "mean", "solar_radiation_mean"),
            aridity_index=aridity,
            evapotranspiration_total=evapotranspiration_total,
            missing=tuple(missing),
        )

        if missing:
            log.warning(f"POWER data incomplete at ({lat}, {lon}), defaulted to 0: {missing}")
        return measurement

    def aridity_index(self, lat: float, lon: float, start: str, end: str) -> float:
        """Simplified aridity index P/ETP over [start, end]."""
        data = self.fetch_parameters(lat, lon, start, end, [PRECIPITATION, EVAPOTRANSPIRATION])
        stats = self.series_statistics(data)
        precipitation = stats.get(PRECIPITATION)
        evapotranspiration = stats.get(EVAPOTRANSPIRATION)
        value, _ = compute_aridity_index(
            precipitation.sum if precipitation else 0.0,
            evapotranspiration.sum if evapotranspiration else 0.0,
        )
        return value


def compute_aridity_index(precipitation_total: float, evapotranspiration_total: float) -> Tuple[float, bool]:
    """
    P/ETP ratio.

    < 0.05 hyper-arid, 0.05-0.20 arid, 0.20-0.50 semi-arid,
    0.50-0.65 dry sub-humid, > 0.65 humid.

    Returns:
        (index, valid); the index is 0.0 and invalid when ETP is not positive
    """
    if evapotranspiration_total <= 0:
        return 0.0, False
    return precipitation_total / evapotranspiration_total, True


# Singleton
_loader: Optional[ClimateLoader] = None

def get_climate_loader() -> ClimateLoader:
    """Get singleton climate loader."""
    global _loader
    if _loader is None:
        _loader = ClimateLoader()
    return _loader
