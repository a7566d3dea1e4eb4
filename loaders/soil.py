"""
Soil Loader - Topsoil properties from ISRIC SoilGrids.

Queries the 0-5 cm mean for texture fractions, organic carbon and pH,
converts them with each layer's d_factor and derives texture class,
organic matter and a qualitative drainage rating.

API Documentation:
https://rest.isric.org/soilgrids/v2.0/docs
"""

import math
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from core.config import Settings, get_settings
from core.errors import ProviderUnavailable
from core.models import Drainage, SoilMeasurement, SoilTexture

log = logging.getLogger(__name__)

PROVIDER = "SoilGrids"

SURFACE_DEPTH = "0-5cm"

CLAY = "clay"
SAND = "sand"
SILT = "silt"
ORGANIC_CARBON = "soc"
PH = "phh2o"
NITROGEN = "nitrogen"
CEC = "cec"

SOIL_PROPERTIES = [CLAY, SAND, SILT, ORGANIC_CARBON, PH, NITROGEN, CEC]

# Van Bemmelen factor
ORGANIC_MATTER_FACTOR = 1.72


@dataclass
class SoilProfile:
    """Converted SoilGrids values plus the derived interpretation."""
    latitude: float
    longitude: float
    clay: float            # %
    sand: float            # %
    silt: float            # %
    organic_carbon: float  # g/kg
    ph: float
    nitrogen: float        # g/kg
    cec: float             # mmol(c)/kg
    missing: List[str] = field(default_factory=list)

    @property
    def texture(self) -> SoilTexture:
        return classify_texture(self.sand, self.silt, self.clay)

    @property
    def organic_matter(self) -> float:
        return self.organic_carbon * ORGANIC_MATTER_FACTOR

    @property
    def drainage(self) -> Drainage:
        if self.sand > 60:
            return Drainage.GOOD
        if self.sand > 40:
            return Drainage.MODERATE
        return Drainage.POOR

    @property
    def fertility(self) -> str:
        om = self.organic_matter
        return "High" if om > 30 else "Medium" if om > 15 else "Low"

    @property
    def retention(self) -> str:
        return "High" if self.clay > 35 else "Medium" if self.clay > 20 else "Low"

    @property
    def ph_level(self) -> str:
        if self.ph > 7.5:
            return "Alkaline"
        if self.ph > 6.5:
            return "Neutral"
        if self.ph > 5.5:
            return "Slightly acidic"
        return "Acidic"

    def to_measurement(self) -> SoilMeasurement:
        missing = []
        for name in self.missing:
            if name == ORGANIC_CARBON:
                missing.append("organic_matter")
            elif name == PH:
                missing.append("ph")
            elif name in (CLAY, SAND, SILT):
                for derived in ("texture", "drainage"):
                    if derived not in missing:
                        missing.append(derived)
        return SoilMeasurement(
            texture=self.texture,
            ph=self.ph,
            organic_matter=self.organic_matter,
            drainage=self.drainage,
            missing=tuple(missing),
        )


def classify_texture(sand: float, silt: float, clay: float) -> SoilTexture:
    """Simplified USDA texture triangle, first match wins."""
    if sand >= 85 and clay <= 10:
        return SoilTexture.SANDY
    if clay >= 40:
        return SoilTexture.CLAYEY
    if silt >= 80 and clay < 12:
        return SoilTexture.SILTY
    if 45 <= sand <= 80 and clay <= 20:
        return SoilTexture.SANDY_LOAM
    if silt >= 50 and 12 <= clay < 27:
        return SoilTexture.SILTY_LOAM
    if 20 <= clay < 40 and silt < 40 and sand < 45:
        return SoilTexture.CLAY_LOAM
    return SoilTexture.LOAM


def extract_value(data: Dict, name: str) -> Tuple[float, bool]:
    """
    Surface mean for one property, divided by the layer's d_factor.

    Returns:
        (value, found); value is 0.0 when the layer, depth or mean is absent
    """
    layers = (data.get("properties") or {}).get("layers") or []
    layer = next((l for l in layers if l.get("name") == name), None)
    if layer is None or not layer.get("depths"):
        return 0.0, False

    mean = (layer["depths"][0].get("values") or {}).get("mean")
    if mean is None:
        return 0.0, False
    try:
        mean = float(mean)
    except (TypeError, ValueError):
        return 0.0, False
    if math.isnan(mean):
        return 0.0, False

    d_factor = (layer.get("unit_measure") or {}).get("d_factor")
    if not d_factor:
        return mean, True
    return mean / d_factor, True


class SoilLoader:
    """
    Fetch topsoil properties from SoilGrids.

    Missing properties default to 0 and are recorded on the profile.
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
    def _make_request(self, params: List[Tuple[str, object]]) -> Dict:
        response = self.session.get(
            self.settings.soilgrids_url, params=params, timeout=self.settings.http_timeout
        )
        response.raise_for_status()
        return response.json()

    def fetch_soil_data(self, lat: float, lon: float, properties: Optional[List[str]] = None) -> Dict:
        """
        Query SoilGrids for the surface layer.

        Raises:
            ProviderUnavailable: on transport, status or decoding failure
        """
        properties = properties or SOIL_PROPERTIES
        params: List[Tuple[str, object]] = [("lon", lon), ("lat", lat)]
        params.extend(("property", p) for p in properties)
        params.extend([("depth", SURFACE_DEPTH), ("value", "mean")])

        log.debug(f"SoilGrids request for ({lat}, {lon}): {properties}")
        try:
            return self._make_request(params)
        except requests.RequestException as e:
            log.error(f"SoilGrids request failed for ({lat}, {lon}): {e}")
            raise ProviderUnavailable(PROVIDER, str(e)) from e
        except ValueError as e:
            log.error(f"SoilGrids returned an undecodable body for ({lat}, {lon}): {e}")
            raise ProviderUnavailable(PROVIDER, f"invalid JSON: {e}") from e

    def get_soil_profile(self, lat: float, lon: float) -> SoilProfile:
        """Fetch and convert every soil property for a point."""
        data = self.fetch_soil_data(lat, lon)

        values = {}
        missing = []
        for name in SOIL_PROPERTIES:
            value, found = extract_value(data, name)
            values[name] = value
            if not found:
                missing.append(name)

        if missing:
            log.warning(f"SoilGrids has no value for {missing} at ({lat}, {lon}); using 0")

        return SoilProfile(
            latitude=lat,
            longitude=lon,
            clay=values[CLAY],
            sand=values[SAND],
            silt=values[SILT],
            organic_carbon=values[ORGANIC_CARBON],
            ph=values[PH],
            nitrogen=values[NITROGEN],
            cec=values[CEC],
            missing=missing,
        )

    def evaluate(self, lat: float, lon: float) -> SoilMeasurement:
        """Soil measurement ready for scoring."""
        return self.get_soil_profile(lat, lon).to_measurement()


# Singleton
_loader: Optional[SoilLoader] = None

def get_soil_loader() -> SoilLoader:
    """Get singleton soil loader."""
    global _loader
    if _loader is None:
        _loader = SoilLoader()
    return _loader
