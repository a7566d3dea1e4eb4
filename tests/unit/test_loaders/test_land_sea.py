import pytest
import requests
from unittest.mock import MagicMock, patch

from core.config import Settings
from loaders.land_sea import LandSeaValidator, is_likely_on_land


@pytest.fixture
def validator():
    with patch('requests.Session') as mock_session:
        v = LandSeaValidator(settings=Settings())
        v.session = mock_session.return_value
        yield v


def _respond(validator, payload):
    mock_response = MagicMock()
    mock_response.json.return_value = payload
    validator.session.get.return_value = mock_response
    return mock_response


def test_land_point(validator):
    _respond(validator, {
        "countryCode": "BO",
        "countryName": "Bolivia",
        "city": "La Paz",
        "locality": "La Paz",
        "principalSubdivision": "La Paz Department",
    })

    result = validator.validate_land_point(-16.5, -68.15)
    assert result.is_land is True
    assert result.confidence == "high"
    assert result.source == "BigDataCloud"
    assert "Bolivia" in result.message

    params = validator.session.get.call_args.kwargs["params"]
    assert params == {"latitude": -16.5, "longitude": -68.15, "localityLanguage": "en"}


@pytest.mark.parametrize("payload", [
    {"countryCode": "", "locality": "Pacific Ocean", "city": "", "principalSubdivision": ""},
    {"countryCode": "US", "locality": "Gulf of Mexico sea area", "city": "x", "principalSubdivision": "y"},
    {"countryCode": "FR", "locality": "", "city": "", "principalSubdivision": ""},
])
def test_ocean_point(validator, payload):
    _respond(validator, payload)

    result = validator.validate_land_point(0.0, -150.0)
    assert result.is_land is False
    assert result.source == "BigDataCloud"
    assert "ocean" in result.message


def test_extreme_latitude_rejected_without_request(validator):
    result = validator.validate_land_point(88.0, 10.0)
    assert result.is_land is False
    assert result.source == "CoordinateValidation"
    validator.session.get.assert_not_called()


def test_service_failure_uses_basic_check(validator):
    validator.session.get.side_effect = requests.ConnectionError("unreachable")

    result = validator.validate_land_point(-16.5, -68.15)
    assert result.is_land is True
    assert result.confidence == "low"
    assert result.source == "BasicValidation"
    assert result.to_dict()["is_land"] is True


@pytest.mark.parametrize("lat,lon,expected", [
    (-16.5, -68.15, True),     # Altiplano
    (52.5, 13.4, True),        # Berlin
    (0.0, -150.0, False),      # central Pacific
    (10.0, 170.0, False),      # western Pacific
    (0.0, -30.0, False),       # central Atlantic
    (-10.0, 80.0, False),      # Indian Ocean
    (-70.0, 0.0, False),       # Southern Ocean
    (85.0, 0.0, False),        # Arctic
])
def test_is_likely_on_land(lat, lon, expected):
    assert is_likely_on_land(lat, lon) is expected
