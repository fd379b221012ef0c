"""
Best-effort delivery coordinates.

Checkout attaches coordinates to every order so the delivery partner can find
the customer. Getting them must never block or fail an order: every provider
returns either Coordinates or LocationUnavailable, and resolve_location()
never raises.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Union

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

DENIED = 'denied'
TIMEOUT = 'timeout'
UNSUPPORTED = 'unsupported'
ERROR = 'error'


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class LocationUnavailable:
    reason: str


GeoResult = Union[Coordinates, LocationUnavailable]

DEFAULT_COORDINATES = Coordinates(0.0, 0.0)


def _valid_coordinates(latitude, longitude) -> bool:
    return -90 <= latitude <= 90 and -180 <= longitude <= 180


class BrowserLocation:
    """
    Coordinates shared by the browser ("Share my location" on the checkout
    form posts them as hidden `latitude` / `longitude` fields).
    """

    def __init__(self, data):
        self.data = data

    def locate(self, timeout: float) -> GeoResult:
        raw_lat = (self.data.get('latitude') or '').strip()
        raw_lng = (self.data.get('longitude') or '').strip()
        if not raw_lat or not raw_lng:
            return LocationUnavailable(UNSUPPORTED)
        try:
            latitude, longitude = float(raw_lat), float(raw_lng)
        except ValueError:
            return LocationUnavailable(DENIED)
        if not _valid_coordinates(latitude, longitude):
            return LocationUnavailable(DENIED)
        return Coordinates(latitude, longitude)


class IpGeolocator:
    """
    Approximate coordinates from the client IP through an ip-api style
    endpoint (`GEOLOCATION_URL`, `{ip}` is substituted). Disabled when the
    URL is not configured.
    """

    def __init__(self, ip_address, url=None, session=None):
        self.ip_address = ip_address
        self.url = url if url is not None else getattr(settings, 'GEOLOCATION_URL', '')
        self.session = session or requests.Session()

    def locate(self, timeout: float) -> GeoResult:
        if not self.url or not self.ip_address:
            return LocationUnavailable(UNSUPPORTED)
        try:
            response = self.session.get(self.url.format(ip=self.ip_address), timeout=timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.Timeout:
            return LocationUnavailable(TIMEOUT)
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.debug("IP geolocation failed for %s: %s", self.ip_address, e)
            return LocationUnavailable(ERROR)

        if not isinstance(data, dict):
            return LocationUnavailable(ERROR)
        latitude = data.get('lat', data.get('latitude'))
        longitude = data.get('lon', data.get('longitude'))
        try:
            latitude, longitude = float(latitude), float(longitude)
        except (TypeError, ValueError):
            return LocationUnavailable(ERROR)
        if not _valid_coordinates(latitude, longitude):
            return LocationUnavailable(ERROR)
        return Coordinates(latitude, longitude)


def resolve_location(providers: Iterable, timeout: float = None) -> GeoResult:
    """
    Asks each provider in turn and returns the first Coordinates.

    Args:
        providers: objects with a `locate(timeout)` method
        timeout: per-provider time budget in seconds

    Returns:
        Coordinates, or the LocationUnavailable of the last provider tried
    """
    if timeout is None:
        timeout = getattr(settings, 'GEOLOCATION_TIMEOUT', 5.0)
    result: GeoResult = LocationUnavailable(UNSUPPORTED)
    for provider in providers:
        try:
            result = provider.locate(timeout)
        except Exception as e:
            logger.warning("Location provider %s failed: %s", type(provider).__name__, e)
            result = LocationUnavailable(ERROR)
        if isinstance(result, Coordinates):
            return result
    logger.debug("No coordinates available (%s), using default", result.reason)
    return result


def coordinates_or_default(result: GeoResult) -> Coordinates:
    if isinstance(result, Coordinates):
        return result
    return DEFAULT_COORDINATES
