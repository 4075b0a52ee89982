"""Formatting of APRS position beacons."""

from __future__ import annotations

_UINT32 = 0xFFFFFFFF


def _degrees_minutes(value: float, width: int, positive: str, negative: str) -> str:
    hemisphere = negative if value < 0 else positive
    value = abs(value)
    degrees = int(value)
    minutes = (value - degrees) * 60.0
    return f"{degrees:0{width}d}{minutes:05.2f}{hemisphere}"


def create_lat_aprs(lat: float) -> str:
    """Latitude as APRS ``DDMM.mmN`` / ``DDMM.mmS``."""
    return _degrees_minutes(lat, 2, "N", "S")


def create_long_aprs(lng: float) -> str:
    """Longitude as APRS ``DDDMM.mmE`` / ``DDDMM.mmW``."""
    return _degrees_minutes(lng, 3, "E", "W")


def beacon_position_data(lat: float, lng: float, message: str) -> str:
    """Body of a position beacon without timestamp, with the 'L' table and '&' symbol."""
    return f"={create_lat_aprs(lat)}L{create_long_aprs(lng)}&{message}"


def beacon_countdown(seconds: int) -> str:
    """Status text showing the time until the next beacon as ``beacon MM:SS``."""
    diff = int(seconds) & _UINT32
    return f"beacon {diff // 600}{(diff // 60) % 10}:{(diff // 10) % 6}{diff % 10}"