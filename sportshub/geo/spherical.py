"""
Spherical geometry for radius queries.

Distances are great-circle distances on a sphere of radius
``EARTH_RADIUS_MILES``; a radius query selects the spherical cap of angular
radius ``distance / EARTH_RADIUS_MILES`` around a center point.
"""
import math
from typing import Tuple

EARTH_RADIUS_MILES = 3963.0

# Absorbs floating point noise so a point at the exact center or boundary is kept
_EPSILON = 1e-12


def miles_to_radians(distance_miles: float) -> float:
    if distance_miles < 0:
        raise ValueError("Distance must not be negative")
    return distance_miles / EARTH_RADIUS_MILES


def central_angle(lng1: float, lat1: float, lng2: float, lat2: float) -> float:
    """Great-circle angle in radians between two points given in degrees (haversine)."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = phi2 - phi1
    d_lambda = math.radians(lng2 - lng1)
    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * math.asin(min(1.0, math.sqrt(h)))


def within_spherical_cap(
    center: Tuple[float, float], point: Tuple[float, float], radius_radians: float
) -> bool:
    """
    Check whether ``point`` lies inside the cap around ``center``.

    Both points are ``(longitude, latitude)`` pairs in degrees.
    """
    return central_angle(center[0], center[1], point[0], point[1]) <= radius_radians + _EPSILON


def latitude_band(center_lat: float, radius_radians: float) -> Tuple[float, float]:
    """
    Latitude range (degrees) that contains the whole cap.

    Every point within angular distance r of the center differs from it in
    latitude by at most r, so this is a safe prefilter. Longitude is left
    unbounded because caps touching a pole or the antimeridian span it.
    """
    delta = math.degrees(radius_radians)
    return max(-90.0, center_lat - delta), min(90.0, center_lat + delta)
