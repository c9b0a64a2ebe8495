"""
Geographic helpers.

Centroid, bounding box and great-circle distance for field coordinates.

Dependencies: math (stdlib)
System role: Stateless geo utilities
"""

import math

EARTH_RADIUS_KM = 6371.0
DEG_LAT_KM = 111.32


def calculate_centroid(
    latitudes: list[float],
    longitudes: list[float],
) -> dict[str, float] | None:
    """
    Compute the arithmetic centroid of a polygon's vertices.

    Extra coordinates on the longer list are ignored.

    Args:
        latitudes: Vertex latitudes
        longitudes: Vertex longitudes

    Returns:
        dict with latitude/longitude keys, or None when no vertex is given
    """
    length = min(len(latitudes), len(longitudes))
    if length == 0:
        return None

    return {
        "latitude": sum(latitudes[:length]) / length,
        "longitude": sum(longitudes[:length]) / length,
    }


def build_bounding_box(latitude: float, longitude: float, radius_km: float) -> dict[str, float]:
    """
    Build a lat/lon box enclosing a circle of radius_km around a point.

    Args:
        latitude: Centre latitude in degrees
        longitude: Centre longitude in degrees
        radius_km: Radius in kilometres

    Returns:
        dict with min_lat, max_lat, min_lon, max_lon
    """
    delta_lat = radius_km / DEG_LAT_KM
    cos_lat = math.cos(math.radians(latitude)) or 1e-6
    delta_lon = radius_km / (DEG_LAT_KM * cos_lat)

    return {
        "min_lat": latitude - delta_lat,
        "max_lat": latitude + delta_lat,
        "min_lon": longitude - delta_lon,
        "max_lon": longitude + delta_lon,
    }


def haversine_distance_km(a: dict[str, float] | None, b: dict[str, float] | None) -> float:
    """
    Great-circle distance between two points.

    Args:
        a: Point with latitude/longitude keys
        b: Point with latitude/longitude keys

    Returns:
        float: Distance in kilometres, infinity if a point is missing
    """
    if not a or not b:
        return math.inf

    d_lat = math.radians(b["latitude"] - a["latitude"])
    d_lon = math.radians(b["longitude"] - a["longitude"])
    lat1 = math.radians(a["latitude"])
    lat2 = math.radians(b["latitude"])

    hav = math.sin(d_lat / 2) ** 2 + math.sin(d_lon / 2) ** 2 * math.cos(lat1) * math.cos(lat2)
    c = 2 * math.atan2(math.sqrt(hav), math.sqrt(1 - hav))
    return EARTH_RADIUS_KM * c
