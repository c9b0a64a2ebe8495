"""
Pure helper functions (geo, text, time).

Exports:
  - calculate_centroid(), build_bounding_box(), haversine_distance_km():
    Field geometry for callers that match farmers by location

Dependencies: None (stdlib only)
System role: Stateless utilities shared across layers
"""

from agribot.utils.geo import (
    build_bounding_box,
    calculate_centroid,
    haversine_distance_km,
)

__all__ = [
    "build_bounding_box",
    "calculate_centroid",
    "haversine_distance_km",
]
