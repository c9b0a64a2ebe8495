"""
Test suite for geographic helpers.

System role: Verification of field coordinate utilities
"""

import math

import pytest

from agribot.utils import build_bounding_box, calculate_centroid, haversine_distance_km


class TestCalculateCentroid:
    """Test suite for calculate_centroid()."""

    def test_centroid_should_average_vertices(self) -> None:
        """Test the centroid of a square is its centre."""
        result = calculate_centroid([36.0, 36.0, 37.0, 37.0], [3.0, 4.0, 4.0, 3.0])

        assert result == {"latitude": 36.5, "longitude": 3.5}

    def test_centroid_should_ignore_unmatched_coordinates(self) -> None:
        """Test extra latitudes beyond the longitude count are dropped."""
        result = calculate_centroid([10.0, 20.0, 90.0], [1.0, 3.0])

        assert result == {"latitude": 15.0, "longitude": 2.0}

    def test_centroid_should_return_none_without_vertices(self) -> None:
        """Test empty input yields None."""
        assert calculate_centroid([], []) is None
        assert calculate_centroid([1.0], []) is None


class TestBuildBoundingBox:
    """Test suite for build_bounding_box()."""

    def test_box_should_span_radius_in_latitude(self) -> None:
        """Test latitude delta is radius over 111.32 km."""
        box = build_bounding_box(0.0, 0.0, 111.32)

        assert box["min_lat"] == pytest.approx(-1.0)
        assert box["max_lat"] == pytest.approx(1.0)
        assert box["min_lon"] == pytest.approx(-1.0)
        assert box["max_lon"] == pytest.approx(1.0)

    def test_box_should_widen_longitude_away_from_equator(self) -> None:
        """Test longitude delta grows with latitude."""
        box = build_bounding_box(60.0, 3.0, 111.32)

        assert box["max_lon"] - 3.0 == pytest.approx(2.0)


class TestHaversineDistance:
    """Test suite for haversine_distance_km()."""

    def test_distance_should_be_zero_for_same_point(self) -> None:
        point = {"latitude": 36.75, "longitude": 3.06}

        assert haversine_distance_km(point, point) == pytest.approx(0.0)

    def test_distance_should_match_one_degree_of_latitude(self) -> None:
        """Test one degree of latitude is about 111.2 km."""
        distance = haversine_distance_km(
            {"latitude": 36.0, "longitude": 3.0},
            {"latitude": 37.0, "longitude": 3.0},
        )

        assert distance == pytest.approx(111.19, abs=0.05)

    def test_distance_should_be_infinite_when_point_missing(self) -> None:
        assert haversine_distance_km(None, {"latitude": 0.0, "longitude": 0.0}) == math.inf


class TestNearbyFieldMatching:
    """Test suite for combining centroid, box and distance to find nearby fields."""

    def test_box_prefilter_should_keep_fields_within_radius(self) -> None:
        """Fields inside the radius pass both the box and the distance check."""
        # Arrange
        source = calculate_centroid([36.70, 36.72], [3.05, 3.07])
        near = calculate_centroid([36.75, 36.77], [3.10, 3.12])
        far = calculate_centroid([35.60, 35.62], [0.60, 0.62])
        box = build_bounding_box(source["latitude"], source["longitude"], radius_km=20)

        def in_box(point: dict[str, float]) -> bool:
            return (
                box["min_lat"] <= point["latitude"] <= box["max_lat"]
                and box["min_lon"] <= point["longitude"] <= box["max_lon"]
            )

        # Act
        matches = [
            point for point in (near, far)
            if in_box(point) and haversine_distance_km(source, point) <= 20
        ]

        # Assert
        assert matches == [near]
