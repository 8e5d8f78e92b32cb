"""
Geospatial utilities for SparkRadar.

Point containment tests against SPC outlook and mesoscale discussion
polygons. Coordinates are (lon, lat) to match GeoJSON ordering.
"""

import logging
from typing import List, Dict, Any, Optional, Tuple

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


def point_in_ring(point: Point, ring: List) -> bool:
    """
    Even-odd ray-casting test of a point against a single linear ring.

    The ring does not need to be explicitly closed. Points exactly on an
    edge may land on either side.

    Args:
        point: (lon, lat) tuple
        ring: List of (lon, lat) pairs

    Returns:
        True if the point is inside the ring
    """
    if not isinstance(ring, (list, tuple)) or not ring:
        return False

    x, y = point
    n = len(ring)
    inside = False

    try:
        j = n - 1
        for i in range(n):
            xi, yi = ring[i][0], ring[i][1]
            xj, yj = ring[j][0], ring[j][1]

            if ((yi > y) != (yj > y)) and (x < (xj - xi) * (y - yi) / (yj - yi) + xi):
                inside = not inside

            j = i
    except (TypeError, IndexError, KeyError) as e:
        logger.debug(f"Malformed ring vertex, treating point as outside: {e}")
        return False

    return inside


def point_in_polygon(point: Point, polygon_rings: List[List]) -> bool:
    """
    Check if a point is inside a polygon with optional holes.

    Args:
        point: (lon, lat) tuple
        polygon_rings: Outer ring followed by zero or more hole rings

    Returns:
        True if the point is inside the outer ring and outside every hole
    """
    if not isinstance(polygon_rings, (list, tuple)) or not polygon_rings:
        return False

    if not point_in_ring(point, polygon_rings[0]):
        return False

    for hole in polygon_rings[1:]:
        if point_in_ring(point, hole):
            return False

    return True


def point_in_geometry(point: Point, geometry: Optional[Dict[str, Any]]) -> bool:
    """
    Check a point against a GeoJSON Polygon or MultiPolygon geometry.

    Other geometry types never contain the point.
    """
    if not isinstance(geometry, dict):
        return False

    geom_type = geometry.get("type")
    coordinates = geometry.get("coordinates")
    if not isinstance(coordinates, list):
        return False

    if geom_type == "Polygon":
        return point_in_polygon(point, coordinates)

    if geom_type == "MultiPolygon":
        return any(point_in_polygon(point, polygon) for polygon in coordinates)

    logger.debug(f"Unsupported geometry type for containment: {geom_type}")
    return False
