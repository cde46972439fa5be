"""Geographic distance and bounding box utilities.

All coordinates are WGS84 (EPSG:4326) degrees. Bounding boxes follow the
GeoJSON / Sentinel Hub order ``[min_lng, min_lat, max_lng, max_lat]``.
"""

import math
from typing import List

from shapely.geometry import MultiPoint, box

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two points.

    Args:
        lat1: Latitude of first point
        lng1: Longitude of first point
        lat2: Latitude of second point
        lng2: Longitude of second point

    Returns:
        Distance in kilometres
    """
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def point_bbox(lat: float, lng: float, size_deg: float = 0.01) -> List[float]:
    """Square bounding box centred on a point.

    Args:
        lat: Centre latitude
        lng: Centre longitude
        size_deg: Half-width of the box in degrees

    Returns:
        [min_lng, min_lat, max_lng, max_lat]
    """
    return list(box(lng - size_deg, lat - size_deg, lng + size_deg, lat + size_deg).bounds)


def route_bbox(
    from_lat: float, from_lng: float, to_lat: float, to_lng: float, buffer_deg: float = 0.01
) -> List[float]:
    """Bounding box covering both route endpoints plus a buffer.

    Args:
        from_lat: Origin latitude
        from_lng: Origin longitude
        to_lat: Destination latitude
        to_lng: Destination longitude
        buffer_deg: Buffer added on every side, in degrees

    Returns:
        [min_lng, min_lat, max_lng, max_lat]
    """
    min_lng, min_lat, max_lng, max_lat = MultiPoint([(from_lng, from_lat), (to_lng, to_lat)]).bounds
    return [min_lng - buffer_deg, min_lat - buffer_deg, max_lng + buffer_deg, max_lat + buffer_deg]
