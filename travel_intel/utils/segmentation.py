"""Route Segmentation Utilities.

Routes are sampled at evenly spaced waypoints between origin and
destination so that each waypoint can be analysed on its own. Waypoints
are interpolated linearly in latitude/longitude space rather than along
the geodesic, which is close enough for short and medium routes.
"""

import math
from typing import List, NamedTuple

from shapely import line_interpolate_point
from shapely.geometry import LineString


class Waypoint(NamedTuple):
    """Interpolated point along a straight route."""

    index: int
    lat: float
    lng: float
    ratio: float


def count_route_segments(
    distance_km: float,
    segment_km: float = 50.0,
    min_segments: int = 3,
    max_segments: int = 10,
) -> int:
    """Number of segments for a route of the given length.

    One segment per ``segment_km``, never fewer than ``min_segments`` and
    never more than ``max_segments``.

    Args:
        distance_km: Great-circle route length
        segment_km: Target length of a single segment
        min_segments: Lower bound
        max_segments: Upper bound

    Returns:
        Segment count
    """
    if segment_km <= 0:
        return min_segments
    return min(max_segments, max(min_segments, math.ceil(distance_km / segment_km)))


def interpolate_waypoints(
    origin_lat: float,
    origin_lng: float,
    dest_lat: float,
    dest_lng: float,
    num_segments: int,
) -> List[Waypoint]:
    """Evenly spaced waypoints from origin to destination, both included.

    Args:
        origin_lat: Origin latitude
        origin_lng: Origin longitude
        dest_lat: Destination latitude
        dest_lng: Destination longitude
        num_segments: Number of segments (yields num_segments + 1 waypoints)

    Returns:
        Waypoints ordered from origin (index 0) to destination
    """
    num_segments = max(1, num_segments)
    line = LineString([(origin_lng, origin_lat), (dest_lng, dest_lat)])
    waypoints: List[Waypoint] = []

    for i in range(num_segments + 1):
        ratio = i / num_segments

        # Endpoints are taken verbatim so they match the inputs exactly
        if i == 0:
            lat, lng = origin_lat, origin_lng
        elif i == num_segments:
            lat, lng = dest_lat, dest_lng
        elif line.length == 0:
            lat, lng = origin_lat, origin_lng
        else:
            point = line_interpolate_point(line, ratio, normalized=True)
            lat, lng = point.y, point.x

        waypoints.append(Waypoint(index=i, lat=lat, lng=lng, ratio=ratio))

    return waypoints
