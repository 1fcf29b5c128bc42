from __future__ import annotations

import math
from typing import Any

from waitlist_core.core.scoring_config import scoring_tuning


def _coordinates(point: Any) -> tuple[float, float]:
    if isinstance(point, dict):
        return float(point["latitude"]), float(point["longitude"])
    return float(point.latitude), float(point.longitude)


def distance(
    a: Any,
    b: Any,
    *,
    accuracy: float | None = None,
    earth_radius: float | None = None,
) -> float:
    """Great-circle surface distance in meters (spherical law of cosines).

    ``a`` and ``b`` are ``Location``-like objects or ``{"latitude", "longitude"}``
    mappings.  The result is rounded to the nearest multiple of ``accuracy``.
    Malformed coordinates are not validated and come back as NaN.
    """
    accuracy = scoring_tuning.distance_accuracy_m if accuracy is None else accuracy
    earth_radius = scoring_tuning.earth_radius_m if earth_radius is None else earth_radius

    coordinates = _coordinates(a) + _coordinates(b)
    # sin/cos raise on infinity; any non-finite coordinate yields NaN instead.
    if not all(math.isfinite(v) for v in coordinates):
        return math.nan

    lat_a, lon_a, lat_b, lon_b = (math.radians(v) for v in coordinates)

    cosine = (
        math.sin(lat_b) * math.sin(lat_a)
        + math.cos(lat_b) * math.cos(lat_a) * math.cos(lon_a - lon_b)
    )

    # Rounding can push the sum just outside acos' domain.
    cosine = max(-1.0, min(1.0, cosine))
    meters = math.acos(cosine) * earth_radius
    return round(meters / accuracy) * accuracy
