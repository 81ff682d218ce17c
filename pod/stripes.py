"""
Track stripe detection
"""

import math
from typing import Sequence, Tuple


def number_of_stripes(track_length: float, stripe_dist: float) -> int:
    """Stripes along a track of the given length"""
    return int(math.floor(track_length / stripe_dist))


def detect_stripes(
    distance: Sequence[float], stripe_dist: float, n_stripes: int
) -> Tuple[int, ...]:
    """
    Indices at which each stripe is passed

    At most one stripe is counted per time index, as a sensor sampling
    once per step would.

    Args:
        distance: Distance travelled at each time index (m)
        stripe_dist: Distance between stripes (m)
        n_stripes: Number of stripes on the track

    Returns:
        Time index of each detected stripe, in order
    """
    stripes = []
    for i in range(1, len(distance)):
        if len(stripes) >= n_stripes:
            break
        if distance[i] >= (1 + len(stripes)) * stripe_dist:
            stripes.append(i)
    return tuple(stripes)
