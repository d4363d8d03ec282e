"""Story point scale."""
from enum import Enum


class PointSize(str, Enum):
    EXTRA_LARGE = "extraLarge"
    LARGE = "large"
    MEDIUM = "medium"
    SMALL = "small"
    EXTRA_SMALL = "extraSmall"
    EXTRA_EXTRA_SMALL = "extraExtraSmall"


POINTS: dict[PointSize, int] = {
    PointSize.EXTRA_LARGE: 16,
    PointSize.LARGE: 8,
    PointSize.MEDIUM: 4,
    PointSize.SMALL: 2,
    PointSize.EXTRA_SMALL: 1,
    PointSize.EXTRA_EXTRA_SMALL: 0,
}


def point_value(label: PointSize | str) -> int:
    """Integer weight of a size label. Unknown labels raise ValueError."""
    return POINTS[PointSize(label)]
