"""
2D geometry primitives shared by the agent, the camera and the particles
"""

import math
from typing import NamedTuple

TWO_PI = 2.0 * math.pi


def normalize_angle(theta):
    """Map an angle to the canonical range (-pi, pi]."""
    # remainder() lands in [-pi, pi]; only -pi has to be folded
    wrapped = math.remainder(theta, TWO_PI)
    if wrapped <= -math.pi:
        wrapped += TWO_PI
    return wrapped


class Coord(NamedTuple):
    x: float
    y: float

    def __add__(self, other):
        return Coord(self.x + other.x, self.y + other.y)

    def __str__(self):
        return f"x: {self.x}, y: {self.y}"


class Pose(NamedTuple):
    """Position plus heading. The heading is stored as given, never wrapped."""

    coord: Coord
    theta: float

    @classmethod
    def from_xytheta(cls, x, y, theta):
        return cls(Coord(float(x), float(y)), float(theta))

    @property
    def x(self):
        return self.coord.x

    @property
    def y(self):
        return self.coord.y

    def __add__(self, other):
        return Pose(self.coord + other.coord, self.theta + other.theta)

    def with_theta(self, theta):
        return Pose(self.coord, theta)

    def normalized(self):
        return Pose(self.coord, normalize_angle(self.theta))

    def __str__(self):
        return f"x: {self.coord.x}, y: {self.coord.y}, theta: {self.theta}"
