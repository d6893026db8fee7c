"""
Camera model: range/bearing to landmarks plus the sensor fault stages.

For every landmark the camera applies, in order: phantom substitution,
true range/bearing, occlusion, oversight, the visibility gate, bias and
measurement noise. Observations keep the id of the landmark slot they came
from, even when a phantom replaced its position.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, NamedTuple

from .distributions import Gaussian, Uniform
from .errors import InvalidParameter
from .geometry import Coord, normalize_angle

logger = logging.getLogger(__name__)


class Observation(NamedTuple):
    id: int
    dist: float
    angle: float

    def __str__(self):
        return f"id: {self.id}, dist: {self.dist}, angle: {self.angle}"


def observe_landmark(pose, mark, id):
    """Exact distance and canonical bearing of `mark` seen from `pose`."""
    dx = mark.x - pose.coord.x
    dy = mark.y - pose.coord.y
    dist = math.hypot(dx, dy)
    angle = normalize_angle(math.atan2(dy, dx) - pose.theta)
    return Observation(id, dist, angle)


def _check_prob(name, prob):
    if not 0.0 <= prob <= 1.0:
        raise InvalidParameter(f"{name} must be a probability in [0, 1], got {prob}")


@dataclass
class CameraConfig:
    """Parameters of the camera fault stages. Defaults give an ideal camera."""

    distance_noise_rate: float = 0.0
    direction_noise: float = 0.0
    distance_bias_rate_std: float = 0.0
    direction_bias_std: float = 0.0
    phantom_prob: float = 0.0
    phantom_width: float = 0.0
    phantom_height: float = 0.0
    oversight_prob: float = 0.0
    occlusion_prob: float = 0.0
    # visibility window, lower bounds inclusive
    distance_range: tuple = (0.5, 6.0)
    direction_range: tuple = (-math.pi / 3.0, math.pi / 3.0)


# ---------- stages ----------

class Phantom:
    """With probability `prob` the landmark appears somewhere else."""

    def __init__(self, prob=0.0, width=0.0, height=0.0):
        _check_prob("phantom_prob", prob)
        self.prob = prob
        self.x_dist = Uniform.centered(width)
        self.y_dist = Uniform.centered(height)

    def occur(self, rng, mark):
        if rng.random() < self.prob:
            phantom = Coord(self.x_dist.sample(rng), self.y_dist.sample(rng))
            logger.debug("phantom landmark at (%.3f, %.3f)", phantom.x, phantom.y)
            return phantom
        return mark


class Occlusion:
    """With probability `prob` something in front of the landmark stretches the range."""

    def __init__(self, prob=0.0):
        _check_prob("occlusion_prob", prob)
        self.prob = prob

    def occur(self, rng, dist, dist_range):
        if rng.random() < self.prob:
            return dist + rng.random() * (dist_range[1] - dist_range[0])
        return dist


class Oversight:
    """With probability `prob` a detection is lost."""

    def __init__(self, prob=0.0):
        _check_prob("oversight_prob", prob)
        self.prob = prob

    def occur(self, rng):
        if rng.random() < self.prob:
            logger.debug("detection dropped")
            return True
        return False


class ObservationBias:
    """Persistent distance-rate and bearing offsets, drawn once."""

    def __init__(self, rng, distance_bias_rate_std=0.0, direction_bias_std=0.0):
        if distance_bias_rate_std < 0.0 or direction_bias_std < 0.0:
            raise InvalidParameter("bias standard deviations must be non-negative")
        self.distance_bias_rate_std = distance_bias_rate_std
        self.direction_bias_std = direction_bias_std
        normal = Gaussian(0.0, 1.0)
        self.distance_bias_rate = distance_bias_rate_std * normal.sample(rng)
        self.direction_bias = direction_bias_std * normal.sample(rng)

    def on(self, dist, angle):
        return dist + dist * self.distance_bias_rate, angle + self.direction_bias


class ObservationNoise:
    """Fresh Gaussian noise per measurement; the distance std scales with range."""

    def __init__(self, distance_noise_rate=0.0, direction_noise=0.0):
        if distance_noise_rate < 0.0 or direction_noise < 0.0:
            raise InvalidParameter("observation noise must be non-negative")
        self.distance_noise_rate = distance_noise_rate
        self.direction_noise = direction_noise
        self._normal = Gaussian(0.0, 1.0)

    def occur(self, rng, dist, angle):
        dist = dist + dist * self.distance_noise_rate * self._normal.sample(rng)
        angle = angle + self.direction_noise * self._normal.sample(rng)
        return dist, angle


class Camera:
    """Ordered pipeline of the five camera fault stages."""

    def __init__(self, rng, config=None):
        config = config or CameraConfig()
        lo, hi = config.distance_range
        if not 0.0 <= lo < hi:
            raise InvalidParameter(f"invalid distance range {config.distance_range}")
        if not config.direction_range[0] < config.direction_range[1]:
            raise InvalidParameter(f"invalid direction range {config.direction_range}")
        self.config = config
        self.distance_range = tuple(config.distance_range)
        self.direction_range = tuple(config.direction_range)
        self.noise = ObservationNoise(config.distance_noise_rate, config.direction_noise)
        self.bias = ObservationBias(rng, config.distance_bias_rate_std, config.direction_bias_std)
        self.phantom = Phantom(config.phantom_prob, config.phantom_width, config.phantom_height)
        self.oversight = Oversight(config.oversight_prob)
        self.occlusion = Occlusion(config.occlusion_prob)

    def is_visible(self, dist, angle):
        d_lo, d_hi = self.distance_range
        a_lo, a_hi = self.direction_range
        return d_lo <= dist < d_hi and a_lo <= angle < a_hi

    def observe(self, rng, pose, landmarks) -> List[Observation]:
        obs = []
        for id, mark in enumerate(landmarks):
            mark = self.phantom.occur(rng, mark)
            _, dist, angle = observe_landmark(pose, mark, id)
            dist = self.occlusion.occur(rng, dist, self.distance_range)
            if self.oversight.occur(rng) or not self.is_visible(dist, angle):
                continue
            dist, angle = self.bias.on(dist, angle)
            dist, angle = self.noise.occur(rng, dist, angle)
            obs.append(Observation(id, dist, normalize_angle(angle)))
        return obs
