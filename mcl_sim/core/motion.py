"""
Motion model: exact kinematics plus the noise stages acting on the real robot.

The stages are applied in a fixed order by ``MotionModel``:
bias -> stuck/escape -> kinematics -> heading disturbance -> kidnap.
Each stage is always present; a stage is switched off by configuring it with
degenerate parameters (zero std, infinite expected time).
"""

import logging
import math
from dataclasses import dataclass

from .distributions import Exponential, Gaussian, Uniform
from .errors import InvalidControl, InvalidParameter
from .geometry import Coord, Pose

logger = logging.getLogger(__name__)

# below this angular speed the arc formula is replaced by a straight line
OMEGA_EPSILON = 1e-10


def _check_control(**values):
    for name, value in values.items():
        if not math.isfinite(value):
            raise InvalidControl(f"{name} must be finite, got {value}")


def state_transition(pose, nu, omega, dt):
    """
    Move `pose` for `dt` seconds at forward speed `nu` and angular speed `omega`.

    Straight line when omega is (almost) zero, closed-form circular arc
    otherwise. The heading advances by omega * dt and is not wrapped.
    """
    _check_control(x=pose.coord.x, y=pose.coord.y, theta=pose.theta,
                   nu=nu, omega=omega, dt=dt)
    if dt <= 0.0:
        raise InvalidControl(f"dt must be positive, got {dt}")

    theta = pose.theta
    if abs(omega) < OMEGA_EPSILON:
        delta = Coord(nu * math.cos(theta) * dt,
                      nu * math.sin(theta) * dt)
    else:
        delta = Coord(nu / omega * (math.sin(theta + omega * dt) - math.sin(theta)),
                      nu / omega * (-math.cos(theta + omega * dt) + math.cos(theta)))
    return pose + Pose(delta, omega * dt)


# ---------- stage configuration ----------

@dataclass
class MotionConfig:
    """Parameters of the motion noise stages. Defaults disable every stage."""

    # heading disturbance: expected pebbles per metre and heading kick std [rad]
    noise_per_meter: float = 0.0
    noise_std: float = 0.0
    # persistent miscalibration of nu / omega (std of a factor centred at 1)
    nu_bias_rate_std: float = 0.0
    omega_bias_rate_std: float = 0.0
    # stuck / escape expected durations [s]
    expected_stuck_time: float = math.inf
    expected_escape_time: float = 1.0
    # kidnapping: expected time [s], target rectangle and heading range
    expected_kidnap_time: float = math.inf
    kidnap_width: float = 0.0
    kidnap_height: float = 0.0
    kidnap_theta_min: float = 0.0
    kidnap_theta_max: float = 2.0 * math.pi


# ---------- stages ----------

class MotionBias:
    """Multiplicative nu/omega factors, drawn once at construction."""

    def __init__(self, rng, nu_bias_rate_std=0.0, omega_bias_rate_std=0.0):
        if nu_bias_rate_std < 0.0 or omega_bias_rate_std < 0.0:
            raise InvalidParameter("bias standard deviations must be non-negative")
        self.nu_bias_rate_std = nu_bias_rate_std
        self.omega_bias_rate_std = omega_bias_rate_std
        normal = Gaussian(0.0, 1.0)
        self.nu_bias = 1.0 + nu_bias_rate_std * normal.sample(rng)
        self.omega_bias = 1.0 + omega_bias_rate_std * normal.sample(rng)

    def on(self, nu, omega):
        return nu * self.nu_bias, omega * self.omega_bias


class Stuck:
    """
    Two-state FREE/STUCK machine driven by exponential holding times.

    The robot starts FREE. While STUCK the commanded speeds have no effect.
    """

    def __init__(self, rng, expected_stuck_time=math.inf, expected_escape_time=1.0):
        self.stuck_pdf = Exponential(expected_stuck_time)
        self.escape_pdf = Exponential(expected_escape_time)
        self.time_until_stuck = self.stuck_pdf.sample(rng)
        self.time_until_escape = self.escape_pdf.sample(rng)
        self.is_stuck = False

    def occur(self, rng, dt):
        if self.is_stuck:
            self.time_until_escape -= dt
            if self.time_until_escape <= 0.0:
                self.time_until_escape += self.escape_pdf.sample(rng)
                self.is_stuck = False
                logger.debug("robot escaped")
        else:
            self.time_until_stuck -= dt
            if self.time_until_stuck <= 0.0:
                self.time_until_stuck += self.stuck_pdf.sample(rng)
                self.is_stuck = True
                logger.debug("robot got stuck")
        return self.is_stuck


class MotionNoise:
    """Heading kicks from pebbles met after exponentially distributed distances."""

    def __init__(self, rng, noise_per_meter=0.0, noise_std=0.0):
        if noise_std < 0.0:
            raise InvalidParameter(f"noise_std must be non-negative, got {noise_std}")
        self.noise_per_meter = noise_per_meter
        self.noise_std = noise_std
        self.noise_pdf = Exponential.from_rate(noise_per_meter)
        self.theta_noise = Gaussian(0.0, 1.0)
        self.dist_until_noise = self.noise_pdf.sample(rng)

    def occur(self, rng, dist):
        """Heading offset caused by travelling `dist` metres this tick."""
        self.dist_until_noise -= dist
        if self.dist_until_noise <= 0.0:
            self.dist_until_noise += self.noise_pdf.sample(rng)
            kick = self.noise_std * self.theta_noise.sample(rng)
            logger.debug("pebble: heading disturbed by %.4f rad", kick)
            return kick
        return 0.0


class Kidnap:
    """Teleports the robot to a uniformly drawn pose after exponential waits."""

    def __init__(self, rng, expected_kidnap_time=math.inf, width=0.0, height=0.0,
                 theta_min=0.0, theta_max=2.0 * math.pi):
        self.pdf = Exponential(expected_kidnap_time)
        self.x_dist = Uniform.centered(width)
        self.y_dist = Uniform.centered(height)
        self.theta_dist = Uniform(theta_min, theta_max)
        self.time_until_kidnap = self.pdf.sample(rng)

    def occur(self, rng, dt, pose):
        self.time_until_kidnap -= dt
        if self.time_until_kidnap <= 0.0:
            self.time_until_kidnap += self.pdf.sample(rng)
            x = self.x_dist.sample(rng)
            y = self.y_dist.sample(rng)
            theta = self.theta_dist.sample(rng)
            logger.debug("kidnapped to (%.3f, %.3f, %.3f)", x, y, theta)
            return Pose.from_xytheta(x, y, theta)
        return pose


class MotionModel:
    """Ordered pipeline of the motion noise stages around ``state_transition``."""

    def __init__(self, rng, config=None):
        config = config or MotionConfig()
        self.config = config
        # draw order at construction: pebbles, bias, stuck, kidnap
        self.noise = MotionNoise(rng, config.noise_per_meter, config.noise_std)
        self.bias = MotionBias(rng, config.nu_bias_rate_std, config.omega_bias_rate_std)
        self.stuck = Stuck(rng, config.expected_stuck_time, config.expected_escape_time)
        self.kidnap = Kidnap(rng, config.expected_kidnap_time,
                             config.kidnap_width, config.kidnap_height,
                             config.kidnap_theta_min, config.kidnap_theta_max)

    def state_transition_with_noise(self, rng, pose, nu, omega, radius, dt):
        _check_control(nu=nu, omega=omega, radius=radius, dt=dt)
        nu, omega = self.bias.on(nu, omega)
        if self.stuck.occur(rng, dt):
            nu, omega = 0.0, 0.0
        pose = state_transition(pose, nu, omega, dt)
        travelled = nu * dt + radius * abs(omega) * dt
        pose = pose.with_theta(pose.theta + self.noise.occur(rng, travelled))
        return self.kidnap.occur(rng, dt, pose)
