# Monte Carlo localization with known landmark correspondences
# - Particles store a pose hypothesis and an importance weight
# - Motion update samples a noised version of the previous command
# - Measurement update: multiply weights by the observation densities
#                      computed against the true landmark table
# - Systematic resampling every tick, weights reset to 1/N

import logging
import math
from dataclasses import dataclass

import numpy as np

from .distributions import MultivariateGaussian, make_rng
from .errors import InvalidControl, InvalidParameter
from .geometry import Pose
from .particle import Particle

logger = logging.getLogger(__name__)

# below this total weight the cumulative sums are lifted to avoid 0 / 0
WEIGHT_EPSILON = 1e-100


@dataclass
class EstimatorConfig:
    num_particles: int = 100
    # stds of (nn, no, on, oo): nu per sqrt(nu), nu per omega, omega per sqrt(nu), omega per omega
    motion_noise_stds: tuple = (0.19, 0.001, 0.13, 0.2)
    distance_rate_std: float = 0.14
    direction_std: float = 0.05


def systematic_resample(weights, rng):
    """
    Select len(weights) indexes with one random offset and evenly spaced pointers.

    Returns the selected indexes in ascending order.
    """
    N = len(weights)
    cumulative_sum = np.cumsum(np.asarray(weights, dtype=float))
    total = float(cumulative_sum[-1])
    if total < WEIGHT_EPSILON:
        logger.warning("particle weights collapsed (total=%g), lifting by %g",
                       total, WEIGHT_EPSILON)
        cumulative_sum += WEIGHT_EPSILON
        total += WEIGHT_EPSILON
    step = total / N
    r = rng.random() * step
    indexes = []
    pos = 0
    while len(indexes) < N:
        # the last entry always accepts, guarding against rounding in r
        if r < cumulative_sum[pos] or pos == N - 1:
            indexes.append(pos)
            r += step
        else:
            pos += 1
    return indexes


# ---------- Estimator ----------
class Estimator:
    """
    Particle filter tracking the agent from its observations.

    Each :meth:`decision` predicts with the command of the previous tick (the
    actuation delay of the real robot), reweights with the new observations
    and resamples. After every tick the resampled poses, the weights of the
    population that went into resampling and the index (in the resampled
    set) of the best particle are appended to
    ``pose_records``, ``weight_records`` and ``best_weight_records``.
    """

    def __init__(self, seed, time_interval, init_pose, radius, nu, omega, config=None):
        config = config or EstimatorConfig()
        if not time_interval > 0.0:
            raise InvalidControl(f"time_interval must be positive, got {time_interval}")
        if config.num_particles < 1:
            raise InvalidParameter(f"num_particles must be at least 1, got {config.num_particles}")
        if config.distance_rate_std <= 0.0 or config.direction_std <= 0.0:
            raise InvalidParameter("observation stds of the estimator must be positive")
        if len(config.motion_noise_stds) != 4:
            raise InvalidParameter("motion_noise_stds needs four values (nn, no, on, oo)")

        self.N = config.num_particles
        self.config = config
        self.rng = make_rng(seed)
        self.time_interval = time_interval
        self.radius = radius
        self.nu = nu
        self.omega = omega
        self.prev_nu = 0.0
        self.prev_omega = 0.0
        self.motion_noise_pdf = MultivariateGaussian.from_stds(
            np.zeros(4), config.motion_noise_stds)
        self.distance_rate_std = config.distance_rate_std
        self.direction_std = config.direction_std

        self.particles = [Particle(init_pose, 1.0 / self.N) for _ in range(self.N)]
        self.pose_records = [[p.pose for p in self.particles]]
        self.weight_records = [[p.weight for p in self.particles]]
        self.best_weight_records = [0]

    def update_motion(self, prev_nu, prev_omega):
        for p in self.particles:
            p.sample_motion(self.rng, self.motion_noise_pdf,
                            prev_nu, prev_omega, self.time_interval)

    def updater_observation(self, observation, landmarks):
        for p in self.particles:
            p.update_weight(observation, landmarks,
                            self.distance_rate_std, self.direction_std)

    def resampling(self):
        weights = [p.weight for p in self.particles]
        indexes = systematic_resample(weights, self.rng)

        new_particles = []
        best_idx = 0
        best_weight = -math.inf
        for idx in indexes:
            p_old = self.particles[idx]
            if best_weight < p_old.weight:
                best_weight = p_old.weight
                best_idx = len(new_particles)
            new_particles.append(Particle(p_old.pose, 1.0 / self.N))
        self.particles = new_particles

        self.pose_records.append([p.pose for p in self.particles])
        self.weight_records.append(weights)
        self.best_weight_records.append(best_idx)

    def decision(self, observation, landmarks):
        """Run predict, weight and resample for one tick."""
        self.update_motion(self.prev_nu, self.prev_omega)
        self.prev_nu = self.nu
        self.prev_omega = self.omega
        self.updater_observation(observation, landmarks)
        self.resampling()

    # ---------- estimates ----------

    def get_best_particle(self):
        """Particle that held the highest weight at the last resampling."""
        return self.particles[self.best_weight_records[-1]]

    def weighted_mean_pose(self, weights=None):
        """
        Weighted mean of the particle poses; the heading uses the circular mean.

        Defaults to the current particle weights.
        """
        w = np.asarray([p.weight for p in self.particles] if weights is None else weights,
                       dtype=float)
        total = w.sum()
        w = np.full(self.N, 1.0 / self.N) if total <= 0.0 else w / total
        xs = np.array([p.pose.x for p in self.particles])
        ys = np.array([p.pose.y for p in self.particles])
        thetas = np.array([p.pose.theta for p in self.particles])
        theta = math.atan2(float(w @ np.sin(thetas)), float(w @ np.cos(thetas)))
        return Pose.from_xytheta(float(w @ xs), float(w @ ys), theta)

    def effective_sample_size(self):
        """1 / sum(w^2) of the normalized population weights before the last resampling."""
        w = np.asarray(self.weight_records[-1], dtype=float)
        total = w.sum()
        if total <= 0.0:
            return 0.0
        w = w / total
        return 1.0 / float(np.sum(w ** 2))
