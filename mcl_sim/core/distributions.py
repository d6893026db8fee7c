"""
Probability primitives used by the motion model, the camera and the filter.

Every sampler takes the numpy Generator it draws from, so a component decides
which stream it consumes. Only the distributions the localization core needs
are provided: Gaussian, Exponential, Uniform and a multivariate Gaussian
sampled through its Cholesky factor.
"""

import math
from typing import List, Optional

import numpy as np

from .errors import InvalidParameter

SQRT_2PI = math.sqrt(2.0 * math.pi)


# ---------- random streams ----------

def make_rng(seed=None):
    """Create the generator owned by one component."""
    return np.random.default_rng(seed)


def spawn_rngs(seed, n):
    """Derive `n` independent, reproducible sub-streams from one root seed."""
    children = np.random.SeedSequence(seed).spawn(n)
    return [np.random.default_rng(child) for child in children]


def _check_finite(name, value):
    if not math.isfinite(value):
        raise InvalidParameter(f"{name} must be finite, got {value}")


def normal_pdf(x, mu, std):
    v = (x - mu) / std
    return math.exp(-0.5 * v * v) / (SQRT_2PI * std)


# ---------- univariate ----------

class Gaussian:
    """
    Normal distribution sampled with the Box-Muller transform.

    One transform yields two independent values; the second one is kept and
    returned by the following call so no uniform draw is wasted.
    """

    def __init__(self, mu=0.0, std=1.0):
        _check_finite("mu", mu)
        _check_finite("std", std)
        if std <= 0.0:
            raise InvalidParameter(f"Gaussian std must be positive, got {std}")
        self.mu = float(mu)
        self.std = float(std)
        self._spare: Optional[float] = None

    def __repr__(self):
        return f"Gaussian(mu={self.mu}, std={self.std})"

    def sample(self, rng):
        if self._spare is not None:
            value, self._spare = self._spare, None
            return value
        z0, z1 = box_muller(rng)
        self._spare = self.mu + self.std * z1
        return self.mu + self.std * z0

    def pdf(self, x):
        return normal_pdf(x, self.mu, self.std)


def box_muller(rng):
    """Two independent standard normal values from two uniform draws."""
    # 1 - U keeps the log argument in (0, 1]
    u1 = 1.0 - rng.random()
    u2 = rng.random()
    r = math.sqrt(-2.0 * math.log(u1))
    return r * math.cos(2.0 * math.pi * u2), r * math.sin(2.0 * math.pi * u2)


class Exponential:
    """
    Inter-arrival time of a renewal process, parametrised by its expectation.

    An infinite expectation is accepted and yields an event that never comes.
    """

    def __init__(self, expected):
        if math.isnan(expected) or expected <= 0.0:
            raise InvalidParameter(
                f"Exponential expected value must be positive, got {expected}")
        self.expected = float(expected)

    @classmethod
    def from_rate(cls, rate):
        """Build from events per unit; a zero rate means no events at all."""
        _check_finite("rate", rate)
        if rate < 0.0:
            raise InvalidParameter(f"Exponential rate must be non-negative, got {rate}")
        return cls(math.inf if rate == 0.0 else 1.0 / rate)

    @property
    def rate(self):
        return 1.0 / self.expected

    def __repr__(self):
        return f"Exponential(expected={self.expected})"

    def sample(self, rng):
        if math.isinf(self.expected):
            return math.inf
        return self.expected * rng.standard_exponential()


class Uniform:
    """Uniform distribution on [low, high]; low == high is a point mass."""

    def __init__(self, low, high):
        _check_finite("low", low)
        _check_finite("high", high)
        if low > high:
            raise InvalidParameter(f"Uniform interval is empty: [{low}, {high}]")
        self.low = float(low)
        self.high = float(high)

    @classmethod
    def centered(cls, width):
        """Interval of the given width centred on zero."""
        return cls(-width / 2.0, width / 2.0)

    def __repr__(self):
        return f"Uniform(low={self.low}, high={self.high})"

    def sample(self, rng):
        return self.low + (self.high - self.low) * rng.random()


# ---------- multivariate ----------

class MultivariateGaussian:
    """
    Multivariate normal distribution sampled as ``mean + L @ z``.

    ``L`` is the lower Cholesky factor of the covariance and ``z`` a vector of
    standard normal values from a Box-Muller sampler. The density uses the
    same covariance. A diagonal covariance built with :meth:`from_stds` may
    hold zero variances, which makes the corresponding axis deterministic;
    such a singular distribution can be sampled but has no density.
    """

    def __init__(self, mean, cov):
        mean = np.asarray(mean, dtype=float).reshape(-1)
        cov = np.asarray(cov, dtype=float)
        n = mean.shape[0]
        if cov.shape != (n, n):
            raise InvalidParameter(
                f"covariance shape {cov.shape} does not match mean of length {n}")
        if not (np.all(np.isfinite(mean)) and np.all(np.isfinite(cov))):
            raise InvalidParameter("mean and covariance must be finite")
        if not np.allclose(cov, cov.T):
            raise InvalidParameter("covariance must be symmetric")
        try:
            chol = np.linalg.cholesky(cov)
        except np.linalg.LinAlgError as exc:
            raise InvalidParameter("covariance must be positive definite") from exc
        self._init(mean, cov, chol)

    @classmethod
    def from_stds(cls, mean, stds):
        """Independent axes: covariance diag(stds**2), Cholesky factor diag(stds)."""
        mean = np.asarray(mean, dtype=float).reshape(-1)
        stds = np.asarray(stds, dtype=float).reshape(-1)
        if mean.shape != stds.shape:
            raise InvalidParameter(
                f"mean of length {mean.size} and stds of length {stds.size} differ")
        if not (np.all(np.isfinite(mean)) and np.all(np.isfinite(stds))):
            raise InvalidParameter("mean and stds must be finite")
        if np.any(stds < 0.0):
            raise InvalidParameter(f"standard deviations must be non-negative, got {stds}")
        obj = cls.__new__(cls)
        obj._init(mean, np.diag(stds ** 2), np.diag(stds))
        return obj

    def _init(self, mean, cov, chol):
        self.n = mean.shape[0]
        self.mean = mean
        self.cov = cov
        self.chol = chol
        self._normal = Gaussian(0.0, 1.0)

    def __repr__(self):
        return f"MultivariateGaussian(mean={self.mean.tolist()}, cov={self.cov.tolist()})"

    def sample(self, rng):
        z = np.array([self._normal.sample(rng) for _ in range(self.n)])
        return self.mean + self.chol @ z

    def sample_tuple(self, rng) -> List[float]:
        return [float(v) for v in self.sample(rng)]

    def pdf(self, x):
        diag = np.diag(self.chol)
        if np.any(diag <= 0.0):
            raise InvalidParameter("density is undefined for a singular covariance")
        d = np.asarray(x, dtype=float).reshape(-1) - self.mean
        # solve L y = d, so d^T cov^-1 d = y^T y
        y = np.linalg.solve(self.chol, d)
        maha = float(y @ y)
        log_det = 2.0 * float(np.sum(np.log(diag)))
        return math.exp(-0.5 * (maha + log_det + self.n * math.log(2.0 * math.pi)))
