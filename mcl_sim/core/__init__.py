"""
Core Monte Carlo localization components
"""

from .errors import MCLError, InvalidParameter, InvalidControl
from .geometry import Coord, Pose, normalize_angle
from .distributions import (Gaussian, Exponential, Uniform, MultivariateGaussian,
                            make_rng, spawn_rngs)
from .motion import MotionConfig, MotionModel, state_transition
from .observation import CameraConfig, Camera, Observation, observe_landmark
from .agent import Agent
from .particle import Particle
from .particle_filter import EstimatorConfig, Estimator, systematic_resample

__all__ = [
    'MCLError', 'InvalidParameter', 'InvalidControl',
    'Coord', 'Pose', 'normalize_angle',
    'Gaussian', 'Exponential', 'Uniform', 'MultivariateGaussian', 'make_rng', 'spawn_rngs',
    'MotionConfig', 'MotionModel', 'state_transition',
    'CameraConfig', 'Camera', 'Observation', 'observe_landmark',
    'Agent', 'Particle',
    'EstimatorConfig', 'Estimator', 'systematic_resample',
]
