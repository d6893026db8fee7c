"""
Configuration file parser for the localization simulation
"""

import logging
import math
import os
from typing import Any, Dict, List

import yaml

from mcl_sim.core import (Agent, CameraConfig, Coord, Estimator, EstimatorConfig,
                          MotionConfig, Pose)

logger = logging.getLogger(__name__)

REQUIRED_SECTIONS = ['simulation', 'landmarks', 'agent', 'estimator']


class Config:
    """Configuration container with dot notation access"""

    def __init__(self, config_dict: Dict[str, Any]):
        for key, value in config_dict.items():
            if isinstance(value, dict):
                setattr(self, key, Config(value))
            else:
                setattr(self, key, value)

    def __repr__(self):
        return f"Config({self.__dict__})"

    def get(self, key: str, default: Any = None) -> Any:
        return getattr(self, key, default)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config back to dictionary"""
        result = {}
        for key, value in self.__dict__.items():
            if isinstance(value, Config):
                result[key] = value.to_dict()
            else:
                result[key] = value
        return result


def load_config(config_path: str = "config.yaml") -> Config:
    """
    Load configuration from YAML file

    Args:
        config_path: Path to configuration file

    Returns:
        Config object with dot notation access

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If a required section is missing
        yaml.YAMLError: If config file is invalid
    """
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r') as f:
        config_dict = yaml.safe_load(f)

    return config_from_dict(config_dict)


def config_from_dict(config_dict: Dict[str, Any]) -> Config:
    """Validate required sections and wrap a plain dictionary"""
    if not isinstance(config_dict, dict):
        raise ValueError("Configuration must be a mapping")
    for section in REQUIRED_SECTIONS:
        if section not in config_dict:
            raise ValueError(f"Missing required configuration section: {section}")
    return Config(config_dict)


def _section(config: Config, *path: str) -> Config:
    """Nested section, empty when absent so every key falls back to its default"""
    node = config
    for key in path:
        node = getattr(node, key, None) if isinstance(node, Config) else None
    return node if isinstance(node, Config) else Config({})


def _float(section: Config, key: str, default: float) -> float:
    # float() also accepts 'inf' written as a plain string
    return float(getattr(section, key, default))


def _radians(section: Config, key: str, default_deg: float = 0.0) -> float:
    return math.radians(_float(section, key, default_deg))


def _angle(section: Config, key: str, default: float) -> float:
    """Degrees under `key`, or `default` already in radians when absent"""
    return _radians(section, key) if hasattr(section, key) else default


def get_landmarks(config: Config) -> List[Coord]:
    """
    Landmark table in id order

    Args:
        config: Configuration object

    Returns:
        List of Coord
    """
    return [Coord(float(x), float(y)) for x, y in config.landmarks]


def get_tick_count(config: Config) -> int:
    """Number of ticks covered by the configured time span"""
    sim = _section(config, 'simulation')
    return int(round(_float(sim, 'time_span', 30.0) / _float(sim, 'time_interval', 0.1)))


def get_simulation_params(config: Config) -> Dict[str, Any]:
    """
    Extract the parameters shared by agent and estimator

    Args:
        config: Configuration object

    Returns:
        Dictionary of keyword arguments for Agent / Estimator
    """
    sim = _section(config, 'simulation')
    return {
        'time_interval': _float(sim, 'time_interval', 0.1),
        'init_pose': Pose.from_xytheta(_float(sim, 'initial_x', 0.0),
                                       _float(sim, 'initial_y', 0.0),
                                       _radians(sim, 'initial_theta_deg')),
        'radius': _float(sim, 'radius', 0.2),
        'nu': _float(sim, 'nu', 0.2),
        'omega': _radians(sim, 'omega_deg', 10.0),
    }


def get_motion_config(config: Config) -> MotionConfig:
    """Motion noise stages of the agent; absent keys keep the stage disabled"""
    m = _section(config, 'agent', 'motion')
    return MotionConfig(
        noise_per_meter=_float(m, 'noise_per_meter', 0.0),
        noise_std=_radians(m, 'noise_std_deg'),
        nu_bias_rate_std=_float(m, 'nu_bias_rate_std', 0.0),
        omega_bias_rate_std=_float(m, 'omega_bias_rate_std', 0.0),
        expected_stuck_time=_float(m, 'expected_stuck_time', math.inf),
        expected_escape_time=_float(m, 'expected_escape_time', 1.0),
        expected_kidnap_time=_float(m, 'expected_kidnap_time', math.inf),
        kidnap_width=_float(m, 'kidnap_width', 0.0),
        kidnap_height=_float(m, 'kidnap_height', 0.0),
        kidnap_theta_min=_angle(m, 'kidnap_theta_min_deg', 0.0),
        kidnap_theta_max=_angle(m, 'kidnap_theta_max_deg', 2.0 * math.pi),
    )


def get_camera_config(config: Config) -> CameraConfig:
    """Camera fault stages of the agent; absent keys keep the stage disabled"""
    c = _section(config, 'agent', 'camera')
    return CameraConfig(
        distance_noise_rate=_float(c, 'distance_noise_rate', 0.0),
        direction_noise=_radians(c, 'direction_noise_deg'),
        distance_bias_rate_std=_float(c, 'distance_bias_rate_std', 0.0),
        direction_bias_std=_radians(c, 'direction_bias_std_deg'),
        phantom_prob=_float(c, 'phantom_prob', 0.0),
        phantom_width=_float(c, 'phantom_width', 0.0),
        phantom_height=_float(c, 'phantom_height', 0.0),
        oversight_prob=_float(c, 'oversight_prob', 0.0),
        occlusion_prob=_float(c, 'occlusion_prob', 0.0),
    )


def get_estimator_config(config: Config) -> EstimatorConfig:
    """Particle filter parameters"""
    e = _section(config, 'estimator')
    defaults = EstimatorConfig()
    return EstimatorConfig(
        num_particles=int(getattr(e, 'num_particles', defaults.num_particles)),
        motion_noise_stds=tuple(float(v) for v in
                                getattr(e, 'motion_noise_stds', defaults.motion_noise_stds)),
        distance_rate_std=_float(e, 'distance_rate_std', defaults.distance_rate_std),
        direction_std=_float(e, 'direction_std', defaults.direction_std),
    )


def _seed(config: Config, section: str):
    return getattr(_section(config, section), 'seed', getattr(config, 'random_seed', 0))


def build_agent(config: Config) -> Agent:
    """Ground-truth agent described by the configuration"""
    return Agent(seed=_seed(config, 'agent'),
                 motion_config=get_motion_config(config),
                 camera_config=get_camera_config(config),
                 **get_simulation_params(config))


def build_estimator(config: Config) -> Estimator:
    """Particle filter described by the configuration"""
    return Estimator(seed=_seed(config, 'estimator'),
                     config=get_estimator_config(config),
                     **get_simulation_params(config))


def print_config(config: Config, indent: int = 0):
    """
    Log configuration, one key per line

    Args:
        config: Configuration object
        indent: Indentation level
    """
    for key, value in config.__dict__.items():
        if isinstance(value, Config):
            logger.info("%s%s:", "  " * indent, key)
            print_config(value, indent + 1)
        else:
            logger.info("%s%s: %s", "  " * indent, key, value)
