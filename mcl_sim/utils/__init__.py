"""
Utility functions for configuration parsing and tracking metrics
"""

from .config_parser import (load_config, config_from_dict, get_landmarks, get_tick_count,
                            get_simulation_params, get_motion_config, get_camera_config,
                            get_estimator_config, build_agent, build_estimator,
                            print_config, Config)
from .metrics import mean_pose, estimated_trajectory, tracking_errors, summarize_tracking

__all__ = [
    'load_config',
    'config_from_dict',
    'get_landmarks',
    'get_tick_count',
    'get_simulation_params',
    'get_motion_config',
    'get_camera_config',
    'get_estimator_config',
    'build_agent',
    'build_estimator',
    'print_config',
    'Config',
    'mean_pose',
    'estimated_trajectory',
    'tracking_errors',
    'summarize_tracking',
]
