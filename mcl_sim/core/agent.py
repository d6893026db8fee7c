"""
Ground-truth robot: moves with the noisy motion model and senses with the camera
"""

import logging
from typing import List

from .distributions import spawn_rngs
from .errors import InvalidControl
from .geometry import Pose
from .motion import MotionConfig, MotionModel
from .observation import CameraConfig, Camera, Observation

logger = logging.getLogger(__name__)


class Agent:
    """
    The simulated robot.

    The agent owns two random streams derived from its seed, one for the
    motion noise and one for the camera, so the two pipelines do not shift
    each other's draws. Every call to :meth:`action` appends one element to
    ``pose_records`` and ``obs_records``; index 0 holds the initial pose and
    an empty observation list.
    """

    def __init__(self, seed, time_interval, init_pose, radius, nu, omega,
                 motion_config=None, camera_config=None):
        if not time_interval > 0.0:
            raise InvalidControl(f"time_interval must be positive, got {time_interval}")
        self.seed = seed
        self.time_interval = time_interval
        self.pose = init_pose
        self.radius = radius
        self.nu = nu
        self.omega = omega
        self.motion_rng, self.camera_rng = spawn_rngs(seed, 2)
        self.motion = MotionModel(self.motion_rng, motion_config or MotionConfig())
        self.camera = Camera(self.camera_rng, camera_config or CameraConfig())
        self.pose_records: List[Pose] = [init_pose]
        self.obs_records: List[List[Observation]] = [[]]

    def action(self, landmarks) -> List[Observation]:
        """Advance one tick and return what the camera sees from the new pose."""
        self.pose = self.motion.state_transition_with_noise(
            self.motion_rng, self.pose, self.nu, self.omega,
            self.radius, self.time_interval)
        self.pose_records.append(self.pose)
        obs = self.camera.observe(self.camera_rng, self.pose, landmarks)
        self.obs_records.append(obs)
        logger.debug("tick %d: pose %s, %d observations",
                     len(self.pose_records) - 1, self.pose, len(obs))
        return obs
