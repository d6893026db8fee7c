"""
Unit tests for the ground-truth agent
"""

import math
import unittest

from mcl_sim.core import (Agent, CameraConfig, Coord, InvalidControl, MotionConfig, Pose,
                          state_transition)

LANDMARKS = [Coord(-4.0, 2.0), Coord(2.0, -3.0), Coord(3.0, 3.0)]
NOISY_MOTION = MotionConfig(noise_per_meter=5.0, noise_std=math.pi / 60,
                            nu_bias_rate_std=0.1, omega_bias_rate_std=0.1)
NOISY_CAMERA = CameraConfig(distance_noise_rate=0.1, direction_noise=math.pi / 90,
                            phantom_prob=0.1, phantom_width=10.0, phantom_height=10.0,
                            oversight_prob=0.1, occlusion_prob=0.1)


def make_agent(seed=0, motion=None, camera=None):
    return Agent(seed, 0.1, Pose(Coord(0.0, 0.0), 0.0), 0.2, 0.2, math.radians(10),
                 motion_config=motion, camera_config=camera)


class TestAgent(unittest.TestCase):

    def test_initial_records(self):
        """Index 0 holds the initial pose and no observation"""
        agent = make_agent()
        self.assertEqual(agent.pose_records, [Pose(Coord(0.0, 0.0), 0.0)])
        self.assertEqual(agent.obs_records, [[]])

    def test_records_grow_each_tick(self):
        agent = make_agent()
        for _ in range(5):
            obs = agent.action(LANDMARKS)
        self.assertEqual(len(agent.pose_records), 6)
        self.assertEqual(len(agent.obs_records), 6)
        self.assertEqual(agent.obs_records[-1], obs)
        self.assertEqual(agent.pose_records[-1], agent.pose)

    def test_noiseless_agent_follows_kinematics(self):
        agent = make_agent()
        pose = agent.pose
        for _ in range(30):
            agent.action(LANDMARKS)
            pose = state_transition(pose, 0.2, math.radians(10), 0.1)
            self.assertEqual(agent.pose, pose)

    def test_observation_ids_are_subset(self):
        agent = make_agent(motion=NOISY_MOTION, camera=NOISY_CAMERA)
        for _ in range(100):
            ids = [o.id for o in agent.action(LANDMARKS)]
            self.assertTrue(set(ids) <= {0, 1, 2})
            self.assertEqual(ids, sorted(set(ids)))

    def test_same_seed_same_history(self):
        a = make_agent(3, NOISY_MOTION, NOISY_CAMERA)
        b = make_agent(3, NOISY_MOTION, NOISY_CAMERA)
        for _ in range(100):
            a.action(LANDMARKS)
            b.action(LANDMARKS)
        self.assertEqual(a.pose_records, b.pose_records)
        self.assertEqual(a.obs_records, b.obs_records)

    def test_different_seed_different_history(self):
        a = make_agent(3, NOISY_MOTION, NOISY_CAMERA)
        b = make_agent(4, NOISY_MOTION, NOISY_CAMERA)
        for _ in range(50):
            a.action(LANDMARKS)
            b.action(LANDMARKS)
        self.assertNotEqual(a.pose_records, b.pose_records)

    def test_invalid_time_interval(self):
        with self.assertRaises(InvalidControl):
            Agent(0, 0.0, Pose(Coord(0.0, 0.0), 0.0), 0.2, 0.2, 0.1)


if __name__ == '__main__':
    unittest.main()
