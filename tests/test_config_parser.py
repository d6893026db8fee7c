"""
Unit tests for configuration loading and the agent/estimator factories
"""

import math
import os
import tempfile
import unittest

import yaml

from mcl_sim.core import Agent, CameraConfig, Coord, Estimator, MotionConfig
from mcl_sim.utils import (Config, build_agent, build_estimator, config_from_dict,
                           get_camera_config, get_estimator_config, get_landmarks,
                           get_motion_config, get_simulation_params, get_tick_count,
                           load_config, print_config)

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
MINIMAL = {
    'simulation': {'time_interval': 0.1, 'time_span': 2.0},
    'landmarks': [[1.0, 2.0]],
    'agent': {},
    'estimator': {},
}


class TestLoadConfig(unittest.TestCase):

    def write(self, data):
        fd, path = tempfile.mkstemp(suffix='.yaml')
        with os.fdopen(fd, 'w') as f:
            yaml.safe_dump(data, f)
        self.addCleanup(os.remove, path)
        return path

    def test_reference_config(self):
        config = load_config(os.path.join(ROOT, 'config.yaml'))
        self.assertEqual(get_landmarks(config),
                         [Coord(-4.0, 2.0), Coord(2.0, -3.0), Coord(3.0, 3.0)])
        self.assertEqual(get_tick_count(config), 1000)
        self.assertEqual(get_motion_config(config).expected_stuck_time, math.inf)
        self.assertAlmostEqual(get_simulation_params(config)['omega'], math.radians(10))

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_config(os.path.join(ROOT, 'no_such_config.yaml'))

    def test_missing_section(self):
        data = dict(MINIMAL)
        del data['estimator']
        with self.assertRaises(ValueError):
            load_config(self.write(data))

    def test_dot_access(self):
        config = load_config(self.write(MINIMAL))
        self.assertIsInstance(config.simulation, Config)
        self.assertEqual(config.simulation.time_span, 2.0)
        self.assertEqual(config.to_dict(), MINIMAL)


class TestFactories(unittest.TestCase):

    def setUp(self):
        self.config = config_from_dict(MINIMAL)

    def test_absent_stages_are_disabled(self):
        self.assertEqual(get_motion_config(self.config), MotionConfig())
        self.assertEqual(get_camera_config(self.config), CameraConfig())

    def test_degrees_are_converted(self):
        data = dict(MINIMAL, agent={'camera': {'direction_noise_deg': 2.0},
                                    'motion': {'noise_std_deg': 3.0}})
        config = config_from_dict(data)
        self.assertAlmostEqual(get_camera_config(config).direction_noise, math.radians(2.0))
        self.assertAlmostEqual(get_motion_config(config).noise_std, math.radians(3.0))

    def test_inf_as_string(self):
        data = dict(MINIMAL, agent={'motion': {'expected_kidnap_time': 'inf'}})
        self.assertEqual(get_motion_config(config_from_dict(data)).expected_kidnap_time, math.inf)

    def test_kidnap_heading_range_in_degrees(self):
        data = dict(MINIMAL, agent={'motion': {'kidnap_theta_min_deg': -90.0,
                                               'kidnap_theta_max_deg': 90.0}})
        motion = get_motion_config(config_from_dict(data))
        self.assertAlmostEqual(motion.kidnap_theta_min, -math.pi / 2)
        self.assertAlmostEqual(motion.kidnap_theta_max, math.pi / 2)

    def test_keys_named_like_methods(self):
        """Keys called get or to_dict do not break the section lookups"""
        data = dict(MINIMAL, estimator={'get': 1, 'to_dict': 2, 'num_particles': 9},
                    agent={'get': {'motion': 0}, 'motion': {'noise_per_meter': 5.0}})
        config = config_from_dict(data)
        self.assertEqual(get_estimator_config(config).num_particles, 9)
        self.assertEqual(get_motion_config(config).noise_per_meter, 5.0)
        self.assertEqual(len(build_estimator(config).particles), 9)

    def test_estimator_defaults(self):
        e = get_estimator_config(self.config)
        self.assertEqual(e.num_particles, 100)
        self.assertEqual(e.motion_noise_stds, (0.19, 0.001, 0.13, 0.2))

    def test_build_and_run(self):
        config = config_from_dict(dict(MINIMAL, estimator={'num_particles': 7, 'seed': 3}))
        agent = build_agent(config)
        estimator = build_estimator(config)
        self.assertIsInstance(agent, Agent)
        self.assertIsInstance(estimator, Estimator)
        self.assertEqual(len(estimator.particles), 7)
        landmarks = get_landmarks(config)
        for _ in range(get_tick_count(config)):
            estimator.decision(agent.action(landmarks), landmarks)
        self.assertEqual(len(agent.pose_records), 21)
        self.assertEqual(len(estimator.pose_records), 21)

    def test_print_config_logs(self):
        with self.assertLogs('mcl_sim.utils.config_parser', level='INFO') as logs:
            print_config(self.config)
        self.assertTrue(any('time_span: 2.0' in line for line in logs.output))


if __name__ == '__main__':
    unittest.main()
