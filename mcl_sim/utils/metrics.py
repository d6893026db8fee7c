"""
Tracking metrics computed from the agent and estimator history records.

The estimate of a tick is the mean of that tick's particle poses, with the
heading averaged on the unit circle. Errors are reported per tick and as
summary statistics.
"""

import logging
from typing import Dict, List, Sequence

import numpy as np

from mcl_sim.core import Pose

logger = logging.getLogger(__name__)


def mean_pose(poses: Sequence[Pose], weights: Sequence[float] = None) -> Pose:
    """Weighted mean pose, heading via circular mean. Uniform weights by default."""
    xs = np.array([p.x for p in poses])
    ys = np.array([p.y for p in poses])
    thetas = np.array([p.theta for p in poses])
    w = np.ones(len(poses)) if weights is None else np.asarray(weights, dtype=float)
    w = w / w.sum()
    theta = np.arctan2(w @ np.sin(thetas), w @ np.cos(thetas))
    return Pose.from_xytheta(w @ xs, w @ ys, theta)


def estimated_trajectory(particle_pose_records: Sequence[Sequence[Pose]]) -> List[Pose]:
    """One mean pose per tick of the particle pose history"""
    return [mean_pose(poses) for poses in particle_pose_records]


def tracking_errors(truth: Sequence[Pose], estimate: Sequence[Pose]) -> Dict[str, np.ndarray]:
    """
    Per-tick position error [m] and absolute heading error [rad].

    Raises
    ------
    ValueError
        If the two trajectories have different lengths.
    """
    if len(truth) != len(estimate):
        raise ValueError(
            f"trajectory lengths differ: {len(truth)} truth vs {len(estimate)} estimate")
    gt = np.array([[p.x, p.y, p.theta] for p in truth], dtype=float).reshape(-1, 3)
    est = np.array([[p.x, p.y, p.theta] for p in estimate], dtype=float).reshape(-1, 3)
    pos_error = np.hypot(est[:, 0] - gt[:, 0], est[:, 1] - gt[:, 1])
    # wrap the heading difference into [0, pi]
    theta_error = np.abs(np.angle(np.exp(1j * (est[:, 2] - gt[:, 2]))))
    return {'position': pos_error, 'theta': theta_error}


def summarize_tracking(agent, estimator, verbose: bool = True) -> Dict[str, float]:
    """
    Summary statistics of how well the estimator followed the agent.

    Returns
    -------
    dict
        mean/max position error, position RMSE (ATE) and mean/max heading
        error in degrees.
    """
    errors = tracking_errors(agent.pose_records,
                             estimated_trajectory(estimator.pose_records))
    pos, theta = errors['position'], np.degrees(errors['theta'])
    stats = {
        'mean_position_error': float(np.mean(pos)),
        'max_position_error': float(np.max(pos)),
        'ate_rmse': float(np.sqrt(np.mean(pos ** 2))),
        'mean_theta_error_deg': float(np.mean(theta)),
        'max_theta_error_deg': float(np.max(theta)),
    }
    if verbose:
        logger.info("=== Tracking Performance ===")
        logger.info("Mean position error: %.3f m", stats['mean_position_error'])
        logger.info("Max position error: %.3f m", stats['max_position_error'])
        logger.info("ATE (RMSE): %.3f m", stats['ate_rmse'])
        logger.info("Mean theta error: %.2f deg", stats['mean_theta_error_deg'])
        logger.info("Max theta error: %.2f deg", stats['max_theta_error_deg'])
    return stats
