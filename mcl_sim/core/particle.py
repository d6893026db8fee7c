import math

from .distributions import MultivariateGaussian
from .motion import state_transition
from .observation import observe_landmark


# ---------- Particle class ----------
class Particle:
    """A pose hypothesis and its importance weight."""

    __slots__ = ("pose", "weight")

    def __init__(self, pose, weight=1.0):
        self.pose = pose
        self.weight = weight

    def __repr__(self):
        return f"Particle(pose={self.pose!r}, weight={self.weight})"

    def copy(self):
        # poses are immutable, a shallow copy is enough
        return Particle(self.pose, self.weight)

    def sample_motion(self, rng, noise_pdf, prev_nu, prev_omega, dt):
        """
        Propagate the pose with a noised version of the previous command.

        noise_pdf draws (nn, no, on, oo); the nu noise grows with the square
        root of the travelled distance rate and the omega noise with the
        turning rate, like the odometry error of a real drive.
        """
        nn, no, on, oo = noise_pdf.sample_tuple(rng)
        nu_term = math.sqrt(abs(prev_nu) / dt)
        omega_term = abs(prev_omega) / dt
        noised_nu = prev_nu + nn * nu_term + no * omega_term
        noised_omega = prev_omega + on * nu_term + oo * omega_term
        self.pose = state_transition(self.pose, noised_nu, noised_omega, dt)

    def update_weight(self, observations, landmarks, distance_rate_std, direction_std):
        """
        Multiply the weight by the density of every observation given this pose.

        The expectation is computed against the true landmark table, so a
        phantom detection scores badly on purpose. A pose sitting on the
        landmark has no distance spread and gets zero weight.
        """
        for obs in observations:
            expected = observe_landmark(self.pose, landmarks[obs.id], obs.id)
            if not distance_rate_std * expected.dist > 0.0:
                self.weight = 0.0
                break
            pdf = MultivariateGaussian.from_stds(
                [expected.dist, expected.angle],
                [distance_rate_std * expected.dist, direction_std])
            self.weight *= pdf.pdf([obs.dist, obs.angle])
        return self.weight
