"""
Piecewise-linear inverse-transform sampling from tabulated densities.

A density is evaluated at the midpoints of equal-width bins over a
declared domain. The table is read as a piecewise-linear density
between consecutive points (not a step histogram), matching
std::piecewise_linear_distribution.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Tuple

import numba
import numpy as np

from inelastic_mc.exceptions import DegenerateDistributionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class DiscretizedDistribution:
    """
    Tabulated density, built fresh for one sampling call.

    Attributes:
        x: Ordered sample points (bin midpoints)
        weights: Non-negative density values at x
        domain: (lo, hi) the table was built over
    """
    x: np.ndarray
    weights: np.ndarray
    domain: Tuple[float, float]

    def __post_init__(self):
        if self.x.shape != self.weights.shape or self.x.ndim != 1:
            raise ValueError(
                f"x and weights must be equal-length 1-D arrays, "
                f"got {self.x.shape} and {self.weights.shape}"
            )
        if self.x.size < 2:
            raise ValueError("A piecewise-linear table needs at least two points")

    @property
    def n_points(self) -> int:
        return self.x.size

    def segment_areas(self) -> np.ndarray:
        """Trapezoid area of each segment between consecutive points."""
        return 0.5 * (self.weights[1:] + self.weights[:-1]) * np.diff(self.x)

    def cdf(self, values: np.ndarray) -> np.ndarray:
        """
        Cumulative distribution of the piecewise-linear density.

        Used to compare samples against the table (e.g. KS tests).
        """
        values = np.atleast_1d(np.asarray(values, dtype=np.float64))
        areas = self.segment_areas()
        cumulative = np.concatenate(([0.0], np.cumsum(areas)))
        total = cumulative[-1]

        idx = np.clip(np.searchsorted(self.x, values, side='right') - 1, 0, self.n_points - 2)
        x0 = self.x[idx]
        h = self.x[idx + 1] - x0
        w0 = self.weights[idx]
        slope = (self.weights[idx + 1] - w0) / h
        s = np.clip(values - x0, 0.0, h)
        partial = w0 * s + 0.5 * slope * s * s

        result = (cumulative[idx] + partial) / total
        result[values <= self.x[0]] = 0.0
        result[values >= self.x[-1]] = 1.0
        return result


def bin_midpoints(lo: float, hi: float, n_bins: int) -> np.ndarray:
    """Midpoints of n_bins equal-width bins over [lo, hi]."""
    width = (hi - lo) / n_bins
    return lo + width * (np.arange(n_bins, dtype=np.float64) + 0.5)


def discretize(density: Callable[[np.ndarray], np.ndarray], lo: float, hi: float,
               n_bins: int) -> DiscretizedDistribution:
    """
    Tabulate a density over [lo, hi] at bin midpoints.

    Parameters:
        density: Vectorised density, maps an array of points to weights
        lo: Lower edge of the domain
        hi: Upper edge of the domain
        n_bins: Number of equal-width bins

    Returns:
        DiscretizedDistribution ready for sampling

    Raises:
        DegenerateDistributionError: If the table has no valid probability mass
    """
    if not (np.isfinite(lo) and np.isfinite(hi)) or hi <= lo:
        raise DegenerateDistributionError(f"Empty sampling domain [{lo}, {hi}]")

    x = bin_midpoints(lo, hi, n_bins)
    weights = np.asarray(density(x), dtype=np.float64)
    table = DiscretizedDistribution(x=x, weights=weights, domain=(lo, hi))
    check_weights(table)

    logger.debug("Built %d-point table over [%.6g, %.6g]", n_bins, lo, hi)
    return table


def check_weights(table: DiscretizedDistribution):
    """
    Reject tables that do not define a probability density.

    Raises:
        DegenerateDistributionError: On any NaN/inf or negative weight,
            or zero total mass
    """
    w = table.weights
    bad = ~np.isfinite(w) | (w < 0.0)
    if np.any(bad):
        first = int(np.argmax(bad))
        raise DegenerateDistributionError(
            f"{int(np.sum(bad))} of {w.size} weights are negative or non-finite "
            f"(first at x={table.x[first]:.6g}: {w[first]!r})"
        )
    if not np.sum(table.segment_areas()) > 0.0:
        raise DegenerateDistributionError("Distribution has zero total probability mass")


@numba.njit(cache=True)
def piecewise_linear_inverse(x: np.ndarray, weights: np.ndarray, u: float) -> float:
    """
    Invert the cumulative piecewise-linear density at u in [0, 1).

    Parameters:
        x: Ordered sample points
        weights: Non-negative density values at x (validated by caller)
        u: Uniform variate in [0, 1)

    Returns:
        Sampled value in [x[0], x[-1]]
    """
    n = x.shape[0]
    cumulative = np.empty(n, dtype=np.float64)
    cumulative[0] = 0.0
    for i in range(n - 1):
        cumulative[i + 1] = cumulative[i] + 0.5 * (weights[i] + weights[i + 1]) * (x[i + 1] - x[i])

    target = u * cumulative[n - 1]
    # side='right' never lands on a zero-area segment
    seg = np.searchsorted(cumulative, target, side='right') - 1
    if seg < 0:
        seg = 0
    elif seg > n - 2:
        seg = n - 2

    h = x[seg + 1] - x[seg]
    w0 = weights[seg]
    k = (weights[seg + 1] - w0) / h
    r = target - cumulative[seg]
    if r < 0.0:
        r = 0.0

    # Root of w0 s + k s²/2 = r, in a form stable for k -> 0
    denom = w0 + np.sqrt(max(w0 * w0 + 2.0 * k * r, 0.0))
    if denom <= 0.0:
        s = 0.0
    else:
        s = 2.0 * r / denom
    if s > h:
        s = h
    return x[seg] + s


def sample(table: DiscretizedDistribution, rng: np.random.Generator) -> float:
    """Draw one variate from a validated table."""
    return float(piecewise_linear_inverse(table.x, table.weights, rng.random()))


def sample_density(density: Callable[[np.ndarray], np.ndarray], lo: float, hi: float,
                   n_bins: int, rng: np.random.Generator) -> float:
    """Discretize a density over [lo, hi] and draw one variate from it."""
    return sample(discretize(density, lo, hi, n_bins), rng)
