"""
Isotopic distributions using the Mercury algorithm.

The distribution of each element is raised to the number of atoms in the
formula by binary exponentiation, using discrete convolution to combine
distributions and pruning low abundance peaks after each step.

Rockwood, A., Orman, J., Dearden, D. (2004). Isotopic compositions and
accurate masses of single isotopic peaks. Journal of the American Society for
Mass Spectrometry 15(1), 12-21. https://dx.doi.org/10.1016/j.jasms.2003.08.011

"""

import logging
import numpy as np
from typing import Optional, Tuple, Union

from ._constants import MERCURY_LIMIT, PROTON
from .distribution import IsotopicDistribution
from .formula import Formula
from .generator import IsotopeDistributionGenerator, as_formula
from . import validation

logger = logging.getLogger(__file__)

Envelope = Tuple[np.ndarray, np.ndarray]


class Mercury(IsotopeDistributionGenerator):
    """
    Computes isotopic distributions by convolution of element distributions.

    Every peak that survives pruning is returned, including slots with zero
    abundance between non-zero peaks, so that the peak index is always the
    number of extra neutrons with respect to the first peak.

    Parameters
    ----------
    limit : float, default=1e-26
        Peaks at the ends of intermediate distributions with abundance lower
        than this value are removed.
    charge_carrier : float, default=PROTON
        Mass of the charge carrier used to compute charged distributions.
    positive : bool, default=True
        Polarity used to compute charged distributions.

    Examples
    --------
    >>> import isodist
    >>> mercury = isodist.Mercury()
    >>> dist = mercury.generate_isotopic_distribution("C8H13NO5")
    >>> round(dist.mass[0], 6)
    203.079373

    """

    def __init__(self, limit: float = MERCURY_LIMIT, charge_carrier: float = PROTON, positive: bool = True):
        params = {"limit": limit, "charge_carrier": charge_carrier, "positive": positive}
        validator = validation.ParameterValidator(validation.mercury_schema)
        params = validation.validate(params, validator)
        super().__init__(params["charge_carrier"], params["positive"])
        self.limit = params["limit"]

    def get_params(self) -> dict:
        params = super().get_params()
        params["limit"] = self.limit
        return params

    def generate_isotopic_distribution(self, formula: Union[Formula, str]) -> IsotopicDistribution:
        """
        Computes the isotopic distribution of a formula.

        Parameters
        ----------
        formula : Formula or str

        Returns
        -------
        IsotopicDistribution
            An empty distribution is returned for an empty formula.

        Raises
        ------
        ValueError
            If the formula has negative coefficients.

        """
        formula = as_formula(formula)
        M, p = _mercury(formula, self.limit)
        return IsotopicDistribution(M, p)


def _mercury(formula: Formula, limit: float) -> Envelope:
    msa = None  # type: Optional[Envelope]
    for element, n in formula:
        _, M, p = element.get_abundances()
        esa = M, p
        logger.debug("Adding %d atoms of %s.", n, element.symbol)
        while n > 0:
            if n & 1:
                msa = esa if msa is None else _convolve(msa, esa)
                msa = _prune(msa, limit)
            if n == 1:
                break
            esa = _prune(_convolve(esa, esa), limit)
            n >>= 1

    if msa is None:
        return np.array([]), np.array([])
    if not msa[0].size:
        logger.warning("All peaks in %s have abundances lower than %s.", formula, limit)
    return msa


def _convolve(a: Envelope, b: Envelope) -> Envelope:
    """
    Combines two distributions. The mass of each peak is the abundance-weighted
    mean of the mass of each combination. Peaks with zero abundance are kept,
    with mass equal to zero.

    """
    M1, p1 = a
    M2, p2 = b
    if (not p1.size) or (not p2.size):
        return np.array([]), np.array([])
    p = np.convolve(p1, p2)
    weighted = np.convolve(p1 * M1, p2) + np.convolve(p1, p2 * M2)
    M = np.zeros_like(p)
    mask = p > 0
    M[mask] = weighted[mask] / p[mask]
    return M, p


def _prune(a: Envelope, limit: float) -> Envelope:
    """
    Removes peaks at both ends of a distribution with abundance lower than
    `limit`.

    """
    M, p = a
    above = np.flatnonzero(p >= limit)
    if not above.size:
        return np.array([]), np.array([])
    start = above[0]
    end = above[-1] + 1
    return M[start:end], p[start:end]
