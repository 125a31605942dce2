"""
Isotopic distributions using the BRAIN algorithm.

The aggregated isotopic distribution is the polynomial obtained as the product
of the isotope polynomials of each atom in the formula. Instead of expanding
the product, the power sums of the roots of each element polynomial are added
and the coefficients of the product are recovered using Newton's identities.

Claesen, J., Dittwald, P., Burzykowski, T., Valkenborg, D. (2012). An
Efficient Method to Calculate the Aggregated Isotopic Distribution and Exact
Center-Masses. Journal of The American Society for Mass Spectrometry 23(4),
753-763. https://dx.doi.org/10.1007/s13361-011-0326-2

Dittwald, P., Valkenborg, D. (2014). BRAIN 2.0: time and memory complexity
improvements in the algorithm for calculating the isotope distribution.
Journal of the American Society for Mass Spectrometry 25(4), 588-94.
https://dx.doi.org/10.1007/s13361-013-0796-5

"""

import logging
import threading
import numpy as np
from typing import Dict, NamedTuple, Tuple, Union

from ._constants import MIN_CENTER_MASS, MIN_NPEAKS, PROTON
from .atoms import Element
from .distribution import IsotopicDistribution
from .formula import Formula
from .generator import IsotopeDistributionGenerator, as_formula
from . import validation

logger = logging.getLogger(__file__)


class Brain(IsotopeDistributionGenerator):
    """
    Computes aggregated isotopic distributions and exact center masses.

    Peak ``k`` groups all isotopic combinations with ``k`` extra neutrons with
    respect to the lightest combination. Peaks with zero probability or with a
    center mass lower than one are removed, so the position of a peak in the
    result is not ``k`` when the formula has empty slots. Abundances are
    normalized to sum one.

    Element coefficients are cached in the instance. The cache is guarded by
    a lock, so an instance can be shared between threads.

    Parameters
    ----------
    npeaks : int or None, default=None
        Number of peaks to compute. If ``None``, the number of peaks is
        estimated from the maximum number of extra neutrons in the formula
        as ``max(3, floor(sqrt(max_variants)) - 2) + 1``.
    charge_carrier : float, default=PROTON
        Mass of the charge carrier used to compute charged distributions.
    positive : bool, default=True
        Polarity used to compute charged distributions.

    Examples
    --------
    >>> import isodist
    >>> brain = isodist.Brain()
    >>> dist = brain.generate_isotopic_distribution("C8H13NO5")
    >>> len(dist)
    4

    """

    def __init__(self, npeaks: Union[int, None] = None, charge_carrier: float = PROTON, positive: bool = True):
        params = {"npeaks": npeaks, "charge_carrier": charge_carrier, "positive": positive}
        validator = validation.ParameterValidator(validation.brain_schema)
        params = validation.validate(params, validator)
        super().__init__(params["charge_carrier"], params["positive"])
        self.npeaks = params["npeaks"]
        self._coefficients = dict()  # type: Dict[Element, _ElementCoefficients]
        self._lock = threading.Lock()

    def get_params(self) -> dict:
        params = super().get_params()
        params["npeaks"] = self.npeaks
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
            An empty distribution is returned, and a warning is logged, if
            the probabilities overflow. This happens for formulas with
            hundreds of thousands of atoms.

        Raises
        ------
        ValueError
            If the formula has negative coefficients.
        InvalidElement
            If an element in the formula does not have isotopes with natural
            abundance.

        """
        formula = as_formula(formula)
        order = self.get_order(formula)
        logger.debug("Computing %d peaks for %s.", order + 1, formula)
        coefficients = {e: self._get_coefficients(e, order) for e, _ in formula}

        phi = _phi_values(formula, coefficients, order)
        with np.errstate(over="ignore", invalid="ignore"):
            probability = _probability(phi)
            if not np.isfinite(probability).all():
                msg = "Probabilities of %s overflow with %d peaks. Returning an empty distribution."
                logger.warning(msg, formula, order + 1)
                return IsotopicDistribution([], [])
            center_mass = _center_mass(formula, coefficients, phi, probability)

        keep = np.isfinite(center_mass) & (center_mass >= MIN_CENTER_MASS)
        mass = center_mass[keep]
        abundance = probability[keep]
        total = abundance.sum()
        if total > 0:
            abundance = abundance / total
        return IsotopicDistribution(mass, abundance)

    def get_order(self, formula: Formula) -> int:
        """
        Computes the maximum aggregate isotope number used for a formula.

        """
        max_variants = formula.get_max_variants()
        if self.npeaks is None:
            order = max(MIN_NPEAKS, int(np.sqrt(max_variants)) - 2)
        else:
            order = self.npeaks - 1
        # peaks above max_variants have zero probability
        return min(order, max_variants)

    def _get_coefficients(self, element: Element, order: int) -> "_ElementCoefficients":
        with self._lock:
            coefficients = self._coefficients.get(element)
        if (coefficients is None) or (coefficients.order < order):
            coefficients = _make_element_coefficients(element, order)
            with self._lock:
                current = self._coefficients.get(element)
                if (current is None) or (current.order < coefficients.order):
                    self._coefficients[element] = coefficients
        return coefficients


class _ElementCoefficients(NamedTuple):
    """
    Power sums of an element polynomial, up to `order`.

    `power_sum` is computed from the isotope abundances and `mass_power_sum`
    from the isotope abundances weighted by their exact mass. `base_mass` is
    the mass of the lightest isotope with natural abundance.

    """

    order: int
    base_mass: float
    power_sum: np.ndarray
    mass_power_sum: np.ndarray


def _make_element_coefficients(element: Element, order: int) -> _ElementCoefficients:
    mmi = element.get_mmi()
    max_shift = element.get_max_neutron_shift()
    m, M, p = element.get_abundances()
    start = int(np.flatnonzero(m == mmi.a)[0])
    end = start + max_shift + 1
    M = M[start:end]
    p = p[start:end]

    power_sum = _element_power_sum(p, order)
    mass_power_sum = _element_power_sum(p * M, order)
    return _ElementCoefficients(order, mmi.m, power_sum, mass_power_sum)


def _element_power_sum(coefficients: np.ndarray, order: int) -> np.ndarray:
    esp = np.zeros(order + 1)
    size = min(coefficients.size, order + 1)
    esp[:size] = vietes(coefficients)[:size]
    power_sum, _ = newton(np.zeros(0), esp)
    power_sum.setflags(write=False)
    return power_sum


def _phi_values(formula: Formula, coefficients: Dict[Element, _ElementCoefficients], order: int) -> np.ndarray:
    """
    Computes the power sums of the aggregated polynomial.

    """
    phi = np.zeros(order + 1)
    for element, count in formula:
        phi += count * coefficients[element].power_sum[: order + 1]
    return phi


def _probability(phi: np.ndarray) -> np.ndarray:
    """
    Computes the probability of each aggregate isotope number, relative to
    the probability of the lightest combination.

    """
    _, esp = newton(phi, np.zeros(0))
    return _alternate_sign(esp)


def _center_mass(
    formula: Formula,
    coefficients: Dict[Element, _ElementCoefficients],
    phi: np.ndarray,
    probability: np.ndarray,
) -> np.ndarray:
    """
    Computes the center mass of each aggregate isotope number. Probabilities
    that are zero within round-off error have a center mass equal to zero.

    For each element, one atom polynomial is replaced by the polynomial with
    mass-weighted coefficients to obtain the mass contribution of the element.

    """
    order = phi.size - 1
    weighted_mass = np.zeros(order + 1)
    for element, count in formula:
        element_coefficients = coefficients[element]
        modified_phi = (
            phi
            - element_coefficients.power_sum[: order + 1]
            + element_coefficients.mass_power_sum[: order + 1]
        )
        _, esp = newton(modified_phi, np.zeros(0))
        weighted_mass += count * element_coefficients.base_mass * _alternate_sign(esp)

    center_mass = np.zeros(order + 1)
    mask = probability > np.finfo(float).eps * probability.max()
    center_mass[mask] = weighted_mass[mask] / probability[mask]
    return center_mass


def vietes(coefficients: np.ndarray) -> np.ndarray:
    """
    Computes the elementary symmetric polynomials of the roots of a polynomial
    using Viete's formula.

    Parameters
    ----------
    coefficients : array
        Coefficients of the polynomial, sorted from the highest to the lowest
        degree term. The first coefficient must be non-zero.

    Returns
    -------
    esp : array
        Elementary symmetric polynomials, starting from the zero order
        polynomial.

    Examples
    --------
    Roots of x ** 2 - 3 * x + 2 are 1 and 2:

    >>> vietes(np.array([1.0, -3.0, 2.0]))
    array([1., 3., 2.])

    """
    coefficients = np.asarray(coefficients, dtype=float)
    sign = np.ones(coefficients.size)
    sign[1::2] = -1
    return sign * coefficients / coefficients[0]


def newton(power_sum: np.ndarray, esp: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Uses Newton's identities to extend the shortest sequence between power sums
    and elementary symmetric polynomials to the length of the longest one.

    Both sequences start at order zero. The zero order power sum is not used
    and is set to zero.

    Parameters
    ----------
    power_sum : array
    esp : array
        Elementary symmetric polynomials.

    Returns
    -------
    power_sum : array
    esp : array
        New arrays with the same length.

    """
    power_sum = np.asarray(power_sum, dtype=float)
    esp = np.asarray(esp, dtype=float)
    size = max(power_sum.size, esp.size)
    sign = np.ones(size)
    sign[1::2] = -1

    if power_sum.size > esp.size:
        begin = esp.size
        esp = np.concatenate((esp, np.zeros(size - begin)))
        for k in range(begin, size):
            if k == 0:
                esp[k] = 1.0
            else:
                esp[k] = np.dot(sign[:k] * power_sum[1 : k + 1], esp[k - 1 :: -1]) / k
    elif esp.size > power_sum.size:
        begin = power_sum.size
        power_sum = np.concatenate((power_sum, np.zeros(size - begin)))
        for k in range(begin, size):
            if k == 0:
                power_sum[k] = 0.0
            else:
                tail = np.dot(sign[1:k] * esp[k - 1 : 0 : -1], power_sum[1:k])
                power_sum[k] = sign[k - 1] * (k * esp[k] + tail)
    return power_sum, esp


def _alternate_sign(x: np.ndarray) -> np.ndarray:
    sign = np.ones(x.size)
    sign[1::2] = -1
    return sign * x
