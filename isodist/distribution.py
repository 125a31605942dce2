"""
Containers for isotopic distributions and mass to m/z conversion.

Objects
-------
- IsotopicDistribution
- ChargedIsotopicDistribution

Functions
---------
- mass_to_mz
- mz_to_mass

"""

import numpy as np
from typing import Iterator, Sequence, Tuple, Union
from ._constants import PROTON
from . import validation

Array1D = Union[Sequence[float], np.ndarray]


def mass_to_mz(mass, charge: int, positive: bool = True, charge_carrier: float = PROTON):
    """
    Converts neutral masses to m/z values.

    Parameters
    ----------
    mass : float or array
        Neutral mass.
    charge : int
        Absolute value of the charge. Must be a positive integer.
    positive : bool, default=True
        Polarity. If ``True``, one charge carrier is added per unit of charge,
        otherwise it is removed.
    charge_carrier : float, default=PROTON
        Mass of the charge carrier.

    Returns
    -------
    mz : float or array

    Raises
    ------
    ValueError
        If the charge is not a positive integer.

    Examples
    --------
    >>> round(mass_to_mz(16941.9678834, 10), 7)
    1695.2040648

    """
    _validate_charge(charge)
    if positive:
        return mass / charge + charge_carrier
    return mass / charge - charge_carrier


def mz_to_mass(mz, charge: int, positive: bool = True, charge_carrier: float = PROTON):
    """
    Converts m/z values to neutral masses. Inverse of :func:`mass_to_mz`.

    """
    _validate_charge(charge)
    if positive:
        return (mz - charge_carrier) * charge
    return (mz + charge_carrier) * charge


class IsotopicDistribution:
    """
    Neutral isotopic distribution.

    Peaks are sorted by the aggregate isotope number, i.e. the number of extra
    neutrons with respect to the lightest isotopic combination. The position
    of a peak is its aggregate isotope number only if zero abundance slots are
    kept: Mercury keeps them, with a mass of zero, while Brain removes them
    (e.g. Cl2 has five slots in Mercury and two peaks in Brain).

    Attributes
    ----------
    mass : array
        Centroid mass of each peak.
    abundance : array
        Abundance of each peak.

    Raises
    ------
    ValueError
        If ``mass`` and ``abundance`` have different lengths or if
        ``abundance`` contains negative values.

    """

    def __init__(self, mass: Array1D, abundance: Array1D):
        self.mass = _as_read_only_array(mass)
        self.abundance = _as_read_only_array(abundance)
        if self.mass.size != self.abundance.size:
            msg = "The mass and abundance arrays must have the same length. Got {} and {}."
            raise ValueError(msg.format(self.mass.size, self.abundance.size))
        if (self.abundance < 0).any():
            msg = "Abundances must be non-negative."
            raise ValueError(msg)

    def __len__(self) -> int:
        return self.mass.size

    def __iter__(self) -> Iterator[Tuple[float, float]]:
        return zip(self.mass.tolist(), self.abundance.tolist())

    def __repr__(self):
        return "IsotopicDistribution(n_peaks={})".format(len(self))

    def get_average_mass(self) -> float:
        """
        Computes the abundance-weighted mean mass of the distribution.

        """
        total = self.abundance.sum()
        if total <= 0:
            msg = "Cannot compute the average mass of an empty distribution."
            raise ValueError(msg)
        return float(np.dot(self.mass, self.abundance) / total)

    def get_most_abundant_index(self) -> int:
        if not len(self):
            msg = "The distribution is empty."
            raise ValueError(msg)
        return int(np.argmax(self.abundance))

    def to_charged(
        self,
        charge: int,
        charge_carrier: float = PROTON,
        positive: bool = True,
    ) -> "ChargedIsotopicDistribution":
        """
        Creates a charged distribution. Abundances are kept and masses are
        converted to m/z.

        Parameters
        ----------
        charge : int
            Absolute value of the charge. Must be a positive integer.
        charge_carrier : float, default=PROTON
            Mass of the charge carrier.
        positive : bool, default=True
            Polarity of the charge.

        Returns
        -------
        ChargedIsotopicDistribution

        Raises
        ------
        ValueError
            If the charge is not a positive integer.

        """
        mz = mass_to_mz(self.mass, charge, positive=positive, charge_carrier=charge_carrier)
        return ChargedIsotopicDistribution(mz, self.abundance, charge)


class ChargedIsotopicDistribution:
    """
    Isotopic distribution of a charged species.

    Attributes
    ----------
    mz : array
        m/z of each peak.
    abundance : array
        Abundance of each peak.
    charge : int

    """

    def __init__(self, mz: Array1D, abundance: Array1D, charge: int):
        _validate_charge(charge)
        self.mz = _as_read_only_array(mz)
        self.abundance = _as_read_only_array(abundance)
        self.charge = int(charge)
        if self.mz.size != self.abundance.size:
            msg = "The m/z and abundance arrays must have the same length. Got {} and {}."
            raise ValueError(msg.format(self.mz.size, self.abundance.size))

    def __len__(self) -> int:
        return self.mz.size

    def __repr__(self):
        return "ChargedIsotopicDistribution(n_peaks={}, charge={})".format(len(self), self.charge)

    @property
    def first_mz(self) -> float:
        return float(self.mz[0])

    @property
    def last_mz(self) -> float:
        return float(self.mz[-1])


def _as_read_only_array(x: Array1D) -> np.ndarray:
    x = np.array(x, dtype=float).reshape(-1)
    x.setflags(write=False)
    return x


def _validate_charge(charge: int):
    validator = validation.ParameterValidator(validation.charge_schema)
    validation.validate({"charge": charge}, validator)
