"""
Base class for isotopic distribution generators.

IsotopeDistributionGenerator :
    Computes neutral and charged isotopic distributions of a formula.

"""

from abc import ABC, abstractmethod
from typing import Union

from .distribution import ChargedIsotopicDistribution, IsotopicDistribution
from .formula import Formula


class IsotopeDistributionGenerator(ABC):
    """
    Base class to compute isotopic distributions from molecular formulas.

    Subclasses must implement `generate_isotopic_distribution`. The charged
    distribution is obtained from the neutral distribution, using the charge
    carrier and polarity defined in the generator.

    Attributes
    ----------
    charge_carrier : float
        Mass of the charge carrier.
    positive : bool
        Polarity used to create charged distributions.

    """

    def __init__(self, charge_carrier: float, positive: bool):
        self.charge_carrier = charge_carrier
        self.positive = positive

    @abstractmethod
    def generate_isotopic_distribution(self, formula: Union[Formula, str]) -> IsotopicDistribution:
        ...

    def generate_charged_isotopic_distribution(
        self, formula: Union[Formula, str], charge: int
    ) -> ChargedIsotopicDistribution:
        """
        Computes the isotopic distribution of a charged species.

        Parameters
        ----------
        formula : Formula or str
            Neutral formula.
        charge : int
            Absolute value of the charge.

        Returns
        -------
        ChargedIsotopicDistribution

        Raises
        ------
        ValueError
            If the charge is not a positive integer.

        """
        distribution = self.generate_isotopic_distribution(formula)
        return distribution.to_charged(charge, charge_carrier=self.charge_carrier, positive=self.positive)

    def __repr__(self):
        name = self.__class__.__name__
        params = ", ".join("{}={}".format(k, v) for k, v in self.get_params().items())
        return "{}({})".format(name, params)

    def get_params(self) -> dict:
        return {"charge_carrier": self.charge_carrier, "positive": self.positive}


def as_formula(formula: Union[Formula, str]) -> Formula:
    """
    Converts a formula string into a Formula and checks that the formula can be
    used to compute an isotopic distribution.

    Raises
    ------
    ValueError
        If the formula has negative coefficients.

    """
    if not isinstance(formula, Formula):
        formula = Formula(formula)
    if formula.has_negative_coefficients():
        msg = "Cannot compute the isotopic distribution of {} with negative coefficients."
        raise ValueError(msg.format(formula))
    return formula
