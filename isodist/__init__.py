"""
isodist
=======

Isotopic distributions of molecular formulas.

Provides:

1. A PeriodicTable with element and isotope information.
2. A Formula object that maps elements to formula coefficients.
3. Two isotopic distribution generators: Mercury, based on the convolution of
   element distributions, and Brain, based on the power sums of the element
   isotope polynomials.

Objects
-------
- PeriodicTable
- Formula
- Mercury
- Brain
- IsotopicDistribution
- ChargedIsotopicDistribution

Functions
---------
- mass_to_mz
- mz_to_mass

Constants
---------
- EM : electron mass
- PROTON : proton mass

"""

from ._constants import EM, PROTON
from .atoms import Element, InvalidElement, InvalidIsotope, Isotope, PeriodicTable
from .brain import Brain
from .distribution import (
    ChargedIsotopicDistribution,
    IsotopicDistribution,
    mass_to_mz,
    mz_to_mass,
)
from .formula import Formula, InvalidFormula
from .generator import IsotopeDistributionGenerator
from .mercury import Mercury
