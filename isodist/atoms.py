"""
Tools for working with Isotopes and Elements.

Objects
-------
- Element
- Isotope
- PeriodicTable

Exceptions
----------
- InvalidElement
- InvalidIsotope

"""
import json
import numpy as np
import os.path
from string import digits
from typing import Dict, Tuple, Union


class Isotope:
    """
    Representation of an Isotope.

    Attributes
    ----------
    z: int
        Atomic number
    n: int
        Neutron number
    a: int
        Mass number
    m: float
        Exact mass, relative to carbon-12.
    abundance: float
        Natural abundance of the isotope. Synthetic isotopes have zero
        abundance.
    shift: int
        Difference between the neutron number and the neutron number of the
        most abundant isotope of the element. Set by the Element that owns
        the isotope.

    """

    __slots__ = ("z", "n", "a", "m", "abundance", "shift")

    def __init__(self, z: int, a: int, m: float, abundance: float):
        self.z = z
        self.n = a - z
        self.a = a
        self.m = m
        self.abundance = abundance
        self.shift = 0

    def __str__(self):
        return "{}{}".format(self.a, self.get_symbol())

    def __repr__(self):
        return "Isotope({})".format(str(self))

    def get_element(self) -> "Element":
        return PeriodicTable().get_element(self.z)

    def get_symbol(self) -> str:
        return self.get_element().symbol


class Element(object):
    """
    Representation of a chemical element.

    Isotopes must have contiguous mass numbers. Isotopes without natural
    abundance are used to fill gaps (e.g. 35S).

    Attributes
    ----------
    name : str
        Element name.
    symbol : str
        Element symbol
    z : int
        Atomic number.
    isotopes : Dict[int, Isotope]
        Mapping from mass number to an isotope, sorted by mass number.

    Raises
    ------
    InvalidElement
        If the mass numbers of the isotopes are not contiguous or if the
        isotopes have a different atomic number.

    """

    def __init__(self, symbol: str, name: str, z: int, isotopes: Dict[int, Isotope]):
        self.name = name
        self.symbol = symbol
        self.z = z
        # isotopes are copied, shifts are owned by the element
        self.isotopes = {a: _copy_isotope(isotopes[a]) for a in sorted(isotopes)}
        _validate_isotopes(self)
        if self.isotopes:
            n_mono = self.get_monoisotope().n
            for isotope in self.isotopes.values():
                isotope.shift = isotope.n - n_mono

    def __repr__(self):
        return "Element({})".format(self.symbol)

    def __str__(self):  # pragma: no cover
        return self.symbol

    def get_abundances(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Returns the Mass number, exact mass and abundance of each Isotope,
        sorted by neutron shift.

        Returns
        -------
        m: array[int]
            Mass number of each isotope.
        M: array[float]
            Exact mass of each isotope.
        p: array[float]
            Abundance of each isotope.

        """
        isotopes = list(self.isotopes.values())
        m = np.array([x.a for x in isotopes], dtype=int)
        M = np.array([x.m for x in isotopes], dtype=float)
        p = np.array([x.abundance for x in isotopes], dtype=float)
        return m, M, p

    def get_mmi(self) -> Isotope:
        """
        Returns the isotope with the lowest atomic mass among the isotopes with
        natural abundance.

        """
        abundant = [x for x in self.isotopes.values() if x.abundance > 0]
        if not abundant:
            msg = "{} does not have isotopes with natural abundance.".format(self.symbol)
            raise InvalidElement(msg)
        return abundant[0]

    def get_monoisotope(self) -> Isotope:
        """
        Returns the most abundant isotope.

        """
        if not self.isotopes:
            msg = "{} does not have isotopes.".format(self.symbol)
            raise InvalidElement(msg)
        return max(self.isotopes.values(), key=lambda x: x.abundance)

    def get_monoisotopic_mass(self) -> float:
        return self.get_monoisotope().m

    def get_average_mass(self) -> float:
        """
        Computes the abundance-weighted mean of the isotope masses.

        Abundances are not assumed to be normalized.

        """
        _, M, p = self.get_abundances()
        total = p.sum()
        if total <= 0:
            msg = "The total abundance of {} is zero.".format(self.symbol)
            raise InvalidElement(msg)
        return float(np.dot(M, p) / total)

    def get_max_neutron_shift(self) -> int:
        """
        Computes the difference between the largest and the smallest neutron
        shift of isotopes with natural abundance.

        """
        shifts = [x.shift for x in self.isotopes.values() if x.abundance > 0]
        if not shifts:
            return 0
        return max(shifts) - min(shifts)


def PeriodicTable():
    """
    Reference the PeriodicTable object.

    Examples
    --------
    >>> import isodist
    >>> ptable = isodist.PeriodicTable()

    """
    if _PeriodicTable.instance is None:
        _PeriodicTable.instance = _PeriodicTable()
    return _PeriodicTable.instance


class _PeriodicTable:
    """
    Periodic Table representation. Contains element and isotope information.

    Methods
    -------
    get_element
    get_isotope

    """

    instance = None

    def __init__(self):
        self._symbol_to_element = _make_periodic_table()
        self._z_to_element = {v.z: v for v in self._symbol_to_element.values()}
        self._str_to_isotope = dict()
        for el_str, el in self._symbol_to_element.items():
            for isotope in el.isotopes.values():
                self._str_to_isotope[str(isotope.a) + el_str] = isotope

    def get_element(self, element: Union[str, int]) -> Element:
        """
        Returns an Element object using its symbol or atomic number.

        Parameters
        ----------
        element : str or int
            element symbol or atomic number.

        Returns
        -------
        Element

        Raises
        ------
        InvalidIsotope
            If the element is not in the periodic table.

        Examples
        --------
        >>> import isodist
        >>> ptable = isodist.PeriodicTable()
        >>> h = ptable.get_element("H")
        >>> c = ptable.get_element(6)

        """
        try:
            if isinstance(element, int):
                return self._z_to_element[element]
            return self._symbol_to_element[element]
        except KeyError:
            msg = "{} is not a valid element.".format(element)
            raise InvalidIsotope(msg)

    def get_isotope(self, x: str) -> Isotope:
        """
        Returns an isotope object from a string representation.

        Parameters
        ----------
        x : str
            A string representation of an isotope. If only the symbol is
            provided in the string, the monoisotope is returned.

        Returns
        -------
        Isotope

        Examples
        --------
        >>> import isodist
        >>> ptable = isodist.PeriodicTable()
        >>> d = ptable.get_isotope("2H")
        >>> cl35 = ptable.get_isotope("Cl")

        """
        try:
            if x[0] in digits:
                return self._str_to_isotope[x]
            return self._symbol_to_element[x].get_monoisotope()
        except (KeyError, IndexError):
            msg = "{} is not a valid input.".format(x)
            raise InvalidIsotope(msg)


def _make_periodic_table() -> Dict[str, Element]:
    this_dir, _ = os.path.split(__file__)
    elements_path = os.path.join(this_dir, "elements.json")
    with open(elements_path, "r") as fin:
        element_data = json.load(fin)

    isotopes_path = os.path.join(this_dir, "isotopes.json")
    with open(isotopes_path, "r") as fin:
        isotope_data = json.load(fin)

    periodic_table = dict()
    for element in isotope_data:
        element_isotopes = isotope_data[element]
        isotopes = {x["a"]: Isotope(**x) for x in element_isotopes}
        name = element_data[element]
        z = element_isotopes[0]["z"]
        periodic_table[element] = Element(element, name, z, isotopes)
    return periodic_table


def _copy_isotope(isotope: Isotope) -> Isotope:
    return Isotope(isotope.z, isotope.a, isotope.m, isotope.abundance)


def _validate_isotopes(element: Element):
    mass_numbers = np.array(list(element.isotopes), dtype=int)
    if (np.diff(mass_numbers) != 1).any():
        msg = "{} isotopes must have contiguous mass numbers. Got {}.".format(
            element.symbol, mass_numbers.tolist()
        )
        raise InvalidElement(msg)
    for isotope in element.isotopes.values():
        if isotope.z != element.z:
            msg = "{} isotopes must have atomic number {}.".format(element.symbol, element.z)
            raise InvalidElement(msg)


class InvalidIsotope(ValueError):
    pass


class InvalidElement(ValueError):
    pass
