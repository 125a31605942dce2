"""
Tools for working with chemical formulas

Objects
-------

- Formula

Exceptions
----------

- InvalidFormula

"""


import numbers
import string
from collections import Counter
from typing import Mapping, Tuple, Union
from .atoms import Element, InvalidIsotope, PeriodicTable


class Formula:
    """
    Represents a chemical formula as a mapping from elements to formula
    coefficients.

    Coefficients may be negative, which is useful to represent the delta of a
    chemical modification. Elements with a zero coefficient are removed.

    Attributes
    ----------
    composition: Counter
        A mapping of Elements to formula coefficients.

    Methods
    -------
    get_monoisotopic_mass()
    get_average_mass()
    get_max_variants()

    Examples
    --------
    >>> Formula("H2O")
    Formula(H2O)
    >>> Formula("CH3CH2CH3")
    Formula(C3H8)
    >>> Formula("C2H5(OH)")
    Formula(C2H6O)
    >>> Formula("H-2O-1")
    Formula(H-2O-1)
    >>> Formula({"C": 1, "O": 2})
    Formula(CO2)

    """

    def __init__(self, formula: Union[str, Mapping[Union[str, Element], int]]):
        if isinstance(formula, str):
            composition = _parse_formula(formula)
        else:
            ptable = PeriodicTable()
            composition = Counter()
            for k, v in formula.items():
                if isinstance(k, str):
                    element = ptable.get_element(k)
                elif isinstance(k, Element):
                    element = k
                else:
                    msg = "Composition keys must be an element symbol or an Element object"
                    raise InvalidFormula(msg)

                if not isinstance(v, numbers.Integral) or isinstance(v, bool):
                    msg = "Formula coefficients must be integers"
                    raise InvalidFormula(msg)
                composition[element] += int(v)
        self.composition = Counter({k: v for k, v in composition.items() if v != 0})

    def __add__(self, other: "Formula") -> "Formula":
        if not isinstance(other, Formula):
            msg = "sum operation is defined only for Formula objects"
            raise ValueError(msg)
        composition = Counter(self.composition)
        composition.update(other.composition)
        return Formula(composition)

    def __sub__(self, other: "Formula") -> "Formula":
        if not isinstance(other, Formula):
            msg = "subtraction operation is defined only for Formula objects"
            raise ValueError(msg)
        composition = Counter(self.composition)
        composition.subtract(other.composition)
        return Formula(composition)

    def __eq__(self, other: "Formula"):
        return isinstance(other, Formula) and (self.composition == other.composition)

    def __iter__(self):
        return iter(self.composition.items())

    def has_negative_coefficients(self) -> bool:
        return any(v < 0 for v in self.composition.values())

    def get_monoisotopic_mass(self) -> float:
        """
        Computes the monoisotopic mass of the formula, using the most abundant
        isotope of each element.

        Examples
        --------
        >>> import isodist
        >>> f = isodist.Formula("H2O")
        >>> round(f.get_monoisotopic_mass(), 6)
        18.010565

        """
        return sum(e.get_monoisotopic_mass() * k for e, k in self.composition.items())

    def get_average_mass(self) -> float:
        return sum(e.get_average_mass() * k for e, k in self.composition.items())

    def get_max_variants(self) -> int:
        """
        Computes the maximum number of extra neutrons that the isotopic
        variants of the formula can have.

        """
        return sum(e.get_max_neutron_shift() * k for e, k in self.composition.items())

    def __repr__(self):
        return "Formula({})".format(str(self))

    def __str__(self):
        return _get_formula_str(self.composition)


_matching_parenthesis = {"(": ")", "[": "]"}


def _multiply_formula_coefficients(composition: Counter, multiplier: int):
    if multiplier != 1:
        for k in composition:
            composition[k] *= multiplier


def _get_token_type(formula: str, ind: int) -> int:
    """
    assigns 0 to elements and 1 to expressions.
    """
    c = formula[ind]
    if c in string.ascii_uppercase:
        token_type = 0
    elif c in _matching_parenthesis:
        token_type = 1
    else:
        msg = "Unexpected character {!r} in formula {}".format(c, formula)
        raise InvalidFormula(msg)
    return token_type


def _find_matching_parenthesis(formula: str, ind: int):
    parenthesis_open = formula[ind]
    parenthesis_close = _matching_parenthesis[parenthesis_open]
    match_ind = ind + 1
    level = 1
    try:
        while level > 0:
            c = formula[match_ind]
            if c == parenthesis_open:
                level += 1
            elif c == parenthesis_close:
                level -= 1
            match_ind += 1
        return match_ind - 1
    except IndexError:
        msg = "Formula string has non-matching parenthesis"
        raise InvalidFormula(msg)


def _get_coefficient(formula: str, ind: int) -> Tuple[int, int]:
    """
    traverses a formula string to compute a coefficient. ind is a position
    after an element or expression. Coefficients may have a minus sign.

    Returns
    -------
    coefficient : int
    new_ind : int, new index to continue parsing the formula
    """
    length = len(formula)
    start = ind
    if (ind < length) and (formula[ind] == "-"):
        ind += 1
        if (ind >= length) or (formula[ind] not in string.digits):
            msg = "A minus sign must be followed by a coefficient in {}".format(formula)
            raise InvalidFormula(msg)

    if (ind >= length) or (formula[ind] not in string.digits):
        coefficient = 1
        new_ind = ind
    else:
        end = ind + 1
        while (end < length) and (formula[end] in string.digits):
            end += 1
        coefficient = int(formula[start:end])
        new_ind = end
    return coefficient, new_ind


def _tokenize_element(formula: str, ind: int):
    length = len(formula)
    if (ind < length - 1) and (formula[ind + 1] in string.ascii_lowercase):
        end = ind + 2
    else:
        end = ind + 1
    symbol = formula[ind:end]
    try:
        element = PeriodicTable().get_element(symbol)
    except InvalidIsotope as e:
        raise InvalidFormula(str(e))
    coefficient, end = _get_coefficient(formula, end)
    token = {element: coefficient}
    return token, end


def _parse_formula(formula: str) -> Counter:
    """
    Parse a formula string into a Counter that maps elements to formula
    coefficients.
    """
    ind = 0
    n = len(formula)
    composition = Counter()
    while ind < n:
        token_type = _get_token_type(formula, ind)
        if token_type == 0:
            token, ind = _tokenize_element(formula, ind)
        else:
            # expression type evaluated recursively
            exp_end = _find_matching_parenthesis(formula, ind)
            token = _parse_formula(formula[ind + 1 : exp_end])
            exp_coefficient, ind = _get_coefficient(formula, exp_end + 1)
            _multiply_formula_coefficients(token, exp_coefficient)
        composition.update(token)
    return composition


class InvalidFormula(ValueError):
    pass


def _get_formula_str(composition: Counter) -> str:
    # C and H first, other elements sorted alphabetically
    ptable = PeriodicTable()
    ch = [ptable.get_element("C"), ptable.get_element("H")]
    f_str = ""
    for e in ch:
        if e in composition:
            f_str += _element_coeff_to_f_str(e, composition[e])

    elements = set(composition).difference(ch)
    for e in sorted(elements, key=lambda x: x.symbol):
        f_str += _element_coeff_to_f_str(e, composition[e])
    return f_str


def _element_coeff_to_f_str(element: Element, coeff: int) -> str:
    coeff_str = str(coeff) if coeff != 1 else ""
    return "{}{}".format(element.symbol, coeff_str)
