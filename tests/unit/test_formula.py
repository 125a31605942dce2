import numpy as np
from isodist import formula
from isodist.atoms import InvalidIsotope, PeriodicTable
import pytest


@pytest.mark.parametrize(
    "formula_str,p_open,p_close",
    [
        ("[C9H11NO2]", 0, 9),
        ("C2H5(OH)", 4, 7),
        ("C2[H5(OH)2]3", 2, 10),
        ("(C(H2)2)3", 0, 7),
    ],
)
def test_find_matching_parenthesis_valid_input(formula_str, p_open, p_close):
    test_p_close = formula._find_matching_parenthesis(formula_str, p_open)
    assert test_p_close == p_close


def test_find_matching_parenthesis_invalid_input():
    with pytest.raises(formula.InvalidFormula):
        formula._find_matching_parenthesis("(H2O", 0)


@pytest.mark.parametrize(
    "formula_str,ind,token_type",
    [
        ("H2O", 0, 0),
        ("H2(OH)2", 2, 1),
        ("C[H2]4", 1, 1),
    ],
)
def test_get_token_type(formula_str, ind, token_type):
    test_token_type = formula._get_token_type(formula_str, ind)
    assert test_token_type == token_type


@pytest.mark.parametrize("formula_str,ind", [("h2O", 0), ("H2O)", 3), ("H2O+", 3)])
def test_get_token_type_invalid_input(formula_str, ind):
    with pytest.raises(formula.InvalidFormula):
        formula._get_token_type(formula_str, ind)


@pytest.mark.parametrize(
    "formula_str,ind,coeff,new_ind",
    [
        ("H2O", 3, 1, 3),
        ("CO2", 1, 1, 1),
        ("C9H11NO2", 3, 11, 5),
        ("H-2O-1", 1, -2, 3),
        ("H-2O-1", 4, -1, 6),
    ],
)
def test_get_coefficient_valid_input(formula_str, ind, coeff, new_ind):
    test_coeff, test_ind = formula._get_coefficient(formula_str, ind)
    assert coeff == test_coeff
    assert test_ind == new_ind


@pytest.mark.parametrize("formula_str,ind", [("H-", 1), ("H-O", 1)])
def test_get_coefficient_invalid_input(formula_str, ind):
    with pytest.raises(formula.InvalidFormula):
        formula._get_coefficient(formula_str, ind)


@pytest.mark.parametrize(
    "formula_str,expected",
    [
        ("H2O", {"H": 2, "O": 1}),
        ("C6H12O6", {"C": 6, "H": 12, "O": 6}),
        ("CH3CH2CH3", {"C": 3, "H": 8}),
        ("C2H5(OH)", {"C": 2, "H": 6, "O": 1}),
        ("[Fe(CN)6]", {"Fe": 1, "C": 6, "N": 6}),
        ("Ca(OH)2", {"Ca": 1, "O": 2, "H": 2}),
        ("H-2O-1", {"H": -2, "O": -1}),
        ("C2H6O-1", {"C": 2, "H": 6, "O": -1}),
        ("CH4C-1", {"H": 4}),
    ],
)
def test_formula_from_string(formula_str, expected):
    ptable = PeriodicTable()
    expected = {ptable.get_element(k): v for k, v in expected.items()}
    f = formula.Formula(formula_str)
    assert dict(f.composition) == expected


@pytest.mark.parametrize("formula_str", ["h2o", "H2O)", "(H2O", "Xx2", "H-", "H2O+", "2H2O"])
def test_formula_from_string_invalid_input(formula_str):
    with pytest.raises(formula.InvalidFormula):
        formula.Formula(formula_str)


def test_formula_from_mapping():
    f = formula.Formula({"C": 6, "H": 12, "O": 6})
    assert f == formula.Formula("C6H12O6")


def test_formula_from_mapping_with_elements():
    ptable = PeriodicTable()
    f = formula.Formula({ptable.get_element("C"): 1, "O": 2})
    assert f == formula.Formula("CO2")


def test_formula_from_mapping_removes_zero_coefficients():
    f = formula.Formula({"C": 1, "O": 0})
    assert f == formula.Formula("C")
    assert len(f.composition) == 1


@pytest.mark.parametrize("composition", [{"C": 1.5}, {"C": "2"}, {"C": True}, {6: 1}])
def test_formula_from_mapping_invalid_input(composition):
    with pytest.raises(formula.InvalidFormula):
        formula.Formula(composition)


def test_formula_from_mapping_invalid_symbol():
    with pytest.raises(InvalidIsotope):
        formula.Formula({"Xx": 1})


@pytest.mark.parametrize(
    "formula_str,expected",
    [
        ("H2O", "H2O"),
        ("OH2", "H2O"),
        ("C6H12O6", "C6H12O6"),
        ("NaCl", "ClNa"),
        ("O2C", "CO2"),
        ("CH3CH2CH3", "C3H8"),
        ("H-2O-1", "H-2O-1"),
    ],
)
def test_formula_str(formula_str, expected):
    assert str(formula.Formula(formula_str)) == expected


def test_formula_repr():
    assert repr(formula.Formula("H2O")) == "Formula(H2O)"


def test_formula_add():
    f = formula.Formula("C6H12O6") + formula.Formula("H2O")
    assert f == formula.Formula("C6H14O7")


def test_formula_sub():
    f = formula.Formula("C6H12O6") - formula.Formula("H2O")
    assert f == formula.Formula("C6H10O5")


def test_formula_sub_negative_coefficients():
    f = formula.Formula("H2O") - formula.Formula("CH4")
    assert f == formula.Formula({"C": -1, "H": -2, "O": 1})
    assert f.has_negative_coefficients()


def test_formula_sub_removes_zero_coefficients():
    f = formula.Formula("C6H12O6") - formula.Formula("C6H12O6")
    assert not f.composition
    assert str(f) == ""


@pytest.mark.parametrize("other", ["H2O", 1, None])
def test_formula_arithmetic_invalid_operand(other):
    f = formula.Formula("C6H12O6")
    with pytest.raises(ValueError):
        f + other
    with pytest.raises(ValueError):
        f - other


def test_formula_iter():
    f = formula.Formula("H2O")
    items = {e.symbol: k for e, k in f}
    assert items == {"H": 2, "O": 1}


def test_formula_monoisotopic_mass():
    f = formula.Formula("H2O")
    assert f.get_monoisotopic_mass() == pytest.approx(18.0105646837)


def test_formula_average_mass():
    ptable = PeriodicTable()
    f = formula.Formula("CO2")
    expected = ptable.get_element("C").get_average_mass() + 2 * ptable.get_element("O").get_average_mass()
    assert f.get_average_mass() == pytest.approx(expected)
    assert f.get_average_mass() > f.get_monoisotopic_mass()


@pytest.mark.parametrize(
    "formula_str,max_variants",
    [
        ("C8H13NO5", 32),
        ("H2O", 4),
        ("Cl2", 4),
        ("NaF", 0),
        ("C1290H1970N354O394S4", 4418),
    ],
)
def test_formula_max_variants(formula_str, max_variants):
    assert formula.Formula(formula_str).get_max_variants() == max_variants


def test_formula_from_mapping_numpy_integer_coefficients():
    f = formula.Formula({"C": np.int64(6), "H": np.int32(12), "O": np.uint8(6)})
    assert f == formula.Formula("C6H12O6")
    assert all(type(k) is int for _, k in f)
