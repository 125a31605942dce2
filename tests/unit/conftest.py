import numpy as np
import pytest
from isodist import Brain, Formula, Mercury


@pytest.fixture
def mercury():
    return Mercury()


@pytest.fixture
def brain():
    return Brain()


@pytest.fixture
def hexnac():
    return Formula("C8H13N1O5")


@pytest.fixture
def carbonic_anhydrase():
    return Formula("C1290H1970N354O394S4")


@pytest.fixture
def hexnac_reference():
    # reference values computed with brainpy
    mass = np.array([203.079373, 204.082545, 205.084190, 206.086971])
    abundance = np.array([0.901867, 0.084396, 0.012787, 0.000950])
    return mass, abundance


@pytest.fixture
def carbonic_anhydrase_reference():
    # reference values computed with mMass. mMass does not report the first
    # four peaks of the distribution.
    offset = 4
    mass = np.array(
        [
            28856.3995, 28857.40232, 28858.40491, 28859.40789, 28860.41027,
            28861.41338, 28862.41566, 28863.41873, 28864.42102, 28865.42396,
            28866.42631, 28867.42913, 28868.43154, 28869.43426, 28870.43671,
        ]
    )
    abundance = np.array(
        [
            0.000166925, 0.000537912, 0.00145733, 0.003399197, 0.006991671,
            0.012854012, 0.021405595, 0.032612538, 0.045785523, 0.05975158,
            0.072715668, 0.083213348, 0.089580389, 0.091474523, 0.088461882,
        ]
    )
    return offset, mass, abundance
