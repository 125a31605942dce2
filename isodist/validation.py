"""
Validation of isotope distribution generator parameters.
"""


import numbers
import cerberus
from . import _constants as c


def validate(params: dict, validator: cerberus.Validator) -> dict:
    """
    Function used to validate parameters.

    Parameters
    ----------
    params: dict
    validator: cerberus.Validator

    Returns
    -------
    dict: Validated and normalized parameters

    Raises
    ------
    ValueError: if any of the parameters are invalid.
    """
    normalized = validator.normalized(params)
    if normalized is None or not validator.validate(normalized):
        msg = ""
        for field, e_msgs in validator.errors.items():
            for e_msg in e_msgs:
                msg += "{}: {}\n".format(field, e_msg)
        raise ValueError(msg)
    return normalized


class ParameterValidator(cerberus.Validator):
    # numpy integers are accepted as integers
    types_mapping = cerberus.Validator.types_mapping.copy()
    types_mapping["integer"] = cerberus.TypeDefinition("integer", (numbers.Integral,), ())

    def _validate_is_positive(self, is_positive, field, value):
        """
        Tests if a value is positive

        The rule's arguments are validated against this schema:
        {"type": "boolean"}
        """
        if is_positive and (value is not None) and (value <= 0):
            msg = "Must be a positive number"
            self._error(field, msg)


charge_schema = {
    "charge": {"type": "integer", "min": 1, "required": True},
}

_ion_schema = {
    "charge_carrier": {"type": "number", "min": 0.0, "default": c.PROTON},
    "positive": {"type": "boolean", "default": True},
}

mercury_schema = {
    "limit": {"type": "number", "is_positive": True, "default": c.MERCURY_LIMIT},
    **_ion_schema,
}

brain_schema = {
    "npeaks": {"type": "integer", "min": 1, "nullable": True, "default": None},
    **_ion_schema,
}
