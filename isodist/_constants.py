from typing import Final

# masses
EM: Final[float] = 0.00054858  # electron mass
PROTON: Final[float] = 1.007276466

# Mercury
MERCURY_LIMIT: Final[float] = 1e-26

# BRAIN
MIN_CENTER_MASS: Final[float] = 1.0
MIN_NPEAKS: Final[int] = 3
