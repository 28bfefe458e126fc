# mfhwpt/config.py

# Stehfest inversion
DEFAULT_STEHFEST_N = 8
LOW_PRECISION_STEHFEST_N = 4

# Adaptive Gauss-Legendre quadrature
QUAD_EPS = 1e-5
QUAD_MAX_DEPTH = 10
QUAD_REL_TOL = 1e-10

# Numerical floors and guards
MAGNITUDE_FLOOR = 1e-100
BESSEL_ARG_FLOOR = 1e-10
BESSEL_ASYMPTOTIC_ARG = 600.0
EXP_UNDERFLOW = -700.0
EXP_CEILING = 300.0         # largest exponent a resolved ScaledValue carries
TD_FLOOR = 1e-12
GAMAD_EPS = 1e-9
LENGTH_EPS = 1e-9
STORAGE_EPS = 1e-12

# Curve generation
DERIVATIVE_LOG_WINDOW = 0.1
DEFAULT_POINTS = 100
MIN_POINTS = 5
DEFAULT_T_END = 1000.0      # h
T_START_EXP = -3.0
MAX_CURVES = 6              # one per display colour

# Field-unit constants (tD and pressure prefactor)
TD_CONSTANT = 14.4
PRESSURE_CONSTANT = 1.842e-3

# Logging Settings
LOGGING_LEVEL = "INFO"
LOG_FILE = None             # e.g. "mfhwpt.log"
