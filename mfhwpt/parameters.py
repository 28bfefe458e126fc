"""
Model variants and the frozen parameter container for one curve computation.
"""

from __future__ import annotations
import math
from dataclasses import dataclass, fields
from enum import Enum
from typing import ClassVar, Dict, Final, List, Mapping, Tuple

from .config import LENGTH_EPS, PRESSURE_CONSTANT

__all__ = [
    "Boundary",
    "WellboreStorage",
    "ModelVariant",
    "MODEL_1", "MODEL_2", "MODEL_3", "MODEL_4", "MODEL_5", "MODEL_6",
    "ALL_VARIANTS",
    "ParameterSet",
]


# ---------------------------------------------------------------
# Model variants
# ---------------------------------------------------------------
class Boundary(Enum):
    INFINITE = "infinite"
    CLOSED = "closed"
    CONSTANT_PRESSURE = "constant pressure"


class WellboreStorage(Enum):
    VARIABLE = "variable"    # storage + skin convolved in Laplace space
    CONSTANT = "constant"    # cD = S = 0


@dataclass(frozen=True)
class ModelVariant:
    boundary: Boundary
    storage: WellboreStorage

    @property
    def number(self) -> int:
        return ALL_VARIANTS.index(self) + 1

    @property
    def bounded(self) -> bool:
        return self.boundary is not Boundary.INFINITE

    @property
    def has_storage(self) -> bool:
        return self.storage is WellboreStorage.VARIABLE

    @property
    def name(self) -> str:
        return f"Model {self.number}: {self.boundary.value} boundary + {self.storage.value} storage"

    @classmethod
    def from_number(cls, number: int) -> "ModelVariant":
        if not 1 <= number <= len(ALL_VARIANTS):
            raise ValueError(f"model number must be in 1..{len(ALL_VARIANTS)}, got {number}")
        return ALL_VARIANTS[number - 1]

    def __str__(self) -> str:
        return self.name


MODEL_1: Final = ModelVariant(Boundary.INFINITE, WellboreStorage.VARIABLE)
MODEL_2: Final = ModelVariant(Boundary.INFINITE, WellboreStorage.CONSTANT)
MODEL_3: Final = ModelVariant(Boundary.CLOSED, WellboreStorage.VARIABLE)
MODEL_4: Final = ModelVariant(Boundary.CLOSED, WellboreStorage.CONSTANT)
MODEL_5: Final = ModelVariant(Boundary.CONSTANT_PRESSURE, WellboreStorage.VARIABLE)
MODEL_6: Final = ModelVariant(Boundary.CONSTANT_PRESSURE, WellboreStorage.CONSTANT)

ALL_VARIANTS: Final = (MODEL_1, MODEL_2, MODEL_3, MODEL_4, MODEL_5, MODEL_6)


def _ratio(num: float, den: float) -> float:
    """num/den with IEEE semantics instead of ZeroDivisionError."""
    if den != 0.0:
        return num / den
    if num == 0.0 or math.isnan(num):
        return math.nan
    return math.copysign(math.inf, num)


# ---------------------------------------------------------------
# Reservoir, well and fracture parameters
# ---------------------------------------------------------------
@dataclass(frozen=True)
class ParameterSet:
    # reservoir / fluid (field units)
    phi:     float = 0.0    # porosity, –
    h:       float = 0.0    # thickness, m
    mu:      float = 0.0    # viscosity, mPa·s
    B:       float = 0.0    # formation volume factor, –
    Ct:      float = 0.0    # total compressibility, MPa⁻¹
    q:       float = 0.0    # flow rate, m³/d
    # permeabilities and geometry
    kf:      float = 0.0    # fracture-system permeability, μm²
    km:      float = 0.0    # matrix permeability, μm²
    L:       float = 0.0    # well half-length, m
    Lf:      float = 0.0    # fracture half-length, m
    nf:      int   = 4      # fracture count
    rmD:     float = 0.0    # matrix-block radius, –
    # dual porosity
    omega1:  float = 0.0
    omega2:  float = 0.0
    lambda1: float = 0.0
    # stress sensitivity, boundary, storage
    gamaD:   float = 0.0
    reD:     float = 0.0
    cD:      float = 0.0
    S:       float = 0.0
    # Stehfest order
    N:       int   = 0

    _ALIASES: ClassVar[Dict[str, str]] = {
        "porosity": "phi",
        "thickness": "h",
        "viscosity": "mu",
        "formation_volume_factor": "B",
        "total_compressibility": "Ct",
        "flow_rate": "q",
        "fracture_permeability": "kf",
        "matrix_permeability": "km",
        "well_half_length": "L",
        "fracture_half_length": "Lf",
        "fracture_count": "nf",
        "matrix_block_radius": "rmD",
        "interporosity_coefficient": "lambda1",
        "stress_sensitivity": "gamaD",
        "outer_radius": "reD",
        "wellbore_storage": "cD",
        "skin": "S",
        "stehfest_n": "N",
    }
    _DERIVED: ClassVar[Tuple[str, ...]] = ("LfD", "t", "points")

    def __post_init__(self):
        # numeric coercion only, nothing is rejected here
        for f in fields(self):
            if f.name in ("nf", "N"):
                continue
            object.__setattr__(self, f.name, float(getattr(self, f.name)))
        nf, N = float(self.nf), float(self.N)
        object.__setattr__(self, "nf", max(int(nf), 1) if math.isfinite(nf) else 1)
        object.__setattr__(self, "N", int(N) if math.isfinite(N) else 0)

    @classmethod
    def from_mapping(cls, values: Mapping[str, float]) -> "ParameterSet":
        """Build from a name→value mapping; missing keys keep their defaults."""
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, float] = {}
        for key, value in values.items():
            name = cls._ALIASES.get(key, key)
            if name in cls._DERIVED:
                continue
            if name not in known:
                raise KeyError(f"unknown parameter {key!r}")
            kwargs[name] = value
        return cls(**kwargs)

    def as_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    # convenience
    @property
    def LfD(self) -> float:
        return self.Lf / self.L if self.L > LENGTH_EPS else 0.0

    @property
    def M12(self) -> float:
        return _ratio(self.kf, self.km)

    @property
    def td_denominator(self) -> float:
        return self.phi * self.mu * self.Ct * self.L ** 2

    @property
    def pressure_factor(self) -> float:
        return _ratio(PRESSURE_CONSTANT * self.q * self.mu * self.B, self.kf * self.h)

    def issues(self, bounded: bool = False) -> List[str]:
        """Findings that make the computed curve physically meaningless."""
        out = []
        for name in ("phi", "h", "mu", "B", "Ct", "q", "kf", "km", "L", "Lf", "rmD"):
            if getattr(self, name) <= 0.0:
                out.append(f"{name} must be positive (got {getattr(self, name)})")
        if not 0.0 <= self.omega1 <= 1.0:
            out.append(f"omega1 should lie in [0, 1] (got {self.omega1})")
        if bounded and self.reD <= self.rmD:
            out.append(f"reD ({self.reD}) should exceed rmD ({self.rmD}) for a bounded reservoir")
        return out
