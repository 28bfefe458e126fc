from __future__ import annotations
from typing import Dict, Optional, Sequence, Tuple, Union, Mapping

import numpy as np

from .logging_setup import setup_logger
from .model import CurveResult, TransientCurveModel
from .parameters import ALL_VARIANTS, MODEL_1, ModelVariant, ParameterSet
from .scenarios import default_parameters

__all__ = ["ModelManager"]

logger = setup_logger(__name__)


class ModelManager:
    """One curve model per variant, the current selection, and an observed dataset."""

    def __init__(self, high_precision: bool = True) -> None:
        self.models: Dict[ModelVariant, TransientCurveModel] = {
            v: TransientCurveModel(v, high_precision=high_precision) for v in ALL_VARIANTS
        }
        self.current: ModelVariant = MODEL_1
        self._observed: Optional[Tuple[np.ndarray, np.ndarray, np.ndarray]] = None

    @property
    def current_model(self) -> TransientCurveModel:
        return self.models[self.current]

    def switch_to(self, variant: Union[ModelVariant, int]) -> ModelVariant:
        """Select a variant (or model number); returns the previous one."""
        if not isinstance(variant, ModelVariant):
            variant = ModelVariant.from_number(variant)
        old, self.current = self.current, variant
        logger.info(f"Switched from {old.name} to {variant.name}")
        return old

    def set_high_precision(self, high: bool) -> None:
        for model in self.models.values():
            model.set_high_precision(high)

    def default_parameters(self, variant: Optional[ModelVariant] = None) -> ParameterSet:
        return default_parameters(variant or self.current)

    def calculate_curve(self, variant: ModelVariant,
                        params: Union[ParameterSet, Mapping[str, float]],
                        t: Optional[Sequence[float]] = None) -> CurveResult:
        return self.models[variant].calculate(params, t)

    # observed (field) data
    def set_observed_data(self, t, p, dp) -> None:
        self._observed = (np.asarray(t, dtype=float), np.asarray(p, dtype=float),
                          np.asarray(dp, dtype=float))

    def get_observed_data(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        if self._observed is None:
            return np.empty(0), np.empty(0), np.empty(0)
        return self._observed

    def has_observed_data(self) -> bool:
        return self._observed is not None and len(self._observed[0]) > 0

    def clear_cache(self) -> None:
        self._observed = None
