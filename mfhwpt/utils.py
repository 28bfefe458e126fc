from __future__ import annotations
import re
from typing import List, Sequence, Union

import numpy as np

_SEPARATORS = re.compile(r"[,，]")


def log_time_steps(count: int, start_exp: float, end_exp: float) -> np.ndarray:
    """count times 10**e with e evenly spaced from start_exp to end_exp."""
    if count < 2:
        raise ValueError("a time grid needs at least 2 points")
    return 10.0 ** np.linspace(start_exp, end_exp, count)


def parse_values(raw: Union[str, float, Sequence[float]]) -> List[float]:
    """
    Normalise one input field to a list of floats.
    Strings are split on ASCII or full-width commas; tokens that do not parse
    are dropped. An empty result becomes [0.0].
    """
    if isinstance(raw, str):
        values = []
        for token in _SEPARATORS.split(raw):
            try:
                values.append(float(token.strip()))
            except ValueError:
                continue
    elif np.ndim(raw) == 0:
        values = [float(raw)]
    else:
        values = [float(v) for v in raw]
    return values or [0.0]
