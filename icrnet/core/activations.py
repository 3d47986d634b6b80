"""Activation utilities for icrnet."""

from __future__ import annotations

from typing import Callable, Dict

import numpy as np

from .types import Array


def sigmoid(x):
    """Return the logistic function ``1 / (1 + exp(-x))``."""

    with np.errstate(over="ignore"):
        return 1.0 / (1.0 + np.exp(-x))


def resquash_deriv(values: Array) -> Array:
    """Sigmoid derivative evaluated on ``sigmoid(values)``.

    ``values`` already hold post-sigmoid activations, so the logistic
    function is applied a second time before taking ``s * (1 - s)``.  This
    reproduces the reference trainer's numbers; see ``activation_deriv``.
    """

    s = sigmoid(values)
    return s * (1.0 - s)


def activation_deriv(values: Array) -> Array:
    """Sigmoid derivative expressed through the stored activation."""

    return values * (1.0 - values)


DERIVATIVES: Dict[str, Callable[[Array], Array]] = {
    "resquash": resquash_deriv,
    "activation": activation_deriv,
}


def resolve_derivative(name: str) -> Callable[[Array], Array]:
    try:
        return DERIVATIVES[name]
    except KeyError:
        options = ", ".join(sorted(DERIVATIVES))
        raise ValueError(f"Unknown derivative mode {name!r}; expected one of: {options}") from None


def argmax_first(values: Array) -> int:
    """Index of the largest value; the lowest index wins ties."""

    return int(np.argmax(np.asarray(values)))


def one_hot(label: int, num_classes: int) -> Array:
    out = np.zeros(num_classes, dtype=np.float64)
    out[label] = 1.0
    return out
