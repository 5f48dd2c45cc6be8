"""Activation utilities for backpropnet."""

from __future__ import annotations

import numpy as np

from .types import Array


def sigmoid(z: Array) -> Array:
    """Return the logistic sigmoid of ``z`` element-wise."""

    # keep exp() finite for large |z|
    return 1.0 / (1.0 + np.exp(-np.clip(z, -500.0, 500.0)))


def sigmoid_prime(z: Array) -> Array:
    """Derivative of :func:`sigmoid` evaluated at ``z``."""

    s = sigmoid(z)
    return s * (1.0 - s)
