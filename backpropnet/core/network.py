"""Sigmoid feed-forward network state and evaluator."""

from __future__ import annotations

from typing import List, Mapping, Sequence

import numpy as np

from .activations import sigmoid
from .errors import ConfigurationError, ShapeMismatchError
from .types import ActivationTrace, Array, Gradients


def as_row(x: Array | Sequence[float], width: int, *, name: str = "input") -> Array:
    """Return ``x`` as a ``(1, width)`` float64 row vector."""

    row = np.asarray(x, dtype=np.float64)
    if row.ndim == 1:
        row = row.reshape(1, -1)
    if row.ndim != 2 or row.shape != (1, width):
        raise ShapeMismatchError(
            f"{name} must be a row vector of width {width}, got shape {row.shape}"
        )
    return row


class Network:
    """Fully connected network with sigmoid units on every layer.

    ``weights[i]`` has shape ``(sizes[i], sizes[i + 1])`` and ``biases[i]`` has
    shape ``(1, sizes[i + 1])``. Inputs are row vectors, so a layer computes
    ``sigmoid(a @ W + b)``.
    """

    def __init__(
        self, sizes: Sequence[int], rng: np.random.Generator | None = None
    ) -> None:
        sizes = [int(s) for s in sizes]
        if len(sizes) < 2:
            raise ConfigurationError("Need a minimum of two layers in the network")
        if any(s < 1 for s in sizes):
            raise ConfigurationError(f"Layer sizes must be positive, got {sizes}")
        self._sizes = sizes
        self.weights: List[Array] = []
        self.biases: List[Array] = []
        self.reset(rng)

    def __repr__(self) -> str:
        return f"<Network sizes={self._sizes}>"

    @property
    def sizes(self) -> List[int]:
        return list(self._sizes)

    @property
    def num_layers(self) -> int:
        return len(self._sizes)

    def reset(self, rng: np.random.Generator | None = None) -> None:
        """Draw every weight and bias from a standard normal distribution."""

        rng = rng if rng is not None else np.random.default_rng()
        weights: list[Array] = []
        biases: list[Array] = []
        for in_dim, out_dim in zip(self._sizes[:-1], self._sizes[1:]):
            weights.append(rng.standard_normal((in_dim, out_dim)))
            biases.append(rng.standard_normal((1, out_dim)))
        self.weights = weights
        self.biases = biases

    def check_initialised(self) -> None:
        if self.num_layers < 2 or len(self.weights) != self.num_layers - 1:
            raise ConfigurationError("Network not set up")

    def feedforward(self, x: Array | Sequence[float]) -> Array:
        """Propagate ``x`` through every layer and return the output row."""

        a = as_row(x, self._sizes[0])
        for W, b in zip(self.weights, self.biases):
            a = sigmoid(a @ W + b)
        return a

    def trace(self, x: Array | Sequence[float]) -> tuple[Array, ActivationTrace]:
        """Forward pass that keeps every pre-activation and activation."""

        a = as_row(x, self._sizes[0])
        activations: list[Array] = [a]
        zs: list[Array] = []
        for W, b in zip(self.weights, self.biases):
            z = a @ W + b
            zs.append(z)
            a = sigmoid(z)
            activations.append(a)
        return a, ActivationTrace(activations=activations, zs=zs)

    def apply_gradients(self, grads: Gradients, scale: float) -> None:
        """Subtract ``scale`` times ``grads`` from the parameters in place."""

        for W, nabla_w in zip(self.weights, grads.nabla_w):
            W -= scale * nabla_w
        for b, nabla_b in zip(self.biases, grads.nabla_b):
            b -= scale * nabla_b

    def state_dict(self) -> Mapping[str, Array]:
        state = {f"W{idx}": W.copy() for idx, W in enumerate(self.weights)}
        state.update({f"B{idx}": b.copy() for idx, b in enumerate(self.biases)})
        return state

    def load_state_dict(self, state: Mapping[str, Array]) -> None:
        for idx in range(self.num_layers - 1):
            for prefix, params in (("W", self.weights), ("B", self.biases)):
                key = f"{prefix}{idx}"
                if key not in state:
                    raise KeyError(f"Missing parameter {key} in state dict")
                value = np.asarray(state[key], dtype=np.float64)
                if value.shape != params[idx].shape:
                    raise ShapeMismatchError(
                        f"{key} has shape {value.shape}, expected {params[idx].shape}"
                    )
                params[idx][...] = value

    def parameter_count(self) -> int:
        return int(sum(w.size for w in self.weights) + sum(b.size for b in self.biases))


__all__ = ["Network", "as_row"]
