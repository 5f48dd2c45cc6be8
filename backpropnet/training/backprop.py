"""Per-example backpropagation for the quadratic cost."""

from __future__ import annotations

from typing import Any

from ..core.activations import sigmoid_prime
from ..core.errors import MalformedExampleError
from ..core.network import Network, as_row
from ..core.types import Example, Gradients
from .losses import QUADRATIC


def as_example(pair: Any, network: Network) -> Example:
    """Coerce ``pair`` into an :class:`Example` sized for ``network``."""

    if isinstance(pair, Example):
        inputs, targets = pair.inputs, pair.targets
    else:
        try:
            items = list(pair)
        except TypeError as exc:
            raise MalformedExampleError("Input and output data set mismatch") from exc
        if len(items) != 2:
            raise MalformedExampleError(
                f"Input and output data set mismatch: expected 2 items, got {len(items)}"
            )
        inputs, targets = items
    sizes = network.sizes
    return Example(
        inputs=as_row(inputs, sizes[0], name="input"),
        targets=as_row(targets, sizes[-1], name="desired output"),
    )


def backprop(network: Network, example: Example) -> tuple[Gradients, float]:
    """Return the cost gradients for one example and its quadratic cost.

    The returned gradients are freshly allocated; they never alias the
    network's parameters or a batch accumulator.
    """

    output, trace = network.trace(example.inputs)
    activations, zs = trace.activations, trace.zs
    loss, error = QUADRATIC(output, example.targets)

    n_weights = len(network.weights)
    nabla_w = [None] * n_weights
    nabla_b = [None] * n_weights

    delta = error * sigmoid_prime(zs[-1])
    nabla_b[-1] = delta
    nabla_w[-1] = activations[-2].T @ delta
    for idx in reversed(range(n_weights - 1)):
        delta = (delta @ network.weights[idx + 1].T) * sigmoid_prime(zs[idx])
        nabla_b[idx] = delta
        nabla_w[idx] = activations[idx].T @ delta
    return Gradients(nabla_w=nabla_w, nabla_b=nabla_b), loss


__all__ = ["as_example", "backprop"]
