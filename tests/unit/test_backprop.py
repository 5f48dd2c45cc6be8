import numpy as np
import pytest

from backpropnet.core.errors import MalformedExampleError, ShapeMismatchError
from backpropnet.core.network import Network
from backpropnet.core.types import Example, Gradients
from backpropnet.training.backprop import as_example, backprop
from backpropnet.training.losses import QUADRATIC, quadratic_cost, quadratic_cost_derivative


def _cost(net: Network, example: Example) -> float:
    return quadratic_cost(net.feedforward(example.inputs), example.targets)


def _numeric_gradients(net: Network, example: Example, eps: float = 1e-6):
    numeric = []
    for params in (net.weights, net.biases):
        grads = []
        for param in params:
            grad = np.zeros_like(param)
            for idx in np.ndindex(param.shape):
                original = param[idx]
                param[idx] = original + eps
                plus = _cost(net, example)
                param[idx] = original - eps
                minus = _cost(net, example)
                param[idx] = original
                grad[idx] = (plus - minus) / (2 * eps)
            grads.append(grad)
        numeric.append(grads)
    return numeric


@pytest.mark.parametrize("sizes", [[1, 1], [2, 3, 1], [3, 4, 5, 2]])
def test_backprop_matches_finite_differences(sizes):
    rng = np.random.default_rng(11)
    net = Network(sizes, rng=rng)
    example = Example(
        inputs=rng.uniform(-1, 1, size=(1, sizes[0])),
        targets=rng.uniform(0, 1, size=(1, sizes[-1])),
    )
    grads, loss = backprop(net, example)
    numeric_w, numeric_b = _numeric_gradients(net, example)
    assert loss == pytest.approx(_cost(net, example))
    for analytic, numeric in zip(grads.nabla_w, numeric_w):
        assert analytic.shape == numeric.shape
        assert np.allclose(analytic, numeric, atol=1e-4)
    for analytic, numeric in zip(grads.nabla_b, numeric_b):
        assert analytic.shape == numeric.shape
        assert np.allclose(analytic, numeric, atol=1e-4)


def test_backprop_does_not_touch_parameters():
    net = Network([2, 3, 1], rng=np.random.default_rng(0))
    before = [p.copy() for p in net.weights + net.biases]
    backprop(net, Example(np.array([[1.0, 0.0]]), np.array([[1.0]])))
    for old, new in zip(before, net.weights + net.biases):
        assert np.array_equal(old, new)


def test_gradients_are_not_aliased_with_accumulator():
    net = Network([2, 2, 1], rng=np.random.default_rng(0))
    example = Example(np.array([[1.0, 1.0]]), np.array([[0.0]]))
    grads, _ = backprop(net, example)
    snapshot = [g.copy() for g in grads.nabla_w]
    acc = Gradients.zeros_like(net)
    acc.accumulate(grads)
    acc.accumulate(grads)
    for g, s, a in zip(grads.nabla_w, snapshot, acc.nabla_w):
        assert np.array_equal(g, s)
        assert np.allclose(a, 2 * s)


def test_quadratic_cost_derivative_is_difference():
    out = np.array([[0.2, 0.9]])
    desired = np.array([[0.0, 1.0]])
    assert np.allclose(quadratic_cost_derivative(out, desired), [[0.2, -0.1]])
    value, grad = QUADRATIC(out, desired)
    assert value == pytest.approx(0.5 * (0.04 + 0.01))
    assert np.allclose(grad, out - desired)


@pytest.mark.parametrize("pair", [(np.zeros((1, 2)),), (1, 2, 3), 5])
def test_as_example_rejects_malformed_pairs(pair):
    net = Network([2, 1])
    with pytest.raises(MalformedExampleError):
        as_example(pair, net)


def test_as_example_checks_widths():
    net = Network([2, 1])
    with pytest.raises(ShapeMismatchError):
        as_example((np.zeros((1, 2)), np.zeros((1, 2))), net)
    example = as_example(([0.0, 1.0], [1.0]), net)
    assert example.inputs.shape == (1, 2)
    assert example.targets.shape == (1, 1)
