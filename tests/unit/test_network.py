import numpy as np
import pytest

from backpropnet.core.activations import sigmoid, sigmoid_prime
from backpropnet.core.errors import ConfigurationError, ShapeMismatchError
from backpropnet.core.network import Network


@pytest.mark.parametrize("sizes", [[1, 1], [2, 3, 4], [4, 8, 8, 2], [3, 1]])
def test_init_shapes(sizes):
    net = Network(sizes, rng=np.random.default_rng(0))
    assert net.num_layers == len(sizes)
    assert len(net.weights) == len(net.biases) == len(sizes) - 1
    for idx in range(len(sizes) - 1):
        assert net.weights[idx].shape == (sizes[idx], sizes[idx + 1])
        assert net.biases[idx].shape == (1, sizes[idx + 1])


@pytest.mark.parametrize("sizes", [[], [3]])
def test_init_requires_two_layers(sizes):
    with pytest.raises(ConfigurationError):
        Network(sizes)


def test_init_rejects_non_positive_sizes():
    with pytest.raises(ConfigurationError):
        Network([2, 0, 1])


def test_init_is_reproducible_with_injected_rng():
    a = Network([2, 3, 1], rng=np.random.default_rng(7))
    b = Network([2, 3, 1], rng=np.random.default_rng(7))
    for wa, wb in zip(a.weights + a.biases, b.weights + b.biases):
        assert np.array_equal(wa, wb)


def test_feedforward_output_width_and_range():
    net = Network([2, 3, 4], rng=np.random.default_rng(1))
    out = net.feedforward(np.array([[0.5, 0.5]]))
    assert out.shape == (1, 4)
    assert np.all((out > 0.0) & (out < 1.0))


def test_feedforward_accepts_flat_input():
    net = Network([2, 3, 1], rng=np.random.default_rng(1))
    assert np.array_equal(net.feedforward([0.1, 0.9]), net.feedforward(np.array([[0.1, 0.9]])))


def test_feedforward_is_deterministic():
    net = Network([3, 5, 2], rng=np.random.default_rng(2))
    x = np.random.default_rng(3).standard_normal((1, 3))
    first = net.feedforward(x)
    second = net.feedforward(x)
    assert np.array_equal(first, second)


def test_feedforward_matches_manual_computation():
    net = Network([2, 2], rng=np.random.default_rng(4))
    x = np.array([[0.3, -0.7]])
    expected = sigmoid(x @ net.weights[0] + net.biases[0])
    assert np.allclose(net.feedforward(x), expected)


def test_feedforward_rejects_wrong_width():
    net = Network([2, 3, 1], rng=np.random.default_rng(0))
    with pytest.raises(ShapeMismatchError):
        net.feedforward(np.zeros((1, 3)))
    with pytest.raises(ShapeMismatchError):
        net.feedforward(np.zeros((2, 2)))


def test_trace_records_every_layer():
    net = Network([2, 3, 4, 1], rng=np.random.default_rng(5))
    output, trace = net.trace(np.array([[1.0, 0.0]]))
    assert len(trace.activations) == 4
    assert len(trace.zs) == 3
    assert np.array_equal(trace.activations[-1], output)
    for z, a in zip(trace.zs, trace.activations[1:]):
        assert np.allclose(sigmoid(z), a)


def test_state_dict_round_trip_and_shape_check():
    src = Network([2, 3, 1], rng=np.random.default_rng(0))
    dst = Network([2, 3, 1], rng=np.random.default_rng(1))
    dst.load_state_dict(src.state_dict())
    for a, b in zip(src.weights + src.biases, dst.weights + dst.biases):
        assert np.array_equal(a, b)

    bad = dict(src.state_dict())
    bad["W0"] = np.zeros((3, 3))
    with pytest.raises(ShapeMismatchError):
        dst.load_state_dict(bad)
    del bad["W0"]
    with pytest.raises(KeyError):
        dst.load_state_dict(bad)


def test_parameter_count():
    assert Network([2, 3, 1]).parameter_count() == 2 * 3 + 3 + 3 * 1 + 1


def test_sigmoid_prime_peak():
    assert sigmoid(np.array(0.0)) == pytest.approx(0.5)
    assert sigmoid_prime(np.array(0.0)) == pytest.approx(0.25)
    z = np.linspace(-5, 5, 11)
    assert np.all(sigmoid_prime(z) <= 0.25)


def test_sigmoid_saturates_without_overflow():
    z = np.array([[-1000.0, -50.0, 0.0, 50.0, 1000.0]])
    with np.errstate(all="raise"):
        out = sigmoid(z)
        grad = sigmoid_prime(z)
    assert out[0, 0] == pytest.approx(0.0, abs=1e-300)
    assert out[0, -1] == pytest.approx(1.0)
    assert np.all(np.isfinite(grad))
    assert np.all(grad >= 0.0)


def test_feedforward_with_large_weights_stays_finite():
    net = Network([2, 2, 1], rng=np.random.default_rng(0))
    net.weights[0][...] = np.array([[1e4, -1e4], [1e4, -1e4]])
    net.weights[1][...] = np.array([[-1e4], [1e4]])
    with np.errstate(all="raise"):
        out = net.feedforward(np.array([[1.0, 1.0]]))
    assert out.shape == (1, 1)
    assert 0.0 <= out[0, 0] <= 1.0
