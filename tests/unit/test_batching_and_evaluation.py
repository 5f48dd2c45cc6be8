import math

import numpy as np
import pytest

from backpropnet.core.errors import ConfigurationError
from backpropnet.core.network import Network
from backpropnet.core.types import Example, Score
from backpropnet.data.xor import make_xor_dataset, xor_truth_table
from backpropnet.training.batching import count_batches, iter_batches
from backpropnet.training.evaluation import evaluate, within_tolerance


@pytest.mark.parametrize("n,batch_size", [(10, 3), (9, 3), (1, 5), (0, 2), (7, 1)])
def test_partition_counts(n, batch_size):
    examples = list(range(n))
    batches = list(iter_batches(examples, batch_size))
    assert len(batches) == math.ceil(n / batch_size) == count_batches(n, batch_size)
    assert sum(len(b) for b in batches) == n
    assert all(len(b) == batch_size for b in batches[:-1])
    if batches:
        assert 1 <= len(batches[-1]) <= batch_size


def test_partition_is_positional():
    batches = list(iter_batches(list(range(7)), 3))
    assert [b.examples for b in batches] == [[0, 1, 2], [3, 4, 5], [6]]


def test_partition_rejects_bad_batch_size():
    with pytest.raises(ConfigurationError):
        list(iter_batches([1, 2], 0))
    with pytest.raises(ConfigurationError):
        count_batches(2, 0)


def test_within_tolerance():
    accept = within_tolerance(0.1)
    assert accept(np.array([[0.95]]), np.array([[1.0]]))
    assert not accept(np.array([[0.85]]), np.array([[1.0]]))
    assert not accept(np.array([[0.0, 0.5]]), np.array([[0.0, 1.0]]))


def test_evaluate_counts_accepted_outputs():
    net = Network([2, 1], rng=np.random.default_rng(0))
    calls = []

    def accept_first_only(produced, desired):
        calls.append((produced.shape, desired.shape))
        return len(calls) == 1

    score = evaluate(net, xor_truth_table(), accept_first_only)
    assert score == Score(correct=1, total=4)
    assert str(score) == "1/4"
    assert score.accuracy == pytest.approx(0.25)
    assert calls == [((1, 1), (1, 1))] * 4


def test_evaluate_accepts_plain_pairs():
    net = Network([2, 1], rng=np.random.default_rng(0))
    pairs = [(np.array([[0.0, 0.0]]), np.array([[0.0]]))]
    assert evaluate(net, pairs, lambda p, d: True) == Score(1, 1)


def test_xor_datasets():
    table = xor_truth_table()
    assert [(e.inputs.tolist(), e.targets.tolist()) for e in table] == [
        ([[0.0, 0.0]], [[0.0]]),
        ([[0.0, 1.0]], [[1.0]]),
        ([[1.0, 0.0]], [[1.0]]),
        ([[1.0, 1.0]], [[0.0]]),
    ]
    sampled = make_xor_dataset(50, np.random.default_rng(0))
    assert len(sampled) == 50
    for example in sampled:
        assert isinstance(example, Example)
        x, y = example.inputs[0]
        assert example.targets[0, 0] == float(int(x) ^ int(y))
