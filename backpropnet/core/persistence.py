"""Persistence of network weights and biases.

The binary layout stores, for every layer in order, the weight matrix followed
by the bias row. Each matrix is written as two little-endian ``int64`` values
(rows, columns) and then its entries as little-endian ``float64`` in row-major
order. Shapes are not recovered from the file: reading walks it positionally
and requires the network to already have matching shapes.
"""

from __future__ import annotations

import zipfile
from pathlib import Path
from typing import BinaryIO, Tuple

import numpy as np

from .errors import PersistenceError, ShapeMismatchError
from .network import Network
from .types import Array

_HEADER = np.dtype("<i8")
_ENTRY = np.dtype("<f8")


def encoded_size(shape: Tuple[int, int]) -> int:
    rows, cols = shape
    return 2 * _HEADER.itemsize + rows * cols * _ENTRY.itemsize


def encode_matrix(matrix: Array) -> bytes:
    """Serialise a 2-D array into the header + row-major payload format."""

    matrix = np.asarray(matrix)
    if matrix.ndim != 2:
        raise ShapeMismatchError(f"Only 2-D matrices can be encoded, got {matrix.ndim}-D")
    header = np.array(matrix.shape, dtype=_HEADER).tobytes()
    return header + np.ascontiguousarray(matrix, dtype=_ENTRY).tobytes()


def decode_matrix(buffer: bytes, shape: Tuple[int, int]) -> Array:
    """Decode one matrix of ``shape`` from ``buffer``."""

    expected = encoded_size(shape)
    if len(buffer) < expected:
        raise PersistenceError(
            f"Truncated matrix data: expected {expected} bytes, got {len(buffer)}"
        )
    rows, cols = (int(v) for v in np.frombuffer(buffer, dtype=_HEADER, count=2))
    if (rows, cols) != tuple(shape):
        raise ShapeMismatchError(
            f"Persisted matrix has shape {(rows, cols)}, expected {tuple(shape)}"
        )
    data = np.frombuffer(
        buffer, dtype=_ENTRY, count=rows * cols, offset=2 * _HEADER.itemsize
    )
    return data.astype(np.float64).reshape(rows, cols)


def _read_matrix(handle: BinaryIO, shape: Tuple[int, int]) -> Array:
    return decode_matrix(handle.read(encoded_size(shape)), shape)


def dump_weights_biases(network: Network, path: str | Path) -> str:
    """Write every weight matrix and bias row of ``network`` to ``path``."""

    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as handle:
            for W, b in zip(network.weights, network.biases):
                handle.write(encode_matrix(W))
                handle.write(encode_matrix(b))
    except OSError as exc:
        raise PersistenceError(f"Unable to write weights to {path}: {exc}") from exc
    return str(path)


def read_weights_biases(network: Network, path: str | Path) -> None:
    """Load parameters written by :func:`dump_weights_biases` into ``network``.

    All matrices are decoded before any parameter is replaced, so a failed
    read leaves the network untouched.
    """

    path = Path(path)
    weights: list[Array] = []
    biases: list[Array] = []
    try:
        with path.open("rb") as handle:
            for W, b in zip(network.weights, network.biases):
                weights.append(_read_matrix(handle, W.shape))
                biases.append(_read_matrix(handle, b.shape))
    except OSError as exc:
        if isinstance(exc, PersistenceError):
            raise
        raise PersistenceError(f"Unable to read weights from {path}: {exc}") from exc
    for idx, (W, b) in enumerate(zip(weights, biases)):
        network.weights[idx][...] = W
        network.biases[idx][...] = b


def save_checkpoint(network: Network, path: str | Path) -> str:
    """Store ``network.state_dict()`` as a compressed ``.npz`` archive."""

    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as handle:
            np.savez_compressed(handle, **network.state_dict())
    except OSError as exc:
        raise PersistenceError(f"Unable to write checkpoint {path}: {exc}") from exc
    return str(path)


def load_checkpoint(network: Network, path: str | Path) -> None:
    path = Path(path)
    try:
        with np.load(path, allow_pickle=False) as archive:
            state = {name: archive[name] for name in archive.files}
    except (OSError, ValueError, zipfile.BadZipFile) as exc:
        raise PersistenceError(f"Unable to read checkpoint {path}: {exc}") from exc
    network.load_state_dict(state)


__all__ = [
    "encode_matrix",
    "decode_matrix",
    "dump_weights_biases",
    "read_weights_biases",
    "save_checkpoint",
    "load_checkpoint",
]
