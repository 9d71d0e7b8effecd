# NN/matrix.py
from __future__ import annotations
from typing import Callable, Iterable, Optional, Sequence, Union
import numpy as np

from .errors import DimensionMismatch

Scalar = Union[int, float]
ScalarFn = Callable[[float], float]


class Matrix:
    """
    Dense R x C matrix of float64 values.

    Shape is fixed at construction. Operations named like verbs (add, multiply, map,
    randomize) mutate the receiver; the rest (subtract, matmul, transpose, mapped)
    return a new matrix and leave their operands untouched.
    """

    __slots__ = ("_data",)

    def __init__(self, rows: int, cols: int):
        for dim in (rows, cols):
            if isinstance(dim, bool) or not isinstance(dim, (int, np.integer)):
                raise ValueError(f"Matrix dimensions must be integers, got {rows!r}x{cols!r}")
        rows, cols = int(rows), int(cols)
        if rows < 1 or cols < 1:
            raise ValueError(f"Matrix dimensions must be positive, got {rows}x{cols}")
        self._data = np.zeros((rows, cols), dtype=np.float64)

    # ---------- Construction ----------
    @classmethod
    def from_list(cls, values: Sequence[Sequence[float]]) -> "Matrix":
        """Copy a rectangular nested sequence (list of rows)."""
        rows = [list(r) for r in values]
        if not rows or not rows[0]:
            raise DimensionMismatch("Matrix needs at least one row and one column")
        width = len(rows[0])
        for i, r in enumerate(rows):
            if len(r) != width:
                raise DimensionMismatch(f"row {i} has {len(r)} elements, expected {width}")
        m = cls(len(rows), width)
        m._data[:, :] = np.asarray(rows, dtype=np.float64)
        return m

    @classmethod
    def from_array(cls, values: Iterable[float]) -> "Matrix":
        """Build an (n x 1) column matrix from an n-length sequence."""
        arr = np.asarray(list(values), dtype=np.float64).reshape(-1)
        if arr.size == 0:
            raise DimensionMismatch("cannot build a column matrix from an empty sequence")
        m = cls(arr.size, 1)
        m._data[:, 0] = arr
        return m

    @classmethod
    def _wrap(cls, arr: np.ndarray) -> "Matrix":
        m = cls.__new__(cls)
        m._data = np.ascontiguousarray(arr, dtype=np.float64)
        return m

    # ---------- Shape ----------
    @property
    def rows(self) -> int:
        return self._data.shape[0]

    @property
    def cols(self) -> int:
        return self._data.shape[1]

    @property
    def shape(self) -> tuple[int, int]:
        return (self.rows, self.cols)

    def _require_same_shape(self, other: "Matrix", op: str) -> None:
        if self.shape != other.shape:
            raise DimensionMismatch(
                f"{op}: shapes must match, got {self.rows}x{self.cols} and {other.rows}x{other.cols}"
            )

    # ---------- In-place ----------
    def add(self, other: Union["Matrix", Scalar]) -> None:
        if isinstance(other, Matrix):
            self._require_same_shape(other, "add")
            self._data += other._data
        else:
            self._data += float(other)

    def multiply(self, other: Union["Matrix", Scalar]) -> None:
        """Hadamard product with a matrix, or scaling by a scalar."""
        if isinstance(other, Matrix):
            self._require_same_shape(other, "multiply")
            self._data *= other._data
        else:
            self._data *= float(other)

    def map(self, func: ScalarFn) -> None:
        self._data[:, :] = _apply(func, self._data)

    def randomize(self, rng: Optional[np.random.Generator] = None) -> None:
        """Fill every cell with an independent uniform sample in [-1, 1)."""
        rng = rng or np.random.default_rng()
        self._data[:, :] = rng.uniform(-1.0, 1.0, size=self._data.shape)

    # ---------- New matrix ----------
    def subtract(self, other: "Matrix") -> "Matrix":
        self._require_same_shape(other, "subtract")
        return Matrix._wrap(self._data - other._data)

    def matmul(self, other: "Matrix") -> "Matrix":
        if self.cols != other.rows:
            raise DimensionMismatch(
                f"matmul: cols of A ({self.cols}) must match rows of B ({other.rows})"
            )
        return Matrix._wrap(self._data @ other._data)

    def transpose(self) -> "Matrix":
        return Matrix._wrap(self._data.T)

    def mapped(self, func: ScalarFn) -> "Matrix":
        return Matrix._wrap(_apply(func, self._data))

    def copy(self) -> "Matrix":
        return Matrix._wrap(self._data.copy())

    # ---------- Export ----------
    def to_array(self) -> list[float]:
        """Row-major flatten to rows*cols floats."""
        return [float(v) for v in self._data.reshape(-1)]

    def to_list(self) -> list[list[float]]:
        return [[float(v) for v in row] for row in self._data]

    # ---------- Operators ----------
    def __matmul__(self, other: "Matrix") -> "Matrix":
        return self.matmul(other)

    def __sub__(self, other: "Matrix") -> "Matrix":
        return self.subtract(other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"Matrix({self.rows}x{self.cols}, {self.to_list()})"


def _apply(func: ScalarFn, data: np.ndarray) -> np.ndarray:
    # cells are independent; func must be a pure scalar function
    flat = np.fromiter((func(float(v)) for v in data.flat), dtype=np.float64, count=data.size)
    return flat.reshape(data.shape)
