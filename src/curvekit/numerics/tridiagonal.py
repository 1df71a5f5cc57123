"""
Tridiagonal linear systems.

Solves A x = b with the Thomas algorithm, an O(n) specialisation of Gaussian
elimination. No pivoting is performed: the algorithm assumes a diagonally
dominant matrix, which holds for the natural cubic spline system. A zero or
tiny pivot is not trapped and yields inf/nan in the result.
"""

from typing import Sequence

import numpy as np

from ..errors import MatrixShapeError
from .value import to_array


class TridiagonalMatrix:
    """
    Square tridiagonal matrix stored as three diagonals.

    Attributes:
        lower: Sub-diagonal, length n-1
        diagonal: Main diagonal, length n
        upper: Super-diagonal, length n-1
    """

    def __init__(self, lower: Sequence, diagonal: Sequence, upper: Sequence):
        if not (len(lower) == len(upper) and len(upper) + 1 == len(diagonal)):
            raise MatrixShapeError(
                f"diagonal lengths must be (n-1, n, n-1), got "
                f"({len(lower)}, {len(diagonal)}, {len(upper)})"
            )
        self.lower = to_array(lower)
        self.diagonal = to_array(diagonal)
        self.upper = to_array(upper)

    @property
    def size(self) -> int:
        return len(self.diagonal)

    def _check_vector(self, v: Sequence, name: str) -> np.ndarray:
        if len(v) != self.size:
            raise MatrixShapeError(
                f"{name} has length {len(v)}, matrix size is {self.size}"
            )
        return to_array(v)

    def solve(self, b: Sequence) -> np.ndarray:
        """
        Solve A x = b.

        Args:
            b: Right-hand side of length n

        Returns:
            Solution vector x as a new array
        """
        rhs = self._check_vector(b, "b")
        n = self.size
        dtype = np.result_type(self.diagonal, rhs)

        if n == 1:
            return np.array([rhs[0] / self.diagonal[0]], dtype=dtype)

        a, d, c = self.lower, self.diagonal, self.upper

        # Forward elimination: modified super-diagonal and right-hand side
        c_mod = np.empty(n - 1, dtype=dtype)
        x = np.empty(n, dtype=dtype)
        c_mod[0] = c[0] / d[0]
        x[0] = rhs[0] / d[0]
        for i in range(1, n):
            pivot = d[i] - a[i - 1] * c_mod[i - 1]
            if i < n - 1:
                c_mod[i] = c[i] / pivot
            x[i] = (rhs[i] - a[i - 1] * x[i - 1]) / pivot

        # Back substitution
        for i in range(n - 2, -1, -1):
            x[i] = x[i] - c_mod[i] * x[i + 1]

        return x

    def dot(self, x: Sequence) -> np.ndarray:
        """Matrix-vector product A x."""
        v = self._check_vector(x, "x")
        n = self.size
        out = np.empty(n, dtype=np.result_type(self.diagonal, v))
        for i in range(n):
            acc = self.diagonal[i] * v[i]
            if i + 1 < n:
                acc = acc + self.upper[i] * v[i + 1]
            if i > 0:
                acc = acc + self.lower[i - 1] * v[i - 1]
            out[i] = acc
        return out

    def __matmul__(self, x: Sequence) -> np.ndarray:
        return self.dot(x)

    def to_dense(self) -> np.ndarray:
        """Dense n x n representation."""
        n = self.size
        dense = np.zeros((n, n), dtype=np.result_type(self.diagonal, np.float64))
        for i in range(n):
            dense[i, i] = self.diagonal[i]
            if i + 1 < n:
                dense[i, i + 1] = self.upper[i]
                dense[i + 1, i] = self.lower[i]
        return dense

    def __repr__(self) -> str:
        return f"TridiagonalMatrix(size={self.size})"


__all__ = ["TridiagonalMatrix"]
