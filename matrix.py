# Square matrices (2x2, 3x3, 4x4) for transforming geometry vectors.
#
# Row-major, indexed as m[row, col]. Matrices are immutable; everything
# returns a new one. Inverses are by cofactor expansion:
#   inverse(m) = transpose(cofactor(m)) / det(m)
# https://en.wikipedia.org/wiki/Invertible_matrix#In_relation_to_its_adjugate

import math
import typing

from geometry import Vec3f, Vec4f

_Rows = typing.Tuple[typing.Tuple[float, ...], ...]


class _Matrix:
    LEN = 0

    def __init__(self, rows: typing.Optional[typing.Iterable[
                 typing.Iterable[float]]] = None):
        if rows is None:
            self.rows: _Rows = tuple(
                tuple(0.0 for _ in range(self.LEN)) for _ in range(self.LEN))
        else:
            self.rows = tuple(tuple(float(v) for v in row) for row in rows)
        if (len(self.rows) != self.LEN
                or any(len(row) != self.LEN for row in self.rows)):
            raise ValueError(
                f"{type(self).__name__} needs {self.LEN}x{self.LEN} values")

    def __getitem__(self, index: typing.Tuple[int, int]) -> float:
        (row, col) = index
        if not (0 <= row < self.LEN and 0 <= col < self.LEN):
            raise IndexError(f"no element [{row}, {col}]")
        return self.rows[row][col]

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.rows == other.rows

    def __hash__(self) -> int:
        return hash((type(self), self.rows))

    def __matmul__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        n = self.LEN
        return type(self)(
            [sum(self.rows[i][k] * other.rows[k][j] for k in range(n))
             for j in range(n)]
            for i in range(n))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.rows!r})"

    def __str__(self) -> str:
        return "".join(" ".join(str(v) for v in row) + " \n"
                       for row in self.rows)

    def transpose(self):
        return type(self)(zip(*self.rows))

    def replace(self, row: int, col: int, value: float):
        """Copy with one element changed."""
        self[row, col]  # Bounds check.
        rows = [list(r) for r in self.rows]
        rows[row][col] = value
        return type(self)(rows)

    def is_close(self, other, abs_tol: float = 1e-6) -> bool:
        return all(math.isclose(a, b, abs_tol=abs_tol)
                   for (ra, rb) in zip(self.rows, other.rows)
                   for (a, b) in zip(ra, rb))

    @classmethod
    def identity(cls):
        return cls([1.0 if r == c else 0.0 for c in range(cls.LEN)]
                   for r in range(cls.LEN))


class Matrix2(_Matrix):
    LEN = 2


class Matrix3(_Matrix):
    LEN = 3

    def with_column(self, col: int, v: Vec3f) -> 'Matrix3':
        rows = [list(r) for r in self.rows]
        for r in range(self.LEN):
            rows[r][col] = v[r]
        return Matrix3(rows)

    def with_row(self, row: int, v: Vec3f) -> 'Matrix3':
        rows = [list(r) for r in self.rows]
        rows[row] = list(v)
        return Matrix3(rows)


class Matrix4(_Matrix):
    LEN = 4

    @classmethod
    def zoom(cls, scale: float) -> 'Matrix4':
        # Scales h too, which cancels out after a perspective divide.
        return cls([scale if r == c else 0.0 for c in range(4)]
                   for r in range(4))

    @classmethod
    def rotation_z(cls, angle: float) -> 'Matrix4':
        cosangle = math.cos(angle)
        sinangle = math.sin(angle)
        return cls([
            [cosangle, -sinangle, 0.0, 0.0],
            [sinangle, cosangle, 0.0, 0.0],
            [0.0, 0.0, 1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ])


_SMALLER = {Matrix4: Matrix3, Matrix3: Matrix2}


def minor(m: _Matrix, row: int, col: int) -> _Matrix:
    """The matrix one size down with row and col struck out."""
    return _SMALLER[type(m)](
        [v for (c, v) in enumerate(r) if c != col]
        for (i, r) in enumerate(m.rows) if i != row)


def cofactor(m: _Matrix, row: int, col: int) -> float:
    sign = 1 if (row + col) % 2 == 0 else -1
    return det(minor(m, row, col)) * sign


def cofactor_matrix(m: _Matrix) -> _Matrix:
    return type(m)([cofactor(m, row, col) for col in range(m.LEN)]
                   for row in range(m.LEN))


def det(m: _Matrix) -> float:
    if isinstance(m, Matrix2):
        return m[0, 0] * m[1, 1] - m[0, 1] * m[1, 0]
    # Expand along the top row.
    return sum(m[0, i] * cofactor(m, 0, i) for i in range(m.LEN))


def _scaled(m: _Matrix, factor: float) -> _Matrix:
    return type(m)([v * factor for v in row] for row in m.rows)


def inverse(m: typing.Union[Matrix3, Matrix4]):
    """Raises ZeroDivisionError for a singular matrix."""
    cof = cofactor_matrix(m)
    determinant = sum(m[0, i] * cof[0, i] for i in range(m.LEN))
    return _scaled(cof.transpose(), 1.0 / determinant)


def transpose_inverse(m: Matrix4) -> Matrix4:
    # transpose(inverse(m)) is just cofactor(m) / det(m); no transposes needed.
    # This is what normals want.
    cof = cofactor_matrix(m)
    determinant = sum(m[0, i] * cof[0, i] for i in range(m.LEN))
    return _scaled(cof, 1.0 / determinant)


@typing.overload
def mult(m: Matrix3, v: Vec3f) -> Vec3f: ...
@typing.overload
def mult(m: Matrix4, v: Vec4f) -> Vec4f: ...
def mult(m, v):
    if isinstance(m, Matrix3) and isinstance(v, Vec3f):
        return Vec3f(*(sum(m[r, c] * v[c] for c in range(3)) for r in range(3)))
    if isinstance(m, Matrix4) and isinstance(v, Vec4f):
        return Vec4f(*(sum(m[r, c] * v[c] for c in range(4)) for r in range(4)))
    raise TypeError(f"can't multiply {type(m).__name__} by {type(v).__name__}")
