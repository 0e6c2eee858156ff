# Small fixed-size vectors for 2D/3D drawing onto a tga.Image.
#
# These are plain immutable values. Indexing is by component number, so
# v[0] is x, v[1] is y, and so on; going past the arity is an IndexError.

import dataclasses
import math
import typing


class _Vector:
    """Shared arithmetic; subclasses are dataclasses listing the components."""

    def _components(self) -> tuple:
        return dataclasses.astuple(self)

    def __getitem__(self, i: int):
        components = self._components()
        if i < 0 or i >= len(components):
            raise IndexError(f"{type(self).__name__} has no component {i}")
        return components[i]

    def __len__(self) -> int:
        return len(self._components())

    def __iter__(self):
        return iter(self._components())

    def with_component(self, i: int, value):
        """Copy of this vector with component i replaced."""
        self[i]  # Bounds check.
        field = dataclasses.fields(self)[i].name
        return dataclasses.replace(self, **{field: value})

    def __add__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return type(self)(*(a + b for (a, b) in zip(self, other)))

    def __sub__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return type(self)(*(a - b for (a, b) in zip(self, other)))


class _FloatVector(_Vector):
    def __mul__(self, num: float):
        return type(self)(*(a * num for a in self))

    __rmul__ = __mul__

    def __truediv__(self, num: float):
        return type(self)(*(a / num for a in self))

    def norm(self) -> float:
        return math.sqrt(sum(a * a for a in self))

    def normalize(self):
        # A zero vector divides by zero, same as any other division would.
        return self / self.norm()


@dataclasses.dataclass(frozen=True)
class Vec2f(_FloatVector):
    x: float = 0.0
    y: float = 0.0


@dataclasses.dataclass(frozen=True)
class Vec3f(_FloatVector):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclasses.dataclass(frozen=True)
class Vec4f(_FloatVector):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    h: float = 0.0


@dataclasses.dataclass(frozen=True)
class Vec2i(_Vector):
    x: int = 0
    y: int = 0


@dataclasses.dataclass(frozen=True)
class Vec3i(_Vector):
    x: int = 0
    y: int = 0
    z: int = 0


def cross(l: Vec3f, r: Vec3f) -> Vec3f:
    return Vec3f(l.y * r.z - l.z * r.y,
                 l.z * r.x - l.x * r.z,
                 l.x * r.y - l.y * r.x)


def dot(l: Vec3f, r: Vec3f) -> float:
    return l.x * r.x + l.y * r.y + l.z * r.z


def embed_4d(v: Vec3f, fill: float = 1.0) -> Vec4f:
    """Lift a point (fill=1) or direction (fill=0) into homogeneous space."""
    return Vec4f(v.x, v.y, v.z, fill)


def project_2d(v: typing.Union[Vec3f, Vec4f]) -> Vec2f:
    return Vec2f(v.x, v.y)


def project_3d(v: Vec4f) -> Vec3f:
    # Just drops h; no perspective divide.
    return Vec3f(v.x, v.y, v.z)
