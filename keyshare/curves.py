"""
Elliptic Curve Groups
The prime-order groups key shares live in.

Scalars are plain ints reduced modulo the group order, the same way the
rest of the package does field arithmetic. Points are immutable values
bound to their curve.

Multiplying the generator by a secret scalar is delegated to the
``cryptography`` backend (OpenSSL). Arithmetic on arbitrary points, which
only ever touches public values, is done by the ``ecdsa`` library.
"""

import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import ecdsa
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat
from ecdsa.ellipticcurve import INFINITY, PointJacobi
from ecdsa.numbertheory import inverse_mod


_system_rng = secrets.SystemRandom()


def default_rng():
    """The OS-backed CSPRNG used when a caller does not supply one."""
    return _system_rng


@dataclass(frozen=True)
class Point:
    """
    A point on an elliptic curve.

    ``x`` and ``y`` are affine coordinates; both are ``None`` for the
    identity (point at infinity). Construction checks the point lies on
    the curve.
    """
    curve: "Curve" = field(repr=False)
    x: int | None = None
    y: int | None = None

    def __post_init__(self):
        if (self.x is None) != (self.y is None):
            raise ValueError("Both coordinates must be set, or neither")
        if self.x is not None and not self.curve.contains(self.x, self.y):
            raise ValueError(f"Point is not on {self.curve.name}")

    @property
    def is_identity(self) -> bool:
        return self.x is None

    def __add__(self, other: "Point") -> "Point":
        return self.curve.add(self, other)

    def __neg__(self) -> "Point":
        return self.curve.negate(self)

    def __sub__(self, other: "Point") -> "Point":
        return self.curve.add(self, self.curve.negate(other))

    def __mul__(self, k: int) -> "Point":
        if not isinstance(k, int):
            return NotImplemented
        if self == self.curve.generator:
            return self.curve.base_mul(k)
        return self.curve.mul(self, k)

    __rmul__ = __mul__

    def to_bytes(self) -> bytes:
        """SEC1 compressed encoding (a single zero byte for the identity)."""
        return self.curve.point_to_bytes(self)

    def __repr__(self) -> str:
        if self.is_identity:
            return f"Point({self.curve.name}, identity)"
        return f"Point({self.curve.name}, {self.to_bytes().hex()})"


class Curve(ABC):
    """
    Capability interface of a prime-order group.

    The sharing engine, validator and reconstruction are written against
    this interface only. Implementations provide ``name`` and ``order``
    attributes plus the operations below.
    """

    name: str
    order: int

    @property
    @abstractmethod
    def generator(self) -> Point:
        """The fixed group generator."""

    @property
    def identity(self) -> Point:
        return Point(self)

    @abstractmethod
    def contains(self, x: int, y: int) -> bool:
        """Whether affine (x, y) is on the curve."""

    @abstractmethod
    def add(self, p: Point, q: Point) -> Point:
        """Group addition."""

    @abstractmethod
    def negate(self, p: Point) -> Point:
        """Additive inverse."""

    @abstractmethod
    def mul(self, p: Point, k: int) -> Point:
        """Scalar multiplication of an arbitrary (public) point."""

    def base_mul(self, k: int) -> Point:
        """Generator times ``k``."""
        return self.mul(self.generator, k)

    @abstractmethod
    def point_to_bytes(self, p: Point) -> bytes:
        """Encode a point."""

    @abstractmethod
    def point_from_bytes(self, data: bytes) -> Point:
        """Decode a point, rejecting encodings that are not on the curve."""

    def scalar(self, value: int) -> int:
        """Reduce an integer into the scalar field."""
        return value % self.order

    def random_scalar(self, rng=None) -> int:
        """Uniform scalar in [0, order)."""
        return (rng or default_rng()).randrange(self.order)

    def random_nonzero_scalar(self, rng=None) -> int:
        """Uniform non-zero scalar in [1, order)."""
        return (rng or default_rng()).randrange(1, self.order)

    def inverse(self, k: int) -> int:
        """Inverse of a non-zero scalar."""
        k %= self.order
        if k == 0:
            raise ZeroDivisionError("Zero scalar has no inverse")
        return inverse_mod(k, self.order)


class WeierstrassCurve(Curve):
    """
    Short Weierstrass curve with cofactor 1.

    Group arithmetic on public points is done by the ``ecdsa`` library;
    multiplying the generator by a secret scalar and SEC1 encoding go
    through the ``cryptography`` backend.

    Args:
        name: Curve name, also used for equality.
        params: ``ecdsa`` curve supplying field, coefficients, generator
            and order.
        backend: ``cryptography`` curve class for the same curve.
    """

    def __init__(self, name: str, params: ecdsa.curves.Curve, backend: type[ec.EllipticCurve]):
        self.name = name
        self.params = params
        self.p = params.curve.p()
        self.order = params.order
        self.backend = backend
        self._generator = Point(self, params.generator.x(), params.generator.y())

    @property
    def generator(self) -> Point:
        return self._generator

    def contains(self, x: int, y: int) -> bool:
        if not (0 <= x < self.p and 0 <= y < self.p):
            return False
        return self.params.curve.contains_point(x, y)

    def negate(self, p: Point) -> Point:
        if p.is_identity:
            return p
        return self._from_ecdsa(-self._to_ecdsa(p))

    def add(self, p: Point, q: Point) -> Point:
        return self._from_ecdsa(self._to_ecdsa(p) + self._to_ecdsa(q))

    def mul(self, p: Point, k: int) -> Point:
        k %= self.order
        if k == 0 or p.is_identity:
            return self.identity
        return self._from_ecdsa(self._to_ecdsa(p) * k)

    def base_mul(self, k: int) -> Point:
        k %= self.order
        if k == 0:
            return self.identity
        numbers = ec.derive_private_key(k, self.backend()).public_key().public_numbers()
        return Point(self, numbers.x, numbers.y)

    def point_to_bytes(self, p: Point) -> bytes:
        if p.is_identity:
            return b"\x00"
        key = ec.EllipticCurvePublicNumbers(p.x, p.y, self.backend()).public_key()
        return key.public_bytes(Encoding.X962, PublicFormat.CompressedPoint)

    def point_from_bytes(self, data: bytes) -> Point:
        if data == b"\x00":
            return self.identity
        key = ec.EllipticCurvePublicKey.from_encoded_point(self.backend(), data)
        numbers = key.public_numbers()
        return Point(self, numbers.x, numbers.y)

    def _to_ecdsa(self, p: Point):
        if p.is_identity:
            return INFINITY
        return PointJacobi(self.params.curve, p.x, p.y, 1, self.order)

    def _from_ecdsa(self, q) -> Point:
        if q == INFINITY:
            return self.identity
        return Point(self, q.x(), q.y())

    def __eq__(self, other) -> bool:
        return isinstance(other, WeierstrassCurve) and other.name == self.name

    def __hash__(self) -> int:
        return hash(("weierstrass", self.name))

    def __repr__(self) -> str:
        return f"WeierstrassCurve({self.name!r})"


SECP256K1 = WeierstrassCurve("secp256k1", ecdsa.SECP256k1, ec.SECP256K1)
SECP256R1 = WeierstrassCurve("secp256r1", ecdsa.NIST256p, ec.SECP256R1)

DEFAULT_CURVE = SECP256K1

CURVES = {curve.name: curve for curve in (SECP256K1, SECP256R1)}
