"""
Secret Sharing Engine
Split a secret scalar into n shares, either t-out-of-n or n-out-of-n.

Threshold (Shamir) sharing samples a random polynomial of degree t-1
whose constant term is the secret and evaluates it at each party's
preimage. Any t evaluations determine the polynomial, and hence f(0);
any t-1 of them reveal nothing.

Additive sharing draws n-1 random shares and picks the last one so that
all n sum to the secret. Every share is needed to reconstruct.

The functions here return raw share values. A zero share is possible
(with negligible probability) and is left for the caller to reject.
"""

from dataclasses import dataclass

from ecdsa.numbertheory import inverse_mod

from keyshare.curves import Curve, Point


@dataclass(frozen=True)
class Polynomial:
    """A polynomial over GF(order), constant term first."""
    coefficients: tuple[int, ...]
    order: int

    @classmethod
    def sample_with_const_term(cls, curve: Curve, degree: int, const_term: int, rng=None) -> "Polynomial":
        """
        Sample a random polynomial of the given degree with f(0) = const_term.

        f(x) = const_term + a1*x + a2*x^2 + ... + a_degree*x^degree
        """
        coefficients = [curve.scalar(const_term)]
        for _ in range(degree):
            coefficients.append(curve.random_scalar(rng))
        return cls(coefficients=tuple(coefficients), order=curve.order)

    @property
    def degree(self) -> int:
        return len(self.coefficients) - 1

    def value(self, x: int) -> int:
        """Evaluate at x using Horner's method."""
        result = 0
        for coeff in reversed(self.coefficients):
            result = (result * x + coeff) % self.order
        return result


def lagrange_coefficient(x: int, j: int, points: list[int], order: int) -> int | None:
    """
    Lagrange basis polynomial for points[j], evaluated at x.

        lambda_j(x) = prod_{m != j} (x - x_m) / (x_j - x_m)

    Returns None if the points are not pairwise distinct.
    """
    xj = points[j] % order
    numerator = 1
    denominator = 1
    for m, xm in enumerate(points):
        if m == j:
            continue
        xm %= order
        if xm == xj:
            return None
        numerator = (numerator * (x - xm)) % order
        denominator = (denominator * (xj - xm)) % order
    return (numerator * inverse_mod(denominator, order)) % order


def lagrange_coefficients(x: int, points: list[int], order: int) -> list[int] | None:
    """All Lagrange coefficients for ``points`` at x, or None on a collision."""
    if len({p % order for p in points}) != len(points):
        return None
    return [lagrange_coefficient(x, j, points, order) for j in range(len(points))]


def interpolate_scalars(x: int, points: list[int], values: list[int], order: int) -> int | None:
    """Value at x of the polynomial through (points[i], values[i])."""
    coefficients = lagrange_coefficients(x, points, order)
    if coefficients is None:
        return None
    return sum(lam * v for lam, v in zip(coefficients, values)) % order


def interpolate_points(x: int, points: list[int], values: list[Point], curve: Curve) -> Point | None:
    """
    Value at x of the point-valued polynomial through (points[i], values[i]).

    This is interpolation "in the exponent": if values[i] = G * f(points[i])
    then the result is G * f(x).
    """
    coefficients = lagrange_coefficients(x, points, curve.order)
    if coefficients is None:
        return None
    result = curve.identity
    for lam, value in zip(coefficients, values):
        result = result + curve.mul(value, lam)
    return result


def share_threshold(curve: Curve, secret: int, threshold: int, preimages: list[int], rng=None) -> list[int]:
    """
    Shamir-share ``secret`` at the given preimages.

    Args:
        curve: Group whose scalar field the shares live in.
        secret: The constant term f(0).
        threshold: t. The polynomial has degree t-1.
        preimages: Evaluation point of each party, in party order.
        rng: Randomness source (random.Random API).

    Returns:
        f(preimages[i]) for every party.
    """
    f = Polynomial.sample_with_const_term(curve, threshold - 1, secret, rng)
    return [f.value(preimage) for preimage in preimages]


def share_additive(curve: Curve, secret: int, num_shares: int, rng=None) -> list[int]:
    """
    Split ``secret`` into ``num_shares`` values summing to it.

    The first n-1 shares are uniform non-zero scalars, the last is
    secret minus their sum.
    """
    shares = [curve.random_nonzero_scalar(rng) for _ in range(num_shares - 1)]
    shares.append(curve.scalar(secret - sum(shares)))
    return shares
