"""
Utility functions for polynomial arithmetic over GF(2).

Polynomials are encoded as non-negative Python integers: bit l holds the
coefficient of z^l. With this encoding the integer index i and the
polynomial i(z) share the same bits, which is what polynomial lattice
rules rely on.
"""

from functools import lru_cache
from typing import List, Tuple


def poly_degree(p: int) -> int:
    """
    Degree of a polynomial over GF(2).

    Parameters
    ----------
    p : int
        Polynomial encoded as a bit mask.

    Returns
    -------
    int
        Degree of p, or -1 for the zero polynomial.

    Examples
    --------
    >>> poly_degree(0b1011)
    3
    >>> poly_degree(0)
    -1
    """
    return p.bit_length() - 1


def _check_non_negative(*polys: int) -> None:
    for p in polys:
        if p < 0:
            raise ValueError(
                f"Polynomials over GF(2) are non-negative bit masks, got {p}"
            )


def poly_mul(a: int, b: int) -> int:
    """Carry-less product of two polynomials over GF(2)."""
    _check_non_negative(a, b)
    result = 0
    while b:
        if b & 1:
            result ^= a
        a <<= 1
        b >>= 1
    return result


def poly_divmod(a: int, b: int) -> Tuple[int, int]:
    """
    Euclidean division of polynomials over GF(2).

    Parameters
    ----------
    a : int
        Dividend.
    b : int
        Divisor, must be nonzero.

    Returns
    -------
    quotient : int
    remainder : int
        Satisfy a = quotient * b + remainder with deg(remainder) < deg(b).

    Raises
    ------
    ZeroDivisionError
        If b is the zero polynomial.
    ValueError
        If an operand is negative.
    """
    _check_non_negative(a, b)
    if b == 0:
        raise ZeroDivisionError("polynomial division by zero")
    deg_b = poly_degree(b)
    quotient = 0
    while a and poly_degree(a) >= deg_b:
        shift = poly_degree(a) - deg_b
        quotient ^= 1 << shift
        a ^= b << shift
    return quotient, a


def poly_mod(a: int, b: int) -> int:
    """Remainder of a modulo b over GF(2)."""
    return poly_divmod(a, b)[1]


def poly_mulmod(a: int, b: int, modulus: int) -> int:
    """Product a * b reduced modulo `modulus` over GF(2)."""
    return poly_mod(poly_mul(a, b), modulus)


def poly_powmod(base: int, exponent: int, modulus: int) -> int:
    """
    Compute base^exponent modulo `modulus` over GF(2) by square-and-multiply.
    """
    if exponent < 0:
        raise ValueError(f"exponent must be non-negative, got {exponent}")
    result = poly_mod(1, modulus)
    base = poly_mod(base, modulus)
    while exponent:
        if exponent & 1:
            result = poly_mulmod(result, base, modulus)
        base = poly_mulmod(base, base, modulus)
        exponent >>= 1
    return result


def prime_factors(n: int) -> List[int]:
    """
    Distinct prime factors of n by trial division.

    Examples
    --------
    >>> prime_factors(63)
    [3, 7]
    >>> prime_factors(1)
    []
    """
    if n < 1:
        raise ValueError(f"n must be positive, got {n}")
    factors = []
    p = 2
    while p * p <= n:
        if n % p == 0:
            factors.append(p)
            while n % p == 0:
                n //= p
        p += 1
    if n > 1:
        factors.append(n)
    return factors


def is_primitive(p: int) -> bool:
    """
    Test whether p is a primitive polynomial over GF(2).

    p of degree s is primitive iff z has multiplicative order exactly
    2^s - 1 modulo p. A reducible p has fewer than 2^s - 1 units, so the
    order test alone also rules out reducible polynomials.
    """
    s = poly_degree(p)
    if s < 1:
        return False
    order = (1 << s) - 1
    z = 0b10
    if poly_powmod(z, order, p) != 1:
        return False
    return all(poly_powmod(z, order // r, p) != 1 for r in prime_factors(order))


@lru_cache(maxsize=None)
def _primitive_polynomials_of_degree(degree: int) -> Tuple[int, ...]:
    # Joe-Kuo ordering: increasing value of the inner coefficients c_1..c_{s-1}
    # where c_1 multiplies z^{s-1}.
    candidates = ((1 << degree) | (a << 1) | 1 for a in range(1 << (degree - 1)))
    return tuple(p for p in candidates if is_primitive(p))


def primitive_polynomials(count: int) -> List[int]:
    """
    First `count` primitive polynomials over GF(2).

    Polynomials are ordered by degree, then by their inner coefficients, which
    is the order used to assign polynomials to Sobol coordinates.

    Parameters
    ----------
    count : int
        Number of polynomials to return.

    Returns
    -------
    List[int]
        Primitive polynomials encoded as bit masks.

    Examples
    --------
    >>> primitive_polynomials(4)
    [3, 7, 11, 13]
    """
    result: List[int] = []
    degree = 1
    while len(result) < count:
        result.extend(_primitive_polynomials_of_degree(degree))
        degree += 1
    return result[:count]


def poly_to_str(p: int) -> str:
    """
    Human-readable form of a polynomial, highest degree first.

    Examples
    --------
    >>> poly_to_str(0b1011)
    'z^3 + z + 1'
    """
    if p == 0:
        return "0"
    terms = []
    for l in range(poly_degree(p), -1, -1):
        if (p >> l) & 1:
            terms.append("1" if l == 0 else "z" if l == 1 else f"z^{l}")
    return " + ".join(terms)
