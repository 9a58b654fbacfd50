"""
Numeric rings underlying lattice rules.

A lattice rule indexes its points by the elements of a finite ring:
integers modulo n for ordinary integration lattices, and polynomials
over GF(2) modulo P(z) for polynomial lattice rules. Index permutations
such as strides only need the four operations defined by AbstractRing.
"""

from abc import ABC, abstractmethod
from typing import Literal

from .utils import poly_degree, poly_mod, poly_mul

LatticeType = Literal["integration", "polynomial"]


class AbstractRing(ABC):
    """
    Finite quotient ring whose elements are in bijection with point indices.

    Parameters
    ----------
    modulus : int
        Modulus of the ring (integer or polynomial bit mask).
    """

    def __init__(self, modulus: int):
        self.modulus = modulus

    @abstractmethod
    def multiply(self, a: int, b: int) -> int:
        """Product of two ring elements, not reduced."""
        pass

    @abstractmethod
    def reduce(self, a: int) -> int:
        """Canonical representative of a modulo the ring modulus."""
        pass

    @abstractmethod
    def to_index(self, a: int) -> int:
        """Convert a reduced ring element to a point index."""
        pass

    @abstractmethod
    def from_index(self, i: int) -> int:
        """Convert a point index to a ring element."""
        pass

    @property
    @abstractmethod
    def size(self) -> int:
        """Number of elements in the ring."""
        pass

    def check_element(self, a: int) -> None:
        """Raise ValueError if a cannot be used as a ring element."""
        pass

    def scale(self, a: int, i: int) -> int:
        """Index of a * element(i) reduced modulo the ring modulus."""
        return self.to_index(self.reduce(self.multiply(a, self.from_index(i))))

    def __eq__(self, other) -> bool:
        return type(self) is type(other) and self.modulus == other.modulus

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.modulus))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(modulus={self.modulus})"


class IntegerRing(AbstractRing):
    """
    Integers modulo n.

    Indices and ring elements coincide, so a stride a maps i to a*i mod n.
    """

    def __init__(self, modulus: int):
        if modulus <= 0:
            raise ValueError(f"Integer modulus must be positive, got {modulus}")
        super().__init__(modulus)

    def multiply(self, a: int, b: int) -> int:
        return a * b

    def reduce(self, a: int) -> int:
        return a % self.modulus

    def to_index(self, a: int) -> int:
        return a

    def from_index(self, i: int) -> int:
        return i

    @property
    def size(self) -> int:
        return self.modulus


class PolynomialRing(AbstractRing):
    """
    Polynomials over GF(2) modulo P(z).

    The index i = sum a_l 2^l is read as the polynomial i(z) = sum a_l z^l,
    so conversion in both directions is the identity on bit masks. The ring
    has 2^deg(P) elements.
    """

    def __init__(self, modulus: int):
        if modulus <= 0:
            raise ValueError(
                f"Polynomial modulus must be a nonzero bit mask, got {modulus}"
            )
        super().__init__(modulus)

    def multiply(self, a: int, b: int) -> int:
        return poly_mul(a, b)

    def check_element(self, a: int) -> None:
        if a < 0:
            raise ValueError(
                f"Polynomial ring elements are non-negative bit masks, got {a}"
            )

    def reduce(self, a: int) -> int:
        return poly_mod(a, self.modulus)

    def to_index(self, a: int) -> int:
        return a

    def from_index(self, i: int) -> int:
        return i

    @property
    def degree(self) -> int:
        return poly_degree(self.modulus)

    @property
    def size(self) -> int:
        return 1 << self.degree


# Ring registry keyed by lattice type
RING_REGISTRY = {
    'integration': IntegerRing,
    'polynomial': PolynomialRing,
}


def create_ring(lattice: str, modulus: int) -> AbstractRing:
    """
    Factory function to create the ring of a lattice type.

    Parameters
    ----------
    lattice : str
        Lattice type ('integration' or 'polynomial').
    modulus : int
        Integer modulus or modulus polynomial.

    Returns
    -------
    AbstractRing
        Instantiated ring.

    Raises
    ------
    ValueError
        If the lattice type is unknown or the modulus is invalid.

    Examples
    --------
    >>> create_ring('integration', 7).scale(3, 5)
    1
    """
    if lattice not in RING_REGISTRY:
        available = ', '.join(RING_REGISTRY.keys())
        raise ValueError(f"Unknown lattice type '{lattice}'. "
                         f"Available types: {available}")
    return RING_REGISTRY[lattice](modulus)
