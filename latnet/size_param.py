"""
Size parameters of point sets.

A size parameter holds the construction data shared by every coordinate
of a point set: the number of points and the modulus for lattices, the
shape of the generating matrices for digital nets. Sobol nets use a plain
number of columns and polynomial nets a plain modulus polynomial; the
dataclasses below cover the remaining cases.
"""

from dataclasses import dataclass
from typing import Any, Optional

from .rings import RING_REGISTRY, AbstractRing, create_ring
from .utils import poly_degree


@dataclass(frozen=True)
class LatticeSizeParam:
    """
    Size of an integration lattice or a polynomial lattice rule.

    Attributes
    ----------
    lattice : str
        'integration' or 'polynomial'.
    modulus : int
        Number of points n for integration lattices; modulus polynomial P(z)
        encoded as a bit mask for polynomial lattices.

    Examples
    --------
    >>> LatticeSizeParam('integration', 7).num_points
    7
    >>> LatticeSizeParam('polynomial', 0b1011).num_points
    8
    """
    lattice: str
    modulus: int

    def __post_init__(self):
        if self.lattice not in RING_REGISTRY:
            available = ', '.join(RING_REGISTRY.keys())
            raise ValueError(f"Unknown lattice type '{self.lattice}'. "
                             f"Available types: {available}")
        if self.modulus <= 0:
            raise ValueError(
                f"Modulus of a {self.lattice} lattice must be positive, "
                f"got {self.modulus}"
            )

    @classmethod
    def integration(cls, num_points: int) -> "LatticeSizeParam":
        return cls('integration', num_points)

    @classmethod
    def polynomial(cls, modulus: int) -> "LatticeSizeParam":
        return cls('polynomial', modulus)

    @property
    def num_points(self) -> int:
        if self.lattice == 'polynomial':
            return 1 << poly_degree(self.modulus)
        return self.modulus

    @property
    def ring(self) -> AbstractRing:
        return create_ring(self.lattice, self.modulus)


@dataclass(frozen=True)
class MatrixShape:
    """Shape of the generating matrices of an explicit net."""
    num_rows: int = 0
    num_cols: int = 0

    def __post_init__(self):
        if self.num_rows < 0 or self.num_cols < 0:
            raise ValueError(
                f"Matrix dimensions must be non-negative, "
                f"got ({self.num_rows}, {self.num_cols})"
            )


@dataclass(frozen=True)
class ScrambleSizeParam:
    """
    Size parameter of a left-matrix-scrambled net.

    Attributes
    ----------
    base_net : AbstractDigitalNet or None
        Net whose matrices are scrambled. None only for placeholder nets.
    num_rows : int
        Number of rows of the scrambled matrices (output precision).
    """
    base_net: Optional[Any] = None
    num_rows: int = 0

    def __post_init__(self):
        if self.num_rows < 0:
            raise ValueError(f"num_rows must be non-negative, got {self.num_rows}")

    @property
    def num_cols(self) -> int:
        return 0 if self.base_net is None else self.base_net.num_cols
