"""
Flat storage of lattice point indices
=====================================

A Storage describes how the values attached to the points of a lattice
(for instance kernel values used by a figure of merit) are laid out: one
slot per point, optionally folded by a compression policy. Two index views
are derived from a storage:

    - Unpermute: i -> compress(i)
    - Stride:    i -> compress(a * i mod n)

For polynomial lattice rules the stride acts in GF(2)[z] / P(z): the index
i is read bit for bit as i(z) and mapped to i(z) q(z) mod P(z).

Both views keep their own copy of the storage, so they remain valid after
the storage they were built from goes out of scope.
"""

import copy
import logging
from typing import Literal, Union

import numpy as np

from .compress import CompressionPolicy, get_compression
from .size_param import LatticeSizeParam

logger = logging.getLogger(__name__)

PerLevelOrderType = Literal["basic", "cyclic"]


class Storage:
    """
    Flat vector storage with compressed indices.

    The vector elements are not permuted but compression is applied to
    vector indices.

    Parameters
    ----------
    size_param : LatticeSizeParam
        Number of points and modulus of the lattice.
    compression : str or policy, optional
        'none' (default) or 'symmetric'.
    per_level_order : str, optional
        'basic' (default). 'cyclic' only applies to embedded storage and is
        rejected.

    Raises
    ------
    ValueError
        For an unknown compression or ordering, or for the cyclic ordering.

    Examples
    --------
    >>> storage = Storage(LatticeSizeParam.integration(7), compression='symmetric')
    >>> storage.virtual_size()
    4
    >>> storage.stride(3)(5)
    1
    """

    VALID_PER_LEVEL_ORDERS = ("basic", "cyclic")

    def __init__(
        self,
        size_param: LatticeSizeParam,
        compression: Union[str, CompressionPolicy] = "none",
        per_level_order: str = "basic",
    ):
        if not isinstance(size_param, LatticeSizeParam):
            raise ValueError(
                "Storage(): size_param must be a LatticeSizeParam, "
                f"got {type(size_param).__name__}"
            )
        if per_level_order not in self.VALID_PER_LEVEL_ORDERS:
            raise ValueError(
                f"Invalid per-level order '{per_level_order}'. "
                f"Must be one of {self.VALID_PER_LEVEL_ORDERS}"
            )
        if per_level_order == "cyclic":
            raise ValueError(
                "Storage(): cyclic per-level order is only defined for "
                "embedded storage, not for flat storage"
            )

        self._size_param = size_param
        self._compression = get_compression(compression)
        self.per_level_order = per_level_order
        logger.debug("Created %s for %s with %s compression",
                     self.shortname(), size_param, self._compression.name)

    @staticmethod
    def shortname() -> str:
        return "flat storage"

    @property
    def size_param(self) -> LatticeSizeParam:
        return self._size_param

    @property
    def compression(self) -> CompressionPolicy:
        return self._compression

    def num_points(self) -> int:
        """Uncompressed number of points."""
        return self._size_param.num_points

    def virtual_size(self) -> int:
        """Number of distinct slots after compression."""
        return self._compression.virtual_size(self.num_points())

    def compress_index(self, i: int) -> int:
        return self._compression.compress_index(i, self.num_points())

    def unpermute(self) -> "Unpermute":
        return Unpermute(self)

    def stride(self, stride: int) -> "Stride":
        return Stride(self, stride)

    def info(self) -> dict:
        """Return a dictionary with storage information."""
        return {
            "type": self.shortname(),
            "lattice": self._size_param.lattice,
            "modulus": self._size_param.modulus,
            "num_points": self.num_points(),
            "compression": self._compression.name,
            "virtual_size": self.virtual_size(),
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, Storage):
            return NotImplemented
        return (self._size_param == other._size_param
                and self._compression.name == other._compression.name)

    def __hash__(self) -> int:
        return hash((self._size_param, self._compression.name))

    def __repr__(self) -> str:
        return (f"Storage({self._size_param}, "
                f"compression='{self._compression.name}')")


class _IndexView:
    """Common part of the index views: a private storage copy and bounds checks."""

    def __init__(self, storage: Storage):
        self._storage = copy.copy(storage)

    @property
    def storage(self) -> Storage:
        return self._storage

    def num_points(self) -> int:
        """Number of raw indices accepted by the view."""
        return self._storage.num_points()

    def compressed_size(self) -> int:
        """Number of distinct values the view can return."""
        return self._storage.virtual_size()

    def _check_index(self, i: int) -> None:
        n = self._storage.num_points()
        if not 0 <= i < n:
            raise IndexError(f"index {i} out of range [0, {n})")

    def as_array(self) -> np.ndarray:
        """
        Mapped indices of all raw indices.

        Returns
        -------
        np.ndarray
            Integer array of shape (num_points,) whose i-th entry is self(i).
        """
        n = self.num_points()
        return np.fromiter((self(i) for i in range(n)), dtype=np.int64, count=n)


class Unpermute(_IndexView):
    """
    Identity permutation composed with compression.

    size() is the compressed size; use num_points() for the number of raw
    indices.
    """

    def __call__(self, i: int) -> int:
        self._check_index(i)
        return self._storage.compress_index(i)

    def size(self) -> int:
        return self.compressed_size()

    def __repr__(self) -> str:
        return f"Unpermute({self._storage!r})"


class Stride(_IndexView):
    """
    Stride permutation composed with compression.

    For integration lattices, a stride with parameter a maps the index i to
    a * i mod n: the j-th component of the permuted vector v is v[j * a mod n].

    For polynomial lattices, a stride with parameter q(z) maps i(z) to
    h(z) = i(z) q(z) mod P(z), where j(z) = sum a_l z^l if j = sum a_l 2^l.

    size() is the uncompressed number of points, unlike Unpermute.size().

    Parameters
    ----------
    storage : Storage
        Storage whose ring and compression are used.
    stride : int
        Ring element a (integer) or q(z) (polynomial bit mask).

    Raises
    ------
    ValueError
        If the stride is not an element of the ring, such as a negative
        polynomial.
    """

    def __init__(self, storage: Storage, stride: int):
        super().__init__(storage)
        self._ring = self._storage.size_param.ring
        self._ring.check_element(stride)
        self.stride = stride

    def __call__(self, i: int) -> int:
        self._check_index(i)
        return self._storage.compress_index(self._ring.scale(self.stride, i))

    def size(self) -> int:
        return self.num_points()

    def __repr__(self) -> str:
        return f"Stride({self._storage!r}, stride={self.stride})"
