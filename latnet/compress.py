"""
Index compression policies.

A compression policy folds raw point indices onto canonical
representatives. Symmetric compression identifies i with n - i, which
halves the number of distinct values a symmetric kernel needs to store.
"""

from typing import Literal, Union

CompressionType = Literal["none", "symmetric"]


class NoCompression:
    """Identity policy: every index is its own representative."""

    name = "none"

    @staticmethod
    def compress_index(i: int, size: int) -> int:
        return i

    @staticmethod
    def virtual_size(size: int) -> int:
        return size

    def __repr__(self) -> str:
        return "NoCompression()"


class SymmetricCompression:
    """
    Fold i and size - i together.

    Indices in [0, size/2] are representatives; an index i > size/2 maps to
    size - i. Index 0 and, when size is even, index size/2 are fixed points.

    Examples
    --------
    >>> SymmetricCompression.compress_index(5, 7)
    2
    >>> SymmetricCompression.virtual_size(7)
    4
    """

    name = "symmetric"

    @staticmethod
    def compress_index(i: int, size: int) -> int:
        return size - i if 2 * i > size else i

    @staticmethod
    def virtual_size(size: int) -> int:
        return size // 2 + 1

    def __repr__(self) -> str:
        return "SymmetricCompression()"


CompressionPolicy = Union[NoCompression, SymmetricCompression]

COMPRESSION_REGISTRY = {
    'none': NoCompression,
    'symmetric': SymmetricCompression,
}

VALID_COMPRESSIONS = tuple(COMPRESSION_REGISTRY.keys())


def get_compression(compression: Union[str, CompressionPolicy]) -> CompressionPolicy:
    """
    Resolve a compression policy from its name.

    Parameters
    ----------
    compression : str or policy
        'none', 'symmetric', or an already instantiated policy.

    Returns
    -------
    CompressionPolicy

    Raises
    ------
    ValueError
        If the name is not registered.
    """
    if isinstance(compression, tuple(COMPRESSION_REGISTRY.values())):
        return compression
    if compression not in COMPRESSION_REGISTRY:
        raise ValueError(
            f"Invalid compression '{compression}'. "
            f"Must be one of {VALID_COMPRESSIONS}"
        )
    return COMPRESSION_REGISTRY[compression]()
