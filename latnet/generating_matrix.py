"""
Generating matrices of digital nets in base 2.
"""

from typing import Sequence

import numpy as np


class GeneratingMatrix:
    """
    Immutable bit matrix defining one coordinate of a digital net.

    The bits are held in a read-only numpy array of dtype uint8, so one
    instance can be shared by every net built from the same coordinate.

    Parameters
    ----------
    bits : array_like
        Two-dimensional array of 0/1 values of shape (num_rows, num_cols).

    Raises
    ------
    ValueError
        If `bits` is not two-dimensional or holds values other than 0 and 1.

    Examples
    --------
    >>> C = GeneratingMatrix([[1, 1], [0, 1]])
    >>> C.num_rows, C.num_cols
    (2, 2)
    >>> C.format_to_columns_reverse()
    '1073741824 1610612736'
    """

    def __init__(self, bits):
        if isinstance(bits, GeneratingMatrix):
            bits = bits.bits
        array = np.array(bits, dtype=np.int64)
        if array.ndim != 2:
            raise ValueError(
                f"Generating matrix must be two-dimensional, got shape {array.shape}"
            )
        if np.any((array != 0) & (array != 1)):
            raise ValueError("Generating matrix entries must be 0 or 1")
        self._bits = array.astype(np.uint8)
        self._bits.setflags(write=False)

    @classmethod
    def zeros(cls, num_rows: int, num_cols: int) -> "GeneratingMatrix":
        return cls(np.zeros((num_rows, num_cols), dtype=np.uint8))

    @classmethod
    def identity(cls, n: int) -> "GeneratingMatrix":
        return cls(np.eye(n, dtype=np.uint8))

    @classmethod
    def from_columns(cls, columns: Sequence[int], num_rows: int) -> "GeneratingMatrix":
        """
        Build a matrix from integer columns.

        Parameters
        ----------
        columns : Sequence[int]
            Column values; bit num_rows - 1 - r of a column is the entry in
            row r, so row 0 is the most significant bit.
        num_rows : int
            Number of rows.
        """
        bits = np.zeros((num_rows, len(columns)), dtype=np.uint8)
        for c, value in enumerate(columns):
            if value < 0 or value >> num_rows:
                raise ValueError(
                    f"Column value {value} does not fit in {num_rows} rows"
                )
            for r in range(num_rows):
                bits[r, c] = (value >> (num_rows - 1 - r)) & 1
        return cls(bits)

    @property
    def num_rows(self) -> int:
        return self._bits.shape[0]

    @property
    def num_cols(self) -> int:
        return self._bits.shape[1]

    @property
    def shape(self):
        return self._bits.shape

    @property
    def bits(self) -> np.ndarray:
        """Read-only view of the bits."""
        return self._bits

    def __getitem__(self, key):
        value = self._bits[key]
        return int(value) if np.ndim(value) == 0 else value

    def column_value(self, j: int) -> int:
        """Column j as an integer with row 0 as the most significant bit."""
        value = 0
        for bit in self._bits[:, j]:
            value = (value << 1) | int(bit)
        return value

    def __matmul__(self, other: "GeneratingMatrix") -> "GeneratingMatrix":
        """Matrix product over GF(2)."""
        if not isinstance(other, GeneratingMatrix):
            return NotImplemented
        if self.num_cols != other.num_rows:
            raise ValueError(
                f"Cannot multiply {self.shape} matrix by {other.shape} matrix"
            )
        product = self._bits.astype(np.int64) @ other._bits.astype(np.int64)
        return GeneratingMatrix(product % 2)

    def format_to_columns_reverse(self, output_digits: int = 31) -> str:
        """
        Columns as integers over `output_digits` binary digits.

        Row 0 becomes the most significant of the output digits, i.e. the
        bit order of each column is reversed with respect to the row index.

        Raises
        ------
        ValueError
            If the matrix has more rows than `output_digits`.
        """
        if self.num_rows > output_digits:
            raise ValueError(
                f"Cannot write {self.num_rows} rows over {output_digits} "
                "output digits"
            )
        shift = output_digits - self.num_rows
        values = [self.column_value(j) << shift for j in range(self.num_cols)]
        return " ".join(str(v) for v in values)

    def __eq__(self, other) -> bool:
        if not isinstance(other, GeneratingMatrix):
            return NotImplemented
        return self.shape == other.shape and np.array_equal(self._bits, other._bits)

    def __hash__(self) -> int:
        return hash((self.shape, self._bits.tobytes()))

    def __str__(self) -> str:
        return "\n".join(
            "".join(str(int(b)) for b in row) for row in self._bits
        )

    def __repr__(self) -> str:
        return f"GeneratingMatrix(num_rows={self.num_rows}, num_cols={self.num_cols})"
