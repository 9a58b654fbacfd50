"""
Digital Nets in Base 2
======================

The abstract representation of a digital net is a sequence of generating
matrices, one per coordinate. AbstractDigitalNet is used to reason about
nets whenever their construction does not matter, e.g. to compute figures
of merit from the matrices or to write them out.

DigitalNet adds what is common to all construction methods: a size
parameter, the generating value of each coordinate, and extension of the
net by one coordinate. Extension shares the matrices and generating values
of the lower coordinates with the original net instead of copying or
recomputing them, so going from dimension d to d + 1 costs exactly one
matrix construction.

The point of index i in coordinate j is obtained from the base-2 digits
a(i) = (a_0, a_1, ...) of i:

    y = C_j a(i) mod 2,    x_j = sum_r y_r 2^{-(r+1)}
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional, Sequence, Tuple, Union

import numpy as np

from .construction import (
    VALID_OUTPUT_STYLES,
    ConstructionMethod,
    get_construction,
)
from .generating_matrix import GeneratingMatrix

logger = logging.getLogger(__name__)

# Number of binary output digits in the machine-readable net format
OUTPUT_DIGITS = 31


class AbstractDigitalNet(ABC):
    """
    Abstract digital net in base 2.

    Parameters
    ----------
    dimension : int
        Number of coordinates.
    num_rows : int
        Number of rows of the generating matrices.
    num_cols : int
        Number of columns of the generating matrices.
    generating_matrices : Sequence[GeneratingMatrix]
        One matrix per coordinate, each of shape (num_rows, num_cols).

    Raises
    ------
    ValueError
        If the number of matrices differs from the dimension or a matrix has
        the wrong shape.
    """

    def __init__(
        self,
        dimension: int = 0,
        num_rows: int = 0,
        num_cols: int = 0,
        generating_matrices: Sequence[GeneratingMatrix] = (),
    ):
        if dimension < 0:
            raise ValueError(f"Dimension must be non-negative, got {dimension}")
        matrices = tuple(generating_matrices)
        if len(matrices) != dimension:
            raise ValueError(
                f"Expected {dimension} generating matrices, got {len(matrices)}"
            )
        for coord, matrix in enumerate(matrices):
            if matrix.shape != (num_rows, num_cols):
                raise ValueError(
                    f"Generating matrix of coordinate {coord} has shape "
                    f"{matrix.shape}, expected {(num_rows, num_cols)}"
                )

        self._dimension = dimension
        self._num_rows = num_rows
        self._num_cols = num_cols
        self._generating_matrices = matrices
        self._points = None

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def num_rows(self) -> int:
        return self._num_rows

    @property
    def num_cols(self) -> int:
        return self._num_cols

    @property
    def num_points(self) -> int:
        return 2 ** self._num_cols

    @property
    def generating_matrices(self) -> Tuple[GeneratingMatrix, ...]:
        return self._generating_matrices

    def generating_matrix(self, coord: int) -> GeneratingMatrix:
        """
        Generating matrix of a coordinate.

        Parameters
        ----------
        coord : int
            Coordinate between 0 and dimension - 1.

        Raises
        ------
        IndexError
            If coord is out of range.
        """
        if not 0 <= coord < self._dimension:
            raise IndexError(
                f"Coordinate {coord} out of range for a net of dimension "
                f"{self._dimension}"
            )
        return self._generating_matrices[coord]

    @property
    def points(self) -> np.ndarray:
        """
        Generate the point set of the net.

        Returns
        -------
        np.ndarray
            Point set of shape (num_points, dimension) in [0, 1)^dimension.
        """
        if self._points is None:
            n, m = self.num_points, self._num_cols
            digits = (np.arange(n, dtype=np.int64)[:, None] >> np.arange(m)) & 1
            weights = 0.5 ** np.arange(1, self._num_rows + 1)
            points = np.zeros((n, self._dimension))
            for j, matrix in enumerate(self._generating_matrices):
                y = (digits @ matrix.bits.T.astype(np.int64)) % 2
                points[:, j] = y @ weights
            self._points = points
        return self._points

    @abstractmethod
    def format(self, output_style: str = "terminal", interlacing_factor: int = 1) -> str:
        """
        Format the net for output.

        Parameters
        ----------
        output_style : str, optional
            'terminal' (default), 'net', or a construction-specific style
            ('sobol', 'polynomial').
        interlacing_factor : int, optional
            Interlacing factor of the net (default: 1).
        """
        pass

    @abstractmethod
    def is_sequence_viewable(self) -> bool:
        """Whether the net can be viewed as a digital sequence."""
        pass

    def info(self) -> dict:
        """Return a dictionary with net information."""
        return {
            "type": self.__class__.__name__,
            "dimension": self._dimension,
            "num_rows": self._num_rows,
            "num_cols": self._num_cols,
            "num_points": self.num_points,
            "sequence_viewable": self.is_sequence_viewable(),
        }

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}(dimension={self._dimension}, "
                f"num_rows={self._num_rows}, num_cols={self._num_cols})")


class DigitalNet(AbstractDigitalNet):
    """
    Digital net built by a construction method.

    Parameters
    ----------
    construction : str or ConstructionMethod
        'sobol', 'polynomial', 'explicit' or 'lms'.
    dimension : int, optional
        Number of coordinates (default: 0).
    size_parameter : optional
        Size parameter of the construction method. If None, the method's
        default is used, which only makes sense for placeholder nets.
    gen_values : Iterable, optional
        One generating value per coordinate. Omit for a placeholder net of
        dimension 0.

    Examples
    --------
    >>> net = DigitalNet('sobol', dimension=2, size_parameter=4,
    ...                  gen_values=[(), (1,)])
    >>> net.num_points
    16
    >>> net3 = net.append_new_coordinate((1, 3))
    >>> net3.generating_matrix(1) is net.generating_matrix(1)
    True
    """

    def __init__(
        self,
        construction: Union[str, ConstructionMethod],
        dimension: int = 0,
        size_parameter: Any = None,
        gen_values: Optional[Iterable] = None,
    ):
        method = get_construction(construction)
        if size_parameter is None:
            size_parameter = method.default_size_parameter()
        if gen_values is None:
            gen_values = ()
        values = tuple(method.make_gen_value(v) for v in gen_values)
        if len(values) != dimension:
            raise ValueError(
                f"Expected {dimension} generating values, got {len(values)}"
            )

        matrices = tuple(
            method.create_generating_matrix(value, size_parameter, coord)
            for coord, value in enumerate(values)
        )
        super().__init__(dimension, method.n_rows(size_parameter),
                         method.n_cols(size_parameter), matrices)
        self._construction = method
        self._size_parameter = size_parameter
        self._gen_values = values
        logger.debug("Built %s net of dimension %d (%d x %d matrices)",
                     method.name, dimension, self.num_rows, self.num_cols)

    @classmethod
    def _from_shared(
        cls,
        method: ConstructionMethod,
        size_parameter: Any,
        gen_values: Tuple,
        matrices: Tuple[GeneratingMatrix, ...],
    ) -> "DigitalNet":
        """Assemble a net from already built values and matrices."""
        net = cls.__new__(cls)
        AbstractDigitalNet.__init__(net, len(matrices), method.n_rows(size_parameter),
                                    method.n_cols(size_parameter), matrices)
        net._construction = method
        net._size_parameter = size_parameter
        net._gen_values = gen_values
        return net

    @property
    def construction(self) -> ConstructionMethod:
        return self._construction

    @property
    def size_parameter(self) -> Any:
        return self._size_parameter

    @property
    def gen_values(self) -> Tuple:
        return self._gen_values

    def gen_value(self, coord: int) -> Any:
        """Generating value of a coordinate; raises IndexError out of range."""
        if not 0 <= coord < self.dimension:
            raise IndexError(
                f"Coordinate {coord} out of range for a net of dimension "
                f"{self.dimension}"
            )
        return self._gen_values[coord]

    def append_new_coordinate(self, gen_value: Any) -> "DigitalNet":
        """
        Add a coordinate at the end of the net.

        The generating matrices and generating values of the lower
        coordinates are shared between this net and the returned one, not
        copied. This net is left unchanged.

        Parameters
        ----------
        gen_value
            Generating value of the new coordinate.

        Returns
        -------
        DigitalNet
            New net of dimension self.dimension + 1.
        """
        value = self._construction.make_gen_value(gen_value)
        matrix = self._construction.create_generating_matrix(
            value, self._size_parameter, self.dimension
        )
        logger.debug("Extended %s net to dimension %d",
                     self._construction.name, self.dimension + 1)
        return DigitalNet._from_shared(
            self._construction,
            self._size_parameter,
            self._gen_values + (value,),
            self.generating_matrices + (matrix,),
        )

    def format(self, output_style: str = "terminal", interlacing_factor: int = 1) -> str:
        if output_style not in VALID_OUTPUT_STYLES:
            raise ValueError(
                f"Invalid output style '{output_style}'. "
                f"Must be one of {VALID_OUTPUT_STYLES}"
            )
        if interlacing_factor < 1:
            raise ValueError(
                f"Interlacing factor must be at least 1, got {interlacing_factor}"
            )

        res = ""
        if output_style == "terminal":
            res += f"{self.num_cols}  // Number of columns\n"
            res += f"{self.num_rows}  // Number of rows\n"
            res += f"{self.num_points}  // Number of points\n"
            res += f"{self.dimension // interlacing_factor}  // Dimension of points\n"
            if interlacing_factor > 1:
                res += f"{interlacing_factor}  // Interlacing factor\n"
                res += (f"{self.dimension}  // Number of components = "
                        f"interlacing factor x dimension\n")

        elif output_style == "net":
            d, k = self.dimension, self.num_cols
            lines = [
                "# Parameters for a digital net in base 2",
                f"{d}    # {d} dimensions",
            ]
            if interlacing_factor > 1:
                lines.append(f"{interlacing_factor}  // Interlacing factor")
                lines.append(f"{d}  // Number of components = interlacing factor x dimension")
            lines.append(f"{k}   # k = {k},  n = 2^{k} = {self.num_points} points")
            lines.append(f"{OUTPUT_DIGITS}   # r = {OUTPUT_DIGITS} binary output digits")
            if interlacing_factor == 1:
                lines.append("# Columns of gen. matrices C_1,...,C_s, one matrix per line:")
            else:
                lines.append("# Columns of gen. matrices C_1,...,C_{ds}, one matrix per line:")
            lines += [m.format_to_columns_reverse(OUTPUT_DIGITS)
                      for m in self.generating_matrices]
            res += "\n".join(lines)

        res += self._construction.format(self.generating_matrices, self._gen_values,
                                         self._size_parameter, output_style,
                                         interlacing_factor)
        return res

    def is_sequence_viewable(self) -> bool:
        return self._construction.is_sequence_viewable

    def info(self) -> dict:
        info = super().info()
        info["construction"] = self._construction.name
        return info


def create_net(
    construction: Union[str, ConstructionMethod],
    size_parameter: Any = None,
    gen_values: Iterable = (),
) -> DigitalNet:
    """
    Factory function to create a net, inferring its dimension.

    Parameters
    ----------
    construction : str or ConstructionMethod
        Construction method name or instance.
    size_parameter : optional
        Size parameter of the method.
    gen_values : Iterable, optional
        One generating value per coordinate.

    Returns
    -------
    DigitalNet

    Examples
    --------
    >>> net = create_net('polynomial', 0b1011, [1, 0b110])
    >>> net.dimension, net.num_points
    (2, 8)
    """
    values = list(gen_values)
    return DigitalNet(construction, len(values), size_parameter, values)
