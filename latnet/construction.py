"""
Construction methods for digital nets
=====================================

A construction method specifies a subspace of digital nets and how to build
a net of that subspace. It is defined by two kinds of data:

    - the generating values, one per coordinate, which are specific to
      each net and are the variables explored when searching the subspace;
    - the size parameter, common to all nets of the subspace and never
      optimized.

Available methods:
    - sobol: size parameter is the number of columns m; generating values
      are the direction numbers of each coordinate.
    - polynomial: size parameter is the modulus P(z); generating value is the
      polynomial q(z) of each coordinate.
    - explicit: size parameter is the matrix shape; generating value is the
      matrix itself.
    - lms: left matrix scramble. Size parameter is the base net and the
      number of output rows; generating value is the scrambling matrix.

Each method builds the generating matrix of a coordinate from its
generating value, the size parameter and the coordinate index. The index
matters for Sobol nets, where it selects the primitive polynomial.
"""

from abc import ABC, abstractmethod
from typing import Any, Literal, Sequence, Tuple, Union

import numpy as np

from .generating_matrix import GeneratingMatrix
from .size_param import MatrixShape, ScrambleSizeParam
from .utils import poly_degree, poly_divmod, poly_to_str, primitive_polynomials

NetConstructionType = Literal["sobol", "polynomial", "explicit", "lms"]
OutputStyleType = Literal["terminal", "net", "sobol", "polynomial"]

VALID_OUTPUT_STYLES = ("terminal", "net", "sobol", "polynomial")


class ConstructionMethod(ABC):
    """
    Abstract base class for the construction methods of digital nets.

    Construction methods are stateless; a DigitalNet holds one instance and
    delegates every method-specific decision to it.
    """

    name = ""
    is_sequence_viewable = False

    @abstractmethod
    def n_rows(self, size_parameter) -> int:
        """Number of rows of the generating matrices."""
        pass

    @abstractmethod
    def n_cols(self, size_parameter) -> int:
        """Number of columns of the generating matrices."""
        pass

    @abstractmethod
    def default_size_parameter(self):
        """Size parameter of a placeholder net."""
        pass

    @abstractmethod
    def make_gen_value(self, value) -> Any:
        """Convert a user-supplied generating value to its immutable form."""
        pass

    @abstractmethod
    def create_generating_matrix(self, gen_value, size_parameter,
                                 coordinate: int) -> GeneratingMatrix:
        """
        Build the generating matrix of one coordinate.

        Parameters
        ----------
        gen_value
            Generating value, as returned by make_gen_value().
        size_parameter
            Size parameter shared by all coordinates.
        coordinate : int
            Index of the coordinate being built, starting from 0.

        Returns
        -------
        GeneratingMatrix
            Matrix of shape (n_rows(size_parameter), n_cols(size_parameter)).
        """
        pass

    def format(self, matrices: Sequence[GeneratingMatrix], gen_values: Sequence,
               size_parameter, output_style: str = "terminal",
               interlacing_factor: int = 1) -> str:
        """Method-specific annotation appended after the generic net description."""
        return ""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class SobolConstruction(ConstructionMethod):
    """
    Sobol nets from direction numbers.

    Coordinate 0 uses the identity matrix and takes no direction numbers.
    Coordinate j >= 1 is attached to the j-th primitive polynomial
    P(z) = z^s + c_1 z^{s-1} + ... + c_{s-1} z + 1 and takes s initial
    direction numbers m_1, ..., m_s with m_k odd and m_k < 2^k. Further
    direction numbers follow the recurrence

        m_k = 2 c_1 m_{k-1} ^ 4 c_2 m_{k-2} ^ ... ^ 2^s m_{k-s} ^ m_{k-s}

    and column k - 1 of the matrix holds the k bits of m_k, most
    significant bit in row 0.

    Examples
    --------
    >>> method = SobolConstruction()
    >>> print(method.create_generating_matrix((1,), 3, 1))
    111
    010
    001
    """

    name = "sobol"
    is_sequence_viewable = True

    def n_rows(self, size_parameter: int) -> int:
        return size_parameter

    def n_cols(self, size_parameter: int) -> int:
        return size_parameter

    def default_size_parameter(self) -> int:
        return 0

    def make_gen_value(self, value) -> Tuple[int, ...]:
        return tuple(int(v) for v in value)

    @staticmethod
    def primitive_polynomial(coordinate: int) -> int:
        """Primitive polynomial attached to a coordinate >= 1."""
        if coordinate < 1:
            raise ValueError("Coordinate 0 of a Sobol net has no primitive polynomial")
        return primitive_polynomials(coordinate)[coordinate - 1]

    def check_direction_numbers(self, direction_numbers: Tuple[int, ...],
                                coordinate: int) -> None:
        """
        Validate the direction numbers of a coordinate.

        Raises
        ------
        ValueError
            If their count does not match the degree of the primitive
            polynomial, or a number is even or too large.
        """
        if coordinate == 0:
            if direction_numbers:
                raise ValueError(
                    "Coordinate 0 of a Sobol net takes no direction numbers, "
                    f"got {direction_numbers}"
                )
            return
        degree = poly_degree(self.primitive_polynomial(coordinate))
        if len(direction_numbers) != degree:
            raise ValueError(
                f"Coordinate {coordinate} of a Sobol net needs {degree} "
                f"direction numbers, got {len(direction_numbers)}"
            )
        for k, m_k in enumerate(direction_numbers, start=1):
            if m_k % 2 == 0 or not 0 < m_k < (1 << k):
                raise ValueError(
                    f"Direction number m_{k} = {m_k} must be odd and "
                    f"less than 2^{k}"
                )

    def direction_numbers(self, gen_value: Tuple[int, ...], coordinate: int,
                          count: int) -> list:
        """Extend the initial direction numbers to `count` numbers."""
        if coordinate == 0:
            return [1] * count
        poly = self.primitive_polynomial(coordinate)
        s = poly_degree(poly)
        m = list(gen_value)
        for k in range(s + 1, count + 1):
            new = m[k - s - 1] ^ (m[k - s - 1] << s)
            for i in range(1, s):
                if (poly >> (s - i)) & 1:
                    new ^= m[k - i - 1] << i
            m.append(new)
        return m[:count]

    def create_generating_matrix(self, gen_value, size_parameter: int,
                                 coordinate: int) -> GeneratingMatrix:
        self.check_direction_numbers(gen_value, coordinate)
        num_cols = size_parameter
        if coordinate == 0:
            return GeneratingMatrix.identity(num_cols)
        bits = np.zeros((num_cols, num_cols), dtype=np.uint8)
        for k, m_k in enumerate(self.direction_numbers(gen_value, coordinate, num_cols),
                                start=1):
            for r in range(k):
                bits[r, k - 1] = (m_k >> (k - 1 - r)) & 1
        return GeneratingMatrix(bits)

    def format(self, matrices, gen_values, size_parameter, output_style="terminal",
               interlacing_factor=1) -> str:
        if output_style == "terminal":
            lines = ["// Direction numbers"]
            lines += [" ".join(str(m) for m in value) for value in gen_values[1:]]
            return "\n".join(lines) + "\n"
        if output_style == "sobol":
            dimension = len(gen_values)
            lines = [
                "# Parameters for Sobol points",
                f"{dimension}    # {dimension} dimensions",
                "# Initial direction numbers for coordinates 2,...,s, one coordinate per line:",
            ]
            lines += [" ".join(str(m) for m in value) for value in gen_values[1:]]
            return "\n".join(lines)
        return ""


class PolynomialConstruction(ConstructionMethod):
    """
    Polynomial lattice rules seen as digital nets.

    With modulus P(z) of degree m and generating polynomial q(z), write
    q(z) / P(z) = sum_{l >= 1} u_l z^{-l}. The m x m generating matrix is the
    Hankel matrix C[r, c] = u_{r + c + 1}.

    Examples
    --------
    >>> method = PolynomialConstruction()
    >>> print(method.create_generating_matrix(1, 0b1011, 0))
    001
    010
    101
    """

    name = "polynomial"

    def n_rows(self, size_parameter: int) -> int:
        return max(poly_degree(size_parameter), 0)

    def n_cols(self, size_parameter: int) -> int:
        return max(poly_degree(size_parameter), 0)

    def default_size_parameter(self) -> int:
        return 1

    def make_gen_value(self, value) -> int:
        return int(value)

    def laurent_coefficients(self, gen_value: int, modulus: int, count: int) -> list:
        """First `count` coefficients u_1, ..., u_count of q(z) / P(z)."""
        quotient, _ = poly_divmod(gen_value << count, modulus)
        return [(quotient >> (count - l)) & 1 for l in range(1, count + 1)]

    def create_generating_matrix(self, gen_value: int, size_parameter: int,
                                 coordinate: int) -> GeneratingMatrix:
        m = self.n_cols(size_parameter)
        if gen_value < 0 or poly_degree(gen_value) >= m:
            raise ValueError(
                f"Generating polynomial {gen_value} must have degree lower "
                f"than the modulus degree {m}"
            )
        u = self.laurent_coefficients(gen_value, size_parameter, 2 * m)
        bits = np.array([[u[r + c] for c in range(m)] for r in range(m)],
                        dtype=np.uint8).reshape(m, m)
        return GeneratingMatrix(bits)

    def format(self, matrices, gen_values, size_parameter, output_style="terminal",
               interlacing_factor=1) -> str:
        if output_style == "terminal":
            lines = [f"{poly_to_str(size_parameter)}  // Modulus"]
            lines += [f"{poly_to_str(q)}  // Generating polynomial" for q in gen_values]
            return "\n".join(lines) + "\n"
        if output_style == "polynomial":
            dimension = len(gen_values)
            lines = [
                "# Parameters for a polynomial lattice rule in base 2",
                f"{dimension}    # {dimension} dimensions",
                f"{size_parameter}   # polynomial modulus P(z) = {poly_to_str(size_parameter)}",
                "# Coordinates of the generating vector, one per line:",
            ]
            lines += [str(q) for q in gen_values]
            return "\n".join(lines)
        return ""


class ExplicitConstruction(ConstructionMethod):
    """Nets given directly by their generating matrices."""

    name = "explicit"

    def n_rows(self, size_parameter: MatrixShape) -> int:
        return size_parameter.num_rows

    def n_cols(self, size_parameter: MatrixShape) -> int:
        return size_parameter.num_cols

    def default_size_parameter(self) -> MatrixShape:
        return MatrixShape()

    def make_gen_value(self, value) -> GeneratingMatrix:
        if isinstance(value, GeneratingMatrix):
            return value
        return GeneratingMatrix(value)

    def create_generating_matrix(self, gen_value: GeneratingMatrix,
                                 size_parameter: MatrixShape,
                                 coordinate: int) -> GeneratingMatrix:
        expected = (size_parameter.num_rows, size_parameter.num_cols)
        if gen_value.shape != expected:
            raise ValueError(
                f"Matrix for coordinate {coordinate} has shape {gen_value.shape}, "
                f"expected {expected}"
            )
        return gen_value


class LMSConstruction(ConstructionMethod):
    """
    Left matrix scramble of a base net.

    The matrix of coordinate j is S_j C_j, where C_j is the j-th matrix of
    the base net and S_j the (num_rows x base_net.num_rows) scrambling
    matrix given as generating value.
    """

    name = "lms"

    def n_rows(self, size_parameter: ScrambleSizeParam) -> int:
        return size_parameter.num_rows

    def n_cols(self, size_parameter: ScrambleSizeParam) -> int:
        return size_parameter.num_cols

    def default_size_parameter(self) -> ScrambleSizeParam:
        return ScrambleSizeParam()

    def make_gen_value(self, value) -> GeneratingMatrix:
        if isinstance(value, GeneratingMatrix):
            return value
        return GeneratingMatrix(value)

    def create_generating_matrix(self, gen_value: GeneratingMatrix,
                                 size_parameter: ScrambleSizeParam,
                                 coordinate: int) -> GeneratingMatrix:
        base_net = size_parameter.base_net
        if base_net is None:
            raise ValueError("Left matrix scramble requires a base net")
        expected = (size_parameter.num_rows, base_net.num_rows)
        if gen_value.shape != expected:
            raise ValueError(
                f"Scrambling matrix for coordinate {coordinate} has shape "
                f"{gen_value.shape}, expected {expected}"
            )
        return gen_value @ base_net.generating_matrix(coordinate)


# Construction registry for name-based lookup
CONSTRUCTION_REGISTRY = {
    'sobol': SobolConstruction(),
    'polynomial': PolynomialConstruction(),
    'explicit': ExplicitConstruction(),
    'lms': LMSConstruction(),
}


def get_construction(construction: Union[str, ConstructionMethod]) -> ConstructionMethod:
    """
    Resolve a construction method from its name.

    Parameters
    ----------
    construction : str or ConstructionMethod
        'sobol', 'polynomial', 'explicit', 'lms', or a method instance.

    Returns
    -------
    ConstructionMethod

    Raises
    ------
    ValueError
        If the name is not registered.
    """
    if isinstance(construction, ConstructionMethod):
        return construction
    if construction not in CONSTRUCTION_REGISTRY:
        available = ', '.join(CONSTRUCTION_REGISTRY.keys())
        raise ValueError(f"Unknown construction method '{construction}'. "
                         f"Available methods: {available}")
    return CONSTRUCTION_REGISTRY[construction]
