"""
Point Set Representation for Quasi-Monte Carlo Integration
==========================================================

This package represents and incrementally constructs the point sets used
in quasi-Monte Carlo integration: integration lattices, polynomial lattice
rules and digital nets in base 2.

Main classes:
- Storage: flat storage of lattice indices, with Unpermute and Stride views
  and optional symmetric compression
- DigitalNet: digital net built from generating values by a construction
  method (Sobol, polynomial, explicit, left matrix scramble), extensible one
  coordinate at a time
- GeneratingMatrix: immutable bit matrix of one net coordinate

License: MIT
"""

from .compress import (
    COMPRESSION_REGISTRY,
    NoCompression,
    SymmetricCompression,
    get_compression,
)
from .construction import (
    CONSTRUCTION_REGISTRY,
    ConstructionMethod,
    ExplicitConstruction,
    LMSConstruction,
    PolynomialConstruction,
    SobolConstruction,
    get_construction,
)
from .digital_net import AbstractDigitalNet, DigitalNet, create_net
from .generating_matrix import GeneratingMatrix
from .rings import AbstractRing, IntegerRing, PolynomialRing, create_ring
from .size_param import LatticeSizeParam, MatrixShape, ScrambleSizeParam
from .storage import Storage, Stride, Unpermute

__version__ = "1.0.0"
__all__ = [
    "Storage",
    "Unpermute",
    "Stride",
    "NoCompression",
    "SymmetricCompression",
    "COMPRESSION_REGISTRY",
    "get_compression",
    "AbstractRing",
    "IntegerRing",
    "PolynomialRing",
    "create_ring",
    "LatticeSizeParam",
    "MatrixShape",
    "ScrambleSizeParam",
    "GeneratingMatrix",
    "ConstructionMethod",
    "SobolConstruction",
    "PolynomialConstruction",
    "ExplicitConstruction",
    "LMSConstruction",
    "CONSTRUCTION_REGISTRY",
    "get_construction",
    "AbstractDigitalNet",
    "DigitalNet",
    "create_net",
]
