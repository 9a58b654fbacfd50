"""
Unit tests for compression policies, rings and flat storage.

Tests index mapping properties:
- Compression folding and virtual sizes
- Unpermute and Stride views for integer and polynomial lattices
- Configuration and bounds errors
"""

import numpy as np
import pytest
from latnet import (
    IntegerRing,
    LatticeSizeParam,
    MatrixShape,
    NoCompression,
    PolynomialRing,
    Storage,
    SymmetricCompression,
    create_ring,
    get_compression,
)


class TestCompression:
    """Test compression policies."""

    def test_none_is_identity(self):
        """Test that no compression keeps every index."""
        policy = NoCompression()
        assert [policy.compress_index(i, 7) for i in range(7)] == list(range(7))
        assert policy.virtual_size(7) == 7

    @pytest.mark.parametrize("n", [1, 2, 7, 8, 16, 101])
    def test_symmetric_folds_i_and_n_minus_i(self, n):
        """Test compress(i) == compress(n - i)."""
        policy = SymmetricCompression()
        for i in range(1, n):
            assert policy.compress_index(i, n) == policy.compress_index(n - i, n)

    @pytest.mark.parametrize("n", [7, 8])
    def test_symmetric_fixed_points(self, n):
        """Test that 0 and, for even n, n/2 map to themselves."""
        policy = SymmetricCompression()
        assert policy.compress_index(0, n) == 0
        if n % 2 == 0:
            assert policy.compress_index(n // 2, n) == n // 2

    @pytest.mark.parametrize("n", [1, 6, 7, 8, 33])
    def test_symmetric_virtual_size(self, n):
        """Test virtual size n // 2 + 1 equals the number of classes."""
        policy = SymmetricCompression()
        classes = {policy.compress_index(i, n) for i in range(n)}
        assert policy.virtual_size(n) == n // 2 + 1
        assert len(classes) == policy.virtual_size(n)

    @pytest.mark.parametrize("policy", [NoCompression(), SymmetricCompression()])
    def test_idempotent(self, policy):
        """Test compress(compress(i)) == compress(i)."""
        n = 10
        for i in range(n):
            j = policy.compress_index(i, n)
            assert policy.compress_index(j, n) == j
            assert policy.virtual_size(n) <= n

    def test_registry(self):
        """Test lookup by name and rejection of unknown names."""
        assert isinstance(get_compression("symmetric"), SymmetricCompression)
        policy = NoCompression()
        assert get_compression(policy) is policy
        with pytest.raises(ValueError, match="Invalid compression"):
            get_compression("antisymmetric")


class TestRings:
    """Test the numeric rings used by strides."""

    def test_integer_scale(self):
        """Test i -> a * i mod n."""
        ring = IntegerRing(7)
        assert ring.scale(3, 5) == 1
        assert ring.size == 7

    def test_polynomial_scale(self):
        """Test i(z) -> i(z) q(z) mod P(z)."""
        ring = PolynomialRing(0b1011)
        # (z^2)(z) = z^3 = z + 1 mod z^3 + z + 1
        assert ring.scale(0b10, 0b100) == 0b11
        assert ring.size == 8

    def test_factory(self):
        """Test ring factory and error on unknown type."""
        assert create_ring("polynomial", 0b111) == PolynomialRing(0b111)
        with pytest.raises(ValueError, match="Unknown lattice type"):
            create_ring("rank-2", 7)

    def test_invalid_modulus(self):
        """Test non-positive moduli are rejected."""
        with pytest.raises(ValueError):
            IntegerRing(0)
        with pytest.raises(ValueError):
            PolynomialRing(0)


class TestLatticeSizeParam:
    """Test lattice size parameters."""

    def test_integration(self):
        """Test number of points equals modulus."""
        size_param = LatticeSizeParam.integration(7)
        assert size_param.num_points == 7
        assert size_param.ring == IntegerRing(7)

    def test_polynomial(self):
        """Test 2^deg(P) points."""
        assert LatticeSizeParam.polynomial(0b1011).num_points == 8

    def test_invalid(self):
        """Test invalid size parameters are rejected."""
        with pytest.raises(ValueError):
            LatticeSizeParam.integration(0)
        with pytest.raises(ValueError):
            LatticeSizeParam("korobov", 7)


class TestStorage:
    """Test flat storage configuration."""

    def test_virtual_size(self):
        """Test virtual size delegates to the compression policy."""
        size_param = LatticeSizeParam.integration(7)
        assert Storage(size_param).virtual_size() == 7
        assert Storage(size_param, compression="symmetric").virtual_size() == 4

    def test_cyclic_order_rejected(self):
        """Test flat storage refuses the cyclic per-level order."""
        with pytest.raises(ValueError, match="cyclic"):
            Storage(LatticeSizeParam.integration(8), per_level_order="cyclic")

    def test_unknown_order_rejected(self):
        """Test unknown per-level orders are rejected."""
        with pytest.raises(ValueError, match="per-level order"):
            Storage(LatticeSizeParam.integration(8), per_level_order="spiral")

    def test_size_param_type_checked(self):
        """Test storage requires a lattice size parameter."""
        with pytest.raises(ValueError, match="LatticeSizeParam"):
            Storage(MatrixShape(2, 2))
        with pytest.raises(ValueError, match="LatticeSizeParam"):
            Storage(7)

    def test_value_semantics(self):
        """Test equality and shortname."""
        a = Storage(LatticeSizeParam.integration(8), compression="symmetric")
        b = Storage(LatticeSizeParam.integration(8), compression="symmetric")
        assert a == b
        assert a != Storage(LatticeSizeParam.integration(8))
        assert Storage.shortname() == "flat storage"

    def test_info(self):
        """Test info dictionary."""
        info = Storage(LatticeSizeParam.integration(7), compression="symmetric").info()
        assert info["num_points"] == 7
        assert info["virtual_size"] == 4
        assert info["compression"] == "symmetric"


class TestUnpermute:
    """Test the unpermuted view."""

    def test_identity_without_compression(self):
        """Test Unpermute(i) == i for all i."""
        storage = Storage(LatticeSizeParam.integration(7))
        view = storage.unpermute()
        assert view(5) == 5
        assert np.array_equal(view.as_array(), np.arange(7))

    def test_symmetric(self):
        """Test folding and compressed size for n = 7."""
        storage = Storage(LatticeSizeParam.integration(7), compression="symmetric")
        view = storage.unpermute()
        assert view(5) == view(2) == 2
        assert view.size() == 4
        assert view.num_points() == 7

    def test_out_of_range(self):
        """Test indices outside [0, n) are rejected."""
        view = Storage(LatticeSizeParam.integration(7)).unpermute()
        with pytest.raises(IndexError):
            view(7)
        with pytest.raises(IndexError):
            view(-1)


class TestStride:
    """Test the stride view."""

    def test_integer_mapping(self):
        """Test i -> a * i mod n."""
        storage = Storage(LatticeSizeParam.integration(7))
        view = storage.stride(3)
        assert [view(i) for i in range(7)] == [0, 3, 6, 2, 5, 1, 4]

    def test_size_is_uncompressed(self):
        """Test Stride.size() is the number of points, unlike Unpermute.size()."""
        storage = Storage(LatticeSizeParam.integration(7), compression="symmetric")
        assert storage.stride(3).size() == 7
        assert storage.stride(3).compressed_size() == 4
        assert storage.unpermute().size() == 4

    @pytest.mark.parametrize("compression", ["none", "symmetric"])
    @pytest.mark.parametrize("n, a", [(7, 3), (16, 5), (15, 7), (101, 12)])
    def test_coprime_stride_is_bijection(self, compression, n, a):
        """Test a coprime stride covers the same compressed classes as Unpermute."""
        storage = Storage(LatticeSizeParam.integration(n), compression=compression)
        strided = np.sort(storage.stride(a).as_array())
        unpermuted = np.sort(storage.unpermute().as_array())
        assert np.array_equal(strided, unpermuted)

    def test_non_coprime_stride_is_not_bijection(self):
        """Test a stride sharing a factor with n collapses indices."""
        storage = Storage(LatticeSizeParam.integration(8))
        assert len(set(storage.stride(2).as_array())) == 4

    def test_polynomial_stride(self):
        """Test i(z) q(z) mod P(z) with P = z^3 + z + 1 and q = z."""
        storage = Storage(LatticeSizeParam.polynomial(0b1011))
        view = storage.stride(0b10)
        assert view(0b100) == 0b011
        assert view(0b001) == 0b010
        assert sorted(view.as_array()) == list(range(8))

    def test_polynomial_stride_with_compression(self):
        """Test compression is applied over the number of points."""
        storage = Storage(LatticeSizeParam.polynomial(0b1011), compression="symmetric")
        view = storage.stride(0b10)
        # z^2 * z = z + 1 = 3, and 3 <= 8 / 2
        assert view(0b100) == 3
        # (z^2 + 1) * z = z^3 + z = 1 mod P
        assert view(0b101) == 1
        # (z^2 + z) * z = z^2 + z + 1 = 7, folded to 8 - 7 = 1
        assert view(0b110) == 1

    def test_negative_polynomial_stride_rejected(self):
        """Test negative bit masks are not polynomial strides."""
        storage = Storage(LatticeSizeParam.polynomial(0b1011))
        with pytest.raises(ValueError, match="non-negative"):
            storage.stride(-1)
        with pytest.raises(ValueError, match="non-negative"):
            storage.stride(-8)

    def test_negative_integer_stride(self):
        """Test a negative integer stride reduces modulo n."""
        storage = Storage(LatticeSizeParam.integration(7))
        view = storage.stride(-1)
        assert [view(i) for i in range(7)] == [0, 6, 5, 4, 3, 2, 1]

    def test_view_survives_storage(self):
        """Test the view keeps its own storage copy."""
        storage = Storage(LatticeSizeParam.integration(7))
        view = storage.stride(3)
        assert view.storage == storage
        assert view.storage is not storage
        del storage
        assert view(1) == 3
