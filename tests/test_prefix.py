"""Tests for prefix allocation parameter derivation."""
import ipaddress

import pytest

from linkstate_config.errors import (
    InvalidArgumentError,
    MalformedAddressError,
    OutOfRangeError,
)
from linkstate_config.prefix import compute_allocation_params


class TestComputeAllocationParams:
    """Tests for compute_allocation_params."""

    def test_v4_seed(self):
        params = compute_allocation_params("10.0.0.0/8", 24)

        assert params.seed_network == ipaddress.ip_network("10.0.0.0/8")
        assert params.allocation_prefix_len == 24
        assert params.seed_prefix_len == 8
        assert params.is_v4

    def test_v6_seed(self):
        params = compute_allocation_params("fc00:cafe::/56", 64)

        assert params.seed_network == ipaddress.ip_network("fc00:cafe::/56")
        assert not params.is_v4

    def test_host_bits_are_masked(self):
        params = compute_allocation_params("10.1.2.3/8", 24)
        assert str(params.seed_network) == "10.0.0.0/8"

    def test_length_must_exceed_seed(self):
        with pytest.raises(OutOfRangeError) as exc:
            compute_allocation_params("10.0.0.0/8", 8)
        assert "(8, 32]" in str(exc.value)

    def test_v4_ceiling(self):
        with pytest.raises(OutOfRangeError) as exc:
            compute_allocation_params("10.0.0.0/8", 33)
        assert "(8, 32]" in str(exc.value)

    def test_v4_full_length_allowed(self):
        params = compute_allocation_params("10.0.0.0/8", 32)
        assert params.allocation_prefix_len == 32

    def test_v6_ceiling(self):
        assert compute_allocation_params("fc00::/64", 128).allocation_prefix_len == 128

        with pytest.raises(OutOfRangeError) as exc:
            compute_allocation_params("fc00::/64", 129)
        assert "(64, 128]" in str(exc.value)

    def test_empty_seed_raises(self):
        with pytest.raises(InvalidArgumentError):
            compute_allocation_params("", 24)

    def test_zero_length_raises(self):
        with pytest.raises(InvalidArgumentError):
            compute_allocation_params("10.0.0.0/8", 0)

    def test_malformed_seed_raises(self):
        with pytest.raises(MalformedAddressError):
            compute_allocation_params("10.0.0/abc", 24)

        with pytest.raises(MalformedAddressError):
            compute_allocation_params("not-a-prefix", 24)

    def test_params_are_immutable(self):
        params = compute_allocation_params("10.0.0.0/8", 24)
        with pytest.raises(AttributeError):
            params.allocation_prefix_len = 16
