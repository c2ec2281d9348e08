"""Prefix allocation parameters derived from a seed network."""
import ipaddress
from dataclasses import dataclass
from typing import Optional, Union

from .errors import InvalidArgumentError, MalformedAddressError, OutOfRangeError

IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


@dataclass(frozen=True)
class PrefixAllocationParams:
    """Seed network and the length of the prefixes carved out of it."""
    seed_network: IPNetwork
    allocation_prefix_len: int

    @property
    def is_v4(self) -> bool:
        return self.seed_network.version == 4

    @property
    def seed_prefix_len(self) -> int:
        return self.seed_network.prefixlen

    def __str__(self) -> str:
        return f"{self.seed_network}, allocate /{self.allocation_prefix_len}"


def parse_network(prefix: str) -> IPNetwork:
    """Parse CIDR text into a network, masking off host bits.

    A bare address is treated as a full-length prefix.

    Raises:
        MalformedAddressError: If the text is not a valid IPv4/IPv6 prefix
    """
    try:
        return ipaddress.ip_network(prefix.strip(), strict=False)
    except ValueError as e:
        raise MalformedAddressError(f"Invalid seed_prefix '{prefix}': {e}") from e


def max_prefix_len(network: IPNetwork) -> int:
    """32 for IPv4, 128 for IPv6."""
    return network.max_prefixlen


def compute_allocation_params(
    seed_prefix: Optional[str],
    allocation_len: Optional[int],
) -> PrefixAllocationParams:
    """
    Derive prefix allocation parameters.

    Args:
        seed_prefix: Seed network in CIDR notation (e.g. "10.0.0.0/8")
        allocation_len: Prefix length of each allocated sub-network

    Raises:
        InvalidArgumentError: If either value is missing
        MalformedAddressError: If seed_prefix cannot be parsed
        OutOfRangeError: Unless seed length < allocation_len <= 32 (IPv4) or 128 (IPv6)
    """
    if not seed_prefix or not allocation_len:
        raise InvalidArgumentError(
            "seed_prefix and allocate_prefix_len must be filled."
        )

    seed_network = parse_network(seed_prefix)
    ceiling = max_prefix_len(seed_network)

    if allocation_len <= seed_network.prefixlen or allocation_len > ceiling:
        raise OutOfRangeError(
            f"invalid allocate_prefix_len ({allocation_len}), "
            f"valid range = ({seed_network.prefixlen}, {ceiling}]"
        )

    return PrefixAllocationParams(
        seed_network=seed_network,
        allocation_prefix_len=allocation_len,
    )
