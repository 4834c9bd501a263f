"""Template functions for IPv4/IPv6 addresses and CIDR prefixes.

Addresses are sampled as fixed-width unsigned integers and converted to and
from their textual form only at the template boundary.
"""

from __future__ import annotations

from collections.abc import Mapping
from ipaddress import IPv4Address, IPv6Address
from typing import Any, Optional

from pydantic import StrictInt

from jinja_rand.errors import PrefixLengthOutOfBoundsError
from jinja_rand.generators.common import (
    UINT32,
    UINT128,
    FunctionArgs,
    IntDomain,
    RandomSource,
    gen_value_in_range,
    parse_args,
    resolve_rng,
)
from jinja_rand.models import IPV4_BITS, IPV6_BITS, CidrBlock


class Ipv4Args(FunctionArgs):
    start: Optional[IPv4Address] = None
    end: Optional[IPv4Address] = None


class Ipv6Args(FunctionArgs):
    start: Optional[IPv6Address] = None
    end: Optional[IPv6Address] = None


class Ipv4CidrArgs(FunctionArgs):
    addr_start: Optional[IPv4Address] = None
    addr_end: Optional[IPv4Address] = None
    # plain ints so that out-of-range lengths reach the bounds check
    length_start: Optional[StrictInt] = None
    length_end: Optional[StrictInt] = None


class Ipv6CidrArgs(FunctionArgs):
    addr_start: Optional[IPv6Address] = None
    addr_end: Optional[IPv6Address] = None
    length_start: Optional[StrictInt] = None
    length_end: Optional[StrictInt] = None


def random_ipv4(args: Mapping[str, Any] | None = None, *, rng: RandomSource | None = None) -> str:
    parsed = parse_args(Ipv4Args, args, "random_ipv4")
    value = sample_address(UINT32, _as_int(parsed.start), _as_int(parsed.end), rng=rng)
    return str(IPv4Address(value))


def random_ipv6(args: Mapping[str, Any] | None = None, *, rng: RandomSource | None = None) -> str:
    parsed = parse_args(Ipv6Args, args, "random_ipv6")
    value = sample_address(UINT128, _as_int(parsed.start), _as_int(parsed.end), rng=rng)
    return str(IPv6Address(value))


def random_ipv4_cidr(args: Mapping[str, Any] | None = None, *, rng: RandomSource | None = None) -> str:
    parsed = parse_args(Ipv4CidrArgs, args, "random_ipv4_cidr")
    block = generate_cidr(
        _as_int(parsed.addr_start),
        _as_int(parsed.addr_end),
        parsed.length_start,
        parsed.length_end,
        bit_width=IPV4_BITS,
        rng=rng,
    )
    return str(block)


def random_ipv6_cidr(args: Mapping[str, Any] | None = None, *, rng: RandomSource | None = None) -> str:
    parsed = parse_args(Ipv6CidrArgs, args, "random_ipv6_cidr")
    block = generate_cidr(
        _as_int(parsed.addr_start),
        _as_int(parsed.addr_end),
        parsed.length_start,
        parsed.length_end,
        bit_width=IPV6_BITS,
        rng=rng,
    )
    return str(block)


def sample_address(
    domain: IntDomain,
    lower: int | None,
    upper: int | None,
    *,
    rng: RandomSource | None = None,
) -> int:
    return domain.sample(resolve_rng(rng), lower, upper)


def generate_cidr(
    addr_lower: int | None,
    addr_upper: int | None,
    length_lower: int | None,
    length_upper: int | None,
    *,
    bit_width: int,
    rng: RandomSource | None = None,
) -> CidrBlock:
    """Sample an address and a prefix length, then zero the host bits."""
    chooser = resolve_rng(rng)
    domain = _domain_for_width(bit_width)
    address = sample_address(domain, addr_lower, addr_upper, rng=chooser)

    checked_lower = check_prefix_length(length_lower, bit_width)
    checked_upper = check_prefix_length(length_upper, bit_width)
    prefix_length = gen_value_in_range(
        checked_lower,
        checked_upper,
        0,
        bit_width,
        sample_range=chooser.randint,
        sample_full=lambda: chooser.randint(0, bit_width),
    )
    return CidrBlock(
        address=mask_address(address, prefix_length, bit_width),
        prefix_length=prefix_length,
        bit_width=bit_width,
    )


def check_prefix_length(length: int | None, bit_width: int) -> int | None:
    if length is None:
        return None
    if length < 0 or length > bit_width:
        raise PrefixLengthOutOfBoundsError(length, 0, bit_width)
    return length


def mask_address(address: int, prefix_length: int, bit_width: int) -> int:
    """Keep the top ``prefix_length`` bits of ``address`` and clear the rest."""
    bits_to_shift = bit_width - prefix_length
    if bits_to_shift == bit_width:
        # a full-width shift is undefined for fixed-width integers
        return 0
    return (address >> bits_to_shift) << bits_to_shift


def _domain_for_width(bit_width: int) -> IntDomain:
    if bit_width == IPV4_BITS:
        return UINT32
    if bit_width == IPV6_BITS:
        return UINT128
    raise ValueError(f"Unsupported address width {bit_width}; expected {IPV4_BITS} or {IPV6_BITS}.")


def _as_int(address: IPv4Address | IPv6Address | None) -> int | None:
    return int(address) if address is not None else None
