# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
import secrets
from eth_typing import BLSPubkey
from py_ecc.bls.g2_primitives import G1_to_pubkey, pubkey_to_G1
from py_ecc.optimized_bls12_381 import (
    G1,
    Z1,
    add,
    b,
    curve_order,
    is_inf,
    is_on_curve,
    multiply,
)

# compressed G1 points are 48 bytes
G1_HEX_LENGTH = 96


def rng() -> int:
    """
    Generates a random scalar using the secrets module.

    Returns:
        int: A random nonzero number below the field order.
    """
    return secrets.randbelow(curve_order - 1) + 1


def g1_point(scalar: int) -> str:
    """
    Generates a BLS12-381 point from the G1 generator using scalar multiplication
    and returns it in compressed format.

    Args:
        scalar (int): The scalar value for multiplication.

    Returns:
        str: The resulting BLS12-381 G1 point in compressed hex format.
    """
    return G1_to_pubkey(multiply(G1, scalar % curve_order)).hex()


def uncompress(element: str) -> tuple:
    """
    Uncompresses a hexadecimal string to a BLS12-381 G1 point.

    Decompression checks the encoding flags and that the point is on the
    curve. It does not check membership of the prime order subgroup, use
    `validate_element` for that.

    Args:
        element (str): The compressed point as a hexadecimal string.

    Returns:
        tuple: The uncompressed point.

    Raises:
        ValueError: If the string is not a compressed G1 point encoding.
    """
    if not isinstance(element, str) or len(element) != G1_HEX_LENGTH:
        raise ValueError("compressed G1 point must be 96 hex characters")
    return pubkey_to_G1(BLSPubkey(bytes.fromhex(element)))


def compress(element: tuple) -> str:
    """
    Compresses a BLS12-381 G1 point to a hexadecimal string.

    Args:
        element (tuple): The point to be compressed.

    Returns:
        str: The compressed point as a hexadecimal string.
    """
    return G1_to_pubkey(element).hex()


def validate_element(element: str) -> tuple:
    """
    Decode a compressed point and check that it belongs to the prime order group.

    Args:
        element (str): The compressed point as a hexadecimal string.

    Returns:
        tuple: The uncompressed point.

    Raises:
        ValueError: If the point does not decode, is off the curve, or lies
            outside the order `curve_order` subgroup.
    """
    point = uncompress(element)
    if not is_on_curve(point, b):
        raise ValueError("point is not on the curve")
    if not is_inf(multiply(point, curve_order)):
        raise ValueError("point is not in the prime order subgroup")
    return point


def is_element(element: str) -> bool:
    """Return True when `element` is a valid compressed group element."""
    try:
        validate_element(element)
    except ValueError:
        return False
    return True


def is_scalar(value: int) -> bool:
    """Return True when `value` is an element of the scalar field Zq."""
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return 0 <= value < curve_order


def scale(element: str, scalar: int) -> str:
    """
    Scales a BLS12-381 point by a given scalar using scalar multiplication.

    Args:
        element (str): The compressed point to be scaled.
        scalar (int): The scalar value for multiplication, reduced modulo
            the curve order so negative exponents work.

    Returns:
        str: The resulting scaled point.
    """
    return compress(multiply(uncompress(element), scalar % curve_order))


def combine(left_element: str, right_element: str) -> str:
    """
    Combines two BLS12-381 points using addition.

    Args:
        left_element (str): A compressed point.
        right_element (str): A compressed point.

    Returns:
        str: The resulting combined point.
    """
    return compress(add(uncompress(left_element), uncompress(right_element)))


def multi_scale(elements: list[str], scalars: list[int]) -> str:
    """
    Compute the product of each element raised to its scalar.

    In additive notation this is sum([s_i]P_i). Every point is decompressed
    once and the result is compressed once.

    Args:
        elements: Compressed points.
        scalars: One exponent per point.

    Returns:
        str: The compressed result.

    Raises:
        ValueError: If the two lists differ in length.
    """
    if len(elements) != len(scalars):
        raise ValueError("multi_scale needs one scalar per element")

    total = Z1
    for element, scalar in zip(elements, scalars):
        total = add(total, multiply(uncompress(element), scalar % curve_order))
    return compress(total)


def to_int(hash_digest: str) -> int:
    """
    Interpret a hex digest as a scalar reduced modulo the curve order.

    This maps a hash output into the scalar field used by the protocol:

        c = int(hash_digest, 16) mod curve_order

    Args:
        hash_digest: Hex-encoded digest string (no '0x' prefix expected).

    Returns:
        An integer scalar in the range [0, curve_order - 1].
    """
    return int(hash_digest, 16) % curve_order


def from_int(integer: int) -> str:
    """
    Encode a non-negative integer as a minimal-length big-endian hex string.

    - The encoding is *minimal* (no leading zero bytes).
    - The special case `0` is encoded as `"00"` to ensure a non-empty byte
      representation.

    Args:
        integer: Non-negative integer to encode.

    Returns:
        A hex string representing the integer in big-endian byte order.
    """
    if integer == 0:
        return "00"
    length = (integer.bit_length() + 7) // 8
    return integer.to_bytes(length, "big").hex()


# identity element
g1_identity = compress(Z1)

# group generator
g1_generator = compress(G1)

# curve order
curve_order = curve_order
