# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
from dataclasses import dataclass
from idescrow.bls12381 import from_int, multi_scale, to_int
from idescrow.constants import TID_DOMAIN_TAG, XI_DOMAIN_TAG
from idescrow.hashing import generate, length_prefixed
from idescrow.issuer import IssuerParameters


@dataclass(frozen=True)
class Token:
    """The public fields of an issued credential token."""

    uid_p: bytes
    h: str
    ti: bytes
    pi: bytes
    sigma_z: str
    sigma_c: int
    sigma_r: int
    is_device_protected: bool = False


@dataclass(frozen=True)
class CommittedAttribute:
    """A Pedersen commitment `tilde_c = g^x * g1^o` disclosed in a presentation."""

    tilde_c: str


@dataclass(frozen=True)
class PresentationProof:
    commitments: list[CommittedAttribute] | None = None


@dataclass(frozen=True)
class CommitmentPrivateValues:
    """The prover-side openings `tilde_o`, one per committed attribute."""

    tilde_o: list[int] | None = None


def compute_token_id(ip: IssuerParameters, token: Token) -> bytes:
    """
    Derive the identifier of a token by hashing its public fields.

    The transcript is:

        TID_DOMAIN_TAG || h || sigma_z || sigma_c || sigma_r

    with every item length-prefixed, hashed with the issuer's hash function.

    Args:
        ip: Issuer parameters supplying the hash function.
        token: The token to identify.

    Returns:
        bytes: The token identifier.
    """
    transcript = TID_DOMAIN_TAG + "".join(
        length_prefixed(bytes.fromhex(item))
        for item in (
            token.h,
            token.sigma_z,
            from_int(token.sigma_c),
            from_int(token.sigma_r),
        )
    )
    return bytes.fromhex(generate(transcript, ip.hash_name))


def compute_xi(ip: IssuerParameters, attribute: bytes) -> int:
    """
    Map attribute bytes to a scalar by hashing them with the issuer's hash function.

    Args:
        ip: Issuer parameters supplying the hash function.
        attribute: The raw attribute value.

    Returns:
        int: The attribute scalar in Zq.
    """
    return to_int(generate(XI_DOMAIN_TAG + length_prefixed(attribute), ip.hash_name))


def commit(ip: IssuerParameters, x: int, o: int) -> str:
    """
    Compute the Pedersen commitment `g^x * g1^o` over the issuer's bases.

    Args:
        ip: Issuer parameters supplying the bases.
        x: Committed value.
        o: Opening.

    Returns:
        str: The commitment as a compressed point.
    """
    return multi_scale([ip.g, ip.g1], [x, o])
