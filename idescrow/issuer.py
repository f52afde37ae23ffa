# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

from dataclasses import dataclass, field
from idescrow.bls12381 import (
    curve_order,
    g1_generator,
    g1_identity,
    g1_point,
    is_element,
    rng,
)
from idescrow.constants import DEFAULT_HASH, GROUP_NAME, SUPPORTED_HASHES


@dataclass(frozen=True)
class IssuerParameters:
    """
    The public context published by a credential issuer.

    Only the parts the escrow scheme consumes are modelled: the issuer's
    unique identifier, the group description, the two Pedersen commitment
    bases `g` and `g1`, and the issuer's hash function.
    """

    uid_p: bytes
    g1: str
    hash_name: str = DEFAULT_HASH
    g: str = field(default=g1_generator)
    group_name: str = GROUP_NAME

    @property
    def zq(self) -> int:
        return curve_order

    @classmethod
    def generate(cls, uid_p: bytes, hash_name: str = DEFAULT_HASH) -> "IssuerParameters":
        # the discrete log of g1 is discarded
        return cls(uid_p=uid_p, g1=g1_point(rng()), hash_name=hash_name)

    def verify(self) -> None:
        if not isinstance(self.uid_p, bytes) or len(self.uid_p) == 0:
            raise ValueError("Issuer uid must be non-empty bytes")
        if self.group_name != GROUP_NAME:
            raise ValueError(f"Unsupported group: {self.group_name}")
        if self.g != g1_generator:
            raise ValueError("g must be the group generator")
        if not is_element(self.g1) or self.g1 == g1_identity:
            raise ValueError("g1 must be a non-identity group element")
        if self.hash_name not in SUPPORTED_HASHES:
            raise ValueError(f"Unsupported hash function: {self.hash_name}")
