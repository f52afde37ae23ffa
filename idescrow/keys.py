# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

from dataclasses import dataclass, field
from idescrow.bls12381 import g1_identity, is_element, is_scalar, rng, scale
from idescrow.errors import InvalidArgument
from idescrow.params import DomainParameters


@dataclass(frozen=True)
class PrivateKey:
    """The auditor's decryption key `x`."""

    x: int = field(repr=False)

    def __post_init__(self):
        if not is_scalar(self.x):
            raise InvalidArgument("private key must be an element of Zq")

    @classmethod
    def generate(cls, params: DomainParameters) -> "PrivateKey":
        if params is None:
            raise InvalidArgument("Null input to PrivateKey.generate")
        return cls(x=rng())


@dataclass(frozen=True)
class PublicKey:
    """The auditor's public key `H = ge^x`."""

    h: str

    def __post_init__(self):
        if not isinstance(self.h, str):
            raise InvalidArgument("public key must be a compressed group element")

    @classmethod
    def derive(cls, params: DomainParameters, private_key: PrivateKey) -> "PublicKey":
        if params is None or private_key is None:
            raise InvalidArgument("Null input to PublicKey.derive")
        return cls(h=scale(params.ge, private_key.x))

    def verify_consistency(self, params: DomainParameters, private_key: PrivateKey) -> bool:
        """Check that `private_key` is in Zq and that `ge^x` equals this key."""
        if params is None or private_key is None:
            raise InvalidArgument("Null input to PublicKey.verify_consistency")
        if not is_scalar(private_key.x):
            return False
        return scale(params.ge, private_key.x) == self.h

    def verify_well_formed(self, params: DomainParameters) -> bool:
        """Check that `H` is a non-identity member of the parameters' group."""
        return is_element(self.h) and self.h != g1_identity
