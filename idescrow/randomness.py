# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
import logging

from dataclasses import dataclass, field
from typing import Protocol
from idescrow.bls12381 import is_scalar, rng
from idescrow.errors import InvalidArgument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RandomnessBundle:
    """
    The four random exponents of one escrow proof.

    `r` randomizes the ElGamal ciphertext, while `xb_prime`, `r_prime` and
    `ob_prime` blind the responses. Two proofs sharing any of these values
    reveal the secrets through the response equations, so a bundle must
    never be used for more than one proof.
    """

    r: int = field(repr=False)
    xb_prime: int = field(repr=False)
    r_prime: int = field(repr=False)
    ob_prime: int = field(repr=False)

    def __post_init__(self):
        for value in (self.r, self.xb_prime, self.r_prime, self.ob_prime):
            if not is_scalar(value):
                raise InvalidArgument("randomness must be elements of Zq")

    @classmethod
    def generate(cls) -> "RandomnessBundle":
        return cls(r=rng(), xb_prime=rng(), r_prime=rng(), ob_prime=rng())


class RandomnessSource(Protocol):
    def bundle(self) -> RandomnessBundle: ...


class SystemRandomness:
    """Draws a fresh bundle from the operating system CSPRNG on every call."""

    def bundle(self) -> RandomnessBundle:
        return RandomnessBundle.generate()


class FixedRandomness:
    """
    Returns the same bundle on every call.

    Only for reproducing test vectors; using it for more than one proof
    leaks the encrypted attribute.
    """

    def __init__(self, bundle: RandomnessBundle):
        if not isinstance(bundle, RandomnessBundle):
            raise InvalidArgument("FixedRandomness needs a RandomnessBundle")
        self._bundle = bundle
        logger.warning("Fixed escrow randomness in use; proofs are not zero-knowledge")

    def bundle(self) -> RandomnessBundle:
        return self._bundle
