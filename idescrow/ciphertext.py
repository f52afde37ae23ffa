# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

from dataclasses import dataclass
from idescrow.errors import InvalidArgument


@dataclass(frozen=True)
class Proof:
    """The challenge and the three responses of an escrow proof."""

    c: int
    r_xb: int
    r_r: int
    r_ob: int


@dataclass(frozen=True)
class Ciphertext:
    """
    An ElGamal encryption `(E1, E2) = (ge^r, H^r * ge^x_b)` of a pseudonym.

    The label is bound into the proof but is not encrypted; `None` means
    the ciphertext carries no label. On the wire a missing label is the
    literal `"NULL"`, so the three byte label `b64decode("NULL")` cannot
    be told apart from no label and reads back as `None`.
    """

    e1: str
    e2: str
    proof: Proof
    label: bytes | None = None

    def __post_init__(self):
        if self.e1 is None or self.e2 is None or self.proof is None:
            raise InvalidArgument("Null inputs to Ciphertext")
        if self.label is not None and not isinstance(self.label, bytes):
            raise InvalidArgument("Ciphertext label must be bytes or None")
