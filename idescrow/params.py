# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

from dataclasses import dataclass, field
from idescrow.errors import InvalidArgument
from idescrow.issuer import IssuerParameters


@dataclass(frozen=True, eq=False)
class DomainParameters:
    """
    Binds the escrow scheme to one issuer's group and hash function.

    The encryption generator `ge` is fixed to the generator of the issuer's
    group. Equality compares the issuer uid, the group name and `ge`; the
    rest of the issuer parameters has no defined equality.
    """

    ip: IssuerParameters
    ge: str = field(init=False)

    def __post_init__(self):
        if not isinstance(self.ip, IssuerParameters):
            raise InvalidArgument("DomainParameters needs IssuerParameters")
        try:
            self.ip.verify()
        except ValueError as e:
            raise InvalidArgument(f"Invalid issuer parameters: {e}") from e
        object.__setattr__(self, "ge", self.ip.g)

    @property
    def uid_p(self) -> bytes:
        return self.ip.uid_p

    @property
    def group_name(self) -> str:
        return self.ip.group_name

    @property
    def hash_name(self) -> str:
        return self.ip.hash_name

    @property
    def zq(self) -> int:
        return self.ip.zq

    @property
    def g(self) -> str:
        return self.ip.g

    @property
    def g1(self) -> str:
        return self.ip.g1

    def __eq__(self, other):
        if not isinstance(other, DomainParameters):
            return NotImplemented
        return (
            self.uid_p == other.uid_p
            and self.group_name == other.group_name
            and self.ge == other.ge
        )

    def __hash__(self):
        return hash((self.uid_p, self.group_name, self.ge))
