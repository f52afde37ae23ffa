# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only


class EscrowError(Exception):
    """Base class for every error raised by the escrow scheme."""


class InvalidArgument(EscrowError, ValueError):
    """A required input is missing, empty, or of the wrong kind."""


class SerializationError(EscrowError, ValueError):
    """A wire object is incomplete, undecodable, or bound to the wrong context."""


class SerializationMismatch(SerializationError):
    """The issuer uid on the wire differs from the issuer parameters being bound."""


class InvalidArtifact(EscrowError, ValueError):
    """A presentation proof, token, or commitment opening is malformed."""
