# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
from idescrow.ciphertext import Ciphertext
from idescrow.errors import InvalidArgument, InvalidArtifact
from idescrow.escrow import verifiable_encrypt, verify
from idescrow.keys import PublicKey
from idescrow.params import DomainParameters
from idescrow.presentation import (
    CommitmentPrivateValues,
    PresentationProof,
    Token,
    compute_token_id,
    compute_xi,
)
from idescrow.randomness import RandomnessSource


def presentation_verifiable_encrypt(
    params: DomainParameters,
    pk: PublicKey,
    token: Token,
    label: bytes | None,
    proof: PresentationProof,
    cpv: CommitmentPrivateValues,
    id_attribute_index: int,
    attributes: list[bytes],
    source: RandomnessSource | None = None,
) -> Ciphertext:
    """
    Escrow the identity attribute committed to in a presentation proof.

    The identity attribute must be the first committed attribute of `proof`;
    its commitment and opening are taken from index 0 of the proof and of
    `cpv`.

    Args:
        params: Domain parameters of the scheme.
        pk: The auditor's public key.
        token: The token the presentation was made with.
        label: See `verifiable_encrypt`.
        proof: The presentation proof carrying the commitment.
        cpv: Commitment openings produced alongside `proof`.
        id_attribute_index: 1-based index of the identity attribute in `attributes`.
        attributes: The token's attribute values.
        source: See `verifiable_encrypt`.

    Returns:
        The ciphertext with its embedded proof.

    Raises:
        InvalidArgument: If a required input is None.
        InvalidArtifact: If the proof, openings or attribute index are unusable.
    """
    if params is None or pk is None or token is None or proof is None or cpv is None:
        raise InvalidArgument("null input to presentation_verifiable_encrypt")
    if (
        not proof.commitments
        or not cpv.tilde_o
        or attributes is None
        or id_attribute_index < 1
        or len(attributes) < id_attribute_index
    ):
        raise InvalidArtifact("invalid inputs to presentation_verifiable_encrypt")

    token_id = compute_token_id(params.ip, token)
    cx1 = proof.commitments[0].tilde_c
    x1 = compute_xi(params.ip, attributes[id_attribute_index - 1])
    tilde_o1 = cpv.tilde_o[0]
    return verifiable_encrypt(params, pk, token_id, cx1, x1, tilde_o1, label, source)


def presentation_verify(
    params: DomainParameters,
    ciphertext: Ciphertext,
    proof: PresentationProof,
    token: Token,
    pk: PublicKey,
) -> bool:
    if params is None or ciphertext is None or proof is None or token is None or pk is None:
        raise InvalidArgument("null input to presentation_verify")
    if not proof.commitments:
        raise InvalidArtifact("invalid inputs to presentation_verify")

    cx1 = proof.commitments[0].tilde_c
    token_id = compute_token_id(params.ip, token)
    return verify(params, ciphertext, token_id, pk, cx1)
