# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
import logging

from idescrow.bls12381 import (
    combine,
    curve_order,
    is_element,
    is_scalar,
    multi_scale,
    scale,
    to_int,
)
from idescrow.ciphertext import Ciphertext, Proof
from idescrow.constants import ESC_DOMAIN_TAG
from idescrow.errors import InvalidArgument
from idescrow.hashing import generate, length_prefixed
from idescrow.keys import PrivateKey, PublicKey
from idescrow.params import DomainParameters
from idescrow.randomness import RandomnessSource, SystemRandomness

logger = logging.getLogger(__name__)


def fiat_shamir_heuristic(
    params: DomainParameters,
    token_id: bytes,
    h: str,
    cxb: str,
    e1: str,
    e2: str,
    cxb_prime: str,
    e1_prime: str,
    e2_prime: str,
    label: bytes | None,
) -> str:
    """
    Compute the Fiat–Shamir challenge material for the escrow proof.

    The challenge is derived by hashing a domain-separated transcript:

        ESC_DOMAIN_TAG || uid || token_id || H || Cxb || E1 || E2
                       || Cxb' || E1' || E2' || label

    where every item is length-prefixed and the hash function is the one
    selected by the issuer. The prover passes its commitment-phase values
    as the primed points; the verifier passes the points it recomputes
    from the responses.

    Args:
        params: Domain parameters supplying the issuer uid and hash function.
        token_id: Identifier of the token the proof is bound to.
        h: Auditor public key.
        cxb: Commitment to the escrowed attribute.
        e1: First ciphertext component.
        e2: Second ciphertext component.
        cxb_prime: Commitment-phase value for `Cxb`.
        e1_prime: Commitment-phase value for `E1`.
        e2_prime: Commitment-phase value for `E2`.
        label: Authenticated label, or None.

    Returns:
        A hex digest that is mapped to a scalar via `to_int(...)`.
    """
    items = [params.uid_p, token_id]
    items += [bytes.fromhex(p) for p in (h, cxb, e1, e2, cxb_prime, e1_prime, e2_prime)]
    items.append(label)
    transcript = ESC_DOMAIN_TAG + "".join(length_prefixed(item) for item in items)
    return generate(transcript, params.hash_name)


def compute_response(nonce: int, c: int, secret: int) -> int:
    """Return the response `nonce - c*secret mod q`."""
    return (nonce - c * secret) % curve_order


def _check_token_id(token_id: bytes) -> None:
    if token_id is None:
        raise InvalidArgument("Null token id")
    if not isinstance(token_id, bytes) or len(token_id) == 0:
        raise InvalidArgument("token id must be non-empty bytes")


def verifiable_encrypt(
    params: DomainParameters,
    pk: PublicKey,
    token_id: bytes,
    cxb: str,
    x_b: int,
    o_b: int,
    label: bytes | None,
    source: RandomnessSource | None = None,
) -> Ciphertext:
    """
    Encrypt the pseudonym `ge^x_b` to the auditor and prove it matches `Cxb`.

    This is a Sigma protocol made non-interactive with Fiat–Shamir:

    Encrypt:
        E1 = ge^r
        E2 = H^r * ge^x_b

    Commit:
        Cxb' = g^xb' * g1^ob'
        E1'  = ge^r'
        E2'  = ge^xb' * H^r'

    Challenge:
        c = H(uid || token_id || H || Cxb || E1 || E2 || Cxb' || E1' || E2' || label) mod q

    Response:
        rXb = xb' - c*x_b
        rR  = r'  - c*r
        rOb = ob' - c*o_b

    The proof shows knowledge of `(x_b, r, o_b)` with E1 = ge^r,
    E2 = H^r * ge^x_b and Cxb = g^x_b * g1^o_b.

    Args:
        params: Domain parameters of the scheme.
        pk: The auditor's public key.
        token_id: Non-empty identifier of the token; binds the proof to it.
        cxb: Commitment to `x_b` over the bases (g, g1).
        x_b: The committed attribute.
        o_b: The commitment opening.
        label: Bytes bound to the proof but left in the clear, or None.
        source: Where the proof randomness comes from. Defaults to a fresh
            draw from the system CSPRNG.

    Returns:
        The ciphertext with its embedded proof.

    Raises:
        InvalidArgument: If a required input is missing or malformed. The
            check runs before any group operation.
    """
    if params is None or pk is None or cxb is None or x_b is None or o_b is None:
        raise InvalidArgument("Null input to verifiable_encrypt")
    _check_token_id(token_id)
    if not isinstance(cxb, str):
        raise InvalidArgument("commitment must be a compressed group element")
    if not is_scalar(x_b) or not is_scalar(o_b):
        raise InvalidArgument("x_b and o_b must be elements of Zq")
    if label is not None and not isinstance(label, bytes):
        raise InvalidArgument("label must be bytes or None")

    if source is None:
        source = SystemRandomness()
    bundle = source.bundle()

    ge = params.ge
    e1 = scale(ge, bundle.r)
    e2 = multi_scale([pk.h, ge], [bundle.r, x_b])

    cxb_prime = multi_scale([params.g, params.g1], [bundle.xb_prime, bundle.ob_prime])
    e1_prime = scale(ge, bundle.r_prime)
    e2_prime = multi_scale([ge, pk.h], [bundle.xb_prime, bundle.r_prime])

    c = to_int(
        fiat_shamir_heuristic(
            params, token_id, pk.h, cxb, e1, e2, cxb_prime, e1_prime, e2_prime, label
        )
    )
    proof = Proof(
        c=c,
        r_xb=compute_response(bundle.xb_prime, c, x_b),
        r_r=compute_response(bundle.r_prime, c, bundle.r),
        r_ob=compute_response(bundle.ob_prime, c, o_b),
    )
    logger.debug("Escrow ciphertext created for token %s", token_id.hex())
    return Ciphertext(e1=e1, e2=e2, proof=proof, label=label)


def verify(
    params: DomainParameters,
    ciphertext: Ciphertext,
    token_id: bytes,
    pk: PublicKey,
    cxb: str,
) -> bool:
    """
    Check that `ciphertext` encrypts the attribute committed to in `cxb`.

    The verifier recomputes the commitment-phase values from the responses:

        ~Cxb = g^rXb * g1^rOb * Cxb^c
        ~E1  = ge^rR * E1^c
        ~E2  = ge^rXb * H^rR * E2^c

    and accepts iff hashing them in place of the primed values gives back `c`.

    Malformed group or field elements make the proof invalid; they do not
    raise.

    Args:
        params: Domain parameters of the scheme.
        ciphertext: The ciphertext and proof to check.
        token_id: Identifier of the token the proof must be bound to.
        pk: The auditor's public key.
        cxb: Commitment to the escrowed attribute.

    Returns:
        True if the proof verifies, False otherwise.

    Raises:
        InvalidArgument: If a required input is missing or `token_id` is empty.
    """
    if params is None or ciphertext is None or pk is None or cxb is None:
        raise InvalidArgument("Null input to verify")
    _check_token_id(token_id)

    proof = ciphertext.proof
    if not all(is_element(p) for p in (ciphertext.e1, ciphertext.e2, cxb, pk.h)):
        logger.debug("Escrow proof rejected: invalid group element")
        return False
    if not all(is_scalar(v) for v in (proof.c, proof.r_xb, proof.r_r, proof.r_ob)):
        logger.debug("Escrow proof rejected: invalid field element")
        return False

    ge = params.ge
    tilde_cxb = multi_scale([params.g, params.g1, cxb], [proof.r_xb, proof.r_ob, proof.c])
    tilde_e1 = multi_scale([ge, ciphertext.e1], [proof.r_r, proof.c])
    tilde_e2 = multi_scale([ge, pk.h, ciphertext.e2], [proof.r_xb, proof.r_r, proof.c])

    c_prime = to_int(
        fiat_shamir_heuristic(
            params,
            token_id,
            pk.h,
            cxb,
            ciphertext.e1,
            ciphertext.e2,
            tilde_cxb,
            tilde_e1,
            tilde_e2,
            ciphertext.label,
        )
    )
    if c_prime != proof.c:
        logger.debug("Escrow proof rejected: challenge mismatch")
        return False
    return True


def decrypt(params: DomainParameters, ciphertext: Ciphertext, sk: PrivateKey) -> str:
    """
    Recover the pseudonym `PE = E2 * E1^(-x) = ge^x_b`.

    The proof is not checked here. Callers must run `verify` on the
    ciphertext first; only a verified ciphertext is known to encrypt the
    committed attribute.

    Args:
        params: Domain parameters of the scheme.
        ciphertext: A verified ciphertext.
        sk: The auditor's private key.

    Returns:
        str: The pseudonym as a compressed point.

    Raises:
        InvalidArgument: If an input is missing or E1/E2 is not a group element.
    """
    if params is None or ciphertext is None or sk is None:
        raise InvalidArgument("Null input to decrypt")
    if not is_element(ciphertext.e1) or not is_element(ciphertext.e2):
        raise InvalidArgument("E1 or E2 is not a valid group element in decrypt")

    return combine(ciphertext.e2, scale(ciphertext.e1, -sk.x))
