"""
Escrow test fixtures
"""

import pytest
from py_ecc.fields import optimized_bls12_381_FQ as FQ
from py_ecc.optimized_bls12_381 import b

from idescrow.bls12381 import compress, g1_point
from idescrow.escrow import verifiable_encrypt
from idescrow.issuer import IssuerParameters
from idescrow.keys import PrivateKey, PublicKey
from idescrow.params import DomainParameters
from idescrow.presentation import commit


@pytest.fixture(scope="session")
def ip() -> IssuerParameters:
    # fixed second base so results are reproducible
    return IssuerParameters(uid_p=bytes([65, 65, 65]), g1=g1_point(987654321))


@pytest.fixture(scope="session")
def params(ip) -> DomainParameters:
    return DomainParameters(ip)


@pytest.fixture(scope="session")
def sk() -> PrivateKey:
    return PrivateKey(x=123456789)


@pytest.fixture(scope="session")
def pk(params, sk) -> PublicKey:
    return PublicKey.derive(params, sk)


@pytest.fixture(scope="session")
def token_id() -> bytes:
    return bytes([1, 2, 3, 4])


@pytest.fixture(scope="session")
def label() -> bytes:
    return bytes([5, 6, 7, 8, 9, 10])


@pytest.fixture(scope="session")
def secret() -> tuple[int, int]:
    # (x_b, o_b)
    return 31337, 271828


@pytest.fixture(scope="session")
def cxb(ip, secret) -> str:
    x_b, o_b = secret
    return commit(ip, x_b, o_b)


@pytest.fixture(scope="session")
def ciphertext(params, pk, token_id, cxb, secret, label):
    x_b, o_b = secret
    return verifiable_encrypt(params, pk, token_id, cxb, x_b, o_b, label)


@pytest.fixture(scope="session")
def off_subgroup_point() -> str:
    """A point on the curve that lies outside the prime order subgroup."""
    field_modulus = FQ.field_modulus
    x = 1
    while True:
        rhs = (x**3 + b.n) % field_modulus
        y = pow(rhs, (field_modulus + 1) // 4, field_modulus)
        if y * y % field_modulus == rhs:
            return compress((FQ(x), FQ(y), FQ(1)))
        x += 1
