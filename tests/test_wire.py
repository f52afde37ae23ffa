# tests/test_wire.py

import base64
import json
import threading

from concurrent.futures import ThreadPoolExecutor

import cbor2
import pytest

from idescrow.bls12381 import curve_order, from_int, g1_point
from idescrow.ciphertext import Ciphertext, Proof
from idescrow.errors import SerializationError, SerializationMismatch
from idescrow.escrow import decrypt, verifiable_encrypt, verify
from idescrow.issuer import IssuerParameters
from idescrow.keys import PrivateKey, PublicKey
from idescrow.params import DomainParameters
from idescrow.presentation import commit
from idescrow.wire import (
    WireObject,
    deserialize,
    load,
    loads,
    loads_cbor,
    save,
    serialize,
    serialize_cbor,
    to_wire,
)


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


class TestRoundTrip:
    def test_params(self, ip, params):
        text = serialize(params)
        assert "null" not in text
        assert deserialize(ip, DomainParameters, text) == params

    def test_public_key(self, ip, pk):
        assert deserialize(ip, PublicKey, serialize(pk)) == pk

    def test_private_key(self, ip, sk):
        assert deserialize(ip, PrivateKey, serialize(sk)) == sk

    def test_proof(self, ip, ciphertext):
        assert deserialize(ip, Proof, serialize(ciphertext.proof)) == ciphertext.proof

    def test_ciphertext(self, ip, ciphertext):
        text = serialize(ciphertext)
        assert "null" not in text
        assert deserialize(ip, Ciphertext, text) == ciphertext

    def test_ciphertext_without_label(self, ip, params, pk, token_id, cxb, secret):
        x_b, o_b = secret
        ct = verifiable_encrypt(params, pk, token_id, cxb, x_b, o_b, None)
        wire = to_wire(ct)
        assert wire["info"] == "NULL"
        restored = deserialize(ip, Ciphertext, serialize(ct))
        assert restored.label is None
        assert restored == ct

    def test_ciphertext_with_empty_label(self, ip, params, pk, token_id, cxb, secret):
        x_b, o_b = secret
        ct = verifiable_encrypt(params, pk, token_id, cxb, x_b, o_b, b"")
        restored = deserialize(ip, Ciphertext, serialize(ct))
        assert restored.label == b""

    def test_cbor(self, ip, ciphertext):
        data = serialize_cbor(ciphertext)
        assert loads_cbor(Ciphertext, data).finish(ip) == ciphertext

    def test_file(self, ip, ciphertext, tmp_path):
        path = tmp_path / "escrow" / "ciphertext.json"
        save(path, ciphertext)
        assert load(path, Ciphertext).finish(ip) == ciphertext


def test_field_order(ciphertext):
    wire = to_wire(ciphertext)
    assert list(wire) == ["E1", "E2", "info", "ieproof"]
    assert list(wire["ieproof"]) == ["c", "rXb", "rR", "rOb"]


def test_full_flow_from_serialized(ip, params, pk, sk):
    # every object crosses the wire before use
    params2 = deserialize(ip, DomainParameters, serialize(params))
    pk2 = deserialize(ip, PublicKey, serialize(pk))
    sk2 = deserialize(ip, PrivateKey, serialize(sk))

    x_b, o_b = 77, 88
    cxb = commit(ip, x_b, o_b)
    ct = verifiable_encrypt(params2, pk2, b"\x01\x02", cxb, x_b, o_b, b"label")
    ct2 = deserialize(ip, Ciphertext, serialize(ct))

    assert verify(params2, ct2, b"\x01\x02", pk2, cxb)
    assert decrypt(params2, ct2, sk2) == g1_point(x_b)


def test_mismatched_uid_fails(params):
    other = IssuerParameters(uid_p=b"BBB", g1=g1_point(5))
    with pytest.raises(SerializationMismatch):
        deserialize(other, DomainParameters, serialize(params))


def test_mismatch_is_a_serialization_error(params):
    other = IssuerParameters(uid_p=b"BBB", g1=g1_point(5))
    with pytest.raises(SerializationError):
        deserialize(other, DomainParameters, serialize(params))


def test_ge_must_be_generator(ip):
    text = json.dumps({"uidp": b64(ip.uid_p), "ge": b64(bytes.fromhex(g1_point(2)))})
    with pytest.raises(SerializationError, match="ge"):
        deserialize(ip, DomainParameters, text)


def test_missing_field_fails_in_phase_one(ciphertext):
    wire = to_wire(ciphertext)
    del wire["E2"]
    with pytest.raises(SerializationError, match="E2"):
        WireObject.parse(Ciphertext, wire)


def test_missing_nested_field_fails_in_phase_one(ciphertext):
    wire = to_wire(ciphertext)
    del wire["ieproof"]["rOb"]
    with pytest.raises(SerializationError, match="rOb"):
        WireObject.parse(Ciphertext, wire)


def test_null_field_fails_in_phase_one(pk):
    with pytest.raises(SerializationError, match="H"):
        loads(PublicKey, json.dumps({"H": None}))


def test_wrong_type_fails_in_phase_one():
    with pytest.raises(SerializationError):
        loads(PrivateKey, json.dumps({"x": 5}))
    with pytest.raises(SerializationError):
        loads(PrivateKey, json.dumps(["x"]))
    with pytest.raises(SerializationError):
        loads(PrivateKey, "{not json")


def test_bad_info_fails_in_phase_one(ciphertext):
    wire = to_wire(ciphertext)
    wire["info"] = "***"
    with pytest.raises(SerializationError, match="info"):
        WireObject.parse(Ciphertext, wire)


def test_finish_twice_fails(ip, pk):
    wire = loads(PublicKey, serialize(pk))
    assert not wire.finished
    assert wire.finish(ip) == pk
    assert wire.finished
    with pytest.raises(SerializationError, match="already finished"):
        wire.finish(ip)


def test_failed_finish_consumes_object(params):
    other = IssuerParameters(uid_p=b"BBB", g1=g1_point(5))
    wire = loads(DomainParameters, serialize(params))
    with pytest.raises(SerializationMismatch):
        wire.finish(other)
    with pytest.raises(SerializationError, match="already finished"):
        wire.finish(params.ip)


def test_finish_finishes_nested_proof(ip, ciphertext):
    wire = loads(Ciphertext, serialize(ciphertext))
    wire.finish(ip)
    assert wire.nested["ieproof"].finished


def test_non_member_element_fails_in_phase_two(ip, off_subgroup_point):
    wire = loads(PublicKey, json.dumps({"H": b64(bytes.fromhex(off_subgroup_point))}))
    with pytest.raises(SerializationError, match="group"):
        wire.finish(ip)


def test_undecodable_element_fails_in_phase_two(ip, ciphertext):
    wire = to_wire(ciphertext)
    wire["E1"] = b64(bytes(48))
    with pytest.raises(SerializationError, match="E1"):
        deserialize(ip, Ciphertext, json.dumps(wire))


def test_scalar_out_of_field_fails_in_phase_two(ip):
    text = json.dumps({"x": b64(bytes.fromhex(from_int(curve_order)))})
    with pytest.raises(SerializationError, match="Zq"):
        deserialize(ip, PrivateKey, text)


def test_unknown_kind_fails():
    with pytest.raises(SerializationError):
        to_wire(object())
    with pytest.raises(SerializationError):
        WireObject.parse(dict, {})


def test_cbor_garbage_fails():
    with pytest.raises(SerializationError):
        loads_cbor(PublicKey, cbor2.dumps([1, 2, 3]))


def test_concurrent_finish_succeeds_once(ip, pk):
    wire = loads(PublicKey, serialize(pk))
    barrier = threading.Barrier(8)

    def finish():
        barrier.wait()
        try:
            return wire.finish(ip)
        except SerializationError:
            return None

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: finish(), range(8)))

    assert [r for r in results if r is not None] == [pk]
    assert results.count(None) == 7


def test_invalid_issuer_fails_in_phase_two(params):
    # same uid so the uid check passes and the issuer check is reached
    bad = IssuerParameters(uid_p=params.uid_p, g1=g1_point(5), hash_name="md5")
    with pytest.raises(SerializationError, match="Unsupported hash"):
        deserialize(bad, DomainParameters, serialize(params))


def test_saved_file_keeps_field_order(tmp_path, ciphertext):
    path = tmp_path / "ciphertext.json"
    save(path, ciphertext)
    data = json.loads(path.read_text())
    assert list(data) == ["E1", "E2", "info", "ieproof"]
    assert list(data["ieproof"]) == ["c", "rXb", "rR", "rOb"]


def test_label_equal_to_null_sentinel_reads_back_as_none(
    ip, params, pk, token_id, cxb, secret
):
    label = base64.b64decode("NULL")
    x_b, o_b = secret
    ct = verifiable_encrypt(params, pk, token_id, cxb, x_b, o_b, label)
    assert to_wire(ct)["info"] == "NULL"

    restored = deserialize(ip, Ciphertext, serialize(ct))
    assert restored.label is None
    assert verify(params, ct, token_id, pk, cxb)
    assert not verify(params, restored, token_id, pk, cxb)


if __name__ == "__main__":
    pytest.main()
