# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
"""
Two-phase wire encoding for escrow objects.

A wire value is an opaque base64 string whose group is unknown until the
object is bound to issuer parameters. Deserialization is therefore split:

1. `WireObject.parse` (or `loads` / `loads_cbor` / `load`) checks that the
   fields are present and well typed, without any issuer context.
2. `WireObject.finish` decodes the group and field elements against the
   issuer parameters and builds the domain object. A wire object can be
   finished exactly once.
"""
import base64
import binascii
import json
import logging
import threading

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import cbor2

from idescrow.bls12381 import from_int, is_scalar, validate_element
from idescrow.ciphertext import Ciphertext, Proof
from idescrow.constants import NULL_SENTINEL
from idescrow.errors import InvalidArgument, SerializationError, SerializationMismatch
from idescrow.files import load_json, save_json
from idescrow.issuer import IssuerParameters
from idescrow.keys import PrivateKey, PublicKey
from idescrow.params import DomainParameters

logger = logging.getLogger(__name__)

# wire field names, in emission order
WIRE_FIELDS: dict[type, tuple[str, ...]] = {
    DomainParameters: ("uidp", "ge"),
    PublicKey: ("H",),
    PrivateKey: ("x",),
    Ciphertext: ("E1", "E2", "info", "ieproof"),
    Proof: ("c", "rXb", "rR", "rOb"),
}

# fields holding a nested wire object
NESTED_FIELDS: dict[str, type] = {"ieproof": Proof}


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _unb64(value: str, name: str) -> bytes:
    try:
        return base64.b64decode(value.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise SerializationError(f"{name} is not valid base64") from e


def _element_to_wire(element: str) -> str:
    return _b64(bytes.fromhex(element))


def _scalar_to_wire(value: int) -> str:
    return _b64(bytes.fromhex(from_int(value)))


def _element_from_wire(value: str, name: str) -> str:
    element = _unb64(value, name).hex()
    try:
        validate_element(element)
    except ValueError as e:
        raise SerializationError(f"{name} is not an element of the issuer's group") from e
    return element


def _scalar_from_wire(value: str, name: str) -> int:
    raw = _unb64(value, name)
    if len(raw) == 0:
        raise SerializationError(f"{name} is empty")
    scalar = int.from_bytes(raw, "big")
    if not is_scalar(scalar):
        raise SerializationError(f"{name} is not an element of Zq")
    return scalar


def to_wire(obj: Any) -> dict[str, Any]:
    """
    Encode an escrow object as an ordered mapping of wire fields.

    Args:
        obj: A DomainParameters, PublicKey, PrivateKey, Ciphertext or Proof.

    Returns:
        A dict whose keys follow `WIRE_FIELDS` order. No value is None.

    Raises:
        SerializationError: If `obj` has no wire form.
    """
    if isinstance(obj, DomainParameters):
        return {"uidp": _b64(obj.uid_p), "ge": _element_to_wire(obj.ge)}
    if isinstance(obj, PublicKey):
        return {"H": _element_to_wire(obj.h)}
    if isinstance(obj, PrivateKey):
        return {"x": _scalar_to_wire(obj.x)}
    if isinstance(obj, Proof):
        return {
            "c": _scalar_to_wire(obj.c),
            "rXb": _scalar_to_wire(obj.r_xb),
            "rR": _scalar_to_wire(obj.r_r),
            "rOb": _scalar_to_wire(obj.r_ob),
        }
    if isinstance(obj, Ciphertext):
        return {
            "E1": _element_to_wire(obj.e1),
            "E2": _element_to_wire(obj.e2),
            "info": NULL_SENTINEL if obj.label is None else _b64(obj.label),
            "ieproof": to_wire(obj.proof),
        }
    raise SerializationError(f"{type(obj).__name__} has no wire encoding")


class WireObject:
    """A structurally complete wire object that is not yet bound to an issuer."""

    def __init__(
        self,
        kind: type,
        fields: dict[str, str],
        nested: dict[str, "WireObject"],
        label: bytes | None = None,
    ):
        self.kind = kind
        self.fields = fields
        self.nested = nested
        self.label = label
        self._finished = False
        self._lock = threading.Lock()

    @classmethod
    def parse(cls, kind: type, data: Any) -> "WireObject":
        """
        Phase 1: check the wire mapping for `kind` without any issuer context.

        Raises:
            SerializationError: If `kind` is unknown, `data` is not a mapping,
                or a required field is missing or has the wrong type.
        """
        if kind not in WIRE_FIELDS:
            raise SerializationError(f"{getattr(kind, '__name__', kind)} has no wire encoding")
        if not isinstance(data, Mapping):
            raise SerializationError(f"{kind.__name__} must be a mapping")

        fields: dict[str, str] = {}
        nested: dict[str, WireObject] = {}
        for name in WIRE_FIELDS[kind]:
            value = data.get(name)
            if value is None:
                raise SerializationError(f"{kind.__name__} is missing field {name}")
            if name in NESTED_FIELDS:
                nested[name] = cls.parse(NESTED_FIELDS[name], value)
            elif not isinstance(value, str):
                raise SerializationError(f"{kind.__name__}.{name} must be a string")
            else:
                fields[name] = value

        label = None
        if kind is Ciphertext and fields["info"] != NULL_SENTINEL:
            label = _unb64(fields["info"], "info")
        return cls(kind, fields, nested, label)

    @property
    def finished(self) -> bool:
        return self._finished

    def finish(self, ip: IssuerParameters) -> Any:
        """
        Phase 2: decode the fields against `ip` and build the domain object.

        The wire object is consumed even when decoding fails.

        Args:
            ip: The issuer parameters that give the encoded values meaning.

        Returns:
            The domain object of type `kind`.

        Raises:
            SerializationError: If the object was already finished, a value
                does not belong to the issuer's group or field, or the
                issuer uid does not match (`SerializationMismatch`).
        """
        with self._lock:
            if self._finished:
                raise SerializationError(f"{self.kind.__name__} was already finished")
            self._finished = True

        if not isinstance(ip, IssuerParameters):
            raise SerializationError("finish needs IssuerParameters")

        obj = _FINISHERS[self.kind](self, ip)
        logger.debug("Finished %s for issuer %s", self.kind.__name__, ip.uid_p.hex())
        return obj


def _finish_params(wire: WireObject, ip: IssuerParameters) -> DomainParameters:
    uid = _unb64(wire.fields["uidp"], "uidp")
    if uid != ip.uid_p:
        raise SerializationMismatch("issuer uid does not match the serialized uid")
    try:
        params = DomainParameters(ip)
    except InvalidArgument as e:
        raise SerializationError(str(e)) from e
    if _element_from_wire(wire.fields["ge"], "ge") != params.ge:
        raise SerializationError("ge is not the generator of the issuer's group")
    return params


def _finish_public_key(wire: WireObject, ip: IssuerParameters) -> PublicKey:
    return PublicKey(h=_element_from_wire(wire.fields["H"], "H"))


def _finish_private_key(wire: WireObject, ip: IssuerParameters) -> PrivateKey:
    return PrivateKey(x=_scalar_from_wire(wire.fields["x"], "x"))


def _finish_proof(wire: WireObject, ip: IssuerParameters) -> Proof:
    return Proof(
        c=_scalar_from_wire(wire.fields["c"], "c"),
        r_xb=_scalar_from_wire(wire.fields["rXb"], "rXb"),
        r_r=_scalar_from_wire(wire.fields["rR"], "rR"),
        r_ob=_scalar_from_wire(wire.fields["rOb"], "rOb"),
    )


def _finish_ciphertext(wire: WireObject, ip: IssuerParameters) -> Ciphertext:
    e1 = _element_from_wire(wire.fields["E1"], "E1")
    e2 = _element_from_wire(wire.fields["E2"], "E2")
    proof = wire.nested["ieproof"].finish(ip)
    return Ciphertext(e1=e1, e2=e2, proof=proof, label=wire.label)


_FINISHERS = {
    DomainParameters: _finish_params,
    PublicKey: _finish_public_key,
    PrivateKey: _finish_private_key,
    Proof: _finish_proof,
    Ciphertext: _finish_ciphertext,
}


def serialize(obj: Any) -> str:
    """Encode an escrow object as JSON text."""
    return json.dumps(to_wire(obj))


def serialize_cbor(obj: Any) -> bytes:
    """Encode an escrow object as canonical CBOR."""
    return cbor2.dumps(to_wire(obj), canonical=True)


def loads(kind: type, text: str) -> WireObject:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SerializationError(f"{kind.__name__} is not valid JSON") from e
    return WireObject.parse(kind, data)


def loads_cbor(kind: type, data: bytes) -> WireObject:
    try:
        decoded = cbor2.loads(data)
    except cbor2.CBORDecodeError as e:
        raise SerializationError(f"{kind.__name__} is not valid CBOR") from e
    return WireObject.parse(kind, decoded)


def deserialize(ip: IssuerParameters, kind: type, text: str) -> Any:
    """Run both deserialization phases on JSON text."""
    return loads(kind, text).finish(ip)


def save(path: str | Path, obj: Any) -> None:
    save_json(path, to_wire(obj))


def load(path: str | Path, kind: type) -> WireObject:
    return WireObject.parse(kind, load_json(path))
