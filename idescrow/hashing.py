# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

import hashlib
import binascii

from idescrow.constants import SUPPORTED_HASHES


def generate(input_string: str, hash_name: str = "blake2b_224") -> str:
    """
    Calculates the hash digest of a hex encoded input string.

    The default is blake2b_224. Issuers may select any name listed in
    `SUPPORTED_HASHES`, all of which dispatch to `hashlib`.

    Args:
        input_string (str): The hex string to be hashed.
        hash_name (str): The hash function to use.

    Returns:
        str: The hex digest of the decoded input.

    Raises:
        ValueError: If `hash_name` is not supported or the input is not hex.
    """
    if hash_name not in SUPPORTED_HASHES:
        raise ValueError(f"Unsupported hash function: {hash_name}")

    data = binascii.unhexlify(input_string)
    if hash_name == "blake2b_224":
        return hashlib.blake2b(data, digest_size=28).hexdigest()

    return hashlib.new(hash_name, data).hexdigest()


def length_prefixed(data: bytes | None) -> str:
    """
    Encode one transcript item as a 4-byte big-endian length followed by the data.

    Prefixing every item keeps concatenated transcripts unambiguous when
    variable length values (token ids, labels) sit next to each other.
    `None` is encoded exactly like an empty item.

    Args:
        data: The item bytes, or None.

    Returns:
        str: The hex encoding of length || data.
    """
    if data is None:
        data = b""
    return len(data).to_bytes(4, "big").hex() + data.hex()
