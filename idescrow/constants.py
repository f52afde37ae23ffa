# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# domain tags
ESC_DOMAIN_TAG = "ESCROW|PROOF|v1|".encode("utf-8").hex()
TID_DOMAIN_TAG = "TOKEN|To|ID|v1|".encode("utf-8").hex()
XI_DOMAIN_TAG = "ATTRIBUTE|To|Int|v1|".encode("utf-8").hex()

# group description
GROUP_NAME = "bls12-381-g1"

# hash functions an issuer may select
DEFAULT_HASH = "sha256"
SUPPORTED_HASHES = ("blake2b_224", "sha256", "sha384", "sha512")

# wire value for a ciphertext without a label
NULL_SENTINEL = "NULL"
