"""Offer ID generator.

Layout: <random prefix, 5-8 letters>-<uuid4>-<app version without dots>
e.g. "Kqzet-1c2b6f8e-3d1a-4f0e-9a43-5be1f0c8d2e7-170"

The readable prefix lets users quote an offer id by its first characters.
"""

import secrets
import string
import uuid

_PREFIX_ALPHABET = string.ascii_letters


class OfferIdGenerator:
    def __init__(self, version: str, min_prefix: int = 5, max_prefix: int = 8) -> None:
        if not (0 < min_prefix <= max_prefix):
            raise ValueError(f"invalid prefix bounds {min_prefix}..{max_prefix}")
        self._version_tag = version.replace(".", "")
        self._min_prefix = min_prefix
        self._max_prefix = max_prefix

    def next_id(self) -> str:
        length = self._min_prefix + secrets.randbelow(self._max_prefix - self._min_prefix + 1)
        prefix = "".join(secrets.choice(_PREFIX_ALPHABET) for _ in range(length))
        return f"{prefix}-{uuid.uuid4()}-{self._version_tag}"
