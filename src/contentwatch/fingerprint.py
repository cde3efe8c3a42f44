"""Content fingerprinting and comparison."""

from __future__ import annotations

import hashlib
import hmac

# Size in bytes of a fingerprint produced by fingerprint()
FINGERPRINT_SIZE = 16


def fingerprint(content: bytes) -> bytes:
    """Compute a fixed-size digest of ``content``.

    MD5 is used for change detection only, not for security.
    """
    return hashlib.md5(content, usedforsecurity=False).digest()


def fingerprints_match(a: bytes | None, b: bytes | None) -> bool:
    """Return True if two fingerprints are the same byte sequence.

    ``None`` (no fingerprint yet) compares as the empty sequence, so it
    never matches a real digest. Differing lengths are never equal.
    """
    a = a or b""
    b = b or b""
    if len(a) != len(b):
        return False
    return hmac.compare_digest(a, b)
