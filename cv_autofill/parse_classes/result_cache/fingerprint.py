"""fingerprint.py
Computes the content fingerprint used to address cached extraction results.
"""
import hashlib


def fingerprint(data: bytes | bytearray | memoryview) -> str:
    """
    Return the SHA-256 digest of `data` as a 64 character lowercase hex string.

    Identical bytes always produce the same fingerprint. Empty input is valid
    and yields the digest of the empty byte string.

    Args:
        data (bytes | bytearray | memoryview): Exact bytes of the document.

    Returns:
        str: Hex digest of the bytes.

    Raises:
        TypeError: If `data` is not a bytes-like object.
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(
            f"fingerprint() expects a bytes-like object (got {type(data).__name__})."
        )
    return hashlib.sha256(data).hexdigest()
