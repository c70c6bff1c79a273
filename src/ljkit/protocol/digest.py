# =============================================================================
# Password Digest
# =============================================================================
# The flat protocol accepts the password as an MD5 hex digest ("hpassword")
# so it isn't sent in the clear.
#
# IMPORTANT: This is an interoperability hash, not real protection. Anyone
# who sees the digest can log in with it, so treat it as being as sensitive
# as the password itself and never write it to disk.
# =============================================================================

import hashlib


def md5_hex_digest(plaintext: str) -> str:
    """
    Return the MD5 digest of a string as 32 lowercase hex characters.

    Args:
        plaintext: Any text, including the empty string. Encoded as UTF-8.

    Example:
        >>> md5_hex_digest("")
        'd41d8cd98f00b204e9800998ecf8427e'
    """
    return hashlib.md5(plaintext.encode("utf-8")).hexdigest()
