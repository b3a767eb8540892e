import hashlib
import re

_NON_ALPHANUMERIC = re.compile(r"[^A-Za-z0-9]")


def account_storage_key(account_id: str) -> str:
    """
    Pseudonymize an external account reference for storage.

    Only the ASCII letters and digits of the reference are kept, then hashed
    with SHA-256, so "org_123" and "org-123" land on the same row.
    """
    normalized = _NON_ALPHANUMERIC.sub("", account_id)
    return hashlib.sha256(normalized.encode("ascii")).hexdigest()


def account_lock_key(account_id: str) -> str:
    """Lock resource key serializing reconciliations for one account."""
    return f"account:{account_storage_key(account_id)}"
