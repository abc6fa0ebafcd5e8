# ids.py
# Short identifiers are ULIDs: millisecond timestamp prefix + random part,
# 26 Crockford base32 characters. Sorting the strings sorts by creation time.

from ulid import ULID


def new_ulid() -> str:
    return str(ULID())
