from __future__ import annotations

import hashlib


def content_hash(data: str | bytes, length: int = 16) -> str:
    """Return a short, stable hex digest for ``data``.

    sha256(data)[:length]; strings are hashed as UTF-8.
    """

    raw = data.encode("utf-8") if isinstance(data, str) else data
    return hashlib.sha256(raw).hexdigest()[:length]


class SequentialIds:
    """Monotonic ``<prefix>-N`` ids scoped to a single run."""

    def __init__(self, prefix: str, start: int = 0) -> None:
        self.prefix = prefix
        self._next = start

    def next(self) -> str:
        value = f"{self.prefix}-{self._next}"
        self._next += 1
        return value

    @property
    def issued(self) -> int:
        return self._next
