"""Ownership file schema."""

from __future__ import annotations

import msgspec


class OwnersFile(msgspec.Struct, kw_only=True):
    """Decoded ``OWNERS`` document.

    Both historical layouts are accepted: the older one lists only
    ``maintainers`` while the newer one adds ``committers``. A missing or
    ``null`` list contributes nobody.

    Attributes
    ----------
    maintainers : list[str] | None
        Identities that maintain the directory.
    committers : list[str] | None
        Identities with commit rights on the directory.

    """

    maintainers: list[str] | None = None
    committers: list[str] | None = None

    def identities(self) -> frozenset[str]:
        """Return the lowercase union of every listed identity."""
        return frozenset(
            login.strip().lower()
            for login in (*(self.maintainers or ()), *(self.committers or ()))
            if login.strip()
        )
