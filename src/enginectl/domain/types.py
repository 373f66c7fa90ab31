"""Transport schemes understood by the destination resolver."""

from __future__ import annotations

from enum import StrEnum


class Scheme(StrEnum):
    """URI schemes with dedicated validation rules.

    Any other scheme is passed through unvalidated.
    """

    SSH = "ssh"
    UNIX = "unix"
    TCP = "tcp"
