"""Destination translation and resolution.

Turns a user-supplied destination string into a validated
:class:`EndpointDescriptor`:

- ``translate_destination()``: legacy ``host=<dest>`` syntax -> canonical string.
- ``ensure_scheme()``: bare ``[user@]host`` destinations default to ``ssh://``.
- ``resolve_destination()``: parse, apply overrides, validate per scheme.

Scheme validation is a dispatch table of pure functions keyed by
:class:`~enginectl.domain.types.Scheme`, so each transport can be tested
in isolation.  The filesystem check used for ``unix`` destinations is
injected as a ``stat`` callable.
"""

from __future__ import annotations

import logging
import os
import re
import stat as stat_mod
from collections.abc import Callable
from urllib.parse import quote, unquote, urlsplit

from pydantic import BaseModel

from enginectl.domain.errors import (
    FilesystemError,
    InvalidDestinationError,
    InvalidOptionError,
    UnsupportedOptionError,
)
from enginectl.domain.types import Scheme

logger = logging.getLogger(__name__)

StatFn = Callable[[str], os.stat_result]

DEFAULT_SSH_PORT = 22
MAX_PORT = 65535

# Characters left unescaped when a decoded path is written back into a URI.
_PATH_SAFE = "/:@!$&'()*+,;=~"

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class ResolveOptions(BaseModel):
    """Caller-supplied overrides for a resolution.

    The ``*_supplied`` flags record whether the user passed the option
    explicitly; several scheme rules reject an option only when it was
    given on purpose, not when it holds its default.
    """

    model_config = {"frozen": True}

    port: int = DEFAULT_SSH_PORT
    port_supplied: bool = False
    identity: str | None = None
    identity_supplied: bool = False
    socket_path: str | None = None
    socket_path_supplied: bool = False
    make_default: bool = False


class EndpointDescriptor(BaseModel):
    """A validated, scheme-typed remote target."""

    model_config = {"frozen": True}

    scheme: str
    user: str | None = None
    host: str = ""
    port: str | None = None
    path: str = ""
    query: str = ""
    fragment: str = ""
    identity: str | None = None
    is_default: bool = False

    @property
    def uri(self) -> str:
        """Canonical ``scheme://[user@]host[:port]path`` form."""
        netloc = f"{self.user}@" if self.user is not None else ""
        netloc += self.host
        if self.port:
            netloc += f":{self.port}"
        path = quote(self.path, safe=_PATH_SAFE)
        if path and netloc and not path.startswith("/"):
            path = "/" + path
        uri = f"{self.scheme}://{netloc}{path}"
        if self.query:
            uri += f"?{self.query}"
        if self.fragment:
            uri += f"#{self.fragment}"
        return uri


# ---------------------------------------------------------------------------
# Translation and parsing
# ---------------------------------------------------------------------------


def translate_destination(raw: str) -> str:
    """Translate the legacy ``host=<destination>[,opt=val...]`` form.

    Strings without ``=`` are already canonical and returned verbatim.
    Extra comma-separated options (``ca=``, ``cert=``, ``key=``) are
    rejected rather than dropped.

    Examples:
        >>> translate_destination("host=tcp://h:1")
        'tcp://h:1'
        >>> translate_destination("ssh://root@h")
        'ssh://root@h'
    """
    if raw == "":
        return ""
    key, sep, value = raw.partition("=")
    if not sep:
        return raw
    if key != "host":
        msg = f'"host" is required for --docker option, got key {key!r}'
        raise InvalidOptionError(msg)
    segments = value.split(",")
    if len(segments) > 1:
        extra = ",".join(segments[1:])
        msg = f'--docker additional options "{extra}" not supported'
        raise UnsupportedOptionError(msg)
    return segments[0]


def ensure_scheme(destination: str) -> str:
    """Prefix ``ssh://`` unless *destination* already carries a scheme."""
    if _SCHEME_RE.match(destination):
        return destination
    return f"ssh://{destination}"


def _split_netloc(netloc: str) -> tuple[str | None, str, str | None]:
    """Split a netloc into ``(user, host, port)`` without altering case."""
    userinfo, at, hostport = netloc.rpartition("@")
    user = userinfo if at else None

    if hostport.startswith("["):
        end = hostport.find("]")
        if end == -1:
            msg = f"invalid IPv6 host in {netloc!r}"
            raise InvalidDestinationError(msg)
        host, rest = hostport[: end + 1], hostport[end + 1 :]
        if rest and not rest.startswith(":"):
            msg = f"invalid port {rest!r} after host"
            raise InvalidDestinationError(msg)
        port = rest[1:] if rest else None
    else:
        host, colon, port_part = hostport.partition(":")
        port = port_part if colon else None

    if port == "":
        port = None
    if port is not None and not (port.isascii() and port.isdigit()):
        msg = f"invalid port {port!r} after host"
        raise InvalidDestinationError(msg)
    if port is not None and int(port) > MAX_PORT:
        msg = f"port {port} out of range 0-{MAX_PORT}"
        raise InvalidDestinationError(msg)
    return user, host, port


def parse_destination(destination: str) -> EndpointDescriptor:
    """Parse a scheme-qualified destination into an unvalidated descriptor."""
    try:
        parts = urlsplit(destination)
    except ValueError as exc:
        msg = f"invalid destination {destination!r}: {exc}"
        raise InvalidDestinationError(msg) from exc
    if not parts.scheme:
        msg = f"invalid destination {destination!r}: missing scheme"
        raise InvalidDestinationError(msg)

    user, host, port = _split_netloc(parts.netloc)
    return EndpointDescriptor(
        scheme=parts.scheme,
        user=user,
        host=host,
        port=port,
        path=unquote(parts.path),
        query=parts.query,
        fragment=parts.fragment,
    )


# ---------------------------------------------------------------------------
# Scheme validators
# ---------------------------------------------------------------------------


def _warn(warnings: list[str], message: str) -> None:
    logger.warning(message)
    warnings.append(message)


def validate_ssh(
    endpoint: EndpointDescriptor,
    options: ResolveOptions,
    stat: StatFn,
    warnings: list[str],
) -> EndpointDescriptor:
    """ssh imposes no structural rules here; setup happens downstream."""
    return endpoint


def validate_unix(
    endpoint: EndpointDescriptor,
    options: ResolveOptions,
    stat: StatFn,
    warnings: list[str],
) -> EndpointDescriptor:
    """Reject ``--identity`` and stat the socket path.

    A missing or unreadable path only warns: the registry may point at a
    socket that has not been created yet.
    """
    if options.identity_supplied:
        raise UnsupportedOptionError("--identity option not supported for unix scheme")

    path = endpoint.path
    try:
        info = stat(path)
    except FileNotFoundError:
        _warn(warnings, f'"{path}" does not exist')
        return endpoint
    except PermissionError:
        _warn(warnings, f'You do not have permission to read "{path}"')
        return endpoint
    except OSError as exc:
        msg = f'cannot stat "{path}": {exc}'
        raise FilesystemError(msg) from exc

    if not stat_mod.S_ISSOCK(info.st_mode):
        msg = f'"{path}" exists and is not a unix domain socket'
        raise InvalidDestinationError(msg)
    return endpoint


def validate_tcp(
    endpoint: EndpointDescriptor,
    options: ResolveOptions,
    stat: StatFn,
    warnings: list[str],
) -> EndpointDescriptor:
    """Reject socket-path and identity overrides; require a port."""
    if options.socket_path_supplied:
        raise UnsupportedOptionError("--socket-path option not supported for tcp scheme")
    if options.identity_supplied:
        raise UnsupportedOptionError("--identity option not supported for tcp scheme")

    if not endpoint.port and options.port_supplied:
        endpoint = endpoint.model_copy(update={"port": str(options.port)})
    if not endpoint.port:
        raise InvalidDestinationError(
            "tcp scheme requires a port either via --port or in destination URL"
        )
    return endpoint


Validator = Callable[[EndpointDescriptor, ResolveOptions, StatFn, list[str]], EndpointDescriptor]

SCHEME_VALIDATORS: dict[Scheme, Validator] = {
    Scheme.SSH: validate_ssh,
    Scheme.UNIX: validate_unix,
    Scheme.TCP: validate_tcp,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def resolve_destination(
    raw: str,
    options: ResolveOptions | None = None,
    *,
    stat: StatFn = os.stat,
    warnings: list[str] | None = None,
) -> EndpointDescriptor:
    """Resolve *raw* into a validated :class:`EndpointDescriptor`.

    Args:
        raw: Destination as typed by the user (``[user@]host`` or ``scheme://...``).
        options: Overrides from the command line.
        stat: Filesystem stat call used for ``unix`` destinations.
        warnings: Optional collector for non-fatal diagnostics.

    Raises:
        DestinationError: Any fatal validation failure.
    """
    if options is None:
        options = ResolveOptions()
    if warnings is None:
        warnings = []

    endpoint = parse_destination(ensure_scheme(raw))

    # The override lands before scheme checks so tcp can still reject it.
    if options.socket_path_supplied:
        endpoint = endpoint.model_copy(update={"path": options.socket_path or ""})

    try:
        scheme = Scheme(endpoint.scheme)
    except ValueError:
        _warn(warnings, f'"{endpoint.scheme}" unknown scheme, no validation provided')
    else:
        endpoint = SCHEME_VALIDATORS[scheme](endpoint, options, stat, warnings)

    return endpoint.model_copy(
        update={
            "identity": options.identity if options.identity_supplied else None,
            "is_default": options.make_default,
        }
    )
