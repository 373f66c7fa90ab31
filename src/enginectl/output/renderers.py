"""Rich renderers for ServiceResult.

Both service operations (``connection_add`` and ``context_create``)
return a recorded connection, so every success renders the same way.
Lines are printed with ``soft_wrap`` so long URIs and error messages are
never split by the console width.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.text import Text

from enginectl.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from enginectl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        _render_connection(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────

_FIELD_STYLES: dict[str, str] = {
    "name": "engine.name",
    "uri": "engine.uri",
    "identity": "engine.path",
    "registry_path": "engine.path",
}


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    line = Text.assemble(("OK", "engine.ok"), (f"  {result.op}", "engine.op"))
    console.print(line, soft_wrap=True)


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    line = Text.assemble(
        (f"  {key}: ", "engine.key"),
        (str(value), _FIELD_STYLES.get(key, "")),
    )
    console.print(line, soft_wrap=True)


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    line = Text.assemble(
        ("ERROR", "engine.error"),
        (f"  {result.op}", "engine.op"),
        f" — {msg}",
    )
    console.print(line, soft_wrap=True)

    if verbose and err:
        console.print(Text(f"  code: {err.code}", style="dim"), soft_wrap=True)
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}", soft_wrap=True, markup=False)


# ── Connection renderer ───────────────────────────────────────────────


def _render_connection(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a recorded connection, flagging it when it is the default."""
    _status_line(console, result)
    d = result.data
    for key in ("name", "uri", "identity"):
        if key in d:
            _field(console, key, d[key])
    if d.get("default"):
        console.print(Text("  (default connection)", style="engine.default"))
    if verbose and "registry_path" in d:
        _field(console, "registry_path", d["registry_path"])
