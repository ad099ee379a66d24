"""Reusable button components for the UI."""
from __future__ import annotations

from markupsafe import Markup, escape

_PRIMARY = (
    "inline-flex items-center justify-center gap-2 rounded-full bg-gradient-to-r from-fuchsia-600 to-orange-500 "
    "px-5 py-2.5 text-sm font-semibold text-white shadow-lg shadow-fuchsia-500/30 transition hover:opacity-90 "
    "disabled:cursor-not-allowed disabled:opacity-60"
)
_GHOST = (
    "inline-flex items-center justify-center gap-2 rounded-full border border-slate-600/40 px-5 py-2.5 "
    "text-sm font-medium text-slate-100 transition hover:border-fuchsia-500 hover:text-fuchsia-300"
)


def _render(label: str, classes: str, *, id_: str | None, href: str | None, type_: str, extra: str) -> Markup:
    attrs = []
    if id_:
        attrs.append(f'id="{id_}"')
    if href:
        attrs.append(f'href="{escape(href)}"')
        tag = "a"
    else:
        tag = "button"
        attrs.append(f'type="{type_}"')
    if extra:
        attrs.append(extra)
    return Markup(f"<{tag} class=\"{classes}\" {' '.join(attrs)}><span>{escape(label)}</span></{tag}>")


def primary(
    label: str,
    *,
    id_: str | None = None,
    href: str | None = None,
    type_: str = "submit",
    extra: str = "",
    wide: bool = False,
) -> Markup:
    """Return a stylised primary button or link."""

    return _render(label, _PRIMARY + (" flex-1" if wide else ""), id_=id_, href=href, type_=type_, extra=extra)


def ghost(
    label: str,
    *,
    id_: str | None = None,
    href: str | None = None,
    type_: str = "button",
    wide: bool = False,
) -> Markup:
    """Return a subtle button suitable for secondary actions."""

    return _render(label, _GHOST + (" flex-1" if wide else ""), id_=id_, href=href, type_=type_, extra="")


__all__ = ["primary", "ghost"]
