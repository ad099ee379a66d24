"""Feedback elements like loaders, empty states and toast containers."""
from __future__ import annotations

from markupsafe import Markup, escape


def post_skeletons(*, count: int = 3) -> Markup:
    block = """
        <div class="space-y-3 animate-pulse">
            <div class="h-12 w-full rounded-2xl bg-slate-800/80"></div>
            <div class="aspect-square w-full rounded-2xl bg-slate-800/80"></div>
            <div class="h-20 w-full rounded-2xl bg-slate-800/80"></div>
        </div>
    """
    return Markup(f'<div class="space-y-6" data-loading>{block * count}</div>')


def empty_state(message: str) -> Markup:
    return Markup(
        f"""
        <div class="py-12 text-center" data-empty-state>
            <p class="text-lg text-slate-400">{escape(message)}</p>
        </div>
        """
    )


def toast_container() -> Markup:
    return Markup(
        """
        <div id=\"toast-root\" class=\"pointer-events-none fixed inset-x-0 top-5 z-50 flex flex-col items-center gap-3\"></div>
        """
    )


__all__ = ["post_skeletons", "empty_state", "toast_container"]
