"""Layout building blocks shared across pages."""
from __future__ import annotations

from markupsafe import Markup

from ...schemas import AuthUser

NAV_LINKS = (
    ("Feed", "/feed", "M2.25 12l8.954-8.955a1.126 1.126 0 011.591 0L21.75 12M4.5 9.75v10.125c0 .621.504 1.125 1.125 1.125H9.75v-4.875c0-.621.504-1.125 1.125-1.125h2.25c.621 0 1.125.504 1.125 1.125V21h4.125c.621 0 1.125-.504 1.125-1.125V9.75"),
    ("Create", "/create", "M12 4.5v15m7.5-7.5h-15M3.75 3.75h16.5v16.5H3.75z"),
    ("Profile", "/profile", "M15.75 6a3.75 3.75 0 11-7.5 0 3.75 3.75 0 017.5 0zM4.501 20.118a7.5 7.5 0 0114.998 0"),
)
_SIGN_OUT_ICON = "M15.75 9V5.25A2.25 2.25 0 0013.5 3h-6a2.25 2.25 0 00-2.25 2.25v13.5A2.25 2.25 0 007.5 21h6a2.25 2.25 0 002.25-2.25V15M12 9l3 3m0 0l-3 3m3-3H2.25"


def _icon(path: str) -> str:
    return (
        '<svg xmlns="http://www.w3.org/2000/svg" fill="none" viewBox="0 0 24 24" stroke="currentColor" stroke-width="1.5" class="h-5 w-5">'
        f'<path stroke-linecap="round" stroke-linejoin="round" d="{path}" /></svg>'
    )


def navbar(*, user: AuthUser | None = None, active: str | None = None) -> Markup:
    """Sticky header; navigation and sign-out only render for a signed-in user."""

    links_html = ""
    if user is not None:
        links: list[str] = []
        for label, href, icon in NAV_LINKS:
            state = "bg-slate-800 text-white" if active == href else "text-slate-300"
            links.append(
                f'<a href="{href}" title="{label}" aria-label="{label}" '
                f'class="rounded-full p-2 transition hover:bg-slate-800 hover:text-white {state}">{_icon(icon)}</a>'
            )
        links.append(
            '<form method="post" action="/auth/sign-out" class="inline">'
            '<button type="submit" title="Sign out" aria-label="Sign out" data-sign-out '
            'class="rounded-full p-2 text-slate-300 transition hover:bg-slate-800 hover:text-white">'
            f"{_icon(_SIGN_OUT_ICON)}</button></form>"
        )
        links_html = f'<nav class="flex items-center gap-2" data-nav-links>{"".join(links)}</nav>'

    return Markup(
        f"""
        <header class="sticky top-0 z-40 w-full border-b border-slate-800/60 bg-slate-950/90 backdrop-blur">
            <div class="mx-auto flex h-16 max-w-4xl items-center justify-between px-4">
                <a href="/" class="flex items-center gap-2">
                    <span class="h-8 w-8 rounded-lg bg-gradient-to-br from-fuchsia-500 to-orange-400"></span>
                    <span class="bg-gradient-to-r from-fuchsia-400 to-orange-300 bg-clip-text text-xl font-bold text-transparent">Snapgram</span>
                </a>
                {links_html}
            </div>
        </header>
        """
    )


__all__ = ["navbar", "NAV_LINKS"]
