"""Form field components styled with Tailwind."""
from __future__ import annotations

from markupsafe import Markup, escape


_INPUT_BASE = (
    "block w-full rounded-xl border border-slate-700/60 bg-slate-900/70 px-4 py-2.5 text-sm text-slate-100 "
    "placeholder:text-slate-500 focus:border-fuchsia-500 focus:ring-2 focus:ring-fuchsia-600 focus:ring-offset-0"
)


def _length_attr(max_length: int | None) -> str:
    return f'maxlength="{max_length}"' if max_length else ""


def text_input(
    name: str,
    *,
    label: str,
    placeholder: str = "",
    type_: str = "text",
    value: str | None = None,
    required: bool = True,
    max_length: int | None = None,
    hint: str | None = None,
) -> Markup:
    required_attr = "required" if required else ""
    hint_html = f'<span class="text-xs font-normal text-slate-400">{escape(hint)}</span>' if hint else ""
    return Markup(
        f"""
        <label class=\"flex flex-col gap-2 text-sm font-medium text-slate-200\" for=\"{name}\">
            <span>{escape(label)}</span>
            <input id=\"{name}\" name=\"{name}\" type=\"{type_}\" placeholder=\"{escape(placeholder)}\" value=\"{escape(value or '')}\" class=\"{_INPUT_BASE}\" {_length_attr(max_length)} {required_attr}>
            {hint_html}
        </label>
        """
    )


def password_input(name: str, *, label: str, placeholder: str = "", required: bool = True) -> Markup:
    return text_input(name, label=label, placeholder=placeholder, type_="password", required=required)


def textarea(
    name: str,
    *,
    label: str,
    placeholder: str = "",
    rows: int = 4,
    value: str | None = None,
    required: bool = False,
    max_length: int | None = None,
) -> Markup:
    required_attr = "required" if required else ""
    counter = ""
    if max_length:
        counter = (
            f'<span class="text-right text-xs font-normal text-slate-400" data-char-counter="{name}">'
            f"{len(value or '')}/{max_length}</span>"
        )
    return Markup(
        f"""
        <label class=\"flex flex-col gap-2 text-sm font-medium text-slate-200\" for=\"{name}\">
            <span>{escape(label)}</span>
            <textarea id=\"{name}\" name=\"{name}\" rows=\"{rows}\" placeholder=\"{escape(placeholder)}\" class=\"{_INPUT_BASE} resize-none\" {_length_attr(max_length)} {required_attr}>{escape(value or '')}</textarea>
            {counter}
        </label>
        """
    )


__all__ = ["text_input", "password_input", "textarea"]
