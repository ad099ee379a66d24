"""Card-style components for the feed and profile grid."""
from __future__ import annotations

from typing import Iterable, Mapping
from uuid import UUID

from markupsafe import Markup, escape

from ...constants import PLACEHOLDER_IMAGE
from ...schemas import FeedPost, LikeState, Post
from . import feedback

EMPTY_FEED_MESSAGE = "No posts yet. Be the first to share!"


def avatar(*, name: str | None, url: str | None, size: str = "h-10 w-10", text: str = "text-sm") -> Markup:
    """Avatar image, or the first letter of ``name`` on a gradient when there is no image."""

    initial = (name or "")[:1].upper() or "U"
    fallback = (
        f'<span class="{size} {text} inline-flex shrink-0 items-center justify-center rounded-full '
        f'bg-gradient-to-br from-fuchsia-500 to-orange-400 font-semibold text-white">{escape(initial)}</span>'
    )
    if not url:
        return Markup(fallback)
    return Markup(
        f'<img src="{escape(url)}" alt="{escape(name or "avatar")}" class="{size} shrink-0 rounded-full object-cover" '
        f'data-avatar-fallback="{escape(initial)}" onerror="window.snapgram.avatarFallback(this)">'
    )


def like_button(state: LikeState, *, known: bool = True) -> Markup:
    """Heart toggle with its count; an unknown state leaves the count empty."""

    heart_classes = "fill-rose-500 text-rose-500" if state.liked else "fill-none text-slate-300"
    count = state.count if known else ""
    return Markup(
        f"""
        <button type="button" class="like-btn inline-flex items-center gap-2 rounded-full px-3 py-1.5 text-sm transition hover:text-rose-400"
                data-like-button data-post-id="{state.post_id}" data-liked="{str(state.liked).lower()}" aria-pressed="{str(state.liked).lower()}"
                data-like-known="{str(known).lower()}">
            <svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24" stroke="currentColor" stroke-width="1.8" class="h-6 w-6 transition-colors {heart_classes}" data-like-heart>
                <path stroke-linecap="round" stroke-linejoin="round" d="M21 8.25c0-2.485-2.099-4.5-4.688-4.5-1.935 0-3.597 1.126-4.312 2.733-.715-1.607-2.377-2.733-4.313-2.733C5.1 3.75 3 5.765 3 8.25c0 7.22 9 12 9 12s9-4.78 9-12z" />
            </svg>
            <span class="font-semibold" data-like-count>{count}</span>
        </button>
        """
    )


def post_card(post: FeedPost, likes: LikeState | None = None) -> Markup:
    """Return a post card ready for inline rendering."""

    state = likes or LikeState(post_id=post.id)
    author = post.author_name
    avatar_url = post.profiles.avatar_url if post.profiles else None
    date_text = post.created_at.strftime("%b %d, %Y")
    caption_block = ""
    if post.caption:
        caption_block = (
            f'<p class="text-sm text-slate-200"><span class="mr-2 font-semibold text-white">{escape(author)}</span>'
            f"{escape(post.caption)}</p>"
        )

    return Markup(
        f"""
        <article class="overflow-hidden rounded-3xl bg-slate-900/70 shadow-lg shadow-black/20 transition hover:shadow-fuchsia-600/20"
                 data-post-card data-post-id="{post.id}">
            <header class="flex items-center gap-3 p-4">
                {avatar(name=author, url=avatar_url)}
                <div class="flex-1">
                    <p class="text-sm font-semibold text-white">{escape(author)}</p>
                    <time class="text-xs text-slate-400" datetime="{post.created_at.isoformat()}">{escape(date_text)}</time>
                </div>
            </header>
            <div class="aspect-square w-full overflow-hidden bg-slate-800">
                <img src="{escape(post.image_url)}" alt="{escape(post.caption or 'Post')}" class="h-full w-full object-cover" loading="lazy">
            </div>
            <div class="space-y-3 p-4">
                <div class="flex items-center gap-4" data-like-slot>{like_button(state, known=likes is not None)}</div>
                {caption_block}
            </div>
        </article>
        """
    )


def feed_items(posts: Iterable[FeedPost], like_states: Mapping[UUID, LikeState] | None = None) -> Markup:
    """The feed list body: one card per post, or the empty-state message."""

    states = like_states or {}
    cards = [post_card(post, states.get(post.id)) for post in posts]
    if not cards:
        return feedback.empty_state(EMPTY_FEED_MESSAGE)
    return Markup("".join(cards))


def grid_tile(post: Post) -> Markup:
    return Markup(
        f"""
        <div class="aspect-square cursor-pointer overflow-hidden rounded-lg border border-slate-800/70 transition hover:opacity-90" data-post-id="{post.id}">
            <img src="{escape(post.image_url)}" alt="{escape(post.caption or 'Post')}" class="h-full w-full object-cover" loading="lazy"
                 onerror="this.onerror=null;this.src='{PLACEHOLDER_IMAGE}'">
        </div>
        """
    )


__all__ = ["avatar", "like_button", "post_card", "feed_items", "grid_tile", "EMPTY_FEED_MESSAGE"]
