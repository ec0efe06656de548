#!/usr/bin/env python3
"""
normalizer.py - Separator normalization for Markdown image embeds.

Locates ``![alt](path)`` references in note text and rewrites the separator
character inside each path so that it matches a target convention. Network
(``http...``) and absolute (``/...``) paths are never touched.

The scan is the same simple non-greedy bracket match a regex gives; nested
brackets or parentheses inside the alt text or path are not supported.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Literal

FORWARD_SLASH = "/"
BACKSLASH = "\\"

Separator = Literal["/", "\\"]

# neither group may cross a line break, including a bare carriage return
EMBED_RE = re.compile(r"!\[([^\r\n]*?)\]\(([^\r\n]*?)\)")

# Prefixes that mark a path as network or absolute
_PASSTHROUGH_PREFIXES = ("http", "/")


@dataclass(frozen=True)
class EmbedLink:
    """A located image embed inside a document."""

    full_match: str
    alt_text: str
    path: str
    start: int
    end: int
    # Offsets of ``path`` relative to ``full_match``
    path_start: int
    path_end: int


def find_embeds(content: str) -> List[EmbedLink]:
    """Return every image embed in ``content`` in left-to-right order."""
    links: List[EmbedLink] = []
    for m in EMBED_RE.finditer(content):
        base = m.start()
        links.append(
            EmbedLink(
                full_match=m.group(0),
                alt_text=m.group(1),
                path=m.group(2),
                start=base,
                end=m.end(),
                path_start=m.start(2) - base,
                path_end=m.end(2) - base,
            )
        )
    return links


def _other_separator(target: str) -> str:
    if target == FORWARD_SLASH:
        return BACKSLASH
    if target == BACKSLASH:
        return FORWARD_SLASH
    raise ValueError(f"Unsupported target separator: {target!r}")


def is_passthrough_path(path: str) -> bool:
    """True for network or absolute paths, which are never rewritten."""
    return path.startswith(_PASSTHROUGH_PREFIXES)


def convert_path(path: str, target_separator: str) -> str:
    """Rewrite every non-target separator in ``path``."""
    if is_passthrough_path(path):
        return path
    return path.replace(_other_separator(target_separator), target_separator)


def rewrite_embed(link: EmbedLink, target_separator: str) -> str:
    """Return the updated match text for ``link``, or the original when unchanged."""
    converted = convert_path(link.path, target_separator)
    if converted == link.path:
        return link.full_match
    full = link.full_match
    return full[: link.path_start] + converted + full[link.path_end:]


def normalize(content: str, target_separator: str) -> str:
    """Normalize separators in every image-embed path of ``content``.

    Only the path part of each embed is rewritten; alt text and the text
    between embeds are copied verbatim. Applying the function twice gives the
    same result as applying it once.
    """
    # Validate up front so bad input fails even when there are no embeds
    _other_separator(target_separator)

    pieces: List[str] = []
    cursor = 0
    for link in find_embeds(content):
        pieces.append(content[cursor:link.start])
        pieces.append(rewrite_embed(link, target_separator))
        cursor = link.end
    if not pieces:
        return content
    pieces.append(content[cursor:])
    return "".join(pieces)


__all__ = [
    "BACKSLASH",
    "FORWARD_SLASH",
    "EMBED_RE",
    "EmbedLink",
    "Separator",
    "convert_path",
    "find_embeds",
    "is_passthrough_path",
    "normalize",
    "rewrite_embed",
]
