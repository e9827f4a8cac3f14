"""URL path canonicalisation."""

from __future__ import annotations


def clean_path(p: str) -> str:
    """Return the canonical URL path for ``p``.

    Repeated slashes are collapsed, ``.`` elements are removed, ``..`` elements
    remove the element before them, and the result is always rooted. A
    trailing slash is kept when the input had one or ended in a ``.`` element.
    """
    if not p:
        return "/"

    trailing = len(p) > 1 and p.endswith("/")
    segments = p.split("/")
    last_index = len(segments) - 1
    parts: list[str] = []

    for index, segment in enumerate(segments):
        if not segment:
            continue
        if segment == ".":
            if index == last_index:
                trailing = True
            continue
        if segment == "..":
            if parts:
                parts.pop()
            continue
        parts.append(segment)

    if not parts:
        return "/"
    result = "/" + "/".join(parts)
    return result + "/" if trailing else result