"""Depth-aware relative link construction shared by every renderer.

Pages are written to ``<output>/<lowercased id>/index.html`` and must work
from ``file://`` as well as from any static host, so no base URL exists.
Every internal link is therefore relative to the referring page's own
depth. :func:`relative_link` and :func:`relative_asset` are the only
implementations of that formula; the content renderer, the sidebar, the
breadcrumbs, the page assets, and the doc-link post-processor all call
them.

Examples
--------
>>> relative_link("/documentation/Acme/Rocket", 2)
'../../documentation/acme/rocket/index.html'
>>> relative_asset("/images/rocket.png", 1)
'../images/rocket.png'
>>> depth_of("/documentation/acme")
2
"""

from __future__ import annotations

from pathlib import PurePosixPath

_PASSTHROUGH_PREFIXES = ("http://", "https://", "mailto:", "#")


def _segments(identifier: str) -> list[str]:
    return [segment for segment in identifier.split("/") if segment]


def depth_of(document_id: str) -> int:
    """Return the number of non-empty path segments in ``document_id``."""
    return len(_segments(document_id))


def normalize_id(identifier: str) -> str:
    """Return ``identifier`` without surrounding slashes, lowercased.

    Two ids refer to the same page exactly when their normalized forms are
    equal.
    """
    return identifier.strip("/").lower()


def relative_link(target_id: str, depth: int) -> str:
    """Return the relative URL of the page for ``target_id``.

    Parameters
    ----------
    target_id : str
        Canonical id of the target page.
    depth : int
        Depth of the page that contains the link.

    Returns
    -------
    str
        ``"../" * depth`` followed by the lowercased id and ``/index.html``.
    """
    return "../" * depth + normalize_id(target_id) + "/index.html"


def relative_asset(target_path: str, depth: int) -> str:
    """Return the relative URL of an asset such as an image or stylesheet.

    Asset names are copied verbatim from the archive, so their case is kept.
    """
    return "../" * depth + target_path.strip("/")


def resolve_url(url: str, depth: int) -> str:
    """Return an href for a reference url.

    Absolute URLs and fragment-only anchors pass through unchanged; every
    other url is treated as a canonical id.
    """
    if url.startswith(_PASSTHROUGH_PREFIXES):
        return url
    return relative_link(url, depth)


def resolve_media_url(url: str, depth: int) -> str:
    """Return a src for an image or video url from a reference table."""
    if url.startswith("/"):
        return relative_asset(url, depth)
    return url


def output_path_for(document_id: str) -> PurePosixPath:
    """Return the output file path, relative to the output root, for a page.

    Examples
    --------
    >>> output_path_for("/documentation/Acme")
    PurePosixPath('documentation/acme/index.html')
    """
    return PurePosixPath(*_segments(document_id.lower()), "index.html")


__all__ = [
    "depth_of",
    "normalize_id",
    "output_path_for",
    "relative_asset",
    "relative_link",
    "resolve_media_url",
    "resolve_url",
]
