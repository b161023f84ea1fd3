"""Rewrite leftover ``doc://`` tokens in rendered HTML into relative links.

Some cross-document references never reach the structured reference table,
for example links authored in free text that point at another bundle. They
survive rendering as literal ``doc://bundle/path`` tokens. This final pass
scans the finished HTML, skips tag markup such as attribute values and
anything inside ``<code>`` or ``<pre>``, and replaces each token with an
anchor when the bundle is documented in this run or has a configured
external base URL.

Example
-------
>>> processor = DocLinkPostProcessor({"Acme": "com.example.acme"})
>>> processor.process("See doc://com.example.acme/documentation/Acme/Rocket.", 1)
'See <a href="../documentation/acme/rocket/index.html">Rocket</a>.'
"""

from __future__ import annotations

import re
import typing as typ
from html import escape

from docc_pages._constants import DEFAULT_LINK_SCHEME
from docc_pages.diagnostics import Diagnostic, DiagnosticSink, discard
from docc_pages.generator.links import relative_link

_CODE_OPEN = re.compile(r"<code\b", re.IGNORECASE)
_CODE_CLOSE = re.compile(r"</code>", re.IGNORECASE)
_PRE_OPEN = re.compile(r"<pre\b", re.IGNORECASE)
_PRE_CLOSE = re.compile(r"</pre>", re.IGNORECASE)


def token_pattern(scheme: str = DEFAULT_LINK_SCHEME) -> re.Pattern[str]:
    """Return the regex matching ``scheme://bundle/path`` tokens.

    Group 1 is the bundle identifier and group 2 the ``/``-prefixed path.
    """
    return re.compile(
        re.escape(scheme) + r"://([A-Za-z0-9._-]+)(/[A-Za-z0-9/()_-]+)"
    )


def inside_code(html: str, position: int) -> bool:
    """Return ``True`` when ``position`` sits in an unclosed code or pre region.

    Counts opening and closing tags in the preceding text instead of parsing,
    which is sufficient for markup produced by this package.
    """
    before = html[:position]
    if len(_CODE_OPEN.findall(before)) > len(_CODE_CLOSE.findall(before)):
        return True
    return len(_PRE_OPEN.findall(before)) > len(_PRE_CLOSE.findall(before))


def inside_tag(html: str, position: int) -> bool:
    """Return ``True`` when ``position`` sits inside a tag, e.g. an attribute value.

    >>> inside_tag('<meta content="doc://a/b">', 15)
    True
    >>> inside_tag('<p>doc://a/b</p>', 3)
    False
    """
    return html.rfind("<", 0, position) > html.rfind(">", 0, position)


class DocLinkPostProcessor:
    """Resolve ``doc://`` tokens against documented and external modules.

    Parameters
    ----------
    documented_modules : Mapping[str, str]
        Module name to bundle id for modules rendered in this run.
    external_urls : Mapping[str, str], optional
        Bundle id to base URL for modules documented elsewhere.
    scheme : str, optional
        Token scheme, ``doc`` by default.
    """

    def __init__(
        self,
        documented_modules: typ.Mapping[str, str],
        external_urls: typ.Mapping[str, str] | None = None,
        *,
        scheme: str = DEFAULT_LINK_SCHEME,
    ) -> None:
        self.documented_modules = dict(documented_modules)
        self.external_urls = dict(external_urls or {})
        self._pattern = token_pattern(scheme)
        self._bundle_ids = {bundle for bundle in self.documented_modules.values()}
        self._module_names = {name.lower() for name in self.documented_modules}

    def process(
        self, html: str, depth: int, *, report: DiagnosticSink = discard
    ) -> str:
        """Return ``html`` with every resolvable token replaced by an anchor.

        Matches are collected first and substituted from the last to the
        first so each replacement leaves earlier offsets valid. Unresolvable
        tokens are reported and left as they are.
        """
        replacements: list[tuple[int, int, str]] = []
        for match in self._pattern.finditer(html):
            if inside_tag(html, match.start()) or inside_code(html, match.start()):
                continue
            bundle, path = match.group(1), match.group(2)
            href = self.resolve(bundle, path, depth)
            if href is None:
                report(Diagnostic.warning(f"Unresolved documentation link '{match.group(0)}'"))
                continue
            label = path.rstrip("/").rsplit("/", 1)[-1]
            anchor = f'<a href="{escape(href, quote=True)}">{escape(label)}</a>'
            replacements.append((match.start(), match.end(), anchor))

        result = html
        for start, end, anchor in reversed(replacements):
            result = result[:start] + anchor + result[end:]
        return result

    def resolve(self, bundle: str, path: str, depth: int) -> str | None:
        """Return the href for a token, or ``None`` when it cannot be resolved."""
        if bundle in self._bundle_ids or bundle.lower() in self._module_names:
            return relative_link(path, depth)
        base = self.external_urls.get(bundle)
        if base is not None:
            if not base.endswith("/"):
                base = f"{base}/"
            return base + path.lstrip("/").lower()
        return None


__all__ = ["DocLinkPostProcessor", "inside_code", "inside_tag", "token_pattern"]
