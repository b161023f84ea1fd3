"""Utility helpers shared by the docc_pages configuration loader."""

from __future__ import annotations

import typing as typ

from .models import SiteConfigError, ThemeConfig


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _string_mapping(value: object, *, key: str) -> dict[str, str]:
    """Return ``value`` as a ``str -> str`` mapping, rejecting other shapes."""
    match value:
        case None:
            return {}
        case dict():
            result: dict[str, str] = {}
            for name, target in value.items():
                text = _optional_str(target)
                if text is None:
                    msg = f"'{key}.{name}' must be a non-empty string."
                    raise SiteConfigError(msg)
                result[str(name)] = text
            return result
        case _:
            msg = f"'{key}' must be a mapping."
            raise SiteConfigError(msg)


def parse_mapping_pairs(pairs: typ.Iterable[str], *, option: str) -> dict[str, str]:
    """Parse ``NAME=VALUE`` strings supplied on the command line.

    Parameters
    ----------
    pairs : Iterable[str]
        Raw option values.
    option : str
        Option name used in error messages.

    Returns
    -------
    dict[str, str]
        Parsed pairs in input order; later duplicates win.

    Raises
    ------
    SiteConfigError
        If an entry lacks ``=`` or either side is empty.

    Examples
    --------
    >>> parse_mapping_pairs(["Foundation=https://example.invalid/"], option="x")
    {'Foundation': 'https://example.invalid/'}
    """
    result: dict[str, str] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name.strip() or not value.strip():
            msg = f"Invalid {option} entry {pair!r}; expected NAME=VALUE."
            raise SiteConfigError(msg)
        result[name.strip()] = value.strip()
    return result


def _positive_int(value: object, *, key: str, default: int) -> int:
    """Return ``value`` as an integer of at least one."""
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        msg = f"'{key}' must be a positive integer."
        raise SiteConfigError(msg)
    return value


def _build_theme_config(payload: typ.Mapping[str, typ.Any]) -> ThemeConfig:
    """Build a ThemeConfig instance from the provided mapping payload."""
    base = ThemeConfig()
    return ThemeConfig(
        site_name=payload.get("site_name", base.site_name),
        tutorials_label=payload.get("tutorials_label", base.tutorials_label),
    )
