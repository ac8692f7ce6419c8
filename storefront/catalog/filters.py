"""
Filter specification for catalogue queries.

A ``FilterSpec`` is a plain value: the tag ids selected in each of the
recognized tag groups. It round-trips through query-string parameters
(one comma-separated list per group) so a filter sidebar can mirror the
current selection in the page URL and rebuild it on load.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Tuple


# Fixed order: it is also the order used when encoding.
GROUP_SLUGS: Tuple[str, ...] = ("type", "grade-level", "subject", "framework")

_LIKE_SPECIAL = ("\\", "%", "_")


def parse_list(value: Optional[str]) -> List[str]:
    """Split a comma-separated parameter, dropping blanks and duplicates."""
    if not value:
        return []
    items: List[str] = []
    seen = set()
    for part in value.split(","):
        part = part.strip()
        if part and part not in seen:
            seen.add(part)
            items.append(part)
    return items


def parse_flag(value: Optional[str], default: bool = True) -> bool:
    """Parse a boolean query flag.

    Only the exact value ``false`` turns a default-true flag off, so
    ``?is_active=``, ``?is_active=0`` or ``?is_active=False`` keep it on.
    """
    if value is None:
        return default
    return value != "false"


def normalize_search(text: Optional[str]) -> Optional[str]:
    text = (text or "").strip()
    return text or None


def escape_like(text: str, escape_char: str = "\\") -> str:
    """Escape pattern wildcards so ``text`` matches literally in LIKE/ILIKE."""
    out = []
    for ch in text:
        if ch in _LIKE_SPECIAL:
            out.append(escape_char)
        out.append(ch)
    return "".join(out)


def contains_pattern(text: str) -> str:
    """Case-insensitive substring pattern for ``text``: ``%escaped%``."""
    return f"%{escape_like(text)}%"


@dataclass(frozen=True)
class FilterSpec:
    """Selected tag ids per recognized group.

    Groups are keyed by slug; empty groups are never stored, so two specs
    selecting the same tags compare equal.
    """

    selected: Tuple[Tuple[str, Tuple[str, ...]], ...] = field(default=())

    @classmethod
    def from_mapping(cls, groups: Mapping[str, Iterable[str]]) -> "FilterSpec":
        """Build a spec, silently dropping unrecognized group slugs."""
        selected = []
        for slug in GROUP_SLUGS:
            raw = groups.get(slug)
            if raw is None:
                continue
            if isinstance(raw, str):
                ids = parse_list(raw)
            else:
                ids = parse_list(",".join(str(v) for v in raw))
            if ids:
                selected.append((slug, tuple(ids)))
        return cls(selected=tuple(selected))

    @classmethod
    def from_query_params(cls, params: Mapping[str, Optional[str]]) -> "FilterSpec":
        return cls.from_mapping({k: v for k, v in params.items() if v is not None})

    def to_query_params(self) -> Dict[str, str]:
        return {slug: ",".join(ids) for slug, ids in self.selected}

    @property
    def active_groups(self) -> List[Tuple[str, Tuple[str, ...]]]:
        return list(self.selected)

    def tags_for(self, slug: str) -> Tuple[str, ...]:
        for group_slug, ids in self.selected:
            if group_slug == slug:
                return ids
        return ()

    def __bool__(self) -> bool:
        return bool(self.selected)
