"""Data models for linkleaf feeds."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass
class Link:
    """One bookmarked resource inside a feed."""

    id: str
    title: str
    url: str
    date: str
    summary: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    via: Optional[str] = None


@dataclass
class Feed:
    """Root collection persisted in a single file. Links are newest-first."""

    version: int = 0
    title: str = ""
    generated_at: str = ""
    links: List[Link] = field(default_factory=list)


@dataclass(frozen=True)
class LinkSummary:
    """Read-only view of a link as shown in listings."""

    position: int
    id: str
    title: str
    url: str
    date: str
    tags: Tuple[str, ...] = ()
    summary: Optional[str] = None
    via: Optional[str] = None
