"""
Text rendering of feeds for the command line.
"""
import textwrap
from typing import List

from linkleaf.models import Feed, LinkSummary

SUMMARY_WIDTH = 76
INDENT = "     "


def wrap_text(text: str, width: int = SUMMARY_WIDTH, indent: str = INDENT) -> str:
    """
    Word-wrap text, prefixing every line with an indent.

    Args:
        text: Text to wrap
        width: Maximum line width, not counting the indent
        indent: Prefix for each line

    Returns:
        Wrapped text, or "" when text has no words
    """
    if width <= 0:
        return text
    lines = textwrap.wrap(text, width=width, break_long_words=False, break_on_hyphens=False)
    return "\n".join(indent + line for line in lines)


def format_listing(feed: Feed, rows: List[LinkSummary]) -> str:
    """
    Render the tabular listing shown by ``linkleaf list``.

    Args:
        feed: Feed the rows came from (for the header)
        rows: Link summaries in display order

    Returns:
        Listing text ending with a newline
    """
    lines = [f'Feed: "{feed.title}"  (version={feed.version}, generated_at={feed.generated_at})']

    for row in rows:
        lines.append(f"{row.position:3d}) [{row.id}] {row.title}")
        lines.append(f"{INDENT}{row.url}")
        lines.append(f"{INDENT}date={row.date} tags={','.join(row.tags)}")
        if row.summary:
            lines.append(wrap_text(row.summary))
        if row.via:
            lines.append(f"{INDENT}via: {row.via}")

    return "\n".join(lines) + "\n"


def format_dump(feed: Feed) -> str:
    """
    Render the unindented key/value dump shown by ``linkleaf print``.

    Args:
        feed: Feed to render

    Returns:
        Dump text ending with a newline
    """
    lines = [
        "FEED",
        "----",
        f"version: {feed.version}",
        f"title: {feed.title}",
        f"generated_at: {feed.generated_at}",
        f"links: {len(feed.links)}",
        "",
    ]

    for link in feed.links:
        lines.append(f"- id: {link.id}")
        lines.append(f"  title: {link.title}")
        lines.append(f"  url: {link.url}")
        lines.append(f"  date: {link.date}")
        if link.tags:
            lines.append(f"  tags: {', '.join(link.tags)}")
        if link.summary:
            lines.append(f"  summary: {link.summary}")
        if link.via:
            lines.append(f"  via: {link.via}")
        lines.append("")

    return "\n".join(lines) + "\n"
