# src/feeds/xml_records.py

"""Helpers that turn parsed XML feeds into plain records.

Feeds repeat a node once per offer/item, but a document may contain
zero, one or many of them.  :func:`children` is the single place where
that is normalised: it always returns a list, whatever the shape.
"""

from bs4 import BeautifulSoup, Tag


def parse_xml(text: str) -> BeautifulSoup:
    """Parse a feed document with the lxml XML parser."""
    return BeautifulSoup(text, "xml")


def qualified_name(tag: Tag) -> str:
    """Return ``prefix:name`` for namespaced tags, else the bare name."""
    if tag.prefix:
        return f"{tag.prefix}:{tag.name}"
    return tag.name


def children(parent: Tag | None, name: str) -> list[Tag]:
    """Direct child elements named *name* as a list of 0, 1 or N tags."""
    if parent is None:
        return []
    return [
        child
        for child in parent.find_all(recursive=False)
        if qualified_name(child) == name or child.name == name
    ]


def first_child(parent: Tag | None, name: str) -> Tag | None:
    """First direct child named *name*, or ``None``."""
    found = children(parent, name)
    return found[0] if found else None


def element_text(tag: Tag | None) -> str:
    """Trimmed text content (CDATA included); empty for missing tags."""
    if tag is None:
        return ""
    return tag.get_text().strip()


def field_map(tag: Tag) -> dict[str, str]:
    """Map each child element's qualified name to its text.

    Namespaced fields keep their literal key (``g:gtin``).  When a
    field repeats, the first occurrence is kept.
    """
    fields: dict[str, str] = {}
    for child in tag.find_all(recursive=False):
        fields.setdefault(qualified_name(child), element_text(child))
    return fields
