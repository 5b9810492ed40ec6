# src/clients/stock_xml.py

"""Narrow in-place edit of the ``quantity`` field of a stock record.

The record is patched as text instead of being re-serialised so that
every other field and the existing formatting survive the round trip.
"""

import re

_CDATA_QUANTITY_RE = re.compile(
    r"<quantity><!\[CDATA\[(.*?)\]\]></quantity>"
)
_PLAIN_QUANTITY_RE = re.compile(r"<quantity>(.*?)</quantity>")


def replace_quantity_field(xml: str, new_qty: int) -> str:
    """Return *xml* with the first ``quantity`` value set to *new_qty*.

    The CDATA-wrapped form is tried first, then the plain tag.  When
    neither form is present the input is returned unchanged, which
    callers treat as "nothing to write".
    """
    updated, count = _CDATA_QUANTITY_RE.subn(
        lambda _m: f"<quantity><![CDATA[{new_qty}]]></quantity>",
        xml,
        count=1,
    )
    if count:
        return updated
    updated, _count = _PLAIN_QUANTITY_RE.subn(
        lambda _m: f"<quantity>{new_qty}</quantity>",
        xml,
        count=1,
    )
    return updated
