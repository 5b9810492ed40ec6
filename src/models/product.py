# src/models/product.py

"""Store-side records: catalog products and their stock rows."""

from dataclasses import dataclass, field


@dataclass
class StoreProduct:
    """A catalog product as returned by the store webservice."""

    id: int
    ean: str = ""


@dataclass
class StockRecord:
    """The stock row linked one-to-one to a product."""

    id: int
    product_id: int
    quantity: int = 0


@dataclass
class ProductIndex:
    """Catalog products keyed by EAN, with duplicate/missing tallies."""

    by_ean: dict[str, int] = field(
        default_factory=lambda: dict[str, int]()
    )
    without_ean: list[int] = field(
        default_factory=lambda: list[int]()
    )
    duplicated_eans: set[str] = field(
        default_factory=lambda: set[str]()
    )
    total: int = 0
