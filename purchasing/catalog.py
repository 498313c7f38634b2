"""
Supplier and product lookup for type-ahead suggestions.

Loads the supplier and product catalogs from CSV and ranks entries against
what the user has typed so far:
  1. Exact name / alias match (case-insensitive)
  2. Fuzzy name match (using rapidfuzz WRatio, which tolerates partial input)

Suggestions never touch the order; the presentation layer applies a pick
through OrderFormController.apply_suggestion().
"""
import csv
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

from rapidfuzz import fuzz

from models.result import Suggestion
from models.supplier import Product, Supplier

logger = logging.getLogger(__name__)

# Minimum fuzzy score (0-100) to offer a suggestion
FUZZY_THRESHOLD = 70
MAX_SUGGESTIONS = 5


def _parse_price(raw: Optional[str]) -> Optional[Decimal]:
    if not raw or not raw.strip():
        return None
    try:
        return Decimal(raw.strip())
    except InvalidOperation:
        logger.debug("Ignoring unparseable catalog price: %r", raw)
        return None


class CatalogLookup:
    """
    Loads supplier and product catalogs from CSV.

    CSV formats:
      suppliers.csv: id, name, aliases
        aliases: pipe-separated alternative names, e.g. "ACME Corp|ACME Pty Ltd"
      products.csv:  sku, name, mrp, cost_price
    """

    def __init__(
        self,
        suppliers_csv: str | Path,
        products_csv: str | Path,
        threshold: int = FUZZY_THRESHOLD,
        limit: int = MAX_SUGGESTIONS,
    ):
        self.threshold = threshold
        self.limit = limit
        self.suppliers: list[Supplier] = []
        self.products: list[Product] = []
        self._load_suppliers(Path(suppliers_csv))
        self._load_products(Path(products_csv))

    @classmethod
    def from_config(cls, config) -> "CatalogLookup":
        return cls(
            config.suppliers_csv,
            config.products_csv,
            threshold=config.catalog_fuzzy_threshold,
            limit=config.max_suggestions,
        )

    def _load_suppliers(self, path: Path) -> None:
        if not path.exists():
            logger.warning("Suppliers CSV not found: %s — supplier suggestions disabled", path)
            return
        with open(path, newline="", encoding="utf-8") as f:
            for row in csv.DictReader(f):
                aliases_raw = row.get("aliases") or ""
                self.suppliers.append(Supplier(
                    id=row["id"].strip(),
                    name=row["name"].strip(),
                    aliases=[a.strip() for a in aliases_raw.split("|") if a.strip()],
                ))
        logger.info("Loaded %d suppliers from %s", len(self.suppliers), path.name)

    def _load_products(self, path: Path) -> None:
        if not path.exists():
            logger.warning("Products CSV not found: %s — product suggestions disabled", path)
            return
        with open(path, newline="", encoding="utf-8") as f:
            for row in csv.DictReader(f):
                self.products.append(Product(
                    sku=row["sku"].strip(),
                    name=row["name"].strip(),
                    mrp=_parse_price(row.get("mrp")),
                    cost_price=_parse_price(row.get("cost_price")),
                ))
        logger.info("Loaded %d products from %s", len(self.products), path.name)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def suggest_suppliers(self, query: str) -> list[Suggestion]:
        """Best supplier matches for *query*, highest score first."""
        scored = []
        for s in self.suppliers:
            score = max(self._score(query, name) for name in s.all_names)
            scored.append((score, s))
        return [
            Suggestion(kind="supplier", key=s.id, name=s.name, score=score / 100.0)
            for score, s in self._rank(scored)
        ]

    def suggest_products(self, query: str) -> list[Suggestion]:
        """Best product matches for *query*, highest score first."""
        scored = [(self._score(query, p.name), p) for p in self.products]
        return [
            Suggestion(
                kind="product", key=p.sku, name=p.name, score=score / 100.0,
                mrp=p.mrp, cost_price=p.cost_price,
            )
            for score, p in self._rank(scored)
        ]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _score(query: str, candidate: str) -> float:
        q = query.strip().lower()
        c = candidate.strip().lower()
        if not q or not c:
            return 0.0
        if q == c:
            return 100.0
        return fuzz.WRatio(q, c)

    def _rank(self, scored: list[tuple]) -> list[tuple]:
        kept = [(score, entry) for score, entry in scored if score >= self.threshold]
        kept.sort(key=lambda pair: (-pair[0], pair[1].name))
        if kept:
            logger.debug("Top suggestion '%s' (score=%.0f)", kept[0][1].name, kept[0][0])
        return kept[: self.limit]
