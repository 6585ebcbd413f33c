"""Seed demo storefront data: a home page and a few products.

Run: python scripts/seed_demo.py

Writes through the collection service into DATA_DIR. Existing products are
left untouched, so repeated runs are safe; the home page is overwritten.
"""
from __future__ import annotations

import sys
from pathlib import Path

# Ensure project root (parent of scripts/) is on sys.path when run as a file.
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from storeadmin.app_factory import create_app
from storeadmin.collection_service import CONTENT, PRODUCTS
from storeadmin.errors import ConflictError

ACTOR = "seed-script"

HOME_PAGE = {
    "heroTitle": "Handmade beads, good vibes",
    "heroSubtitle": "Small-batch bracelets and charms",
    "announcement": "Free shipping over $40",
}

PRODUCTS_SEED = {
    "bead-aurora": {
        "name": "Aurora Bracelet",
        "price": 18.5,
        "category": "bracelets",
        "emoji": "🌈",
        "featured": True,
        "colors": ["Rainbow", "Pastel"],
    },
    "bead-lavender": {
        "name": "Lavender Diffuser Charm",
        "price": 12,
        "category": "charms",
        "emoji": "💜",
        "scents": ["Lavender", "Eucalyptus"],
    },
    "bead-classic": {
        "name": "Classic Black Onyx",
        "price": 22,
        "category": "bracelets",
        "sizes": ["Small", "Medium", "Large"],
        "inStock": False,
    },
}


def main() -> None:
    app = create_app()
    service = app.collections  # type: ignore[attr-defined]
    service.create(CONTENT, "home", HOME_PAGE, actor=ACTOR)
    created = 0
    for product_id, data in PRODUCTS_SEED.items():
        try:
            service.create(PRODUCTS, product_id, data, actor=ACTOR)
            created += 1
        except ConflictError:
            continue
    print(f"Demo seed complete. Products created: {created}, data dir: {app.config['DATA_DIR']}")


if __name__ == "__main__":
    main()
