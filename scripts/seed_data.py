from __future__ import annotations

import argparse
from decimal import Decimal
from uuid import uuid4

from packages.shared.schemas.catalog_v1 import FULLNESS_ORDER, FullnessV1, WreathSizeV1
from services.api.app.db.database import db_session
from services.api.app.db.init_db import init_db
from services.api.app.db.models import (
    DeliveryOption,
    FullnessVariant,
    Species,
    SpeciesHeight,
    Stand,
    Wreath,
)
from services.api.app.services.catalog_admin import default_wreath_title

# Price per foot by fullness; full trees cost more per foot.
SPECIES = (
    ("Fraser Fir", "Soft needles, strong branches, long lasting.", ("18.00", "20.00", "23.00")),
    ("Douglas Fir", "Sweet scent and a classic full shape.", ("15.00", "17.00", "19.50")),
    ("Noble Fir", "Stiff branches made for heavy ornaments.", ("22.00", "25.00", "28.00")),
)
HEIGHTS_FEET = (5, 6, 7, 8, 9, 10)

STANDS = (
    ("Classic Stand", "Holds trees up to 8 ft.", "25.00", 8.0),
    ("Heavy Duty Stand", "Holds trees up to 12 ft.", "45.00", 12.0),
)

WREATHS = (
    (WreathSizeV1.SMALL, "18 inch fresh wreath.", "15.00"),
    (WreathSizeV1.MEDIUM, "24 inch fresh wreath.", "25.00"),
    (WreathSizeV1.LARGE, "36 inch fresh wreath.", "40.00"),
)

DELIVERY_OPTIONS = (
    ("Standard Delivery", "Delivered to your door.", "25.00"),
    ("Delivery and Setup", "We bring it in and set it up in your stand.", "45.00"),
)


def _seed_species(db) -> int:
    added = 0
    for sort_order, (name, description, prices) in enumerate(SPECIES):
        if db.query(Species).filter(Species.name == name).first() is not None:
            continue

        species = Species(id=uuid4().hex, name=name, description=description, sort_order=sort_order)
        db.add(species)
        db.flush()
        for fullness, price in zip(FULLNESS_ORDER, prices, strict=True):
            db.add(
                FullnessVariant(
                    id=uuid4().hex,
                    species_id=species.id,
                    fullness_type=fullness.value,
                    price_per_foot=Decimal(price),
                    available=True,
                    image_url=(
                        f"/images/{name.lower().replace(' ', '-')}.jpg"
                        if fullness == FullnessV1.MEDIUM
                        else ""
                    ),
                )
            )
        for height in HEIGHTS_FEET:
            db.add(
                SpeciesHeight(
                    id=uuid4().hex,
                    species_id=species.id,
                    height_feet=float(height),
                    price_per_foot=Decimal(prices[1]),
                )
            )
        added += 1
    return added


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed a demo tree lot catalog")
    parser.add_argument("--skip-stands", action="store_true")
    parser.add_argument("--skip-wreaths", action="store_true")
    args = parser.parse_args()

    init_db()

    db = db_session()
    try:
        added_species = _seed_species(db)

        if not args.skip_stands and db.query(Stand).limit(1).count() == 0:
            for sort_order, (name, description, price, fits) in enumerate(STANDS):
                db.add(
                    Stand(
                        id=uuid4().hex,
                        name=name,
                        description=description,
                        price=Decimal(price),
                        fits_up_to_feet=fits,
                        sort_order=sort_order,
                    )
                )

        if not args.skip_wreaths and db.query(Wreath).limit(1).count() == 0:
            for sort_order, (size, description, price) in enumerate(WREATHS):
                db.add(
                    Wreath(
                        id=uuid4().hex,
                        size=size.value,
                        title=default_wreath_title(size.value),
                        description=description,
                        price=Decimal(price),
                        sort_order=sort_order,
                    )
                )

        if db.query(DeliveryOption).limit(1).count() == 0:
            for sort_order, (name, description, fee) in enumerate(DELIVERY_OPTIONS):
                db.add(
                    DeliveryOption(
                        id=uuid4().hex,
                        name=name,
                        description=description,
                        fee=Decimal(fee),
                        sort_order=sort_order,
                    )
                )

        db.commit()
        print(f"Seeded catalog (species added={added_species})")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    raise SystemExit(main())
