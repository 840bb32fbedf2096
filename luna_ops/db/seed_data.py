"""Default raw materials list used by ``init-db --seed``."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from luna_ops.db.models import RawMaterial

DEFAULT_RAW_MATERIALS: list[tuple[str, str]] = [
    ("SLES 70", "kg"),
    ("CDE", "kg"),
    ("NaCl", "kg"),
    ("PQ7", "kg"),
    ("Glycerine", "L"),
    ("Titanium Dioxide", "g"),
    ("Citric Acid", "kg"),
    ("Mango Fragrance Oil", "ml"),
    ("Phenoxy Ethanol", "L"),
    ("Natural Colours", "g"),
    ("Cationic Surfactants", "kg"),
    ("Anionic Surfactants", "kg"),
    ("Amphoteric Surfactants", "kg"),
    ("Orange Fragrance Oil", "ml"),
    ("Mint Fragrance Oil", "ml"),
    ("Lemon Fragrance Oil", "ml"),
    ("Water", "L"),
]


def seed_raw_materials(session: Session) -> int:
    """Insert each default material that does not exist yet (by name), at quantity 0. Returns count added."""
    existing = set(session.scalars(select(RawMaterial.name)).all())
    added = 0
    for name, unit in DEFAULT_RAW_MATERIALS:
        if name in existing:
            continue
        session.add(RawMaterial(name=name, unit_of_measure=unit, quantity=0.0))
        added += 1
    return added
