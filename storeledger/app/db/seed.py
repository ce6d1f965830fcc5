from __future__ import annotations

from decimal import Decimal

from sqlalchemy import select

from storeledger.app.core.logging import configure_logging, get_logger
from storeledger.app.db.session import SessionLocal
from storeledger.app.db.models.models_v1 import BomLine, Material, Project

logger = get_logger(__name__)

DEMO_MATERIALS = [
    ("MAT-CEM-53", "Cement OPC 53", "bag", "Civil"),
    ("MAT-TMT-12", "TMT Bar 12mm", "kg", "Steel"),
    ("MAT-CBL-4C", "Armoured cable 4C x 16 sqmm", "m", "Electrical"),
]


def run_seed():
    db = SessionLocal()
    try:
        # 1) Demo project
        project = db.scalar(select(Project).where(Project.code == "PRJ-DEMO"))
        if not project:
            project = Project(code="PRJ-DEMO", name="Demo Substation")
            db.add(project)
            db.flush()

        # 2) Materials + BOM allocation for the demo project
        for code, name, unit, category in DEMO_MATERIALS:
            material = db.scalar(select(Material).where(Material.code == code))
            if not material:
                material = Material(code=code, name=name, unit=unit, category=category)
                db.add(material)
                db.flush()

            bom = db.scalar(
                select(BomLine)
                .where(BomLine.project_id == project.id)
                .where(BomLine.material_id == material.id)
            )
            if not bom:
                db.add(BomLine(project_id=project.id, material_id=material.id, quantity=Decimal("100")))

        db.commit()
        logger.info("seed ok", project=project.code, materials=len(DEMO_MATERIALS))
    finally:
        db.close()


if __name__ == "__main__":
    configure_logging()
    run_seed()
