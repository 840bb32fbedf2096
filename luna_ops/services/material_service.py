"""Raw materials: register, list, seed defaults and receive deliveries (intake)."""

from sqlalchemy.orm import Session

from luna_ops.db import Database
from luna_ops.db.models import RawMaterial, RawMaterialIntake
from luna_ops.db.repositories import material_repo
from luna_ops.db.seed_data import seed_raw_materials
from luna_ops.exceptions import MaterialNotFound, ValidationError
from luna_ops.models.manufacturing import IntakeRequest, RawMaterialCreate
from luna_ops.services.activity_service import ActivityService
from luna_ops.services.ledger import RawMaterialLedger
from luna_ops.utils.logger import get_logger

logger = get_logger("luna_ops.services.materials")


class MaterialService:
    def __init__(self, db: Database, activity: ActivityService):
        self._db = db
        self._activity = activity

    def add_material(self, data: RawMaterialCreate) -> RawMaterial:
        with self._db.session() as session:
            if material_repo.get_by_name(session, data.name) is not None:
                raise ValidationError(f"Raw material {data.name!r} already exists")
            material = material_repo.add_material(session, data.name, data.unit_of_measure, data.quantity)
        logger.info("materials.added", material_id=material.id, name=material.name, quantity=material.quantity)
        return material

    def get_material(self, material_id: str) -> RawMaterial:
        with self._db.session() as session:
            material = material_repo.get_material(session, material_id)
            if material is None:
                raise MaterialNotFound(material_id)
            return material

    def list_materials(self) -> list[RawMaterial]:
        with self._db.session() as session:
            return material_repo.list_materials(session)

    def seed_defaults(self) -> int:
        """Add the default raw materials list (skipping existing names). Returns how many were added."""
        with self._db.session() as session:
            added = seed_raw_materials(session)
        logger.info("materials.seeded", added=added)
        return added

    def list_intakes(self, material_id: str, limit: int = 100) -> list[RawMaterialIntake]:
        """Deliveries received for one material, newest first."""
        with self._db.session() as session:
            if material_repo.get_material(session, material_id) is None:
                raise MaterialNotFound(material_id)
            return material_repo.list_intakes(session, material_id=material_id, limit=limit)

    def log_intake(self, material_id: str, data: IntakeRequest) -> RawMaterialIntake:
        """Add the received quantity to stock and record the delivery in one transaction."""

        def _receive(session: Session) -> tuple[RawMaterialIntake, RawMaterial]:
            material = RawMaterialLedger.increment(session, material_id, data.actual_quantity)
            intake = material_repo.add_intake(
                session,
                raw_material_id=material_id,
                **data.model_dump(),
            )
            return intake, material

        intake, material = self._db.run_transaction(_receive, name="materials.intake")
        if abs(data.actual_quantity - data.quantity_on_note) > 1e-9:
            logger.warning(
                "materials.intake.discrepancy",
                material_id=material_id,
                delivery_note_id=data.delivery_note_id,
                quantity_on_note=data.quantity_on_note,
                actual_quantity=data.actual_quantity,
            )
        logger.info("materials.intake.recorded", material_id=material_id, new_quantity=material.quantity)
        self._activity.log_activity(
            f"Received {data.actual_quantity:g} {material.unit_of_measure} of {material.name} from {data.supplier}",
            data.received_by,
            data.received_by,
        )
        return intake
