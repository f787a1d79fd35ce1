"""
Read-side access to the donations tables.

The reports module consumes these collections as full snapshots; an empty
table is a valid empty list, never an error.
"""

import logging
from typing import List

from sqlalchemy.orm import Session, joinedload

from app.modules.donations.models import BloodBag, Donor, Request

logger = logging.getLogger(__name__)


class DonationsRepository:
    """Lectura de bolsas, solicitudes y donantes"""

    def __init__(self, db: Session):
        self.db = db

    def list_blood_bags(self) -> List[BloodBag]:
        """
        Listar todas las bolsas de sangre con su sangre, donante y solicitud

        Returns:
            List[BloodBag]: todas las bolsas (lista vacía si no hay registros)
        """
        bags = self.db.query(BloodBag).options(
            joinedload(BloodBag.blood),
            joinedload(BloodBag.donor),
            joinedload(BloodBag.request).joinedload(Request.health_entity)
        ).order_by(BloodBag.id).all()
        logger.debug(f"Loaded {len(bags)} blood bags")
        return bags

    def list_requests(self) -> List[Request]:
        """
        Listar todas las solicitudes con su sangre y entidad de salud

        Returns:
            List[Request]: todas las solicitudes (lista vacía si no hay registros)
        """
        requests = self.db.query(Request).options(
            joinedload(Request.blood),
            joinedload(Request.health_entity)
        ).order_by(Request.id).all()
        logger.debug(f"Loaded {len(requests)} requests")
        return requests

    def list_donors(self) -> List[Donor]:
        """Listar todos los donantes registrados"""
        donors = self.db.query(Donor).order_by(Donor.id).all()
        logger.debug(f"Loaded {len(donors)} donors")
        return donors
