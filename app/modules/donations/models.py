from app.database.database import Base
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import enum


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class BloodType(enum.Enum):
    A = "A"
    B = "B"
    AB = "AB"
    O = "O"


class Rh(enum.Enum):
    POSITIVE = "+"
    NEGATIVE = "-"


class InstitutionType(enum.Enum):
    CLINIC = "clinic"
    HOSPITAL = "hospital"
    BLOOD_BANK = "bloodBank"


class Blood(Base):
    """Datos de referencia: grupo ABO + factor Rh"""
    __tablename__ = "bloods"

    id = Column(Integer, primary_key=True, autoincrement=True)
    type = Column(Enum(BloodType), nullable=False)
    rh = Column(Enum(Rh), nullable=False)

    # Relationships
    donors = relationship("Donor", back_populates="blood")
    blood_bags = relationship("BloodBag", back_populates="blood")
    requests = relationship("Request", back_populates="blood")

    @property
    def label(self) -> str:
        """Etiqueta legible, p.ej. 'O+' o 'AB-'"""
        return f"{self.type.value}{self.rh.value}"


class Donor(Base):
    __tablename__ = "donors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    document = Column(String(50), nullable=False)
    name = Column(String(100), nullable=False)
    lastname = Column(String(100), nullable=False)
    birth_date = Column(DateTime, nullable=True)
    blood_id = Column(Integer, ForeignKey("bloods.id"), nullable=True)

    # Relationships
    blood = relationship("Blood", back_populates="donors")
    blood_bags = relationship("BloodBag", back_populates="donor")


class HealthEntity(Base):
    __tablename__ = "health_entities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    nit = Column(String(20), nullable=False, unique=True)
    name = Column(String(150), nullable=False)
    address = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    phone = Column(String(30), nullable=True)
    email = Column(String(150), nullable=True)
    institution_type = Column(Enum(InstitutionType), nullable=False, default=InstitutionType.HOSPITAL)

    # Relationships
    requests = relationship("Request", back_populates="health_entity")


class Request(Base):
    """Solicitud de sangre de una entidad de salud"""
    __tablename__ = "requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date_created = Column(DateTime, nullable=False, default=_utcnow)
    quantity_needed = Column(Integer, nullable=False)
    due_date = Column(DateTime, nullable=False)

    # References
    blood_id = Column(Integer, ForeignKey("bloods.id"), nullable=False)
    health_entity_id = Column(Integer, ForeignKey("health_entities.id"), nullable=False)

    # Relationships
    blood = relationship("Blood", back_populates="requests")
    health_entity = relationship("HealthEntity", back_populates="requests")
    blood_bags = relationship("BloodBag", back_populates="request")


class BloodBag(Base):
    """Bolsa de sangre donada; siempre atiende exactamente una solicitud"""
    __tablename__ = "blood_bags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    quantity = Column(Integer, nullable=False)
    donation_date = Column(DateTime, nullable=False, default=_utcnow)
    expiration_date = Column(DateTime, nullable=False)

    # References
    blood_id = Column(Integer, ForeignKey("bloods.id"), nullable=False)
    donor_id = Column(Integer, ForeignKey("donors.id"), nullable=False)
    request_id = Column(Integer, ForeignKey("requests.id"), nullable=False, index=True)

    # Relationships
    blood = relationship("Blood", back_populates="blood_bags")
    donor = relationship("Donor", back_populates="blood_bags")
    request = relationship("Request", back_populates="blood_bags")
