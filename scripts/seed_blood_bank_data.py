"""
Seed script: Populate a development database with blood bank demo data.

What it creates:
- Blood reference rows (8): A/B/AB/O with Rh + and -.
- Health entities: hospitals, clinics and a blood bank.
- Donors (default 40) with a random blood group each.
- Requests (default 60) spread over the last months, some already overdue.
- Blood bags: donations assigned to requests of the same blood group,
  leaving a mix of fulfilled, partial and pending requests.

Run from the project root:
    python scripts/seed_blood_bank_data.py --donors 40 --requests 60 --seed 7

Note: This is intended for development environments only.
"""

# Add project root to sys.path so `app.*` imports work even if CWD changes
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import argparse
import random
from datetime import datetime, timedelta, timezone

from app.database.database import SessionLocal, engine, Base
from app.modules.donations.models import (
    Blood,
    BloodBag,
    BloodType,
    Donor,
    HealthEntity,
    InstitutionType,
    Request,
    Rh,
)


FIRST_NAMES = ["Ana", "Carlos", "Laura", "Andrés", "María", "Juan", "Valentina", "Santiago", "Camila", "Felipe"]
LAST_NAMES = ["Gómez", "Rodríguez", "Martínez", "López", "García", "Hernández", "Díaz", "Torres", "Ramírez", "Castro"]

HEALTH_ENTITIES = [
    ("900100200", "Hospital Central", "Bogotá", InstitutionType.HOSPITAL),
    ("900300400", "Clínica del Norte", "Medellín", InstitutionType.CLINIC),
    ("900500600", "Hospital San Rafael", "Cali", InstitutionType.HOSPITAL),
    ("900700800", "Banco de Sangre Regional", "Bucaramanga", InstitutionType.BLOOD_BANK),
]


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def create_bloods(db):
    bloods = []
    for blood_type in BloodType:
        for rh in Rh:
            blood = db.query(Blood).filter(Blood.type == blood_type, Blood.rh == rh).first()
            if not blood:
                blood = Blood(type=blood_type, rh=rh)
                db.add(blood)
            bloods.append(blood)
    db.commit()
    return bloods


def create_health_entities(db):
    entities = []
    for nit, name, city, institution_type in HEALTH_ENTITIES:
        entity = db.query(HealthEntity).filter(HealthEntity.nit == nit).first()
        if not entity:
            entity = HealthEntity(
                nit=nit,
                name=name,
                address=f"Calle {random.randint(1, 120)} # {random.randint(1, 90)}-{random.randint(1, 60)}",
                city=city,
                phone=f"60{random.randint(10000000, 99999999)}",
                email=f"contacto@{name.lower().replace(' ', '')}.co",
                institution_type=institution_type,
            )
            db.add(entity)
        entities.append(entity)
    db.commit()
    return entities


def create_donors(db, bloods, count: int):
    donors = []
    for _ in range(count):
        donor = Donor(
            document=str(random.randint(10000000, 1099999999)),
            name=random.choice(FIRST_NAMES),
            lastname=random.choice(LAST_NAMES),
            birth_date=datetime(random.randint(1965, 2005), random.randint(1, 12), random.randint(1, 28)),
            blood=random.choice(bloods),
        )
        db.add(donor)
        donors.append(donor)
    db.commit()
    return donors


def create_requests(db, bloods, entities, count: int):
    now = utcnow()
    requests = []
    for _ in range(count):
        created = now - timedelta(days=random.randint(1, 240))
        request = Request(
            date_created=created,
            quantity_needed=random.choice([100, 250, 450, 500, 1000]),
            due_date=created + timedelta(days=random.randint(7, 90)),
            blood=random.choice(bloods),
            health_entity=random.choice(entities),
        )
        db.add(request)
        requests.append(request)
    db.commit()
    return requests


def create_blood_bags(db, donors, requests):
    created = 0
    for request in requests:
        # Leave roughly a quarter of the requests without deliveries
        if random.random() < 0.25:
            continue
        target = request.quantity_needed * random.choice([0.3, 0.5, 0.8, 1.0, 1.2])
        delivered = 0
        compatible = [d for d in donors if d.blood_id == request.blood_id] or donors
        while delivered < target:
            quantity = random.choice([250, 450])
            donation_date = request.date_created + timedelta(days=random.randint(0, 30))
            db.add(BloodBag(
                quantity=quantity,
                donation_date=donation_date,
                expiration_date=donation_date + timedelta(days=42),
                blood_id=request.blood_id,
                donor=random.choice(compatible),
                request=request,
            ))
            delivered += quantity
            created += 1
    db.commit()
    return created


def main():
    parser = argparse.ArgumentParser(description="Seed blood bank demo data")
    parser.add_argument("--donors", type=int, default=40)
    parser.add_argument("--requests", type=int, default=60)
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible data")
    args = parser.parse_args()

    if args.seed is not None:
        random.seed(args.seed)

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        print("Creating blood reference data...")
        bloods = create_bloods(db)

        print("Creating health entities...")
        entities = create_health_entities(db)

        print("Creating donors...")
        donors = create_donors(db, bloods, args.donors)
        print(f"Donors created: {len(donors)}")

        print("Creating requests...")
        requests = create_requests(db, bloods, entities, args.requests)
        print(f"Requests created: {len(requests)}")

        print("Creating blood bags...")
        bags_created = create_blood_bags(db, donors, requests)
        print(f"Blood bags created: {bags_created}")

        print("\nSeed completed.")
        print("Try: GET /api/v1/reports/inventory")
    finally:
        db.close()


if __name__ == "__main__":
    main()
