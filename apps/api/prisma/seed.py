#!/usr/bin/env python3
import asyncio
import sys
from pathlib import Path

import jwt

# Add the project root to Python path so we can import from src
project_root = Path(__file__).parent.parent
sys.path.append(str(project_root))

from prisma import Prisma
from src.core.settings import settings

ORGANISATIONS = [
    {"id": "org-0", "name": "Seed Organisation", "slug": "seed-org", "category": ["op"]},
]

PEOPLE = [
    {"id": "person-admin", "name": "Admin", "email": "admin@example.com", "role": ["admin"]},
    {
        "id": "person-provider",
        "name": "Provider",
        "email": "provider@example.com",
        "role": ["opportunityProvider"],
    },
    {"id": "person-volunteer", "name": "Volunteer", "email": "volunteer@example.com", "role": ["volunteer"]},
    {
        "id": "person-org-admin",
        "name": "Org Admin",
        "email": "orgadmin@example.com",
        "role": ["orgAdmin"],
        "orgAdminFor": ["org-0"],
    },
]

OPPORTUNITIES = [
    {"id": "op-0", "name": "Beach clean up", "requestor": "person-provider", "offerOrg": "org-0"},
    {"id": "op-1", "name": "Code club", "requestor": "person-admin", "offerOrg": None},
]

INTERESTS = [
    {"id": "interest-0", "person": "person-volunteer", "opportunity": "op-0", "status": "interested"},
    {"id": "interest-1", "person": "person-volunteer", "opportunity": "op-1", "status": "invited"},
]


async def main():
    print("🌱 Starting database seed...")

    prisma = Prisma()
    await prisma.connect()

    try:
        for organisation in ORGANISATIONS:
            existing = await prisma.organisation.find_unique(where={"id": organisation["id"]})
            if not existing:
                await prisma.organisation.create(data=organisation)
                print(f"✅ Created organisation: {organisation['name']}")
            else:
                print(f"ℹ️ Organisation already exists: {organisation['name']}")

        for person in PEOPLE:
            existing = await prisma.person.find_unique(where={"email": person["email"]})
            if not existing:
                await prisma.person.create(data=person)
                print(f"✅ Created person: {person['email']} ({', '.join(person['role'])})")
            else:
                print(f"ℹ️ Person already exists: {person['email']}")

        result = await prisma.opportunity.create_many(data=OPPORTUNITIES, skip_duplicates=True)
        print(f"✅ Created {result} opportunities")

        result = await prisma.interest.create_many(data=INTERESTS, skip_duplicates=True)
        print(f"✅ Created {result} interests")

        # Development tokens for trying the API by hand
        if settings.JWT_SECRET:
            for person in PEOPLE:
                token = jwt.encode(
                    {"sub": person["id"], "email": person["email"]},
                    settings.JWT_SECRET,
                    algorithm=settings.JWT_ALGORITHM,
                )
                print(f"🔑 {person['email']}: Bearer {token}")
        else:
            print("ℹ️ Skipping token output - JWT_SECRET not configured")

        print("🌱 Seed completed successfully!")

    except Exception as e:
        print(f"❌ Seed failed: {e}")
        raise
    finally:
        await prisma.disconnect()


if __name__ == "__main__":
    asyncio.run(main())
