#!/usr/bin/env python3
"""
Seed script to create a demo owner with one project, content item and version.
Run with: python -m scripts.seed_demo
"""
import asyncio
import uuid
from datetime import datetime, timezone
from motor.motor_asyncio import AsyncIOMotorClient
from collabhub.core.settings import settings
from collabhub.core.security import hash_password

DEMO_USERNAME = "demo"
DEMO_EMAIL = "demo@collabhub.dev"
DEMO_PASSWORD = "demo1234"


async def main():
    print(f"Connecting to MongoDB at {settings.MONGODB_URI}...")
    client = AsyncIOMotorClient(settings.MONGODB_URI, serverSelectionTimeoutMS=5000)
    db = client[settings.MONGODB_DB_NAME]

    try:
        await client.admin.command('ping')
    except Exception as e:
        print(f"Failed to connect to MongoDB: {e}")
        client.close()
        return

    if await db["users"].find_one({"username": DEMO_USERNAME}):
        print(f"Demo user '{DEMO_USERNAME}' already exists. Skipping.")
        client.close()
        return

    now = datetime.now(timezone.utc)
    user_id = str(uuid.uuid4())
    project_id = str(uuid.uuid4())
    content_id = str(uuid.uuid4())
    version_id = str(uuid.uuid4())

    await db["users"].insert_one({
        "user_id": user_id,
        "username": DEMO_USERNAME,
        "email": DEMO_EMAIL,
        "password_hash": hash_password(DEMO_PASSWORD),
        "project_roles": {project_id: "owner"},
        "refresh_token": None,
        "created_at": now,
        "updated_at": now,
    })
    await db["projects"].insert_one({
        "project_id": project_id,
        "name": "Demo Project",
        "description": "Seeded demo project",
        "members": [{"user_id": user_id, "role": "owner"}],
        "comments": [],
        "is_released": False,
        "created_at": now,
        "updated_at": now,
    })
    await db["contents"].insert_one({
        "content_id": content_id,
        "project_id": project_id,
        "type": "document",
        "versions": [version_id],
        "created_at": now,
        "updated_at": now,
    })
    await db["versions"].insert_one({
        "version_id": version_id,
        "content_id": content_id,
        "uploaded_by": user_id,
        "file_path": "",
        "approved": False,
        "created_at": now,
        "updated_at": now,
    })
    print(f"Seeded: user {DEMO_USERNAME} / {DEMO_PASSWORD}, project {project_id}")
    client.close()


if __name__ == "__main__":
    asyncio.run(main())
