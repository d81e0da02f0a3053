# app/scripts/seed.py
# Usage: python -m app.scripts.seed
from datetime import datetime, timezone

from app.db.mongo import ensure_indexes, get_db

db = get_db()
ensure_indexes(db)

now = datetime.now(timezone.utc).isoformat()

# Client: don't overwrite created_at on reseed
db.clients.update_one(
    {"email": "demo@acme.test"},
    {
        "$set": {"name": "Acme", "phone": "555-0100", "updated_at": now},
        "$setOnInsert": {"created_at": now},
    },
    upsert=True,
)
client = db.clients.find_one({"email": "demo@acme.test"}, {"_id": 1})

# Project: unique by name
db.projects.update_one(
    {"name": "Site Redesign"},
    {
        "$set": {
            "description": "Refresh the public website",
            "status": "Not Started",
            "client_id": client["_id"],
            "updated_at": now,
        },
        "$setOnInsert": {"created_at": now},
    },
    upsert=True,
)

print(f"Seeded: client {client['_id']}, project 'Site Redesign'")
