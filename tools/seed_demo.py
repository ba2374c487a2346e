"""Create a demo account with a few todos, straight through the backend client.

    python tools/seed_demo.py [email] [password]

Uses BACKEND_URL when set, otherwise runs the app in-process.
"""
import asyncio
import sys
from pathlib import Path

# ensure project root is on sys.path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

import httpx

from todoapp.client.backend import BackendClient
from todoapp.client.errors import BackendError
from todoapp.config import BACKEND_URL

DEMO_TODOS = [
    {"title": "Buy milk", "priority": "low", "category": "shopping"},
    {"title": "Write report", "description": "Quarterly numbers", "priority": "high", "category": "work"},
    {"title": "Book dentist", "priority": "medium", "category": "health", "due_date": "2030-01-15"},
]


async def seed(email: str, password: str) -> int:
    if BACKEND_URL:
        client = BackendClient(BACKEND_URL)
    else:
        from todoapp.main import app
        client = BackendClient(transport=httpx.ASGITransport(app=app, raise_app_exceptions=False))
    async with client:
        try:
            await client.auth.sign_up(email, password)
            print("registered", email)
        except BackendError as exc:
            print("sign-up skipped:", exc.message)
        session = await client.auth.sign_in(email, password)
        for todo in DEMO_TODOS:
            created = await client.insert("todos", {**todo, "user_id": session.user.id})
            print("created", created["id"], created["title"])
        return len(await client.select_all("todos"))


if __name__ == "__main__":
    email = sys.argv[1] if len(sys.argv) > 1 else "demo@example.com"
    password = sys.argv[2] if len(sys.argv) > 2 else "correct_horse_battery_staple"
    total = asyncio.run(seed(email, password))
    print("todos for", email, "=", total)
