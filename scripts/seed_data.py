#!/usr/bin/env python3
"""
Seed script: registers (or logs in) one user and creates products via the API (no direct DB).
Run: API must be running.
  python scripts/seed_data.py
  python scripts/seed_data.py --products 100 --email seed@example.com
"""

import argparse
import random
from decimal import Decimal

import httpx

API_BASE = "http://localhost:8000/api/v1"

NAMES = [
    "MacBook Pro", "Laptop stand", "Mechanical keyboard", "Wireless mouse", "Bluetooth headphones",
    "27 inch monitor", "HD webcam", "Bluetooth speaker", "Phone charger", "USB-C cable",
    "Coffee maker", "Electric kettle", "Toaster", "Blender", "Air fryer",
    "Backpack", "Laptop sleeve", "Stylus", "Graphics tablet", "USB microphone",
    "Ring light", "Tripod", "Green screen", "Smart watch", "Power bank",
]

DESCRIPTIONS = [
    "Great for home office and remote work.",
    "High quality build and reliable performance.",
    "Popular choice for developers and designers.",
    "Ergonomic and comfortable for long sessions.",
    None,
]


def random_name() -> str:
    return random.choice(NAMES) + (" " + str(random.randint(1, 999)) if random.random() > 0.5 else "")


def random_price() -> str:
    # Two decimal places, sent as a string so no float rounding sneaks in.
    return str(Decimal(random.randint(0, 500_00)) / 100)


def get_token(client: httpx.Client, email: str, password: str) -> str | None:
    """Register the seed user, or log in when the email is already taken."""
    r = client.post("/auth/register", json={
        "name": "Seed User",
        "email": email,
        "password": password,
        "password_confirmation": password,
    })
    if r.status_code == 422 and "email" in r.json().get("errors", {}):
        r = client.post("/auth/login", json={"email": email, "password": password})
    if r.status_code not in (200, 201):
        print(f"Auth failed: {r.status_code} {r.text[:200]}")
        return None
    return r.json()["data"]["token"]


def main():
    ap = argparse.ArgumentParser(description="Seed products via API")
    ap.add_argument("--products", type=int, default=40, help="Number of products to create")
    ap.add_argument("--email", default="seed@example.com")
    ap.add_argument("--password", default="password123")
    ap.add_argument("--base-url", default=API_BASE, help="API base URL")
    args = ap.parse_args()

    created = 0
    errors = []

    with httpx.Client(base_url=args.base_url, timeout=30.0) as client:
        token = get_token(client, args.email, args.password)
        if not token:
            return
        headers = {"Authorization": f"Bearer {token}"}

        print(f"Creating {args.products} products...")
        for i in range(args.products):
            payload = {"name": random_name(), "price": random_price()}
            description = random.choice(DESCRIPTIONS)
            if description:
                payload["description"] = description
            try:
                r = client.post("/products", headers=headers, json=payload)
            except httpx.HTTPError as e:
                errors.append(str(e))
                continue
            if r.status_code == 201:
                created += 1
            elif r.status_code == 429:
                # Default limit is 60/minute per IP; the rest of this run would be rejected too.
                errors.append("Rate limited; stopping early")
                break
            else:
                errors.append(f"Product {i}: {r.status_code} {r.text[:80]}")
            if (i + 1) % 10 == 0:
                print(f"  ... {i + 1} products")

    print(f"\nDone. Products created: {created}")
    if errors:
        print(f"Errors ({len(errors)}):")
        for e in errors[:15]:
            print("  ", e)
        if len(errors) > 15:
            print("  ... and", len(errors) - 15, "more")


if __name__ == "__main__":
    main()
