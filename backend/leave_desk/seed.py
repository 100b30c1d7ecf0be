"""Seed script for development data.

Submits a handful of requests through the running API and reviews some of them,
on top of the mock data the store seeds itself with.

Run with:  python -m leave_desk.seed
"""

from __future__ import annotations

import asyncio
import sys
from datetime import date, timedelta

import httpx

BASE_URL = "http://localhost:8000"

MANAGER_HEADERS = {
    "Content-Type": "application/json",
    "X-User-Id": "mgr001",
    "X-User-Name": "Maria Garcia",
    "X-Role": "manager",
}

# (user_id, user_name)
EMPLOYEES = [
    ("emp020", "Juan Perez"),
    ("emp021", "Elena Ruiz"),
    ("emp022", "Tomas Vega"),
]

# (employee index, type, days from today to start, length in days, work site, observations)
SUBMISSIONS = [
    (0, "Vacation", 14, 5, "Main Office", "Family trip"),
    (1, "Compensatory", 3, 1, "Branch A", "Covering weekend inventory"),
    (2, "Sick Leave", 0, 2, "Remote", "Medical appointment"),
    (0, "Personal Leave", 30, 1, "Main Office", "Moving house"),
]

# (submission index, decision, note)
DECISIONS = [
    (1, "approve", None),
    (2, "approve", "Get well soon"),
    (3, "reject", "Peak season coverage conflict"),
]


def _employee_headers(index: int) -> dict[str, str]:
    user_id, user_name = EMPLOYEES[index]
    return {"Content-Type": "application/json", "X-User-Id": user_id, "X-User-Name": user_name, "X-Role": "employee"}


async def seed_requests(client: httpx.AsyncClient) -> list[str | None]:
    """Submit the demo requests and return their ids (None when a submission failed)."""
    print("\n--- Submitting requests ---")
    today = date.today()
    request_ids: list[str | None] = []

    for employee, leave_type, offset, length, work_site, observations in SUBMISSIONS:
        start = today + timedelta(days=offset)
        end = start + timedelta(days=length - 1)
        resp = await client.post(
            f"{BASE_URL}/requests",
            json={
                "type": leave_type,
                "start_date": start.isoformat(),
                "end_date": end.isoformat(),
                "work_site": work_site,
                "observations": observations,
                "evidence": leave_type == "Sick Leave",
            },
            headers=_employee_headers(employee),
        )
        label = f"{EMPLOYEES[employee][1]}: {leave_type} {start}..{end}"
        if resp.status_code == 201:
            request_ids.append(resp.json()["id"])
            print(f"  [OK] {label} -> {request_ids[-1]}")
        else:
            request_ids.append(None)
            print(f"  [ERROR] {label}: {resp.status_code} {resp.text[:200]}")

    return request_ids


async def seed_decisions(client: httpx.AsyncClient, request_ids: list[str | None]) -> None:
    """Review some of the submitted requests as the manager."""
    print("\n--- Reviewing requests ---")
    for index, decision, note in DECISIONS:
        request_id = request_ids[index]
        if request_id is None:
            print(f"  [SKIP] submission {index} was not created")
            continue
        resp = await client.post(
            f"{BASE_URL}/requests/{request_id}/review",
            json={"decision": decision, "note": note},
            headers=MANAGER_HEADERS,
        )
        if resp.status_code == 200:
            print(f"  [OK] {decision} {request_id}")
        elif resp.status_code == 409:
            print(f"  [SKIP] {request_id} already decided")
        else:
            print(f"  [ERROR] {decision} {request_id}: {resp.status_code} {resp.text[:200]}")


async def main() -> None:
    print("=" * 60)
    print("  Leave Desk - Development Seed Script")
    print("=" * 60)

    async with httpx.AsyncClient(timeout=30.0) as client:
        try:
            resp = await client.get(f"{BASE_URL}/health")
            if resp.status_code != 200:
                print(f"API health check failed: {resp.status_code}")
                sys.exit(1)
            print("\n[OK] API is healthy")
        except httpx.ConnectError:
            print("ERROR: Cannot connect to API at", BASE_URL)
            print("Make sure the API is running (uvicorn leave_desk.main:app)")
            sys.exit(1)

        request_ids = await seed_requests(client)
        await seed_decisions(client, request_ids)

    print("\n" + "=" * 60)
    print("  Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
