"""Deterministic demo data for a fresh request store.

Own requests use ids from ``REQ001`` and team requests from ``REQ101``, so the
two bands never collide. The same seed always produces the same records.
"""

from __future__ import annotations

import random
from datetime import date, timedelta

from leave_desk.models.enums import LeaveType, RequestStatus
from leave_desk.schemas.request import OWN_BAND_START, TEAM_BAND_START, LeaveRequest, format_request_id

TEAM_SIZE = 15

WORK_SITES = ["Main Office", "Branch A", "Branch B", "Remote"]
DEPARTMENTS = ["Logistics", "Operations", "Human Resources", "Finance", "IT", "Sales"]
FIRST_NAMES = ["Ana", "Luis", "Carmen", "Jorge", "Lucia", "Diego", "Sofia", "Miguel", "Valeria", "Pedro"]
LAST_NAMES = ["Garcia", "Perez", "Rodriguez", "Lopez", "Martinez", "Torres", "Ramirez", "Flores"]
OBSERVATIONS = ["", "", "Family trip", "Medical appointment", "Moving house", "Covering overtime"]

# Team requests skew toward Pending so the review queue is never empty.
TEAM_STATUS_WEIGHTS = {
    RequestStatus.PENDING: 60,
    RequestStatus.APPROVED: 25,
    RequestStatus.REJECTED: 15,
}


def _random_request(
    rng: random.Random,
    *,
    request_id: str,
    employee_id: str,
    employee_name: str,
    work_site: str,
    status: RequestStatus,
    created_at: date,
    types: list[LeaveType],
) -> LeaveRequest:
    leave_type = rng.choice(types)
    max_days = 1 if leave_type == LeaveType.COMPENSATORY else 5
    start = created_at + timedelta(days=rng.randint(3, 30))
    end = start + timedelta(days=rng.randint(0, max_days - 1))
    reviewed = status != RequestStatus.PENDING
    return LeaveRequest(
        id=request_id,
        employee_id=employee_id,
        employee_name=employee_name,
        type=leave_type,
        start_date=start,
        end_date=end,
        work_site=work_site,
        status=status,
        created_at=created_at,
        observations=rng.choice(OBSERVATIONS),
        manager_notes="Coverage not available for those dates" if status == RequestStatus.REJECTED else None,
        reviewed_at=created_at + timedelta(days=rng.randint(1, 3)) if reviewed else None,
        evidence=leave_type == LeaveType.SICK_LEAVE and rng.random() < 0.7,
    )


def generate_mock_requests(
    seed: int,
    owner_id: str,
    owner_name: str,
    today: date,
    own_count: int = 12,
    team_count: int = 40,
) -> list[LeaveRequest]:
    """Build the demo collection, newest first.

    Own requests span the current and two previous years; only the most recent
    one is still Pending. Team requests use ``emp002`` onwards.

    Raises ValueError when own_count would overflow into the team id band.
    """
    if not 0 <= own_count <= TEAM_BAND_START - OWN_BAND_START:
        msg = f"own_count must be between 0 and {TEAM_BAND_START - OWN_BAND_START}, got {own_count}"
        raise ValueError(msg)
    rng = random.Random(seed)
    requests: list[LeaveRequest] = []

    window_days = (today - date(today.year - 2, 1, 1)).days
    own_dates = sorted((today - timedelta(days=rng.randint(0, window_days)) for _ in range(own_count)), reverse=True)
    for offset, created_at in enumerate(own_dates):
        if offset == 0:
            status = RequestStatus.PENDING
        else:
            status = rng.choice([RequestStatus.APPROVED, RequestStatus.REJECTED])
        # Only the latest few own requests may be Vacation, so the seeded balance stays positive.
        types = list(LeaveType) if offset < 3 else [LeaveType.SICK_LEAVE, LeaveType.PERSONAL_LEAVE]
        requests.append(
            _random_request(
                rng,
                request_id=format_request_id(OWN_BAND_START + offset),
                employee_id=owner_id,
                employee_name=owner_name,
                work_site=rng.choice(WORK_SITES),
                status=status,
                created_at=created_at,
                types=types,
            )
        )

    roster = [
        (f"emp{number:03d}", f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}", rng.choice(DEPARTMENTS))
        for number in range(2, 2 + TEAM_SIZE)
    ]
    statuses = list(TEAM_STATUS_WEIGHTS)
    weights = list(TEAM_STATUS_WEIGHTS.values())
    team_dates = sorted((today - timedelta(days=rng.randint(0, 120)) for _ in range(team_count)), reverse=True)
    for offset, created_at in enumerate(team_dates):
        employee_id, employee_name, department = rng.choice(roster)
        requests.append(
            _random_request(
                rng,
                request_id=format_request_id(TEAM_BAND_START + offset),
                employee_id=employee_id,
                employee_name=employee_name,
                work_site=department,
                status=rng.choices(statuses, weights=weights)[0],
                created_at=created_at,
                types=list(LeaveType),
            )
        )

    requests.sort(key=lambda r: r.created_at, reverse=True)
    return requests
