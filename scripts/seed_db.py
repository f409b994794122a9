"""Create a demo admin, an employee and two office sites.

Runs against whichever store ``STORE_BACKEND`` selects; with the in-memory
store the data only lives for the process, so this is mainly for MySQL.
"""
from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from src.inout.inout.container import build_container
from src.inout.inout.core.enums import Role
from src.inout.inout.geo.geofence import GeoPoint
from src.inout.inout.main import load_settings

DEMO_ADMIN = {"uid": "demo-admin", "name": "Demo Admin", "email": "admin@example.com", "phone": "0900000001"}
DEMO_EMPLOYEE = {"uid": "demo-employee", "name": "Demo Employee", "email": "employee@example.com", "phone": "0900000002"}

DEMO_SITES = [
    ("Head Office", GeoPoint(10.776889, 106.700806)),
    ("Warehouse", GeoPoint(10.801461, 106.714211)),
]


def main() -> None:
    load_dotenv(override=False)
    container = build_container(settings=load_settings())
    users = container.user_service
    users_repo = container.users_repo

    admin = users.get(DEMO_ADMIN["uid"])
    if admin is None:
        users.register(**DEMO_ADMIN, role=Role.ADMIN)
        users_repo.update_fields(DEMO_ADMIN["uid"], {"approved": True})
    admin = users.require(DEMO_ADMIN["uid"])

    existing = {loc.name: loc for loc in container.location_service.list_locations()}
    sites = []
    for name, point in DEMO_SITES:
        site = existing.get(name) or container.location_service.create(current=admin, name=name, point=point)
        sites.append(site)

    if users.get(DEMO_EMPLOYEE["uid"]) is None:
        users.register(**DEMO_EMPLOYEE)
    users.set_approved(current=admin, uid=DEMO_EMPLOYEE["uid"])
    users.assign_employee_id(current=admin, uid=DEMO_EMPLOYEE["uid"], employee_id="EMP001")
    users.assign_location(current=admin, uid=DEMO_EMPLOYEE["uid"], location_id=sites[0].location_id)

    print(f"OK: seeded admin={DEMO_ADMIN['uid']} employee={DEMO_EMPLOYEE['uid']} sites={[s.location_id for s in sites]}")


if __name__ == "__main__":
    main()
