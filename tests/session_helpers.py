from __future__ import annotations

from taskmate_client.models import DealershipRef

BASE_URL = "https://api.example.com/api/v1"


def dealerships(*ids: int) -> list[DealershipRef]:
    return [DealershipRef(id=item, name=f"Dealership {item}") for item in ids]


def user_payload(role: str = "manager", user_id: int = 1, dealership_id: int | None = 10) -> dict[str, object]:
    return {
        "id": user_id,
        "login": f"user{user_id}",
        "full_name": f"User {user_id}",
        "role": role,
        "dealership_id": dealership_id,
        "phone": None,
        "phone_number": None,
        "dealerships": [{"id": 10, "name": "North"}, {"id": 11, "name": "South"}],
    }
