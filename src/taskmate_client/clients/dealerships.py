from __future__ import annotations

from typing import Any

from ..models import Dealership, PaginatedResponse
from .base import BaseClient

MAX_PAGES = 50


class DealershipsApi(BaseClient):
    def list_dealerships(
        self,
        *,
        page: int | None = None,
        per_page: int | None = None,
        search: str | None = None,
    ) -> PaginatedResponse[Dealership]:
        params = _build_query_params(page=page, per_page=per_page, search=search)
        data = self._request("GET", "/dealerships", params=params)
        return PaginatedResponse[Dealership].model_validate(data)

    def list_all_dealerships(self, per_page: int = 100) -> list[Dealership]:
        dealerships: list[Dealership] = []
        page = 1
        while page <= MAX_PAGES:
            response = self.list_dealerships(page=page, per_page=per_page)
            dealerships.extend(response.data)
            if response.current_page >= response.last_page or not response.data:
                break
            page = response.current_page + 1
        return dealerships

    def get_dealership(self, dealership_id: int) -> Dealership:
        data = self._request("GET", f"/dealerships/{dealership_id}")
        if isinstance(data, dict) and isinstance(data.get("data"), dict):
            data = data["data"]
        return Dealership.model_validate(data)


def _build_query_params(**kwargs: Any) -> dict[str, Any]:
    return {key: value for key, value in kwargs.items() if value not in (None, "")}
