from typing import Any

from pydantic import BaseModel


class MessageResponse(BaseModel):
    message: str


class ListingResponse(BaseModel):
    message: str
    items: list[dict[str, Any]]
    total_count: int
    total_pages: int


class DashboardCard(BaseModel):
    title: str
    description: str
    number: str
    status: str
    percentage: str


class DashboardResponse(BaseModel):
    message: str
    cards: list[DashboardCard]
