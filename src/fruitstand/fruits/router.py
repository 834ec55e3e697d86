"""Fruits REST API router.

GET /fruits, GET /fruits/{id}, POST /fruits, PATCH /fruits/{id},
DELETE /fruits/{id}. Each endpoint makes a single repository call; errors
propagate to the problem-details handlers.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from fruitstand.fruits.repository import FruitRepository
from fruitstand.fruits.schemas import FruitCreate, FruitResponse, FruitUpdate
from fruitstand.infra.database import DbSession

router = APIRouter(prefix="/fruits", tags=["fruits"])


def get_fruit_repository(session: DbSession) -> FruitRepository:
    return FruitRepository(session)


Repository = Annotated[FruitRepository, Depends(get_fruit_repository)]


@router.get("")
async def index(repo: Repository) -> list[FruitResponse]:
    """List every fruit."""
    fruits = await repo.list_all()
    return [FruitResponse.model_validate(fruit) for fruit in fruits]


@router.get("/{fruit_id}")
async def show(fruit_id: int, repo: Repository) -> FruitResponse:
    """Retrieve a fruit by ID."""
    return FruitResponse.model_validate(await repo.get(fruit_id))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create(body: FruitCreate, repo: Repository) -> FruitResponse:
    """Create a fruit and return it with its assigned ID."""
    fruit = await repo.create(name=body.name, color=body.color)
    return FruitResponse.model_validate(fruit)


@router.patch("/{fruit_id}")
async def update(fruit_id: int, body: FruitUpdate, repo: Repository) -> FruitResponse:
    """Change the given fields of a fruit."""
    fruit = await repo.update(fruit_id, **body.changes())
    return FruitResponse.model_validate(fruit)


@router.delete("/{fruit_id}", status_code=status.HTTP_204_NO_CONTENT)
async def destroy(fruit_id: int, repo: Repository) -> Response:
    """Delete a fruit."""
    await repo.delete(fruit_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
