"""Fruits feature: table, domain model, repository, REST router and seeds.

Modules:
    tables:     SQLAlchemy Core ``fruits`` table
    domain:     Fruit, FruitNotFoundError
    repository: FruitRepository (one statement per operation)
    router:     FastAPI endpoints under /fruits
    seeds:      default seed rows and the seed runner
"""

from fruitstand.fruits.domain import Fruit, FruitNotFoundError
from fruitstand.fruits.repository import FruitRepository
from fruitstand.fruits.router import router

__all__ = ["Fruit", "FruitNotFoundError", "FruitRepository", "router"]
