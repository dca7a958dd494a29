# repositories/user.py
from typing import Any, List, Optional

from storefront.models.database_models import User
from storefront.models.schemas.query import FilterOptions
from storefront.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User
    searchable_fields = ("email",)
    sortable_fields = {"id": "id", "email": "email"}

    def build_conditions(self, filters: Optional[FilterOptions]) -> List[Any]:
        if filters is None:
            return []

        conditions = []
        if filters.email:
            conditions.append(User.email.icontains(filters.email, autoescape=True))
        if filters.search:
            conditions.append(User.email.icontains(filters.search, autoescape=True))
        return conditions
