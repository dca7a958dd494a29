from enum import Enum


class ProductCategory(str, Enum):
    ELECTRONICS = "electronics"
    CLOTHING = "clothing"
    BOOKS = "books"
    HOME = "home"
    SPORTS = "sports"
    TOYS = "toys"
    BEAUTY = "beauty"
    AUTOMOTIVE = "automotive"
    FOOD = "food"
    HEALTH = "health"
    OTHER = "other"

    @classmethod
    def values(cls):
        return [member.value for member in cls]


class ProductSortField(str, Enum):
    NAME = "name"
    PRICE = "price"
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ProductEvent(str, Enum):
    CREATED = "productCreated"
    UPDATED = "productUpdated"
    DELETED = "productDeleted"


class UserEvent(str, Enum):
    CREATED = "userCreated"
    UPDATED = "userUpdated"
    DELETED = "userDeleted"
