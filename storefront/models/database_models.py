from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    NUMERIC,
    DateTime,
    func,
)
from sqlalchemy.orm import declarative_base


Base = declarative_base()


class TimestampMixin:
    """Mixin for adding timestamp fields to models"""

    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class Product(Base, TimestampMixin):
    """Product sold in the catalog"""

    __tablename__ = "Product"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=True)
    price = Column(NUMERIC(10, 2, asdecimal=False), nullable=False, index=True)
    category = Column(String(100), nullable=False, index=True)

    def __repr__(self):
        return f"<Product id={self.id} name={self.name!r}>"


class User(Base):
    """Application user"""

    __tablename__ = "User"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False)
    # stored as given
    password = Column(String(255), nullable=False)

    def __repr__(self):
        return f"<User id={self.id} email={self.email!r}>"
