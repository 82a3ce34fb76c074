from datetime import date

from sqlmodel import Field, SQLModel


class Customer(SQLModel, table=True):
    """Customer model."""

    __tablename__ = "customers"

    id: int | None = Field(default=None, primary_key=True)
    name: str
    email: str
    nid: str
    phone: str
    date_of_birth: date
    address_id: int | None = None
