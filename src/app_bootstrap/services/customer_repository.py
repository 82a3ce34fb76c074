"""Repository for customer persistence."""

from loguru import logger
from sqlalchemy import insert
from sqlalchemy.exc import SQLAlchemyError

from app_bootstrap.database.connection import ConnectionPool
from app_bootstrap.exceptions import ConnectionUnavailableError, PersistenceError
from app_bootstrap.models.customer import Customer
from app_bootstrap.utils.dates import format_date


class CustomerRepository:
    """Persists customers through pooled connections."""

    def __init__(self, pool: ConnectionPool):
        self.pool = pool

    def save(self, customer: Customer) -> int:
        """Insert a new customer.

        Args:
            customer: Customer to insert; its ``id`` is ignored and replaced
                by the generated one

        Returns:
            The generated customer id

        Raises:
            PersistenceError: If the connection or the INSERT fails
        """
        logger.debug(f"Repository: saving customer {customer.email} (born {format_date(customer.date_of_birth)})")
        statement = insert(Customer.__table__).values(**customer.model_dump(exclude={"id"}))

        try:
            with self.pool.borrow_connection() as connection:
                result = connection.execute(statement)
                customer_id = result.inserted_primary_key[0]
                connection.commit()
        except (ConnectionUnavailableError, SQLAlchemyError) as e:
            logger.error(f"Failed to save customer name {customer.name} email {customer.email}")
            raise PersistenceError(str(e)) from e

        customer.id = customer_id
        logger.debug(f"Repository: saved customer {customer.email} with id {customer.id}")
        return customer.id
