"""Abstract record store interface."""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

# Import entities directly to avoid pulling services in through domain/__init__.py
from spendbook.domain.entities import (
    Account,
    Category,
    NewTransaction,
    Person,
    Shop,
    Subcategory,
    Transaction,
    TransactionNature,
)


class RecordStore(ABC):
    """Abstract record store for spendbook.

    Implementations raise ``UpstreamError`` when the backing service fails
    and ``NotFoundError`` when a record to delete does not exist.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the store."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize the store schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        name: str,
        type: Optional[str] = None,
        credit_limit: Optional[Decimal] = None,
        is_cashback_eligible: bool = False,
        cashback_percentage: Optional[Decimal] = None,
        max_cashback_amount: Optional[Decimal] = None,
        image_url: Optional[str] = None,
    ) -> str:
        """Create an account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: str) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts ordered by name."""
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self,
        name: str,
        transaction_nature: TransactionNature,
        image_url: Optional[str] = None,
        is_shop: bool = False,
    ) -> str:
        """Create a top-level category. Returns category ID."""
        pass

    @abstractmethod
    def list_categories(self) -> list[Category]:
        """List top-level categories ordered by name."""
        pass

    @abstractmethod
    def create_subcategory(
        self,
        name: str,
        category_id: Optional[str] = None,
        transaction_nature: Optional[TransactionNature] = None,
        image_url: Optional[str] = None,
    ) -> str:
        """Create a subcategory. Returns subcategory ID."""
        pass

    @abstractmethod
    def get_subcategory(self, subcategory_id: str) -> Optional[Subcategory]:
        """Get subcategory by ID."""
        pass

    @abstractmethod
    def list_subcategories(self) -> list[Subcategory]:
        """List subcategories ordered by name."""
        pass

    # Shop and people operations
    @abstractmethod
    def create_shop(
        self, name: str, type: Optional[str] = None, image_url: Optional[str] = None
    ) -> str:
        """Create a shop. Returns shop ID."""
        pass

    @abstractmethod
    def list_shops(self) -> list[Shop]:
        """List shops ordered by name."""
        pass

    @abstractmethod
    def create_person(
        self, name: str, image_url: Optional[str] = None, is_group: bool = False
    ) -> str:
        """Create a person. Returns person ID."""
        pass

    @abstractmethod
    def get_person(self, person_id: str) -> Optional[Person]:
        """Get person by ID."""
        pass

    @abstractmethod
    def list_people(self) -> list[Person]:
        """List people ordered by name."""
        pass

    # Transaction operations
    @abstractmethod
    def insert_transaction(self, payload: NewTransaction) -> str:
        """Insert a validated transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        account_id: Optional[str] = None,
        person_id: Optional[str] = None,
        nature: Optional[TransactionNature] = None,
    ) -> list[Transaction]:
        """List transactions newest first.

        Args:
            date_from: Optional first day to include
            date_to: Optional last day to include
            account_id: Optional account on either side of the transaction
            person_id: Optional person filter
            nature: Optional nature filter; implementations accept every
                stored spelling of the nature
        """
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: str) -> None:
        """Delete one transaction."""
        pass

    @abstractmethod
    def delete_transactions(self, transaction_ids: Sequence[str]) -> None:
        """Delete several transactions atomically: all of them or none."""
        pass
