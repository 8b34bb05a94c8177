"""Account domain service."""

from decimal import Decimal
from typing import Optional

from spendbook.database.base import RecordStore
from spendbook.domain import errors
from spendbook.domain.entities import Account as AccountEntity, CashbackPolicy
from spendbook.domain.errors import NotFoundError, ValidationError
from spendbook.domain.filters import (
    ACCOUNT_COLUMNS,
    Page,
    SortState,
    matches_search,
    paginate,
    sort_records,
)


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: RecordStore):
        """Initialize account service.

        Args:
            db: Record store instance
        """
        self.db = db

    def create_account(
        self,
        name: str,
        type: Optional[str] = None,
        credit_limit: Optional[Decimal] = None,
        cashback_percentage: Optional[Decimal] = None,
        max_cashback_amount: Optional[Decimal] = None,
    ) -> str:
        """Create a new account.

        An account earns cashback when either cashback field is given.

        Args:
            name: Account name
            type: Optional account type (cash, bank, credit, ...)
            credit_limit: Optional credit limit
            cashback_percentage: Optional cashback rate as a fraction (0.03 for 3%)
            max_cashback_amount: Optional absolute cashback cap

        Returns:
            Account ID

        Raises:
            ValidationError: If the name is blank or already taken
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Account name is required.")

        for acc in self.db.list_accounts():
            if acc.name == name:
                raise ValidationError(f"Account with name '{name}' already exists")

        if cashback_percentage is not None and not 0 <= cashback_percentage <= 1:
            raise ValidationError("Cashback rate must be between 0 and 1.")

        return self.db.create_account(
            name=name,
            type=type,
            credit_limit=credit_limit,
            is_cashback_eligible=cashback_percentage is not None
            or max_cashback_amount is not None,
            cashback_percentage=cashback_percentage,
            max_cashback_amount=max_cashback_amount,
        )

    def get_account(self, account_id: str) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def list_accounts(
        self,
        search: str = "",
        sort: Optional[SortState] = None,
        page: int = 1,
        page_size: int = 10,
    ) -> Page:
        """List accounts matching ``search``, sorted and paginated.

        Args:
            search: Text matched against name and type
            sort: Column and direction; defaults to name ascending
            page: 1-indexed page, clamped to the pages that exist
            page_size: Items per page

        Returns:
            Page of account entities
        """
        accounts = [
            account
            for account in self.db.list_accounts()
            if matches_search(search, account.name, account.type)
        ]
        accounts = sort_records(accounts, sort or SortState("name"), ACCOUNT_COLUMNS)
        return paginate(accounts, page, page_size)

    def get_cashback_policy(self, account_id: str) -> Optional[CashbackPolicy]:
        """Return the cashback caps of an account.

        Raises:
            NotFoundError: If the account does not exist
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(errors.account_not_found(account_id))
        return account.cashback_policy()
