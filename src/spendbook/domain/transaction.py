"""Transaction domain service."""

from decimal import Decimal
from typing import Optional, Sequence

from spendbook.database.base import RecordStore
from spendbook.domain import errors
from spendbook.domain.cashback import compute_cashback, to_decimal
from spendbook.domain.entities import (
    BulkDeletePolicy,
    ListResult,
    NewTransaction,
    Transaction as TransactionEntity,
    TransactionDraft,
    TransactionNature,
)
from spendbook.domain.errors import (
    NotFoundError,
    PartialBulkFailure,
    UpstreamError,
    ValidationError,
)
from spendbook.domain.filters import (
    TRANSACTION_COLUMNS,
    SortState,
    TransactionFilters,
    filter_transactions,
    paginate,
    sort_records,
)
from spendbook.logging_setup import get_logger
from spendbook.utils.date_parser import format_date_tag

logger = get_logger("spendbook.domain.transaction")

DEMO_FALLBACK_MESSAGE = "Unable to load transactions. Showing demo data."


class TransactionService:
    """Service for creating, listing and deleting transactions."""

    def __init__(
        self,
        db: RecordStore,
        fallback: Optional[RecordStore] = None,
        bulk_delete_policy: BulkDeletePolicy = BulkDeletePolicy.STOP_ON_FIRST_FAILURE,
    ):
        """Initialize transaction service.

        Args:
            db: Record store instance
            fallback: Store to read from when ``db`` fails to list
                transactions. Defaults to the demo dataset.
            bulk_delete_policy: Behaviour of ``delete_transactions`` when a
                delete fails part-way
        """
        self.db = db
        self._fallback = fallback
        self.bulk_delete_policy = bulk_delete_policy

    @property
    def fallback(self) -> RecordStore:
        if self._fallback is None:
            from spendbook.database.memory import InMemoryRecordStore

            self._fallback = InMemoryRecordStore.with_demo_data()
        return self._fallback

    def build_payload(self, draft: TransactionDraft) -> NewTransaction:
        """Validate a draft and shape the insert payload.

        Args:
            draft: User input for the new transaction

        Returns:
            NewTransaction ready for the record store

        Raises:
            ValidationError: If the amount, date, cashback or participants
                are invalid
            NotFoundError: If the paying account does not exist
        """
        amount = to_decimal(draft.amount)
        if not amount.is_finite() or amount <= 0:
            raise ValidationError("Amount must be greater than 0.")
        if draft.date is None:
            raise ValidationError("Date is required.")

        nature = draft.nature
        self._check_participants(draft)

        requested = draft.cashback
        policy = None
        if nature == TransactionNature.EXPENSE and requested is not None:
            account = self.db.get_account(draft.from_account_id)
            if account is None:
                raise NotFoundError(errors.account_not_found(draft.from_account_id))
            policy = account.cashback_policy()
            if policy is None:
                # Accounts that are not cashback eligible earn nothing
                requested = None

        cashback = compute_cashback(amount, requested, policy)

        debt_cycle_tag = draft.debt_cycle_tag
        if nature == TransactionNature.DEBT and not debt_cycle_tag:
            debt_cycle_tag = format_date_tag(draft.date)

        return NewTransaction(
            date=draft.date,
            amount=amount,
            final_price=cashback.final_price,
            nature=nature,
            notes=(draft.notes or "").strip() or None,
            from_account_id=draft.from_account_id
            if nature != TransactionNature.INCOME
            else None,
            to_account_id=draft.to_account_id
            if nature in (TransactionNature.INCOME, TransactionNature.TRANSFER)
            else None,
            subcategory_id=draft.subcategory_id,
            person_id=draft.person_id,
            shop_id=draft.shop_id if nature == TransactionNature.EXPENSE else None,
            cashback_percent=cashback.percent if draft.cashback is not None else None,
            cashback_amount=cashback.amount if draft.cashback is not None else None,
            debt_tag=draft.debt_tag if nature == TransactionNature.DEBT else None,
            debt_cycle_tag=debt_cycle_tag if nature == TransactionNature.DEBT else None,
        )

    @staticmethod
    def _check_participants(draft: TransactionDraft) -> None:
        nature = draft.nature
        if nature == TransactionNature.EXPENSE:
            if not draft.from_account_id or not draft.subcategory_id:
                raise ValidationError("Please choose an account and category.")
        elif nature == TransactionNature.INCOME:
            if not draft.to_account_id or not draft.subcategory_id:
                raise ValidationError("Please choose an account and category.")
        elif nature == TransactionNature.DEBT:
            if not draft.from_account_id or not draft.person_id:
                raise ValidationError("Please choose a person and account.")
        elif nature == TransactionNature.TRANSFER:
            if not draft.from_account_id or not draft.to_account_id:
                raise ValidationError("Please choose both accounts.")
            if draft.from_account_id == draft.to_account_id:
                raise ValidationError("Cannot transfer to the same account.")
        else:
            raise ValidationError(f"Unsupported transaction type '{nature}'.")

    def create_transaction(self, draft: TransactionDraft) -> str:
        """Create a transaction from user input.

        Cashback is normalized against the paying account's policy only for
        expenses; other types keep the requested cashback within the plain
        bounds.

        Args:
            draft: User input for the new transaction

        Returns:
            Transaction ID

        Raises:
            ValidationError: If the draft is invalid
            NotFoundError: If the paying account does not exist
            UpstreamError: If the record store rejects the insert
        """
        payload = self.build_payload(draft)
        transaction_id = self.db.insert_transaction(payload)
        logger.info("Created %s transaction %s", payload.nature.value, transaction_id)
        return transaction_id

    def get_transaction(self, transaction_id: str) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a single transaction.

        Raises:
            ValidationError: If no identifier is given
            NotFoundError: If the transaction does not exist
            UpstreamError: If the record store rejects the delete
        """
        if not transaction_id:
            raise ValidationError("Missing transaction identifier.")
        self.db.delete_transaction(transaction_id)
        logger.info("Deleted transaction %s", transaction_id)

    def delete_transactions(
        self,
        transaction_ids: Sequence[str],
        policy: Optional[BulkDeletePolicy] = None,
    ) -> list[str]:
        """Delete several transactions.

        With ``STOP_ON_FIRST_FAILURE`` the ids are deleted one at a time and
        the first failure stops the run; ids deleted before it stay deleted.
        With ``ALL_OR_NOTHING`` the store deletes them in one atomic call.

        Args:
            transaction_ids: IDs to delete; duplicates are ignored
            policy: Overrides the service's configured policy

        Returns:
            The deleted IDs in order

        Raises:
            ValidationError: If no ids are given
            PartialBulkFailure: If a delete fails under STOP_ON_FIRST_FAILURE
            NotFoundError: If an id is missing under ALL_OR_NOTHING
            UpstreamError: If the atomic delete fails under ALL_OR_NOTHING
        """
        ids = list(dict.fromkeys(tid for tid in transaction_ids if tid))
        if not ids:
            raise ValidationError("No transactions selected.")

        policy = policy or self.bulk_delete_policy
        if policy == BulkDeletePolicy.ALL_OR_NOTHING:
            self.db.delete_transactions(ids)
            logger.info("Deleted %d transactions", len(ids))
            return ids

        deleted: list[str] = []
        for transaction_id in ids:
            try:
                self.db.delete_transaction(transaction_id)
            except (NotFoundError, UpstreamError) as e:
                logger.warning(
                    "Bulk delete stopped at %s after %d deletions: %s",
                    transaction_id,
                    len(deleted),
                    e,
                )
                raise PartialBulkFailure(
                    f"Failed to delete transaction {transaction_id}: {e}",
                    failed_id=transaction_id,
                    deleted_ids=deleted,
                ) from e
            deleted.append(transaction_id)
        logger.info("Deleted %d transactions", len(deleted))
        return deleted

    def list_transactions(
        self,
        filters: Optional[TransactionFilters] = None,
        sort: Optional[SortState] = None,
    ) -> ListResult:
        """List one page of transactions matching ``filters``.

        When the record store fails, the demo dataset is filtered instead and
        the result carries the failure in ``error``.

        Args:
            filters: Active filters and requested page
            sort: Column of TRANSACTION_COLUMNS and direction; newest first
                when omitted

        Returns:
            ListResult with the page of transactions and the total count
        """
        filters = filters or TransactionFilters()
        error = None
        try:
            rows = self._fetch(self.db, filters)
        except UpstreamError as e:
            logger.warning("Falling back to demo transactions: %s", e)
            error = f"{DEMO_FALLBACK_MESSAGE} ({e})"
            rows = self._fetch(self.fallback, filters)

        matched = filter_transactions(rows, filters)
        if sort is not None:
            matched = sort_records(matched, sort, TRANSACTION_COLUMNS)
        page = paginate(matched, filters.page, filters.page_size)
        return ListResult(
            items=page.items,
            total=page.total,
            page=page.page,
            page_size=page.page_size,
            error=error,
        )

    @staticmethod
    def _fetch(db: RecordStore, filters: TransactionFilters) -> list[TransactionEntity]:
        return db.list_transactions(
            date_from=filters.date_from,
            date_to=filters.date_to,
            account_id=filters.account_id,
            person_id=filters.person_id,
            nature=filters.nature,
        )

    def total_amount(self, transactions: Sequence[TransactionEntity]) -> Decimal:
        """Sum the final prices of ``transactions``, using the amount when unset."""
        return sum(
            (
                txn.final_price if txn.final_price is not None else txn.amount
                for txn in transactions
            ),
            Decimal(0),
        )
