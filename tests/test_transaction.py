"""Tests for the transaction service."""

from datetime import date, datetime, UTC
from decimal import Decimal

import pytest

from spendbook.database.memory import InMemoryRecordStore
from spendbook.domain.entities import (
    BulkDeletePolicy,
    CashbackRequest,
    TransactionDraft,
    TransactionNature,
)
from spendbook.domain.errors import (
    NotFoundError,
    PartialBulkFailure,
    UpstreamError,
    ValidationError,
)
from spendbook.domain.filters import SortDirection, SortState, TransactionFilters
from spendbook.domain.transaction import TransactionService


def expense(accounts, categories, txn_date, **kwargs):
    fields = dict(
        nature=TransactionNature.EXPENSE,
        amount=Decimal("100000"),
        date=txn_date,
        from_account_id=accounts["card"],
        subcategory_id=categories["Supermarket"],
    )
    fields.update(kwargs)
    return TransactionDraft(**fields)


class TestCreateTransaction:
    """Tests for TransactionService.create_transaction."""

    def test_expense_with_policy_cashback(
        self, transaction_service, sample_accounts, sample_categories, txn_date
    ):
        """The card allows 5% up to 3000, so 10%/8000 becomes 3%/3000."""
        draft = expense(
            sample_accounts,
            sample_categories,
            txn_date,
            cashback=CashbackRequest(percent=Decimal("10"), amount=Decimal("8000")),
            notes="  Weekly shopping ",
        )

        transaction_id = transaction_service.create_transaction(draft)
        txn = transaction_service.get_transaction(transaction_id)

        assert txn.nature is TransactionNature.EXPENSE
        assert txn.amount == Decimal("100000")
        assert txn.cashback_amount == Decimal("3000")
        assert txn.cashback_percent == Decimal("3")
        assert txn.final_price == Decimal("97000")
        assert txn.notes == "Weekly shopping"
        assert txn.from_account.name == "Platinum Card"
        assert txn.subcategory_name == "Supermarket"
        assert txn.category_name == "Groceries"
        assert txn.status == "Active"

    def test_expense_from_ineligible_account_earns_no_cashback(
        self, transaction_service, sample_accounts, sample_categories, txn_date
    ):
        draft = expense(
            sample_accounts,
            sample_categories,
            txn_date,
            from_account_id=sample_accounts["cash"],
            cashback=CashbackRequest(percent=Decimal("10"), amount=Decimal("8000")),
        )

        txn = transaction_service.get_transaction(transaction_service.create_transaction(draft))

        assert txn.cashback_amount == 0
        assert txn.cashback_percent == 0
        assert txn.final_price == Decimal("100000")

    def test_ineligible_account_policy_fields_are_ignored(
        self, transaction_service, temp_db, sample_accounts, sample_categories, txn_date
    ):
        account_id = temp_db.create_account(
            name="Debit Card",
            type="debit",
            is_cashback_eligible=False,
            cashback_percentage=Decimal("0.05"),
            max_cashback_amount=Decimal("3000"),
        )
        draft = expense(
            sample_accounts,
            sample_categories,
            txn_date,
            from_account_id=account_id,
            cashback=CashbackRequest(percent=Decimal("10"), amount=Decimal("8000")),
        )

        txn = transaction_service.get_transaction(transaction_service.create_transaction(draft))

        assert txn.cashback_amount == 0
        assert txn.final_price == Decimal("100000")

    def test_expense_without_cashback(
        self, transaction_service, sample_accounts, sample_categories, txn_date
    ):
        txn_id = transaction_service.create_transaction(
            expense(sample_accounts, sample_categories, txn_date)
        )
        txn = transaction_service.get_transaction(txn_id)

        assert txn.cashback_amount is None
        assert txn.cashback_percent is None
        assert txn.final_price == Decimal("100000")

    def test_income_ignores_account_policy(
        self, transaction_service, sample_accounts, sample_categories, txn_date
    ):
        draft = TransactionDraft(
            nature=TransactionNature.INCOME,
            amount=Decimal("100000"),
            date=txn_date,
            to_account_id=sample_accounts["card"],
            subcategory_id=sample_categories["Salary"],
            cashback=CashbackRequest(percent=Decimal("10"), amount=Decimal("8000")),
        )

        txn = transaction_service.get_transaction(transaction_service.create_transaction(draft))

        assert txn.nature is TransactionNature.INCOME
        assert txn.cashback_amount == Decimal("8000")
        assert txn.to_account.id == sample_accounts["card"]
        assert txn.from_account is None

    def test_debt_defaults_cycle_tag(
        self, transaction_service, sample_accounts, sample_person, txn_date
    ):
        draft = TransactionDraft(
            nature=TransactionNature.DEBT,
            amount=Decimal("500000"),
            date=txn_date,
            from_account_id=sample_accounts["cash"],
            person_id=sample_person,
            debt_tag="MINH-2024",
        )

        txn = transaction_service.get_transaction(transaction_service.create_transaction(draft))

        assert txn.nature is TransactionNature.DEBT
        assert txn.person.name == "Minh Nguyen"
        assert txn.debt_tag == "MINH-2024"
        assert txn.debt_cycle_tag == "NOV24"

    def test_transfer_between_accounts(self, transaction_service, sample_accounts, txn_date):
        draft = TransactionDraft(
            nature=TransactionNature.TRANSFER,
            amount=Decimal("250000"),
            date=txn_date,
            from_account_id=sample_accounts["cash"],
            to_account_id=sample_accounts["card"],
        )

        txn = transaction_service.get_transaction(transaction_service.create_transaction(draft))

        assert txn.nature is TransactionNature.TRANSFER
        assert txn.from_account.id == sample_accounts["cash"]
        assert txn.to_account.id == sample_accounts["card"]

    def test_transfer_to_same_account_rejected(self, transaction_service, sample_accounts, txn_date):
        draft = TransactionDraft(
            nature=TransactionNature.TRANSFER,
            amount=Decimal("1000"),
            date=txn_date,
            from_account_id=sample_accounts["cash"],
            to_account_id=sample_accounts["cash"],
        )
        with pytest.raises(ValidationError, match="same account"):
            transaction_service.create_transaction(draft)

    @pytest.mark.parametrize(
        "nature, missing, message",
        [
            (TransactionNature.EXPENSE, "from_account_id", "account and category"),
            (TransactionNature.EXPENSE, "subcategory_id", "account and category"),
            (TransactionNature.INCOME, "to_account_id", "account and category"),
            (TransactionNature.DEBT, "person_id", "person and account"),
            (TransactionNature.TRANSFER, "to_account_id", "both accounts"),
        ],
    )
    def test_missing_participants(
        self, transaction_service, sample_accounts, sample_categories, sample_person, txn_date,
        nature, missing, message,
    ):
        fields = dict(
            nature=nature,
            amount=Decimal("1000"),
            date=txn_date,
            from_account_id=sample_accounts["cash"],
            to_account_id=sample_accounts["card"],
            subcategory_id=sample_categories["Salary"],
            person_id=sample_person,
        )
        fields[missing] = None
        with pytest.raises(ValidationError, match=message):
            transaction_service.create_transaction(TransactionDraft(**fields))

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-10"), Decimal("NaN")])
    def test_invalid_amount(
        self, transaction_service, sample_accounts, sample_categories, txn_date, amount
    ):
        with pytest.raises(ValidationError, match="greater than 0"):
            transaction_service.create_transaction(
                expense(sample_accounts, sample_categories, txn_date, amount=amount)
            )

    def test_missing_date(self, transaction_service, sample_accounts, sample_categories):
        with pytest.raises(ValidationError, match="Date is required"):
            transaction_service.create_transaction(
                expense(sample_accounts, sample_categories, None)
            )

    def test_invalid_cashback_rejected_before_insert(
        self, transaction_service, sample_accounts, sample_categories, txn_date, temp_db
    ):
        draft = expense(
            sample_accounts,
            sample_categories,
            txn_date,
            cashback=CashbackRequest(percent=Decimal("120"), amount=Decimal("0")),
        )
        with pytest.raises(ValidationError, match="between 0 and 100"):
            transaction_service.create_transaction(draft)
        assert temp_db.list_transactions() == []

    def test_unknown_paying_account(self, transaction_service, sample_categories, txn_date):
        draft = expense(
            {"card": "missing"},
            sample_categories,
            txn_date,
            cashback=CashbackRequest(percent=Decimal("1"), amount=Decimal("1000")),
        )
        with pytest.raises(NotFoundError):
            transaction_service.create_transaction(draft)


class TestDeleteTransactions:
    """Tests for single and bulk deletes."""

    @pytest.fixture
    def demo_service(self, demo_store):
        return TransactionService(demo_store)

    def test_delete_single(self, demo_service, demo_store):
        demo_service.delete_transaction("tx-1001")
        assert demo_store.get_transaction("tx-1001") is None

    def test_delete_missing(self, demo_service):
        with pytest.raises(NotFoundError):
            demo_service.delete_transaction("tx-9999")

    def test_delete_requires_id(self, demo_service):
        with pytest.raises(ValidationError, match="Missing transaction identifier"):
            demo_service.delete_transaction("")

    def test_bulk_requires_ids(self, demo_service):
        with pytest.raises(ValidationError, match="No transactions selected"):
            demo_service.delete_transactions([])

    def test_stop_on_first_failure_keeps_earlier_deletes(self, demo_service, demo_store):
        with pytest.raises(PartialBulkFailure) as exc_info:
            demo_service.delete_transactions(["tx-1001", "tx-1002", "tx-9999", "tx-1003"])

        assert exc_info.value.failed_id == "tx-9999"
        assert exc_info.value.deleted_ids == ("tx-1001", "tx-1002")
        assert demo_store.get_transaction("tx-1001") is None
        assert demo_store.get_transaction("tx-1002") is None
        assert demo_store.get_transaction("tx-1003") is not None

    def test_all_or_nothing_deletes_nothing_on_failure(self, demo_service, demo_store):
        with pytest.raises(NotFoundError):
            demo_service.delete_transactions(
                ["tx-1001", "tx-9999"], policy=BulkDeletePolicy.ALL_OR_NOTHING
            )

        assert demo_store.get_transaction("tx-1001") is not None

    def test_all_or_nothing_on_sqlite(
        self, transaction_service, sample_accounts, sample_categories, txn_date, temp_db
    ):
        ids = [
            transaction_service.create_transaction(
                expense(sample_accounts, sample_categories, txn_date)
            )
            for _ in range(3)
        ]

        with pytest.raises(NotFoundError):
            transaction_service.delete_transactions(
                ids + ["missing"], policy=BulkDeletePolicy.ALL_OR_NOTHING
            )
        assert len(temp_db.list_transactions()) == 3

        deleted = transaction_service.delete_transactions(
            ids, policy=BulkDeletePolicy.ALL_OR_NOTHING
        )
        assert deleted == ids
        assert temp_db.list_transactions() == []

    def test_duplicates_ignored(self, demo_service):
        assert demo_service.delete_transactions(["tx-1001", "tx-1001"]) == ["tx-1001"]


class FailingStore(InMemoryRecordStore):
    """Store whose transaction reads always fail."""

    def list_transactions(self, **kwargs):
        raise UpstreamError("relation \"transactions\" does not exist")


class TestListTransactions:
    """Tests for TransactionService.list_transactions."""

    def test_pages_demo_data(self, demo_store):
        service = TransactionService(demo_store)

        result = service.list_transactions(TransactionFilters(page_size=5))

        assert result.total == 7
        assert len(result.items) == 5
        assert result.items[0].id == "tx-1001"
        assert result.error is None

    def test_filters_by_nature_and_date(self, demo_store):
        service = TransactionService(demo_store)

        result = service.list_transactions(
            TransactionFilters(
                nature=TransactionNature.EXPENSE,
                date_from=date(2024, 10, 1),
                date_to=date(2024, 11, 30),
            )
        )

        assert [txn.id for txn in result.items] == ["tx-1001", "tx-1003"]

    def test_sorts_by_amount(self, demo_store):
        service = TransactionService(demo_store)

        result = service.list_transactions(sort=SortState("amount"))

        assert [txn.id for txn in result.items][:3] == ["tx-1005", "tx-1007", "tx-1001"]
        assert result.items[-1].id == "tx-1002"

    def test_sorts_by_debt_cycle(self, demo_store):
        service = TransactionService(demo_store)

        result = service.list_transactions(sort=SortState("debt_cycle", SortDirection.DESC))

        # Only the loan carries a cycle tag, the rest sort as missing
        assert result.items[0].id == "tx-1007"
        assert "tx-1007" not in [txn.id for txn in result.items[1:]]

    def test_falls_back_to_demo_data(self):
        service = TransactionService(FailingStore(), fallback=InMemoryRecordStore.with_demo_data())

        result = service.list_transactions(TransactionFilters(search="coffee"))

        assert [txn.id for txn in result.items] == ["tx-1005"]
        assert result.error == (
            'Unable to load transactions. Showing demo data. (relation "transactions" does not exist)'
        )

    def test_default_fallback_is_demo_data(self):
        service = TransactionService(FailingStore())

        result = service.list_transactions()

        assert result.total == 7
        assert result.error.startswith("Unable to load transactions.")

    def test_page_clamped(self, demo_store):
        service = TransactionService(demo_store)

        result = service.list_transactions(TransactionFilters(page=9, page_size=5))

        assert result.page == 2
        assert len(result.items) == 2

    def test_total_amount(self, demo_store):
        service = TransactionService(demo_store)
        result = service.list_transactions(TransactionFilters(search="coffee"))

        assert service.total_amount(result.items) == Decimal("443250")
