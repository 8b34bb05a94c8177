"""Demo dataset served when no record store is configured or it fails."""

from datetime import datetime, UTC
from decimal import Decimal

from spendbook.domain.entities import (
    Account,
    Category,
    CategoryInfo,
    NewTransaction,
    Person,
    Shop,
    SingleCategory,
    Subcategory,
    TransactionNature,
)

EX = TransactionNature.EXPENSE
IN = TransactionNature.INCOME
TF = TransactionNature.TRANSFER
DE = TransactionNature.DEBT

ACCOUNTS = (
    Account(
        id="acc-cash-wallet",
        name="Cash Wallet",
        type="cash",
        created_at=datetime(2024, 1, 5, 8, 30, tzinfo=UTC),
    ),
    Account(
        id="acc-salary-account",
        name="Salary Account",
        type="bank",
        created_at=datetime(2023, 9, 12, 9, 15, tzinfo=UTC),
        is_cashback_eligible=True,
        cashback_percentage=Decimal("0.015"),
        max_cashback_amount=Decimal("200000"),
    ),
    Account(
        id="acc-credit-card",
        name="Vietcombank Platinum",
        type="credit",
        credit_limit=Decimal("20000000"),
        created_at=datetime(2022, 3, 20, 10, 45, tzinfo=UTC),
        is_cashback_eligible=True,
        cashback_percentage=Decimal("0.03"),
        max_cashback_amount=Decimal("500000"),
    ),
    Account(
        id="acc-investment",
        name="Investment Fund",
        type="investment",
        created_at=datetime(2021, 7, 1, 7, 0, tzinfo=UTC),
    ),
)

CATEGORIES = (
    Category(id="cat-groceries", name="Groceries", transaction_nature=EX),
    Category(id="cat-income", name="Income", transaction_nature=IN),
    Category(id="cat-transfers", name="Transfers", transaction_nature=TF),
    Category(id="cat-housing", name="Housing", transaction_nature=EX),
    Category(id="cat-dining", name="Dining", transaction_nature=EX),
    Category(id="cat-loans", name="Loans", transaction_nature=DE),
)


def _sub(sub_id: str, name: str, nature: TransactionNature, parent: Category) -> Subcategory:
    return Subcategory(
        id=sub_id,
        name=name,
        transaction_nature=nature.value,
        category_id=parent.id,
        relation=SingleCategory(
            CategoryInfo(name=parent.name, transaction_nature=parent.transaction_nature.value)
        ),
    )


_GROCERIES, _INCOME, _TRANSFERS, _HOUSING, _DINING, _LOANS = CATEGORIES

SUBCATEGORIES = (
    _sub("sub-supermarket", "Supermarket", EX, _GROCERIES),
    _sub("sub-salary", "Salary", IN, _INCOME),
    _sub("sub-investments", "Investments", TF, _TRANSFERS),
    _sub("sub-rent", "Rent", EX, _HOUSING),
    _sub("sub-coffee", "Coffee", EX, _DINING),
    _sub("sub-freelance", "Freelance", IN, _INCOME),
    _sub("sub-lending", "Lending", DE, _LOANS),
)

SHOPS = (
    Shop(
        id="shop-tiki",
        name="Tiki",
        type="ecommerce",
        created_at=datetime(2025, 9, 26, 3, 22, 27, tzinfo=UTC),
    ),
    Shop(
        id="shop-vpbank",
        name="VPBank",
        type="bank",
        created_at=datetime(2025, 9, 26, 3, 22, 27, tzinfo=UTC),
    ),
    Shop(id="shop-coopmart", name="Co.op Mart", type="supermarket"),
)

PEOPLE = (
    Person(id="person-minh", name="Minh Nguyen"),
    Person(id="person-team", name="Project Team", is_group=True),
)

TRANSACTIONS = {
    "tx-1001": NewTransaction(
        date=datetime(2024, 11, 5, 12, 20, tzinfo=UTC),
        amount=Decimal("1250000"),
        final_price=Decimal("1212500"),
        nature=EX,
        notes="Weekly supermarket run",
        from_account_id="acc-credit-card",
        subcategory_id="sub-supermarket",
        shop_id="shop-coopmart",
        cashback_percent=Decimal("3"),
        cashback_amount=Decimal("37500"),
    ),
    "tx-1002": NewTransaction(
        date=datetime(2024, 11, 2, 8, 10, tzinfo=UTC),
        amount=Decimal("18000000"),
        final_price=Decimal("18000000"),
        nature=IN,
        notes="Salary for November",
        to_account_id="acc-salary-account",
        subcategory_id="sub-salary",
    ),
    "tx-1003": NewTransaction(
        date=datetime(2024, 10, 28, 18, 40, tzinfo=UTC),
        amount=Decimal("3500000"),
        final_price=Decimal("3500000"),
        nature=EX,
        notes="Rent payment",
        from_account_id="acc-salary-account",
        subcategory_id="sub-rent",
    ),
    "tx-1004": NewTransaction(
        date=datetime(2024, 10, 15, 15, 5, tzinfo=UTC),
        amount=Decimal("2500000"),
        final_price=Decimal("2500000"),
        nature=TF,
        notes="Transfer to investment fund",
        from_account_id="acc-salary-account",
        to_account_id="acc-investment",
        subcategory_id="sub-investments",
    ),
    "tx-1005": NewTransaction(
        date=datetime(2024, 9, 12, 9, 0, tzinfo=UTC),
        amount=Decimal("450000"),
        final_price=Decimal("443250"),
        nature=EX,
        notes="Coffee meetup",
        from_account_id="acc-salary-account",
        subcategory_id="sub-coffee",
        person_id="person-minh",
        cashback_percent=Decimal("1.5"),
        cashback_amount=Decimal("6750"),
    ),
    "tx-1006": NewTransaction(
        date=datetime(2024, 8, 30, 13, 25, tzinfo=UTC),
        amount=Decimal("5200000"),
        final_price=Decimal("5200000"),
        nature=IN,
        notes="Freelance project payment",
        to_account_id="acc-salary-account",
        subcategory_id="sub-freelance",
    ),
    "tx-1007": NewTransaction(
        date=datetime(2024, 10, 20, 10, 0, tzinfo=UTC),
        amount=Decimal("1200000"),
        final_price=Decimal("1200000"),
        nature=DE,
        notes="Lent to Minh",
        from_account_id="acc-cash-wallet",
        subcategory_id="sub-lending",
        person_id="person-minh",
        debt_tag="MINH-2024",
        debt_cycle_tag="OCT24",
    ),
}
