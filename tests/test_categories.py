"""Tests for category relations and the category service."""

import pytest

from spendbook.domain.categories import (
    category_relation_from_raw,
    resolve_category_relation,
    resolve_subcategory_nature,
)
from spendbook.domain.category import DEFAULT_TRANSFER_CATEGORY, CategoryService
from spendbook.domain.entities import (
    CategoryInfo,
    ManyCategories,
    SingleCategory,
    TransactionNature,
)
from spendbook.domain.errors import ValidationError


class TestCategoryRelation:
    """Tests for the category relation union."""

    def test_missing(self):
        assert category_relation_from_raw(None) is None
        assert resolve_category_relation(None) is None

    def test_single_mapping(self):
        relation = category_relation_from_raw({"name": "Dining", "transaction_nature": "Expense"})

        assert relation == SingleCategory(CategoryInfo(name="Dining", transaction_nature="Expense"))
        assert resolve_category_relation(relation).name == "Dining"

    def test_list_resolves_to_first(self):
        relation = category_relation_from_raw(
            [{"name": "Income", "transaction_nature": "IN"}, {"name": "Other"}]
        )

        assert isinstance(relation, ManyCategories)
        assert len(relation.categories) == 2
        assert resolve_category_relation(relation).name == "Income"

    def test_empty_list(self):
        relation = category_relation_from_raw([])
        assert relation == ManyCategories(())
        assert resolve_category_relation(relation) is None

    def test_unsupported_shape(self):
        with pytest.raises(TypeError):
            category_relation_from_raw(42)

    def test_subcategory_nature_prefers_own(self):
        relation = SingleCategory(CategoryInfo(name="Income", transaction_nature="IN"))
        assert resolve_subcategory_nature("expenses", relation) is TransactionNature.EXPENSE

    def test_subcategory_nature_falls_back_to_parent(self):
        relation = ManyCategories((CategoryInfo(name="Loans", transaction_nature="Debts"),))
        assert resolve_subcategory_nature(None, relation) is TransactionNature.DEBT
        assert resolve_subcategory_nature("bogus", None) is None


class TestCategoryService:
    """Tests for CategoryService."""

    def test_create_category_trims_and_normalizes(self, category_service, temp_db):
        category_id = category_service.create_category("  Dining  ", transaction_nature="expenses")

        category = next(c for c in temp_db.list_categories() if c.id == category_id)
        assert category.name == "Dining"
        assert category.transaction_nature is TransactionNature.EXPENSE

    def test_unknown_nature_falls_back_to_expense(self, category_service, temp_db):
        category_service.create_category("Misc", transaction_nature="whatever")

        category = temp_db.list_categories()[0]
        assert category.transaction_nature is TransactionNature.EXPENSE

    def test_blank_name_rejected(self, category_service):
        with pytest.raises(ValidationError, match="name is required"):
            category_service.create_category("   ")

    def test_default_transfer_category_added(self, category_service):
        category_service.create_category("Groceries", transaction_nature="EX")

        names = [c.name for c in category_service.list_categories()]

        assert names == ["General Transfer", "Groceries"]

    def test_default_transfer_category_not_added_twice(self, category_service):
        category_service.create_category("Transfers", transaction_nature="Transfer")

        categories = category_service.list_categories()

        assert DEFAULT_TRANSFER_CATEGORY not in categories
        assert [c.name for c in categories] == ["Transfers"]

    def test_list_filters_by_nature_and_search(self, category_service):
        category_service.create_category("Groceries", transaction_nature="EX")
        category_service.create_category("Salary", transaction_nature="IN")

        income = category_service.list_categories(nature=TransactionNature.INCOME)
        searched = category_service.list_categories(search="groc")

        assert [c.name for c in income] == ["Salary"]
        assert [c.name for c in searched] == ["Groceries"]

    def test_subcategories_by_nature(self, category_service, sample_categories):
        debt = category_service.list_subcategories(nature=TransactionNature.DEBT)

        # "Lending" has no nature of its own and inherits it from "Loans"
        assert [sub.name for sub in debt] == ["Lending"]
        assert resolve_category_relation(debt[0].relation).name == "Loans"

    def test_subcategory_inherits_parent_nature(self, category_service, temp_db):
        parent = category_service.create_category("Salary", transaction_nature="IN")
        sub_id = category_service.create_subcategory("Monthly pay", category_id=parent)

        sub = temp_db.get_subcategory(sub_id)

        assert sub.transaction_nature is None
        assert resolve_subcategory_nature(sub.transaction_nature, sub.relation) is TransactionNature.INCOME
        assert [s.name for s in category_service.list_subcategories(nature=TransactionNature.INCOME)] == [
            "Monthly pay"
        ]

    def test_subcategory_own_nature_wins(self, category_service, temp_db):
        parent = category_service.create_category("Salary", transaction_nature="IN")
        sub_id = category_service.create_subcategory(
            "Refunds", category_id=parent, transaction_nature="expenses"
        )

        sub = temp_db.get_subcategory(sub_id)

        assert resolve_subcategory_nature(sub.transaction_nature, sub.relation) is TransactionNature.EXPENSE

    def test_parentless_subcategory_defaults_to_expense(self, category_service, temp_db):
        sub_id = category_service.create_subcategory("Loose ends")

        assert temp_db.get_subcategory(sub_id).transaction_nature == "EX"
