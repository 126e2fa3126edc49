"""Tests for category / payment / subcategory normalization."""

from __future__ import annotations

from decimal import Decimal

import pytest

EXPENSE_CATEGORIES = ["Food", "Transport", "Shopping"]


class TestNormalizeCategory:
    def test_alias_resolves_to_caller_vocabulary(self):
        from receipt_pipeline.services.receipt.normalizer import normalize_category

        assert normalize_category("restaurant", EXPENSE_CATEGORIES) == "Food"

    def test_alias_prefers_first_candidate_present(self):
        from receipt_pipeline.services.receipt.normalizer import normalize_category

        canonical = ["Food & Dining", "Food", "Travel"]
        assert normalize_category("restaurant", canonical) == "Food & Dining"

    def test_unmatched_label_passes_through(self):
        from receipt_pipeline.services.receipt.normalizer import normalize_category

        assert normalize_category("antiques", EXPENSE_CATEGORIES) == "antiques"

    def test_fuzzy_substring_either_direction(self):
        from receipt_pipeline.services.receipt.normalizer import normalize_category

        assert normalize_category("Travel & Stay", ["Travel", "Shopping"]) == "Travel"
        assert normalize_category("Shop", ["Food", "Shopping"]) == "Shopping"

    def test_case_insensitive_exact_match_returns_canonical_spelling(self):
        from receipt_pipeline.services.receipt.normalizer import normalize_category

        assert normalize_category("SHOPPING", EXPENSE_CATEGORIES) == "Shopping"

    def test_heuristic_label_maps_onto_short_vocabulary(self):
        from receipt_pipeline.services.receipt.normalizer import normalize_category

        assert normalize_category("Food & Dining", EXPENSE_CATEGORIES) == "Food"
        assert normalize_category("Transportation", EXPENSE_CATEGORIES) == "Transport"

    def test_income_aliases(self):
        from receipt_pipeline.schemas.receipt import ExtractionContext
        from receipt_pipeline.services.receipt.normalizer import normalize_category

        canonical = ["Salary", "Freelance", "Rental Income", "Investments"]
        assert normalize_category("payroll", canonical, ExtractionContext.INCOME) == "Salary"
        assert normalize_category("rent", canonical, "income") == "Rental Income"
        assert normalize_category("dividend", canonical, ExtractionContext.INCOME) == "Investments"
        assert normalize_category("Salary Credit", canonical, "income") == "Salary"

    def test_context_changes_alias_table(self):
        from receipt_pipeline.services.receipt.normalizer import normalize_category

        canonical = ["Rent", "Rental Income"]
        assert normalize_category("housing", canonical, "expense") == "Rent"
        assert normalize_category("rental", canonical, "income") == "Rental Income"

    def test_none_and_empty_vocabulary(self):
        from receipt_pipeline.services.receipt.normalizer import normalize_category

        assert normalize_category(None, EXPENSE_CATEGORIES) is None
        assert normalize_category("restaurant", []) == "restaurant"


class TestNormalizePaymentMethod:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("debit", "Card"),
            ("credit_card", "Card"),
            ("net_banking", "Bank Transfer"),
            ("upi", "UPI"),
            ("CASH", "Cash"),
        ],
    )
    def test_default_vocabulary(self, raw, expected):
        from receipt_pipeline.services.receipt.normalizer import normalize_payment_method

        assert normalize_payment_method(raw) == expected

    def test_caller_vocabulary_without_alias_target(self):
        from receipt_pipeline.services.receipt.normalizer import normalize_payment_method

        assert normalize_payment_method("debit", ["UPI", "Cash"]) == "debit"

    def test_snake_case_vocabulary(self):
        from receipt_pipeline.services.receipt.normalizer import normalize_payment_method

        canonical = ["cash", "debit_card", "credit_card", "upi", "net_banking"]
        assert normalize_payment_method("Bank Transfer", canonical) == "net_banking"
        assert normalize_payment_method("Card", canonical) == "debit_card"
        assert normalize_payment_method("credit", canonical) == "credit_card"
        assert normalize_payment_method("UPI", canonical) == "upi"
        assert normalize_payment_method("Cash", canonical) == "cash"

    def test_unknown_passes_through(self):
        from receipt_pipeline.services.receipt.normalizer import normalize_payment_method

        assert normalize_payment_method("barter") == "barter"


class TestNormalizeDate:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("12/01/2024", "2024-01-12"),
            ("2024/1/9", "2024-01-09"),
            ("3 September 2023", "2023-09-03"),
            ("2024-01-12", "2024-01-12"),
            ("last tuesday", "last tuesday"),
            (None, None),
        ],
    )
    def test_canonical_form(self, raw, expected):
        from receipt_pipeline.services.receipt.normalizer import normalize_date

        assert normalize_date(raw) == expected


class TestMatchSubcategory:
    def test_description_contains_subcategory(self):
        from receipt_pipeline.services.receipt.normalizer import match_subcategory

        subs = ["Water Bill", "Electricity Bill"]
        assert match_subcategory("Electricity Bill - March", subs) == "Electricity Bill"

    def test_no_match(self):
        from receipt_pipeline.services.receipt.normalizer import match_subcategory

        assert match_subcategory("Cafe Corner", ["Water Bill"]) is None
        assert match_subcategory(None, ["Water Bill"]) is None


class TestNormalizeResult:
    def test_returns_copy_with_canonical_labels(self):
        from receipt_pipeline.schemas.receipt import ExtractionResult
        from receipt_pipeline.services.receipt.normalizer import normalize_result

        raw = ExtractionResult(
            amount=Decimal("250.00"),
            category="restaurant",
            payment_method="debit",
            description="Electricity Bill - March",
            confidence=0.8,
        )
        normalized = normalize_result(
            raw,
            canonical_categories=EXPENSE_CATEGORIES,
            payment_methods=["UPI", "Card", "Cash", "Bank Transfer"],
            subcategories=["Electricity Bill"],
        )

        assert normalized.category == "Food"
        assert normalized.payment_method == "Card"
        assert normalized.subcategory == "Electricity Bill"
        assert normalized.amount == Decimal("250.00")
        assert normalized.confidence == 0.8
        assert raw.category == "restaurant"

    def test_all_null_result_stays_null(self):
        from receipt_pipeline.schemas.receipt import ExtractionResult
        from receipt_pipeline.services.receipt.normalizer import normalize_result

        normalized = normalize_result(ExtractionResult(), canonical_categories=EXPENSE_CATEGORIES)
        assert normalized.is_empty()
