from decimal import Decimal

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase, TestCase
from django.urls import reverse

from console.expenses import expense_page
from console.forms import ExpenseForm, remaining_balance
from templeapi import TempleApiError

from .helpers import ConsoleTestMixin

EXPENSE = {
    "description": "Cement bags",
    "amount": "15000",
    "category": "Material",
    "notes": "",
    "purchase_date": "2025-02-10",
}
PAGE = {
    "expenses": [{"id": 11, "description": "Sand", "amount": 4000, "purchaseDate": "2025-02-01T00:00:00"}],
    "currentPage": 0,
    "totalPages": 3,
    "totalElements": 21,
}


class ExpenseFormTests(SimpleTestCase):
    def test_amount_over_remaining_balance(self):
        form = ExpenseForm(data=EXPENSE, max_amount=Decimal("12345.5"))
        self.assertFalse(form.is_valid())
        self.assertEqual(
            form.errors["amount"],
            ["Amount exceeds remaining balance. Maximum allowed: ₹12,345.50"],
        )

    def test_payload(self):
        form = ExpenseForm(data=EXPENSE, max_amount=Decimal("20000"))
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.payload(), {
            "description": "Cement bags",
            "amount": 15000.0,
            "category": "Material",
            "notes": None,
            "purchaseDate": "2025-02-10",
            "supportingDocument": None,
        })

    def test_remaining_balance_adds_back_current_amount(self):
        self.assertEqual(remaining_balance({"remaining": 1000}, "250.50"), Decimal("1250.50"))
        self.assertIsNone(remaining_balance({}))

    def test_plain_list_response_accepted(self):
        listing = expense_page([{"id": 1}, {"id": 2}])
        self.assertEqual(listing["total"], 2)
        self.assertEqual(listing["total_pages"], 1)


class ExpenseViewTests(ConsoleTestMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.api.expenses.return_value = PAGE
        self.api.expense_stats.return_value = {"totalDonations": 100000, "totalExpenses": 60000, "remaining": 40000}

    def test_list_page_and_search(self):
        resp = self.client.get(reverse("console:expenses") + "?page=1&q=sand")
        self.api.expenses.assert_called_once_with(page=1, size=10, description="sand")
        self.assertEqual(resp.context["total"], 21)
        self.assertTrue(resp.context["has_next"])
        self.assertContains(resp, "40,000")

    def test_create_over_budget_rejected_locally(self):
        resp = self.client.post(reverse("console:expenses"), {**EXPENSE, "amount": "40000.01"})
        self.api.create_expense.assert_not_called()
        self.assertIn("Maximum allowed: ₹40,000.00", resp.context["form"].errors["amount"][0])

    def test_backend_balance_error_goes_to_amount(self):
        self.api.create_expense.side_effect = TempleApiError("x", 400, {"error": "Expense exceeds available balance"})
        with self.assertLogs("console.expenses", level="WARNING"):
            resp = self.client.post(reverse("console:expenses"), EXPENSE)
        self.assertEqual(resp.context["form"].errors["amount"], ["Expense exceeds available balance"])

    def test_other_backend_error_is_general(self):
        self.api.create_expense.side_effect = TempleApiError("x", 400, {"error": "Category too long"})
        with self.assertLogs("console.expenses", level="WARNING"):
            resp = self.client.post(reverse("console:expenses"), EXPENSE)
        self.assertEqual(resp.context["form"].non_field_errors(), ["Error saving expense: Category too long"])

    def test_create_with_document_upload(self):
        self.api.upload_document.return_value = {"url": "/uploads/docs/bill.pdf"}
        doc = SimpleUploadedFile("bill.pdf", b"%PDF-1.4", content_type="application/pdf")
        resp = self.client.post(reverse("console:expenses"), {**EXPENSE, "document": doc})
        self.assertEqual(resp.status_code, 302)
        payload = self.api.create_expense.call_args.args[0]
        self.assertEqual(payload["supportingDocument"], "http://backend.test/uploads/docs/bill.pdf")

    def test_edit_allows_current_amount_on_top_of_remaining(self):
        resp = self.client.post(
            reverse("console:expense_edit", args=[11]),
            {**EXPENSE, "amount": "44000", "page": "0"},
        )
        self.assertEqual(resp.status_code, 302)
        self.api.edit_expense.assert_called_once()
        self.assertEqual(self.api.edit_expense.call_args.args[0], 11)

    def test_edit_prefills_form(self):
        resp = self.client.get(reverse("console:expense_edit", args=[11]))
        self.assertEqual(resp.context["form"].initial["purchase_date"], "2025-02-01")
        self.assertEqual(resp.context["max_amount"], Decimal("44000"))

    def test_delete_keeps_page(self):
        resp = self.client.post(reverse("console:expense_delete", args=[11]), {"page": "2", "q": "sand"})
        self.api.delete_expense.assert_called_once_with(11)
        self.assertEqual(resp["Location"], reverse("console:expenses") + "?page=2&q=sand")
