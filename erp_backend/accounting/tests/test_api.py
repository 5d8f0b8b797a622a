# accounting/tests/test_api.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from accounting.models import Account, JournalEntry
from accounting.tests.helpers import make_company, seed_chart
from companies.models import Membership


class AccountingApiTests(TestCase):
    """
    HTTP surface of the accounting app: tenant scoping, capability checks,
    error mapping (400 with line_number, 409 on conflicts).
    """

    def setUp(self):
        self.company, self.activity, self.owner, _ = make_company()
        self.chart = seed_chart(self.company)
        self.client = APIClient()
        self.client.force_authenticate(user=self.owner)

    def _manual_entry(self, amount="250.00", **extra):
        payload = {
            "entry_date": "2026-04-02",
            "description": "Owner contribution",
            "reference": "CAP-1",
            "lines": [
                {"account_id": self.chart["571000"].id, "debit": amount},
                {"account_id": self.chart["101000"].id, "credit": amount},
            ],
        }
        payload.update(extra)
        return self.client.post("/api/accounting/journal-entries/", payload, format="json")

    # --------------------------------------------------
    # Chart of accounts
    # --------------------------------------------------

    def test_list_accounts_is_company_scoped(self):
        other, _, _, _ = make_company("Other SARL", username="other")
        Account.objects.create(company=other, code="999000", name="Elsewhere", account_type=Account.ASSET)

        res = self.client.get("/api/accounting/accounts/")
        self.assertEqual(res.status_code, 200)
        codes = [row["code"] for row in res.data]
        self.assertIn("571000", codes)
        self.assertNotIn("999000", codes)
        self.assertEqual(codes, sorted(codes))

        res = self.client.get("/api/accounting/accounts/", {"account_type": "revenue"})
        self.assertEqual([row["code"] for row in res.data], ["700000"])

    def test_create_account_and_duplicate_code(self):
        payload = {"code": " 512100 ", "name": "Mobile money", "account_type": "asset"}
        res = self.client.post("/api/accounting/accounts/", payload, format="json")
        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["code"], "512100")
        self.assertEqual(res.data["account_type"], Account.ASSET)

        res = self.client.post("/api/accounting/accounts/", payload, format="json")
        self.assertEqual(res.status_code, 400)

    def test_delete_referenced_account_deactivates_it(self):
        self._manual_entry()

        res = self.client.delete(f"/api/accounting/accounts/{self.chart['101000'].id}/")
        self.assertEqual(res.status_code, 200)
        self.assertFalse(res.data["account"]["is_active"])

        res = self.client.delete(f"/api/accounting/accounts/{self.chart['401000'].id}/")
        self.assertEqual(res.status_code, 204)

    def test_account_balance_endpoint(self):
        self._manual_entry()
        res = self.client.get(f"/api/accounting/accounts/{self.chart['571000'].id}/balance/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(Decimal(str(res.data["balance"])), Decimal("250.00"))

    # --------------------------------------------------
    # Journal entries
    # --------------------------------------------------

    def test_post_manual_entry(self):
        res = self._manual_entry()

        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["entry_number"], "ECR-000001")
        self.assertEqual(len(res.data["lines"]), 2)
        self.assertEqual(res.data["created_by"], self.owner.id)

        entry = JournalEntry.objects.get(pk=res.data["id"])
        self.assertEqual(entry.company, self.company)
        self.assertEqual(entry.activity, self.activity)

    def test_invalid_entry_reports_line_number(self):
        res = self.client.post(
            "/api/accounting/journal-entries/",
            {
                "description": "Broken",
                "lines": [
                    {"account_id": self.chart["571000"].id, "debit": "10.00"},
                    {"account_id": self.chart["101000"].id, "debit": "5.00", "credit": "5.00"},
                ],
            },
            format="json",
        )
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["line_number"], 2)
        self.assertFalse(JournalEntry.objects.exists())

    def test_unbalanced_entry_rejected(self):
        res = self.client.post(
            "/api/accounting/journal-entries/",
            {
                "description": "Off by one",
                "lines": [
                    {"account_id": self.chart["571000"].id, "debit": "10.00"},
                    {"account_id": self.chart["101000"].id, "credit": "9.00"},
                ],
            },
            format="json",
        )
        self.assertEqual(res.status_code, 400)
        self.assertFalse(JournalEntry.objects.exists())

    def test_oversized_entry_total_returns_400(self):
        top = "999999999999.99"
        res = self.client.post(
            "/api/accounting/journal-entries/",
            {
                "description": "Sum too large",
                "lines": [
                    {"account_id": self.chart["571000"].id, "debit": top},
                    {"account_id": self.chart["571000"].id, "debit": top},
                    {"account_id": self.chart["101000"].id, "credit": top},
                    {"account_id": self.chart["101000"].id, "credit": top},
                ],
            },
            format="json",
        )
        self.assertEqual(res.status_code, 400)
        self.assertFalse(JournalEntry.objects.exists())

    def test_entries_are_immutable_over_http(self):
        entry_id = self._manual_entry().data["id"]
        self.assertEqual(self.client.delete(f"/api/accounting/journal-entries/{entry_id}/").status_code, 405)
        self.assertEqual(
            self.client.patch(f"/api/accounting/journal-entries/{entry_id}/", {}, format="json").status_code,
            405,
        )

    def test_reverse_entry_once(self):
        entry_id = self._manual_entry().data["id"]

        res = self.client.post(f"/api/accounting/journal-entries/{entry_id}/reverse/", {}, format="json")
        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["reverses"], entry_id)

        res = self.client.post(f"/api/accounting/journal-entries/{entry_id}/reverse/", {}, format="json")
        self.assertEqual(res.status_code, 409)

        detail = self.client.get(f"/api/accounting/journal-entries/{entry_id}/")
        self.assertIsNotNone(detail.data["reversed_by"])

    def test_idempotency_key_conflict(self):
        self.assertEqual(self._manual_entry(idempotency_key="import-42").status_code, 201)
        self.assertEqual(self._manual_entry(idempotency_key="import-42").status_code, 201)
        self.assertEqual(self._manual_entry("99.00", idempotency_key="import-42").status_code, 409)
        self.assertEqual(JournalEntry.objects.count(), 1)

    def test_journal_listing_filters(self):
        self._manual_entry()
        self._manual_entry("40.00", entry_date="2026-05-10", reference="CAP-2")

        res = self.client.get("/api/accounting/journal-entries/", {"month": "2026-05"})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["count"], 1)
        self.assertEqual(res.data["results"][0]["reference"], "CAP-2")

    # --------------------------------------------------
    # Reports
    # --------------------------------------------------

    def test_reports(self):
        self._manual_entry()

        trial = self.client.get("/api/accounting/trial-balance/", {"as_of": "2026-12-31"})
        self.assertEqual(trial.status_code, 200)
        self.assertTrue(trial.data["totals"]["balanced"])

        sheet = self.client.get("/api/accounting/balance-sheet/")
        self.assertEqual(sheet.status_code, 200)
        self.assertEqual(sheet.data["totals"]["assets"], Decimal("250.00"))
        self.assertTrue(sheet.data["totals"]["balanced"])

        pnl = self.client.get("/api/accounting/profit-and-loss/", {"start_date": "2026-01-01", "end_date": "2026-12-31"})
        self.assertEqual(pnl.status_code, 200)
        self.assertEqual(pnl.data["net"], Decimal("0.00"))

        bad = self.client.get("/api/accounting/profit-and-loss/", {"start_date": "2026-12-31", "end_date": "2026-01-01"})
        self.assertEqual(bad.status_code, 400)

        overview = self.client.get("/api/accounting/overview/")
        self.assertEqual(overview.status_code, 200)
        self.assertEqual(overview.data["unbalanced_entries"], 0)

        setup = self.client.get("/api/accounting/posting-setup/")
        self.assertEqual(setup.status_code, 200)

    # --------------------------------------------------
    # Expenses
    # --------------------------------------------------

    def test_expense_with_posting_failure_still_returns_201(self):
        self.chart["571000"].is_active = False
        self.chart["571000"].save(update_fields=["is_active"])

        res = self.client.post(
            "/api/accounting/expenses/",
            {"title": "Water bill", "category": "eau", "amount": "30.00"},
            format="json",
        )
        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["posting_status"], "FAILED")
        self.assertTrue(res.data["posting_error"])


class AccountingApiAccessTests(TestCase):
    def setUp(self):
        self.company, _, self.owner, _ = make_company()
        seed_chart(self.company)
        self.client = APIClient()

    def test_anonymous_is_rejected(self):
        res = self.client.get("/api/accounting/accounts/")
        self.assertEqual(res.status_code, 401)

    def test_seller_cannot_read_ledger(self):
        _, _, seller, _ = make_company("Shop SARL", username="seller", role=Membership.ROLE_SELLER)
        self.client.force_authenticate(user=seller)

        for path in (
            "/api/accounting/accounts/",
            "/api/accounting/journal-entries/",
            "/api/accounting/trial-balance/",
            "/api/accounting/balance-sheet/",
        ):
            with self.subTest(path=path):
                self.assertEqual(self.client.get(path).status_code, 403)

    def test_accountant_reads_but_cannot_record_sales(self):
        _, _, accountant, _ = make_company("Books SARL", username="acct", role=Membership.ROLE_ACCOUNTANT)
        self.client.force_authenticate(user=accountant)

        self.assertEqual(self.client.get("/api/accounting/accounts/").status_code, 200)
        self.assertEqual(self.client.get("/api/sales/sales/").status_code, 403)

    def test_user_without_membership_is_forbidden(self):
        drifter = get_user_model().objects.create_user(username="drifter", password="pass")
        self.client.force_authenticate(user=drifter)

        res = self.client.get("/api/accounting/accounts/")
        self.assertEqual(res.status_code, 403)

    def test_company_header_selects_membership(self):
        second, _, _, _ = make_company("Second SARL", username="second")
        Membership.objects.create(user=self.owner, company=second, role=Membership.ROLE_OWNER)
        Account.objects.create(company=second, code="512900", name="Second bank", account_type=Account.ASSET)
        self.client.force_authenticate(user=self.owner)

        res = self.client.get("/api/accounting/accounts/", HTTP_X_COMPANY_ID=str(second.pk))
        self.assertEqual([row["code"] for row in res.data], ["512900"])

    def test_health_check_is_public(self):
        res = self.client.get("/api/health/")
        self.assertEqual(res.status_code, 200)
