# purchases/tests/test_purchases.py

from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIClient

from accounting.models import JournalEntry, PostingStatus
from accounting.services.balance_service import compute_balance
from accounting.tests.helpers import make_company, make_session, seed_chart
from companies.models import Membership
from purchases.models import Purchase
from purchases.services.purchase_service import (
    InvalidPurchaseTransitionError,
    PurchaseError,
    change_purchase_status,
    post_purchase,
    record_purchase,
)

ITEMS = [
    {"product_name": "Rice 25kg", "quantity": 20, "unit_price": "18.00"},
    {"product_name": "Oil 5L", "quantity": 10, "unit_price": "7.50"},
]


class PurchaseServiceTests(TestCase):
    def setUp(self):
        self.company, self.activity, self.user, _ = make_company()
        self.session = make_session(self.company, user=self.user, activity=self.activity)
        self.chart = seed_chart(self.company)

    def test_pending_purchase_is_not_posted(self):
        purchase = record_purchase(self.session, items=ITEMS, supplier_name="Grossiste Sud")

        purchase.refresh_from_db()
        self.assertEqual(purchase.purchase_number, "PUR-000001")
        self.assertEqual(purchase.total_amount, Decimal("435.00"))
        self.assertEqual(purchase.posting_status, PostingStatus.PENDING)
        self.assertFalse(JournalEntry.objects.exists())

    def test_received_purchase_posts_inventory_against_cash(self):
        purchase = record_purchase(self.session, items=ITEMS)
        purchase = change_purchase_status(self.session, purchase=purchase, status=Purchase.STATUS_RECEIVED)

        purchase.refresh_from_db()
        self.assertEqual(purchase.posting_status, PostingStatus.POSTED)
        self.assertEqual(purchase.journal_entry.idempotency_key, f"PURCHASE:{purchase.pk}")
        self.assertEqual(compute_balance(self.chart["371000"]), Decimal("435.00"))
        self.assertEqual(compute_balance(self.chart["571000"]), Decimal("-435.00"))
        self.assertTrue(all(i.received_quantity == i.quantity for i in purchase.items.all()))

        # paying a received purchase does not post again
        change_purchase_status(self.session, purchase=purchase, status=Purchase.STATUS_PAID)
        self.assertEqual(JournalEntry.objects.filter(company=self.company).count(), 1)

    def test_credit_purchase_credits_payables(self):
        purchase = record_purchase(self.session, items=ITEMS, status="received", on_credit=True)

        purchase.refresh_from_db()
        self.assertEqual(compute_balance(self.chart["401000"]), Decimal("435.00"))
        self.assertEqual(compute_balance(self.chart["571000"]), Decimal("0.00"))

    def test_paid_credit_purchase_credits_cash(self):
        record_purchase(self.session, items=ITEMS, status="paid", on_credit=True)
        self.assertEqual(compute_balance(self.chart["571000"]), Decimal("-435.00"))

    def test_transition_rules(self):
        purchase = record_purchase(self.session, items=ITEMS, status="received")
        with self.assertRaises(InvalidPurchaseTransitionError):
            change_purchase_status(self.session, purchase=purchase, status=Purchase.STATUS_CANCELLED)
        with self.assertRaises(InvalidPurchaseTransitionError):
            record_purchase(self.session, items=ITEMS, status="cancelled")

    def test_item_validation(self):
        cases = [
            [],
            [{"product_name": "", "quantity": 0}],
            [{"product_name": "Rice", "quantity": -1, "unit_price": 1}],
            [{"product_name": "Rice", "quantity": 2, "unit_price": "abc"}],
            [{"product_name": "Rice", "quantity": 2, "received_quantity": 3, "unit_price": 1}],
        ]
        for items in cases:
            with self.subTest(items=items):
                with self.assertRaises(PurchaseError):
                    record_purchase(self.session, items=items)
        self.assertFalse(Purchase.objects.exists())

    def test_missing_inventory_account_keeps_purchase(self):
        inventory = self.chart["371000"]
        inventory.is_active = False
        inventory.save(update_fields=["is_active"])

        purchase = record_purchase(self.session, items=ITEMS, status="paid")
        purchase.refresh_from_db()
        self.assertEqual(purchase.posting_status, PostingStatus.FAILED)
        self.assertIn("371000", purchase.posting_error)

        inventory.is_active = True
        inventory.save(update_fields=["is_active"])
        self.assertTrue(post_purchase(self.session, purchase=purchase))
        purchase.refresh_from_db()
        self.assertEqual(purchase.posting_status, PostingStatus.POSTED)


class PurchaseApiTests(TestCase):
    def setUp(self):
        self.company, _, self.user, _ = make_company(username="stock", role=Membership.ROLE_STOCK_MANAGER)
        seed_chart(self.company)
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def test_create_receive_and_list(self):
        res = self.client.post("/api/purchases/", {"supplier_name": "Grossiste", "items": ITEMS}, format="json")
        self.assertEqual(res.status_code, 201)
        purchase_id = res.data["id"]

        res = self.client.post(f"/api/purchases/{purchase_id}/status/", {"status": "received"}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["posting_status"], "POSTED")

        res = self.client.get("/api/purchases/", {"posting_status": "posted"})
        self.assertEqual([row["id"] for row in res.data], [purchase_id])

    def test_repost_pending_purchase_is_rejected(self):
        res = self.client.post("/api/purchases/", {"items": ITEMS}, format="json")
        res = self.client.post(f"/api/purchases/{res.data['id']}/repost/")
        self.assertEqual(res.status_code, 400)

    def test_seller_cannot_record_purchases(self):
        _, _, seller, _ = make_company("Shop SARL", username="seller", role=Membership.ROLE_SELLER)
        self.client.force_authenticate(user=seller)
        self.assertEqual(self.client.get("/api/purchases/").status_code, 403)
