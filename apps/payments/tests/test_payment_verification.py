from __future__ import annotations

from decimal import Decimal
from unittest import mock

from django.db.models.query import QuerySet
from django.test import TestCase
from rest_framework.test import APIClient

from apps.accounts.models import AuditLog, PointTransaction, User
from apps.cart.models import CartItem
from apps.catalog.models import Event, Product, Ticket
from apps.orders.models import Order
from apps.payments.models import Payment
from apps.rewards.models import Redemption, Reward


class PaymentVerificationTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.customer = User.objects.create_user(email="fan@test.local", password="pass1234", loyalty_points=5)
        self.admin = User.objects.create_user(email="ops@test.local", password="pass1234", role=User.Role.ADMIN)
        self.client.force_authenticate(user=self.admin)

        event = Event.objects.create(title="Season Finale")
        self.ticket = Ticket.objects.create(
            event=event,
            ticket_type="Front Row",
            price=Decimal("50.00"),
            quantity_available=3,
            quantity_sold=7,
        )
        self.product = Product.objects.create(name="Jersey", price=Decimal("20.00"), stock_quantity=5, quantity_sold=1)

        self.order = Order.objects.create(
            user=self.customer,
            status=Order.Status.UNDER_REVIEW,
            subtotal_amount=Decimal("120.00"),
            total_amount=Decimal("120.00"),
        )
        self.product_line = CartItem.objects.create(
            order=self.order,
            item_type="product",
            item_id=self.product.id,
            quantity=1,
            unit_price=Decimal("20.00"),
        )
        self.ticket_line = CartItem.objects.create(
            order=self.order,
            item_type="ticket",
            item_id=self.ticket.id,
            quantity=2,
            unit_price=Decimal("50.00"),
        )
        self.payment = Payment.objects.create(order=self.order, method="BankTransfer", payment_reference="TX-9")

    def _verify(self, status="Valid", payment_id=None):
        return self.client.put(
            f"/api/payments/admin/{payment_id or self.payment.id}",
            {"status": status},
            format="json",
        )

    def _assert_nothing_settled(self):
        self.payment.refresh_from_db()
        self.order.refresh_from_db()
        self.customer.refresh_from_db()
        self.ticket.refresh_from_db()
        self.product.refresh_from_db()
        self.assertEqual(self.payment.status, Payment.Status.PENDING)
        self.assertEqual(self.order.status, Order.Status.UNDER_REVIEW)
        self.assertEqual(self.customer.loyalty_points, 5)
        self.assertEqual(self.ticket.quantity_available, 3)
        self.assertEqual(self.ticket.quantity_sold, 7)
        self.assertEqual(self.product.stock_quantity, 5)
        self.assertEqual(self.product.quantity_sold, 1)
        self.assertFalse(PointTransaction.objects.filter(order=self.order).exists())

    def test_valid_verification_settles_the_order(self):
        response = self._verify("Valid")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["data"]["status"], Payment.Status.VALID)

        self.payment.refresh_from_db()
        self.order.refresh_from_db()
        self.assertEqual(self.payment.verified_by, self.admin)
        self.assertIsNotNone(self.payment.verified_at)
        self.assertEqual(self.order.status, Order.Status.DELIVERED)

        self.ticket.refresh_from_db()
        self.product.refresh_from_db()
        self.assertEqual(self.ticket.quantity_available, 1)
        self.assertEqual(self.ticket.quantity_sold, 9)
        self.assertEqual(self.product.stock_quantity, 4)
        self.assertEqual(self.product.quantity_sold, 2)

    def test_valid_verification_credits_ten_percent_of_total(self):
        self.order.total_amount = Decimal("129.99")
        self.order.save(update_fields=["total_amount"])

        self._verify("Valid")

        self.customer.refresh_from_db()
        self.assertEqual(self.customer.loyalty_points, 5 + 12)
        ledger = PointTransaction.objects.get(order=self.order)
        self.assertEqual(ledger.tx_type, PointTransaction.TxType.EARN)
        self.assertEqual(ledger.amount, 12)
        self.assertEqual(ledger.balance_after, 17)

    def test_insufficient_ticket_stock_rolls_back_everything(self):
        self.ticket_line.quantity = 5
        self.ticket_line.save(update_fields=["quantity"])

        response = self._verify("Valid")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"]["code"], "INSUFFICIENT_INVENTORY")
        self.assertEqual(response.data["error"]["message"], "Ticket inventory insufficient.")
        self._assert_nothing_settled()

        audit = AuditLog.objects.get(action="PAYMENT_VERIFY")
        self.assertEqual(audit.result, AuditLog.Result.FAIL)
        self.assertEqual(audit.error_code, "INSUFFICIENT_INVENTORY")

    def test_declined_verification_returns_order_to_unpaid(self):
        response = self._verify("Declined")

        self.assertEqual(response.status_code, 200)
        self.payment.refresh_from_db()
        self.order.refresh_from_db()
        self.ticket.refresh_from_db()
        self.customer.refresh_from_db()
        self.assertEqual(self.payment.status, Payment.Status.DECLINED)
        self.assertEqual(self.order.status, Order.Status.UNPAID)
        self.assertEqual(self.ticket.quantity_available, 3)
        self.assertEqual(self.customer.loyalty_points, 5)

    def test_declined_order_can_be_paid_again(self):
        self._verify("Declined")
        self.client.force_authenticate(user=self.customer)

        response = self.client.post(
            "/api/payments",
            {"order_id": self.order.id, "method": "Card", "payment_reference": "TX-10"},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["data"]["id"], self.payment.id)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.Status.UNDER_REVIEW)

    def test_already_settled_payment_cannot_be_verified_again(self):
        self._verify("Valid")
        self.ticket.refresh_from_db()
        self.customer.refresh_from_db()
        available_after_first = self.ticket.quantity_available
        points_after_first = self.customer.loyalty_points

        response = self._verify("Valid")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"]["message"], "Payment is not pending verification.")
        self.ticket.refresh_from_db()
        self.customer.refresh_from_db()
        self.assertEqual(self.ticket.quantity_available, available_after_first)
        self.assertEqual(self.customer.loyalty_points, points_after_first)
        self.assertEqual(PointTransaction.objects.filter(order=self.order).count(), 1)

    def test_declined_payment_cannot_be_settled_without_resubmission(self):
        self._verify("Declined")

        response = self._verify("Valid")

        self.assertEqual(response.status_code, 400)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.Status.UNPAID)

    def test_settled_order_rejects_payment_edits_and_deletion(self):
        self._verify("Valid")
        self.client.force_authenticate(user=self.customer)

        edit = self.client.put(f"/api/payments/{self.payment.id}", {"method": "Cash"}, format="json")
        remove = self.client.delete(f"/api/payments/{self.payment.id}")
        delete_order = self.client.delete(f"/api/orders/{self.order.id}")

        self.assertEqual(edit.data["error"]["message"], "Payment cannot be edited.")
        self.assertEqual(remove.data["error"]["message"], "Payment cannot be deleted.")
        self.assertEqual(delete_order.data["error"]["message"], "Delivered orders cannot be deleted.")
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.Status.DELIVERED)

    def test_blank_status_is_required(self):
        response = self._verify("")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"]["message"], "Status is required.")

    def test_unknown_status_is_invalid(self):
        response = self._verify("Refunded")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"]["message"], "Invalid status.")
        self._assert_nothing_settled()

    def test_status_match_is_case_sensitive(self):
        for status in ("valid", "VALID", "declined"):
            response = self._verify(status)

            self.assertEqual(response.status_code, 400)
            self.assertEqual(response.data["error"]["message"], "Invalid status.")
        self._assert_nothing_settled()

    def test_status_is_trimmed_before_matching(self):
        response = self._verify("  Valid ")

        self.assertEqual(response.status_code, 200)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.Status.DELIVERED)

    def test_unknown_payment_is_not_found(self):
        response = self._verify("Valid", payment_id=9999)

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["error"]["message"], "Payment not found.")

    def test_order_without_items_is_rejected(self):
        CartItem.objects.filter(order=self.order).delete()

        response = self._verify("Valid")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"]["message"], "Order has no items.")

    def test_order_without_user_is_rejected(self):
        Order.objects.filter(pk=self.order.pk).update(user=None)

        response = self._verify("Valid")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"]["message"], "Order has no associated user.")

    def test_payment_without_order_is_rejected(self):
        orphan = Payment.objects.create(order=None, method="Card")

        response = self._verify("Valid", payment_id=orphan.id)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"]["message"], "Payment has no associated order.")

    def test_unknown_item_type_rolls_back(self):
        CartItem.objects.create(order=self.order, item_type="voucher", item_id=1, quantity=1, unit_price=Decimal("1.00"))

        response = self._verify("Valid")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"]["message"], "Unknown item type: voucher")
        self._assert_nothing_settled()

    def test_missing_item_type_rolls_back(self):
        CartItem.objects.create(order=self.order, item_type="", item_id=1, quantity=1, unit_price=Decimal("1.00"))

        response = self._verify("Valid")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"]["code"], "UNKNOWN_ITEM_TYPE")
        self.assertEqual(response.data["error"]["message"], "Order item type is missing.")
        self._assert_nothing_settled()

    def test_order_row_is_locked_before_payment_row(self):
        locked = []
        original = QuerySet.select_for_update

        def recording_select_for_update(queryset, *args, **kwargs):
            locked.append(queryset.model)
            return original(queryset, *args, **kwargs)

        with mock.patch.object(QuerySet, "select_for_update", recording_select_for_update):
            response = self._verify("Valid")

        self.assertEqual(response.status_code, 200)
        self.assertLess(locked.index(Order), locked.index(Payment))

    def test_unexpected_error_is_wrapped_and_rolled_back(self):
        with mock.patch("apps.payments.services.decrement_stock", side_effect=RuntimeError("db gone")):
            response = self._verify("Valid")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data["error"]["code"], "PAYMENT_PROCESSING_ERROR")
        self.assertEqual(response.data["error"]["message"], f"Failed to update payment {self.payment.id}.")
        self._assert_nothing_settled()

    def test_successful_verification_is_audited(self):
        self._verify("Valid")

        audit = AuditLog.objects.get(action="PAYMENT_VERIFY")
        self.assertEqual(audit.actor, self.admin)
        self.assertEqual(audit.result, AuditLog.Result.SUCCESS)
        self.assertEqual(audit.before_json["status"], Payment.Status.PENDING)
        self.assertEqual(audit.after_json["status"], Payment.Status.VALID)


class PaymentVerificationPermissionTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        customer = User.objects.create_user(email="owner@test.local", password="pass1234")
        order = Order.objects.create(user=customer, status=Order.Status.UNDER_REVIEW)
        self.payment = Payment.objects.create(order=order, method="Card")
        self.customer = customer

    def test_regular_user_cannot_verify(self):
        self.client.force_authenticate(user=self.customer)

        response = self.client.put(f"/api/payments/admin/{self.payment.id}", {"status": "Valid"}, format="json")

        self.assertEqual(response.status_code, 403)
        self.payment.refresh_from_db()
        self.assertEqual(self.payment.status, Payment.Status.PENDING)

    def test_organizer_cannot_verify(self):
        organizer = User.objects.create_user(email="org@test.local", password="pass1234", role=User.Role.ORGANIZER)
        self.client.force_authenticate(user=organizer)

        response = self.client.put(f"/api/payments/admin/{self.payment.id}", {"status": "Valid"}, format="json")

        self.assertEqual(response.status_code, 403)

    def test_anonymous_caller_is_unauthorized(self):
        response = self.client.put(f"/api/payments/admin/{self.payment.id}", {"status": "Valid"}, format="json")

        self.assertEqual(response.status_code, 401)


class SettlementRedemptionTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.customer = User.objects.create_user(email="collector@test.local", password="pass1234")
        admin = User.objects.create_superuser(email="root@test.local", password="pass1234")
        self.client.force_authenticate(user=admin)

        self.product = Product.objects.create(name="Signed Ball", price=Decimal("40.00"), stock_quantity=3)
        self.order = Order.objects.create(
            user=self.customer,
            status=Order.Status.UNDER_REVIEW,
            subtotal_amount=Decimal("40.00"),
            discount_amount=Decimal("10.00"),
            total_amount=Decimal("30.00"),
        )
        CartItem.objects.create(
            order=self.order,
            item_type="product",
            item_id=self.product.id,
            quantity=1,
            unit_price=Decimal("40.00"),
        )
        self.payment = Payment.objects.create(order=self.order, method="Card")

        item_reward = Reward.objects.create(name="Ball upgrade", points_required=500, item_product=self.product)
        discount_reward = Reward.objects.create(name="Ten off", points_required=1000)
        self.item_redemption = Redemption.objects.create(
            user=self.customer,
            reward=item_reward,
            points_spent=500,
            status=Redemption.Status.UNUSED,
        )
        self.applied_redemption = Redemption.objects.create(
            user=self.customer,
            reward=discount_reward,
            points_spent=1000,
            status=Redemption.Status.UNUSED,
            applied_order=self.order,
        )
        self.waiting_redemption = Redemption.objects.create(
            user=self.customer,
            reward=discount_reward,
            points_spent=1000,
            status=Redemption.Status.PENDING,
        )

    def test_settlement_marks_matching_and_applied_redemptions_used(self):
        response = self.client.put(f"/api/payments/admin/{self.payment.id}", {"status": "Valid"}, format="json")

        self.assertEqual(response.status_code, 200)
        for redemption in (self.item_redemption, self.applied_redemption, self.waiting_redemption):
            redemption.refresh_from_db()
        self.assertEqual(self.item_redemption.status, Redemption.Status.USED)
        self.assertEqual(self.applied_redemption.status, Redemption.Status.USED)
        self.assertEqual(self.waiting_redemption.status, Redemption.Status.PENDING)

        self.customer.refresh_from_db()
        self.assertEqual(self.customer.loyalty_points, 3)

    def test_item_redemption_orphaned_by_removed_order_is_consumed(self):
        abandoned = Order.objects.create(user=self.customer, status=Order.Status.UNPAID)
        Redemption.objects.filter(pk=self.item_redemption.pk).update(applied_order=abandoned)
        abandoned.delete()

        self.item_redemption.refresh_from_db()
        self.assertIsNone(self.item_redemption.applied_order)
        self.assertEqual(self.item_redemption.status, Redemption.Status.UNUSED)

        response = self.client.put(f"/api/payments/admin/{self.payment.id}", {"status": "Valid"}, format="json")

        self.assertEqual(response.status_code, 200)
        self.item_redemption.refresh_from_db()
        self.assertEqual(self.item_redemption.status, Redemption.Status.USED)
