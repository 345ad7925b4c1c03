from __future__ import annotations

from decimal import Decimal

from django.db import IntegrityError, transaction
from django.test import TestCase
from rest_framework.test import APIClient

from apps.accounts.models import User
from apps.cart.models import Cart, CartItem
from apps.catalog.models import Event, Product, Ticket
from apps.common.models import RecordState


class CartItemAPITestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email="cart-user@test.local", password="pass1234", name="Cart User")
        self.client.force_authenticate(user=self.user)

        event = Event.objects.create(title="Symphony")
        self.ticket = Ticket.objects.create(
            event=event,
            ticket_type="Balcony",
            price=Decimal("30.00"),
            quantity_available=5,
            limit_per_user=4,
        )
        self.product = Product.objects.create(name="Program Book", price=Decimal("7.25"), stock_quantity=2)

    def test_user_creation_provisions_a_cart(self):
        self.assertTrue(Cart.objects.filter(user=self.user).exists())

    def test_add_item_snapshots_catalog_price(self):
        response = self.client.post(
            "/api/cart/items",
            {"item_type": "ticket", "item_id": self.ticket.id, "quantity": 2, "unit_price": "0.01"},
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["data"]["unit_price"], "30.00")
        self.assertEqual(response.data["data"]["line_total"], "60.00")
        item = CartItem.objects.get(cart__user=self.user)
        self.assertEqual(item.unit_price, Decimal("30.00"))

    def test_adding_same_item_increments_existing_line(self):
        self.client.post(
            "/api/cart/items",
            {"item_type": "ticket", "item_id": self.ticket.id, "quantity": 1},
            format="json",
        )
        self.client.post(
            "/api/cart/items",
            {"item_type": "TICKET", "item_id": self.ticket.id, "quantity": 2},
            format="json",
        )

        items = CartItem.objects.filter(cart__user=self.user)
        self.assertEqual(items.count(), 1)
        self.assertEqual(items.get().quantity, 3)

    def test_add_rejects_quantity_above_stock(self):
        response = self.client.post(
            "/api/cart/items",
            {"item_type": "product", "item_id": self.product.id, "quantity": 3},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"]["code"], "INSUFFICIENT_INVENTORY")
        self.assertEqual(response.data["error"]["message"], "Product inventory insufficient.")
        self.assertFalse(CartItem.objects.exists())

    def test_add_rejects_quantity_above_per_user_limit(self):
        response = self.client.post(
            "/api/cart/items",
            {"item_type": "ticket", "item_id": self.ticket.id, "quantity": 5},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"]["code"], "INVALID_OPERATION")

    def test_add_rejects_unknown_item_type(self):
        response = self.client.post(
            "/api/cart/items",
            {"item_type": "voucher", "item_id": 1, "quantity": 1},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"]["code"], "UNKNOWN_ITEM_TYPE")

    def test_add_missing_catalog_item_is_not_found(self):
        response = self.client.post(
            "/api/cart/items",
            {"item_type": "product", "item_id": 9999, "quantity": 1},
            format="json",
        )

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["error"]["message"], "Product 9999 not found.")

    def test_get_cart_lists_active_items_and_subtotal(self):
        cart = Cart.objects.get(user=self.user)
        CartItem.objects.create(cart=cart, item_type="ticket", item_id=self.ticket.id, quantity=2, unit_price=Decimal("30.00"))
        CartItem.objects.create(cart=cart, item_type="product", item_id=self.product.id, quantity=1, unit_price=Decimal("7.25"))
        CartItem.objects.create(
            cart=cart,
            item_type="product",
            item_id=self.product.id,
            quantity=1,
            unit_price=Decimal("7.25"),
            state=RecordState.DELETED,
        )

        response = self.client.get("/api/cart")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data["data"]["items"]), 2)
        self.assertEqual(response.data["data"]["subtotal"], "67.25")


class CartItemUpdateDeleteAPITestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email="owner@test.local", password="pass1234")
        self.other = User.objects.create_user(email="stranger@test.local", password="pass1234")
        self.product = Product.objects.create(name="Tote", price=Decimal("10.00"), stock_quantity=2)
        self.item = CartItem.objects.create(
            cart=Cart.objects.get(user=self.user),
            item_type="product",
            item_id=self.product.id,
            quantity=1,
            unit_price=Decimal("10.00"),
        )

    def test_put_updates_quantity(self):
        self.client.force_authenticate(user=self.user)

        response = self.client.put(f"/api/cart/items/{self.item.id}", {"quantity": 2}, format="json")

        self.assertEqual(response.status_code, 200)
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, 2)

    def test_cannot_update_quantity_beyond_product_stock(self):
        self.client.force_authenticate(user=self.user)

        response = self.client.patch(f"/api/cart/items/{self.item.id}", {"quantity": 3}, format="json")

        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.data["success"])
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, 1)

    def test_zero_quantity_is_rejected(self):
        self.client.force_authenticate(user=self.user)

        response = self.client.put(f"/api/cart/items/{self.item.id}", {"quantity": 0}, format="json")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"]["code"], "VALIDATION_ERROR")

    def test_other_users_item_is_not_found(self):
        self.client.force_authenticate(user=self.other)

        response = self.client.put(f"/api/cart/items/{self.item.id}", {"quantity": 2}, format="json")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["error"]["message"], "Cart item not found.")

    def test_delete_soft_deletes_the_line(self):
        self.client.force_authenticate(user=self.user)

        response = self.client.delete(f"/api/cart/items/{self.item.id}")

        self.assertEqual(response.status_code, 204)
        self.item.refresh_from_db()
        self.assertEqual(self.item.state, RecordState.DELETED)

        again = self.client.delete(f"/api/cart/items/{self.item.id}")
        self.assertEqual(again.status_code, 404)


class CartItemConstraintTestCase(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email="constraint@test.local", password="pass1234")

    def test_item_must_belong_to_a_cart_or_an_order(self):
        with self.assertRaises(IntegrityError), transaction.atomic():
            CartItem.objects.create(item_type="product", item_id=1, quantity=1, unit_price=Decimal("1.00"))

    def test_quantity_must_be_positive(self):
        with self.assertRaises(IntegrityError), transaction.atomic():
            CartItem.objects.create(
                cart=Cart.objects.get(user=self.user),
                item_type="product",
                item_id=1,
                quantity=0,
                unit_price=Decimal("1.00"),
            )
