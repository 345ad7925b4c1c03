from __future__ import annotations

import logging

from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from apps.accounts.models import PointTransaction, User
from apps.catalog.services import ITEM_TYPE_PRODUCT, ITEM_TYPE_TICKET, normalize_item_type
from apps.common.exceptions import BusinessRuleError, ResourceNotFound
from apps.common.models import RecordState

from .models import Redemption, Reward

logger = logging.getLogger(__name__)


def list_rewards():
    today = timezone.localdate()
    return (
        Reward.objects.filter(state=RecordState.ACTIVE, is_active=True)
        .filter(Q(expire_date__isnull=True) | Q(expire_date__gte=today))
        .order_by("points_required", "id")
    )


def create_redemption(user, reward_id: int) -> Redemption:
    """Spend the reward's points now; the discount is applied at the next checkout."""
    with transaction.atomic():
        reward = list_rewards().filter(pk=reward_id).first()
        if reward is None:
            raise ResourceNotFound("Reward not found.")

        locked_user = User.objects.select_for_update().get(pk=user.pk)
        if locked_user.loyalty_points < reward.points_required:
            logger.warning(
                "redemption rejected: user=%s balance=%s required=%s",
                locked_user.pk,
                locked_user.loyalty_points,
                reward.points_required,
            )
            raise BusinessRuleError("Insufficient loyalty points.")

        locked_user.deduct_loyalty_points(reward.points_required)
        locked_user.save(update_fields=["loyalty_points", "updated_at"])
        PointTransaction.objects.create(
            user=locked_user,
            tx_type=PointTransaction.TxType.USE,
            amount=-reward.points_required,
            balance_after=locked_user.loyalty_points,
            description=f"Redeemed reward {reward.pk}",
        )
        redemption = Redemption.objects.create(
            user=locked_user,
            reward=reward,
            points_spent=reward.points_required,
            status=Redemption.Status.PENDING,
        )
    user.loyalty_points = locked_user.loyalty_points
    logger.info("redemption created: id=%s user=%s reward=%s", redemption.pk, user.pk, reward.pk)
    return redemption


def redemptions_for_user(user):
    return Redemption.objects.filter(user=user).select_related("reward")


def redemptions_for_product(product_id: int):
    return Redemption.objects.filter(reward__item_product_id=product_id).select_related("reward", "user")


def redemptions_for_ticket(ticket_id: int):
    return Redemption.objects.filter(reward__item_ticket_id=ticket_id).select_related("reward", "user")


def finalize_item_redemption(order, item_type, item_id: int) -> Redemption | None:
    """Mark the newest Unused redemption targeting this item as Used.

    Only redemptions of the order's owner that are free or applied to this
    order are considered.
    """
    tag = normalize_item_type(item_type)
    if tag == ITEM_TYPE_PRODUCT:
        target = Q(reward__item_product_id=item_id)
    elif tag == ITEM_TYPE_TICKET:
        target = Q(reward__item_ticket_id=item_id)
    else:
        return None

    redemption = (
        Redemption.objects.select_for_update()
        .filter(target, user_id=order.user_id, status=Redemption.Status.UNUSED)
        .filter(Q(applied_order__isnull=True) | Q(applied_order=order))
        .order_by("-redeemed_at", "-id")
        .first()
    )
    if redemption is None:
        return None
    redemption.status = Redemption.Status.USED
    redemption.save(update_fields=["status", "updated_at"])
    return redemption


def finalize_order_redemptions(order) -> int:
    return Redemption.objects.filter(applied_order=order, status=Redemption.Status.UNUSED).update(
        status=Redemption.Status.USED,
        updated_at=timezone.now(),
    )
