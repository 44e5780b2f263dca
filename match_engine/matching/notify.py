"""Notifications for newly created matches.

Builders are pure functions returning ``Notification`` objects; the
``Notifier`` resolves owner and buyer details from the store and hands the
result to a sink. Sink failures are logged and never propagated: the
stored match is the durable fact, notification is best-effort.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Protocol

from match_engine.exceptions import EntityNotFoundError
from match_engine.models import (
    Buyer,
    MatchSummary,
    MatchType,
    Notification,
    NotificationChannel,
    Owner,
    Property,
    ReconcileOutcome,
    WantedAd,
)
from match_engine.store.base import MatchStore

logger = logging.getLogger(__name__)

DIRECT_TITLE = "A buyer wants YOUR property!"
CRITERIA_TITLE = "New buyer interest in your property"
BATCH_TITLE = "Buyers found for your property"

DIRECT_TEMPLATE = "new_match_direct"
CRITERIA_TEMPLATE = "new_match_criteria"


class NotificationSink(Protocol):
    """Anything that accepts notifications."""

    def send(self, notification: Notification) -> None: ...


def format_nzd(amount: Decimal | int | float) -> str:
    """Format an amount as whole New Zealand dollars, e.g. ``$1,050,000``."""
    value = Decimal(str(amount)).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,}"


def _plural(n: int, one: str, many: str) -> str:
    return one if n == 1 else many


@dataclass(frozen=True)
class DirectBuyerInfo:
    """Buyer details used for the richer direct-match email."""

    buyer_name: str
    budget: Decimal


def property_batch_notifications(
    prop: Property,
    owner: Owner,
    created_count: int,
    direct_count: int,
    criteria_count: int,
    direct_buyer: DirectBuyerInfo | None = None,
) -> list[Notification]:
    """Build the owner's notifications after matching one property.

    Counts are the property's stored totals by match type.
    """
    if created_count <= 0:
        return []

    title = BATCH_TITLE
    if direct_count > 0 and criteria_count > 0:
        message = (
            f"{direct_count} {_plural(direct_count, 'buyer', 'buyers')} specifically "
            f"{_plural(direct_count, 'wants', 'want')} your property, and {criteria_count} more "
            f"{_plural(criteria_count, 'matches', 'match')} your criteria."
        )
    elif direct_count > 0:
        title = DIRECT_TITLE
        message = (
            f"{direct_count} {_plural(direct_count, 'buyer has', 'buyers have')} specifically "
            f"listed your property address at {prop.address}."
        )
    else:
        message = (
            f"{criteria_count} {_plural(criteria_count, 'buyer is', 'buyers are')} looking for "
            f"properties matching yours at {prop.address}."
        )

    notifications = [
        Notification(
            user_id=owner.user_id,
            title=title,
            message=message,
            data={
                "propertyId": prop.property_id,
                "matchCount": created_count,
                "directMatches": direct_count,
                "criteriaMatches": criteria_count,
            },
        )
    ]

    if owner.email:
        if direct_count > 0 and direct_buyer is not None:
            notifications.append(
                Notification(
                    user_id=owner.user_id,
                    title=DIRECT_TITLE,
                    message=f"{direct_buyer.buyer_name} wants your property at {prop.address}.",
                    data={
                        "buyerName": direct_buyer.buyer_name,
                        "propertyAddress": prop.address,
                        "budget": format_nzd(direct_buyer.budget),
                    },
                    channel=NotificationChannel.EMAIL,
                    template=DIRECT_TEMPLATE,
                    recipient=owner.email,
                )
            )
        elif criteria_count > 0:
            notifications.append(
                Notification(
                    user_id=owner.user_id,
                    title=BATCH_TITLE,
                    message=message,
                    data={
                        "propertyAddress": prop.address,
                        "matchCount": str(criteria_count),
                    },
                    channel=NotificationChannel.EMAIL,
                    template=CRITERIA_TEMPLATE,
                    recipient=owner.email,
                )
            )

    return notifications


def owner_notification(ad: WantedAd, owner_user_id: str, created: list[MatchSummary]) -> Notification:
    """Build one owner's in-app notification for a wanted-ad batch."""
    direct = [s for s in created if s.result.match_type == MatchType.DIRECT]
    criteria_count = len(created) - len(direct)

    if len(created) == 1:
        only = created[0].result
        if only.match_type == MatchType.DIRECT:
            title = DIRECT_TITLE
            message = (
                f'A buyer specifically listed your property address in their wanted ad "{ad.title}".'
            )
        else:
            title = CRITERIA_TITLE
            message = f'A buyer searching for "{ad.title}" matches your property\'s criteria.'
        return Notification(
            user_id=owner_user_id,
            title=title,
            message=message,
            data={
                "wantedAdId": ad.wanted_ad_id,
                "propertyId": only.property_id,
                "matchScore": only.score,
                "matchType": only.match_type.value,
            },
        )

    if direct:
        title = DIRECT_TITLE
        message = (
            f"A buyer specifically listed {len(direct)} of your property addresses "
            f'in their wanted ad "{ad.title}"'
        )
        if criteria_count:
            message += (
                f", and {criteria_count} more of your "
                f"{_plural(criteria_count, 'property matches', 'properties match')} their criteria"
            )
        message += "."
    else:
        title = "New buyer interest in your properties"
        message = f'A buyer searching for "{ad.title}" matches {criteria_count} of your properties.'

    return Notification(
        user_id=owner_user_id,
        title=title,
        message=message,
        data={
            "wantedAdId": ad.wanted_ad_id,
            "propertyIds": [s.result.property_id for s in created],
            "matchCount": len(created),
            "directMatches": len(direct),
            "criteriaMatches": criteria_count,
        },
    )


def direct_match_email(prop: Property, owner: Owner, buyer: Buyer, ad: WantedAd) -> Notification | None:
    """Build the richer direct-match email, if buyer name, budget and owner email are known."""
    if not (buyer.name and ad.budget and owner.email):
        return None
    return Notification(
        user_id=owner.user_id,
        title=DIRECT_TITLE,
        message=f"{buyer.name} wants your property at {prop.address}.",
        data={
            "buyerName": buyer.name,
            "propertyAddress": prop.address,
            "budget": format_nzd(ad.budget),
        },
        channel=NotificationChannel.EMAIL,
        template=DIRECT_TEMPLATE,
        recipient=owner.email,
    )


def _created(summaries: Iterable[MatchSummary]) -> list[MatchSummary]:
    return [s for s in summaries if s.outcome == ReconcileOutcome.CREATED]


class Notifier:
    """Emit notifications for created matches through a sink."""

    def __init__(self, sink: NotificationSink) -> None:
        self.sink = sink

    def dispatch(self, notifications: Iterable[Notification]) -> tuple[int, int]:
        """Send notifications, swallowing sink failures.

        Returns
        -------
        tuple[int, int]
            ``(sent, failed)`` counts.
        """
        sent = failed = 0
        for notification in notifications:
            try:
                self.sink.send(notification)
                sent += 1
            except Exception:
                failed += 1
                logger.exception(
                    "Failed to send %s notification to user %s",
                    notification.channel.value,
                    notification.user_id,
                )
        return sent, failed

    def for_property(
        self,
        store: MatchStore,
        prop: Property,
        summaries: Iterable[MatchSummary],
    ) -> tuple[int, int]:
        """Notify the owner of a property about newly created matches."""
        created = _created(summaries)
        if not created:
            return 0, 0

        try:
            owner = store.get_owner(prop.owner_id)
        except EntityNotFoundError:
            logger.warning("Owner %s of property %s not found, skipping notification",
                           prop.owner_id, prop.property_id)
            return 0, 0

        direct_count = store.count_matches(prop.property_id, MatchType.DIRECT)
        criteria_count = store.count_matches(prop.property_id, MatchType.CRITERIA)

        direct_buyer = None
        if direct_count > 0 and owner.email:
            direct_buyer = self._first_direct_buyer(store, prop.property_id)

        notifications = property_batch_notifications(
            prop, owner, len(created), direct_count, criteria_count, direct_buyer
        )
        return self.dispatch(notifications)

    def for_wanted_ad(
        self,
        store: MatchStore,
        ad: WantedAd,
        summaries: Iterable[MatchSummary],
    ) -> tuple[int, int]:
        """Notify each affected owner about matches created for a wanted ad."""
        created = _created(summaries)
        if not created:
            return 0, 0

        by_owner: dict[str, list[MatchSummary]] = defaultdict(list)
        for summary in created:
            by_owner[summary.result.owner_user_id].append(summary)

        notifications = [owner_notification(ad, user_id, group) for user_id, group in by_owner.items()]

        buyer = None
        try:
            buyer = store.get_buyer(ad.buyer_id)
        except EntityNotFoundError:
            logger.warning("Buyer %s of wanted ad %s not found", ad.buyer_id, ad.wanted_ad_id)

        if buyer is not None:
            for summary in created:
                if summary.result.match_type != MatchType.DIRECT:
                    continue
                try:
                    prop = store.get_property(summary.result.property_id)
                    owner = store.get_owner(summary.result.owner_id)
                except EntityNotFoundError as e:
                    logger.warning("Skipping direct match email: %s", e)
                    continue
                email = direct_match_email(prop, owner, buyer, ad)
                if email is not None:
                    notifications.append(email)

        return self.dispatch(notifications)

    def _first_direct_buyer(self, store: MatchStore, property_id: str) -> DirectBuyerInfo | None:
        direct = store.list_matches_for_property(property_id, MatchType.DIRECT)
        if not direct:
            return None
        try:
            ad = store.get_wanted_ad(direct[0].wanted_ad_id)
            buyer = store.get_buyer(ad.buyer_id)
        except EntityNotFoundError as e:
            logger.warning("Cannot resolve direct buyer for property %s: %s", property_id, e)
            return None
        return DirectBuyerInfo(buyer_name=buyer.name or "A buyer", budget=ad.budget)
