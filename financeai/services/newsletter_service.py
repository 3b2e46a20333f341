"""Newsletter subscription use cases."""

from __future__ import annotations

from financeai.domain.models import NewsletterCreate, NewsletterSubscription
from financeai.repositories import DuplicateRecordError, Repository


class NewsletterError(Exception):
    pass


class AlreadySubscribedError(NewsletterError):
    """Raised when the email already has a subscription record, active or not."""


class SubscriptionNotFoundError(NewsletterError):
    pass


class NewsletterService:
    def __init__(self, repository: Repository) -> None:
        self.repository = repository

    @staticmethod
    def normalize(email: str) -> str:
        return (email or "").strip().lower()

    def subscribe(self, email: str) -> NewsletterSubscription:
        address = self.normalize(email)
        if self.repository.get_newsletter_subscription(address):
            raise AlreadySubscribedError(address)
        try:
            return self.repository.subscribe_to_newsletter(NewsletterCreate(email=address))
        except DuplicateRecordError as exc:
            raise AlreadySubscribedError(address) from exc

    def unsubscribe(self, email: str) -> None:
        if not self.repository.unsubscribe_from_newsletter(self.normalize(email)):
            raise SubscriptionNotFoundError(email)

    def active_count(self) -> int:
        return len(self.repository.get_newsletter_subscribers())
