"""Generator for account profiles and routine transactions."""

import random
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterator

from antifraud.generators.base import BaseGenerator
from antifraud.models import Channel, Transaction


@dataclass
class AccountProfile:
    """Habitual context of a sender account."""

    account_id: str
    customer_id: str
    channel: str
    device_id: str
    geo_location: str
    ip_address: str
    currency: str = "BRL"
    payees: list[str] = field(default_factory=list)


class TransactionGenerator(BaseGenerator):
    """Generate account profiles and routine (non-suspicious) transactions.

    Routine traffic reuses the profile's channel, device and location, pays
    only known payees, keeps amounts small and is spaced hours apart during
    business hours, so none of the risk rules match it.
    """

    CHANNELS = [Channel.APP, Channel.WEB]
    CHANNEL_WEIGHTS = [0.7, 0.3]

    ROUTINE_AMOUNT_CAP = 180
    BUSINESS_HOURS = [9, 12, 15, 18]

    def generate_profile(self, num_payees: int = 2) -> AccountProfile:
        """Generate a sender account with its habitual context and payees."""
        channel = random.choices(self.CHANNELS, weights=self.CHANNEL_WEIGHTS, k=1)[0]
        return AccountProfile(
            account_id=self.account_id(),
            customer_id=self.fake.cpf(),
            channel=channel.value,
            device_id=self.device_id(),
            geo_location=f"BR-{self.fake.estado_sigla()}",
            ip_address=self.fake.ipv4_public(),
            payees=[self.account_id() for _ in range(num_payees)],
        )

    def generate(
        self,
        profile: AccountProfile,
        timestamp: datetime,
        receiver_account_id: str | None = None,
    ) -> Transaction:
        """Generate a single routine transaction for a profile.

        Parameters
        ----------
        profile : AccountProfile
            Sender profile.
        timestamp : datetime
            Event time of the transaction.
        receiver_account_id : str | None
            Receiver; a random known payee when omitted.

        Returns
        -------
        Transaction
            Generated transaction, not yet evaluated.
        """
        if receiver_account_id is None and profile.payees:
            receiver_account_id = random.choice(profile.payees)

        return Transaction(
            amount=self.routine_amount(),
            sender_account_id=profile.account_id,
            receiver_account_id=receiver_account_id,
            timestamp=timestamp,
            currency=profile.currency,
            customer_id=profile.customer_id,
            channel=profile.channel,
            device_id=profile.device_id,
            ip_address=profile.ip_address,
            geo_location=profile.geo_location,
            auth_attempts=0,
        )

    def generate_history(
        self,
        profile: AccountProfile,
        start: datetime,
        count: int,
    ) -> Iterator[Transaction]:
        """Generate ``count`` routine transactions spread over business hours."""
        slots = len(self.BUSINESS_HOURS)
        for i in range(count):
            day = start + timedelta(days=i // slots)
            timestamp = day.replace(
                hour=self.BUSINESS_HOURS[i % slots],
                minute=random.randint(0, 59),
                second=random.randint(0, 59),
                microsecond=0,
            )
            yield self.generate(profile, timestamp)

    def routine_amount(self) -> Decimal:
        """Amount based on a Pareto distribution (many small, few large), capped."""
        amount = random.paretovariate(1.5) * 20
        amount = min(amount, self.ROUTINE_AMOUNT_CAP)
        return Decimal(str(round(amount, 2)))

    def account_id(self) -> str:
        return self.fake.bothify("acct-########")

    def device_id(self) -> str:
        return f"dev-{self.fake.uuid4()[:8]}"
