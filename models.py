from dataclasses import dataclass, field
from typing import List, Union

from money import Money

@dataclass(frozen=True)
class Named:
    """One person who paid `spent` towards the shared bill"""
    name: str
    spent: Money = field(default_factory=Money.zero)

@dataclass(frozen=True)
class AnonymousGroup:
    """`size` people who paid nothing and only carry their share of the debt"""
    size: int

    def __post_init__(self):
        if isinstance(self.size, bool) or not isinstance(self.size, int) or self.size < 1:
            raise ValueError(f"Anonymous group size must be a positive integer, got {self.size!r}")

Participant = Union[Named, AnonymousGroup]

def identifier(participant: Participant) -> str:
    if isinstance(participant, Named):
        return participant.name
    if isinstance(participant, AnonymousGroup):
        return f"Other {participant.size} people"
    raise TypeError(f"Not a participant: {participant!r}")

def weight(participant: Participant) -> int:
    """Number of people the participant stands for"""
    if isinstance(participant, Named):
        return 1
    if isinstance(participant, AnonymousGroup):
        return participant.size
    raise TypeError(f"Not a participant: {participant!r}")

def money_spent(participant: Participant) -> Money:
    if isinstance(participant, Named):
        return participant.spent
    if isinstance(participant, AnonymousGroup):
        return Money.zero()
    raise TypeError(f"Not a participant: {participant!r}")

def total_people(participants: List[Participant]) -> int:
    return sum(weight(p) for p in participants)

@dataclass(frozen=True)
class Transfer:
    """A single payment of `amount` from `payer` to `payee`"""
    payer: Participant
    payee: Participant
    amount: Money

    def __post_init__(self):
        if identifier(self.payer) == identifier(self.payee):
            raise ValueError(f"{identifier(self.payer)} cannot pay themselves")
        if self.amount <= Money.zero():
            raise ValueError(f"Transfer amount must be positive, got {self.amount}")

    def to_dict(self):
        return {
            'from': identifier(self.payer),
            'to': identifier(self.payee),
            'amount': self.amount.to_decimal_string()
        }

@dataclass
class ParticipantSummary:
    """What one participant spent, pays and receives in a settlement"""
    participant: Participant
    spent: Money
    total_to_pay: Money
    total_to_receive: Money

    def to_dict(self):
        return {
            'name': identifier(self.participant),
            'people': weight(self.participant),
            'spent': self.spent.to_decimal_string(),
            'total_to_pay': self.total_to_pay.to_decimal_string(),
            'total_to_receive': self.total_to_receive.to_decimal_string()
        }

@dataclass
class SettlementSummary:
    """Aggregates for a settled bill"""
    total_spent: Money
    total_people: int
    amount_for_each: Money
    participants: List[ParticipantSummary]

    def to_dict(self):
        return {
            'total_spent': self.total_spent.to_decimal_string(),
            'total_people': self.total_people,
            'amount_for_each': self.amount_for_each.to_decimal_string(),
            'participants': [p.to_dict() for p in self.participants]
        }
