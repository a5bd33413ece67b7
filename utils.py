import sys
from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from config import Config
from exceptions import ConfigurationError, InternalInvariantViolation
from models import (
    AnonymousGroup,
    Named,
    Participant,
    ParticipantSummary,
    SettlementSummary,
    Transfer,
    identifier,
    money_spent,
    total_people
)
from money import Money
from settlement import STRATEGIES, SettlementGraph, balance_drift, build_naive_transfers

@dataclass
class SettlementResult:
    """Outcome of settling one bill"""
    transfers: List[Transfer]
    naive_transfers: List[Transfer]
    graph: SettlementGraph
    summary: SettlementSummary
    optimized: bool

    def to_dict(self):
        return {
            'transfers': [t.to_dict() for t in self.transfers],
            'summary': self.summary.to_dict(),
            'optimized': self.optimized,
            'naive_transfer_count': len(self.naive_transfers)
        }

def _parse_amount(value, name: str) -> Money:
    try:
        amount = Money.from_decimal(value)
    except ValueError:
        raise ConfigurationError(f"Invalid amount '{value}' for {name}")

    if amount < Money.zero():
        raise ConfigurationError(f"Amount spent by {name} cannot be negative")
    if amount > Money.from_decimal(Config.MAX_AMOUNT):
        raise ConfigurationError(f"Amount spent by {name} cannot exceed {Config.MAX_AMOUNT}")
    return amount

def parse_pair(text: str) -> Named:
    """Parse a NAME=VALUE command line argument"""
    name, separator, value = text.partition('=')
    name = name.strip()
    if not separator or not name:
        raise ConfigurationError(f"Invalid argument, expected NAME=VALUE: '{text}'")

    return Named(name, _parse_amount(value, name))

def parse_record(record: dict) -> Participant:
    """
    Parse one participant record of a JSON request

    Either {"name": ..., "spent": ...} or {"anonymous_group_size": ...}
    """
    if not isinstance(record, dict):
        raise ConfigurationError(f"Invalid participant record: {record!r}")

    if 'anonymous_group_size' in record:
        size = record['anonymous_group_size']
        if isinstance(size, bool) or not isinstance(size, int) or size < 1:
            raise ConfigurationError(f"Anonymous group size must be a positive integer, got {size!r}")
        return AnonymousGroup(size)

    name = record.get('name')
    if not isinstance(name, str) or not name.strip():
        raise ConfigurationError("All participants must have a name")
    name = name.strip()

    return Named(name, _parse_amount(record.get('spent', 0), name))

def _parse_headcount(headcount) -> int:
    if isinstance(headcount, bool):
        raise ConfigurationError(f"Invalid headcount: {headcount!r}")
    if isinstance(headcount, float):
        if not headcount.is_integer():
            raise ConfigurationError(f"Invalid headcount: {headcount!r}")
        return int(headcount)
    try:
        return int(headcount)
    except (ValueError, TypeError):
        raise ConfigurationError(f"Invalid headcount: {headcount!r}")

def build_participants(records: Iterable[Union[dict, Participant]], headcount) -> List[Participant]:
    """
    Build the participant list for one bill

    Anonymous groups, together with anyone counted in the headcount but not
    listed, are merged into a single group placed after the named people.
    """
    parsed = [
        record if isinstance(record, (Named, AnonymousGroup)) else parse_record(record)
        for record in records
    ]
    headcount = _parse_headcount(headcount)

    participants = [p for p in parsed if isinstance(p, Named)]
    seen = set()
    for participant in participants:
        key = identifier(participant)
        if key in seen:
            raise ConfigurationError(f"Participant '{key}' is listed more than once")
        seen.add(key)

    listed = total_people(parsed)
    if headcount < listed:
        raise ConfigurationError(
            f"The bill does not add up: {listed} people listed but headcount is {headcount}"
        )

    others_size = headcount - total_people(participants)
    if others_size:
        others = AnonymousGroup(others_size)
        if identifier(others) in seen:
            raise ConfigurationError(f"Participant '{identifier(others)}' is listed more than once")
        participants.append(others)

    return participants

def summarize(participants: List[Participant], transfers: List[Transfer]) -> SettlementSummary:
    """Totals for the bill and what each participant pays and receives"""
    people = total_people(participants)
    total_spent = sum((money_spent(p) for p in participants), Money.zero())
    amount_for_each = total_spent / people if people else Money.zero()

    to_pay = defaultdict(Money.zero)
    to_receive = defaultdict(Money.zero)
    for transfer in transfers:
        to_pay[identifier(transfer.payer)] += transfer.amount
        to_receive[identifier(transfer.payee)] += transfer.amount

    return SettlementSummary(
        total_spent=total_spent,
        total_people=people,
        amount_for_each=amount_for_each,
        participants=[
            ParticipantSummary(
                participant=p,
                spent=money_spent(p),
                total_to_pay=to_pay[identifier(p)],
                total_to_receive=to_receive[identifier(p)]
            )
            for p in participants
        ]
    )

def settle(participants: List[Participant], strategy: Optional[str] = None,
           strict: Optional[bool] = None) -> SettlementResult:
    """
    Settle a bill: build the naive transfers, reduce them and check the result

    If the reduced transfers fail the balance check, a strict build raises
    InternalInvariantViolation; otherwise the naive transfers are returned.
    """
    strategy = strategy or Config.DEFAULT_STRATEGY
    if strict is None:
        strict = Config.STRICT_VALIDATION

    naive_transfers = build_naive_transfers(participants)
    graph = SettlementGraph(naive_transfers)
    graph.optimize(strategy)
    transfers = graph.to_transfers()
    optimized = True

    drift = balance_drift(transfers, participants)
    if drift:
        details = ', '.join(f"{identifier(p)} off by {amount.to_decimal_string(4)}" for p, amount in drift)
        if strict:
            raise InternalInvariantViolation(f"Optimized settlement does not balance: {details}")

        print(f"Warning: optimized settlement does not balance ({details}), "
              f"using the unoptimized transfers", file=sys.stderr)
        graph = SettlementGraph(naive_transfers)
        transfers = graph.to_transfers()
        optimized = False

    return SettlementResult(
        transfers=transfers,
        naive_transfers=naive_transfers,
        graph=graph,
        summary=summarize(participants, transfers),
        optimized=optimized
    )

def format_report(result: SettlementResult) -> str:
    """Plain text report of a settlement"""
    summary = result.summary
    lines = [
        f"Total bill: {summary.total_spent}",
        f"    {summary.amount_for_each} for each of {summary.total_people} people"
    ]

    for p in summary.participants:
        lines.append("")
        lines.append(f"{identifier(p.participant)}:")
        lines.append(f"    spent: {p.spent}")
        lines.append(f"    total to pay: {p.total_to_pay}")
        lines.append(f"    total to receive: {p.total_to_receive}")

    lines.append("")
    lines.append("Transfers:")
    if not result.transfers:
        lines.append("    Everyone is settled up, no payments needed")
    for transfer in result.transfers:
        lines.append(f"    {identifier(transfer.payer)} pays {transfer.amount} -> {identifier(transfer.payee)}")

    return '\n'.join(lines)

def validate_settlement_data(data) -> Tuple[bool, str]:
    """
    Validate a settlement request body
    Returns (is_valid, error_message)
    """
    if not isinstance(data, dict):
        return False, "Request body must be a JSON object"

    if 'headcount' not in data:
        return False, "Headcount is required"

    participants = data.get('participants', [])
    if not isinstance(participants, list):
        return False, "Participants must be a list"

    if len(participants) > Config.MAX_PARTICIPANTS:
        return False, f"Number of participants cannot exceed {Config.MAX_PARTICIPANTS}"

    strategy = data.get('strategy')
    if strategy is not None and strategy not in STRATEGIES:
        return False, f"Strategy must be one of: {', '.join(STRATEGIES)}"

    return True, ""
