"""
Debt settlement engine.

A bill is first expanded into the naive "everyone owes every payer their
share" transfer list, loaded into a SettlementGraph, and then reduced to a
short list of transfers that leaves every participant with the same net
balance. The validator checks the result against an even split of the bill.
"""
import heapq
from collections import defaultdict
from typing import Dict, Iterable, List, Tuple

from exceptions import InternalInvariantViolation
from models import Participant, Transfer, identifier, money_spent, total_people, weight
from money import Money

STRATEGIES = ('greedy', 'pairwise')

# Validation tolerance, in currency units: per person, and the floor.
TOLERANCE_PER_PERSON = Money.from_decimal('0.0005')
MIN_TOLERANCE = Money.from_decimal('0.01')


def build_naive_transfers(participants: List[Participant]) -> List[Transfer]:
    """
    Everyone pays every participant who spent money their share of that spend.

    A creditor's spend is divided by the total number of people; each other
    participant owes that share once per person they stand for.
    """
    people = total_people(participants)
    transfers = []

    for creditor in participants:
        spent = money_spent(creditor)
        if spent <= Money.zero():
            continue

        share = spent / people
        for debtor in participants:
            if identifier(debtor) == identifier(creditor):
                continue
            amount = share * weight(debtor)
            if amount > Money.zero():
                transfers.append(Transfer(debtor, creditor, amount))

    return transfers


class SettlementGraph:
    """Directed graph of participants with one weighted edge per payer/payee pair"""

    def __init__(self, transfers: Iterable[Transfer] = ()):
        self._nodes: List[Participant] = []
        self._index: Dict[str, int] = {}
        self._edges: Dict[Tuple[int, int], Money] = {}

        for transfer in transfers:
            self.add_transfer(transfer)

    @classmethod
    def from_participants(cls, participants: List[Participant]) -> 'SettlementGraph':
        return cls(build_naive_transfers(participants))

    def add_node(self, participant: Participant) -> int:
        key = identifier(participant)
        index = self._index.get(key)
        if index is None:
            index = len(self._nodes)
            self._nodes.append(participant)
            self._index[key] = index
        elif self._nodes[index] != participant:
            raise ValueError(f"Two different participants are named '{key}'")
        return index

    def add_transfer(self, transfer: Transfer):
        """Add a transfer, summing it into any existing edge for the same pair"""
        source = self.add_node(transfer.payer)
        target = self.add_node(transfer.payee)
        self._add_edge(source, target, transfer.amount)

    def _add_edge(self, source: int, target: int, amount: Money):
        if source == target:
            raise ValueError(f"{identifier(self._nodes[source])} cannot pay themselves")
        key = (source, target)
        self._edges[key] = self._edges.get(key, Money.zero()) + amount

    def clear_edges(self):
        """Drop every edge; nodes keep their indices"""
        self._edges = {}

    def participants(self) -> List[Participant]:
        return list(self._nodes)

    def edge_count(self) -> int:
        return len(self._edges)

    def _net_balances(self) -> List[Money]:
        balances = [Money.zero()] * len(self._nodes)
        for (source, target), amount in self._edges.items():
            balances[source] -= amount
            balances[target] += amount
        return balances

    def balances(self) -> Dict[str, Money]:
        """Net balance per participant: positive is owed money, negative owes it"""
        return {
            identifier(participant): balance
            for participant, balance in zip(self._nodes, self._net_balances())
        }

    def optimize(self, strategy: str = 'greedy'):
        if strategy == 'greedy':
            self._settle_greedily()
        elif strategy == 'pairwise':
            self.net_opposing_edges()
        else:
            raise ValueError(f"Unknown settlement strategy '{strategy}', expected one of {', '.join(STRATEGIES)}")

    def _settle_greedily(self):
        """
        Replace the edges with transfers from the largest debtor to the
        largest creditor until every balance is zero.

        Heap entries are (-magnitude, identifier, index) so equal magnitudes
        settle in identifier order.
        """
        debtors = []
        creditors = []
        for index, balance in enumerate(self._net_balances()):
            key = identifier(self._nodes[index])
            if balance < Money.zero():
                heapq.heappush(debtors, (balance.units, key, index))
            elif balance > Money.zero():
                heapq.heappush(creditors, (-balance.units, key, index))

        settled = []
        while debtors and creditors:
            debt, debtor_key, debtor = heapq.heappop(debtors)
            credit, creditor_key, creditor = heapq.heappop(creditors)
            debt, credit = -debt, -credit

            amount = min(debt, credit)
            settled.append((debtor, creditor, Money(amount)))

            if debt > amount:
                heapq.heappush(debtors, (amount - debt, debtor_key, debtor))
            if credit > amount:
                heapq.heappush(creditors, (amount - credit, creditor_key, creditor))

        if debtors or creditors:
            left = [identifier(self._nodes[index]) for _, _, index in debtors + creditors]
            raise InternalInvariantViolation(f"Balances do not sum to zero, unsettled: {', '.join(left)}")

        self.clear_edges()
        for debtor, creditor, amount in settled:
            self._add_edge(debtor, creditor, amount)

    def net_opposing_edges(self):
        """
        Cancel mutual debts pair by pair.

        If A owes B 10 and B owes A 7, only A owes B 3 remains. Equal debts
        remove both edges.
        """
        for source, target in list(self._edges):
            forward = self._edges.get((source, target))
            backward = self._edges.get((target, source))
            if forward is None or backward is None:
                continue

            if forward > backward:
                self._edges[(source, target)] = forward - backward
                del self._edges[(target, source)]
            elif forward < backward:
                self._edges[(target, source)] = backward - forward
                del self._edges[(source, target)]
            else:
                del self._edges[(source, target)]
                del self._edges[(target, source)]

    def to_transfers(self) -> List[Transfer]:
        return [
            Transfer(self._nodes[source], self._nodes[target], amount)
            for (source, target), amount in self._edges.items()
        ]

    def to_dot(self) -> str:
        """Graphviz DOT description: nodes labelled by name, edges by amount"""
        lines = ['digraph {']
        for index, participant in enumerate(self._nodes):
            lines.append(f'    {index} [ label = "{_escape_label(identifier(participant))}" ]')
        for (source, target), amount in self._edges.items():
            lines.append(f'    {source} -> {target} [ label = "{amount.to_decimal_string()}" ]')
        lines.append('}')
        return '\n'.join(lines) + '\n'


def _escape_label(label: str) -> str:
    return label.replace('\\', '\\\\').replace('"', '\\"')


def tolerance(people: int) -> Money:
    """Largest accepted per-person drift: 0.0005 per person, at least one cent"""
    return max(TOLERANCE_PER_PERSON * people, MIN_TOLERANCE)


def balance_drift(transfers: List[Transfer], participants: List[Participant]) -> List[Tuple[Participant, Money]]:
    """
    Participants whose settled amount is off from an even split by more than
    the tolerance, with how far off they are.

    A participant's settled amount is what they spent plus what they pay,
    minus what they receive, per person they stand for.
    """
    people = total_people(participants)
    known = {identifier(p) for p in participants}
    paid = defaultdict(Money.zero)
    received = defaultdict(Money.zero)
    drifts = []

    for transfer in transfers:
        for participant in (transfer.payer, transfer.payee):
            if identifier(participant) not in known:
                drifts.append((participant, transfer.amount))
        paid[identifier(transfer.payer)] += transfer.amount
        received[identifier(transfer.payee)] += transfer.amount

    if not people:
        return drifts

    total_spent = sum((money_spent(p) for p in participants), Money.zero())
    amount_for_each = total_spent / people
    max_diff = tolerance(people)

    for participant in participants:
        key = identifier(participant)
        settled = (money_spent(participant) + paid[key] - received[key]) / weight(participant)
        drift = settled - amount_for_each
        if abs(drift) > max_diff:
            drifts.append((participant, drift))

    return drifts


def validate_settlement(transfers: List[Transfer], participants: List[Participant]) -> bool:
    """True when every participant ends up within tolerance of an even split"""
    return not balance_drift(transfers, participants)
