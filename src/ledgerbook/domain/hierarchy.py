"""Hierarchy resolver: chart-of-accounts trees and descendant sets."""

import logging
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from ledgerbook.domain.balances import LedgerDiagnostics
from ledgerbook.domain.entities import (
    Account,
    AccountClass,
    AccountNode,
    Transaction,
)
from ledgerbook.domain.errors import CyclicHierarchyError

logger = logging.getLogger(__name__)


def find_cycle(accounts: Sequence[Account]) -> Optional[list[str]]:
    """Return the ids forming a parent loop, or None if the chart is acyclic.

    The returned list starts and ends with the same id, e.g.
    ``["a", "b", "a"]``. Parent ids that do not resolve end a chain.
    """
    parents = {account.id: account.parent_id for account in accounts}
    finished: set[str] = set()

    for account in accounts:
        if account.id in finished:
            continue
        path: list[str] = []
        on_path: set[str] = set()
        current: Optional[str] = account.id
        while current is not None and current in parents and current not in finished:
            if current in on_path:
                start = path.index(current)
                return path[start:] + [current]
            path.append(current)
            on_path.add(current)
            current = parents[current]
        finished.update(path)

    return None


def ensure_acyclic(accounts: Sequence[Account]) -> None:
    """Raise CyclicHierarchyError if any parent chain loops."""
    cycle = find_cycle(accounts)
    if cycle is not None:
        logger.warning("Cyclic account hierarchy detected: %s", " -> ".join(cycle))
        raise CyclicHierarchyError(cycle)


def build_tree(
    accounts: Sequence[Account],
    transactions: Iterable[Transaction],
    diagnostics: Optional[LedgerDiagnostics] = None,
) -> dict[AccountClass, list[AccountNode]]:
    """Build the account forest with Dr-positive balances.

    Args:
        accounts: Full chart of accounts
        transactions: Transactions to attribute (full or pre-windowed)
        diagnostics: Optional collector for postings to unknown accounts

    Returns:
        Root nodes per account class, sorted by code. Every class is present.

    Raises:
        CyclicHierarchyError: If parent links form a loop
    """
    ensure_acyclic(accounts)

    nodes: dict[str, AccountNode] = {}
    for account in accounts:
        nodes[account.id] = AccountNode(account=account)

    for txn in transactions:
        debited = nodes.get(txn.account_id)
        if debited is not None:
            debited.direct_balance += txn.amount
        elif diagnostics is not None:
            diagnostics.record(txn.account_id)

        if txn.payment_account_id:
            credited = nodes.get(txn.payment_account_id)
            if credited is not None:
                credited.direct_balance -= txn.amount
            elif diagnostics is not None:
                diagnostics.record(txn.payment_account_id)

    roots: dict[AccountClass, list[AccountNode]] = {cls: [] for cls in AccountClass}
    for account in accounts:
        node = nodes[account.id]
        parent = nodes.get(account.parent_id) if account.parent_id else None
        if parent is not None:
            parent.children.append(node)
        else:
            roots[account.account_class].append(node)

    for class_roots in roots.values():
        class_roots.sort(key=lambda n: n.code)
        _aggregate(class_roots)

    if diagnostics is not None and diagnostics.has_orphans:
        logger.debug(
            "Ignored %d posting(s) to unknown accounts while building tree",
            diagnostics.orphaned_postings,
        )

    return roots


def _aggregate(roots: list[AccountNode]) -> None:
    """Set total balances bottom-up and order children by code."""
    for node, _ in reversed(walk_tree(roots)):
        node.children.sort(key=lambda n: n.code)
        child_sum = sum((child.total_balance for child in node.children), Decimal("0"))
        node.total_balance = node.direct_balance + child_sum


def walk_tree(nodes: Iterable[AccountNode], depth: int = 0) -> list[tuple[AccountNode, int]]:
    """Return ``(node, depth)`` pairs in pre-order.

    Uses an explicit stack, so deep charts do not hit the recursion limit.
    """
    result: list[tuple[AccountNode, int]] = []
    stack = [(node, depth) for node in reversed(list(nodes))]
    while stack:
        node, level = stack.pop()
        result.append((node, level))
        stack.extend((child, level + 1) for child in reversed(node.children))
    return result


def get_all_descendant_ids(root_id: str, accounts: Sequence[Account]) -> set[str]:
    """Return ``root_id`` plus the ids of every account beneath it.

    Raises:
        CyclicHierarchyError: If the subtree under ``root_id`` loops
    """
    children_map: dict[str, list[str]] = {}
    for account in accounts:
        if account.parent_id is not None:
            children_map.setdefault(account.parent_id, []).append(account.id)

    # Each account has one parent, so a loop reachable from the root must
    # lead back to the root itself.
    reached_from: dict[str, str] = {}
    descendant_ids = {root_id}
    pending = [root_id]
    while pending:
        parent_id = pending.pop()
        for child_id in children_map.get(parent_id, []):
            if child_id == root_id:
                path = [parent_id]
                while path[-1] != root_id:
                    path.append(reached_from[path[-1]])
                path.reverse()
                raise CyclicHierarchyError(path + [root_id])
            if child_id in descendant_ids:
                continue
            descendant_ids.add(child_id)
            reached_from[child_id] = parent_id
            pending.append(child_id)
    return descendant_ids


def flatten_tree(nodes: Iterable[AccountNode]) -> list[AccountNode]:
    """Return nodes in pre-order (parent before its children)."""
    return [node for node, _ in walk_tree(nodes)]


def find_node(nodes: Iterable[AccountNode], account_id: str) -> Optional[AccountNode]:
    """Find a node anywhere in a forest by account id."""
    for node, _ in walk_tree(nodes):
        if node.id == account_id:
            return node
    return None
