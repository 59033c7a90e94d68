"""Tests for the hierarchy resolver."""

from datetime import datetime
from decimal import Decimal

import pytest

from ledgerbook.domain.balances import LedgerDiagnostics
from ledgerbook.domain.chart import DEFAULT_ACCOUNTS
from ledgerbook.domain.entities import (
    Account,
    AccountClass,
    AccountLevel,
    Transaction,
)
from ledgerbook.domain.errors import CyclicHierarchyError
from ledgerbook.domain.hierarchy import (
    build_tree,
    find_cycle,
    find_node,
    flatten_tree,
    get_all_descendant_ids,
)
from ledgerbook.domain.reports import tree_lines


def _account(account_id, code, parent_id=None, account_class=AccountClass.ASSETS, is_posting=True):
    return Account(
        id=account_id,
        code=code,
        name=account_id.title(),
        account_class=account_class,
        level=AccountLevel.GL if is_posting else AccountLevel.GROUP,
        normal_balance=account_class.default_normal_balance,
        is_posting=is_posting,
        parent_id=parent_id,
    )


def _txn(amount, debit, credit=None, day=1):
    return Transaction(
        id=f"{debit}-{credit}-{amount}-{day}",
        date=datetime(2024, 1, day),
        amount=Decimal(amount),
        account_id=debit,
        payment_account_id=credit,
    )


@pytest.fixture
def small_chart():
    return [
        _account("cash_group", "11100", is_posting=False),
        _account("bank", "11110", "cash_group"),
        _account("petty", "11120", "cash_group"),
        _account("salary", "42100", account_class=AccountClass.REVENUE),
        _account("groceries", "60200", account_class=AccountClass.EXPENSES),
    ]


class TestBuildTree:
    """Tests for build_tree."""

    def test_every_class_present(self):
        tree = build_tree([], [])
        assert set(tree) == set(AccountClass)
        assert all(roots == [] for roots in tree.values())

    def test_group_total_is_sum_of_children(self, small_chart):
        transactions = [
            _txn("15000", "bank", "salary"),
            _txn("450.50", "groceries", "bank"),
            _txn("200", "petty", "bank"),
        ]
        tree = build_tree(small_chart, transactions)

        group = find_node(tree[AccountClass.ASSETS], "cash_group")
        assert group.direct_balance == Decimal("0")
        assert find_node(group.children, "bank").total_balance == Decimal("14349.50")
        assert find_node(group.children, "petty").total_balance == Decimal("200")
        assert group.total_balance == Decimal("14549.50")

    def test_aggregation_holds_for_every_node(self, small_chart):
        transactions = [_txn("10", "bank", "salary"), _txn("3", "groceries", "petty")]
        tree = build_tree(small_chart, transactions)

        for node in flatten_tree(n for roots in tree.values() for n in roots):
            expected = node.direct_balance + sum(c.total_balance for c in node.children)
            assert node.total_balance == expected

    def test_roots_and_children_sorted_by_code(self):
        accounts = [
            _account("z_group", "11900", is_posting=False),
            _account("b", "11920", "z_group"),
            _account("a", "11910", "z_group"),
            _account("first", "11000"),
        ]
        tree = build_tree(accounts, [])
        roots = tree[AccountClass.ASSETS]

        assert [n.code for n in roots] == ["11000", "11900"]
        assert [c.code for c in roots[1].children] == ["11910", "11920"]

    def test_unresolvable_parent_becomes_root(self):
        accounts = [_account("lost", "11500", parent_id="missing")]
        tree = build_tree(accounts, [])
        assert [n.id for n in tree[AccountClass.ASSETS]] == ["lost"]

    def test_double_entry_identity(self, small_chart):
        transactions = [
            _txn("15000", "bank", "salary"),
            _txn("450.50", "groceries", "bank"),
            _txn("75.25", "petty", "bank", day=2),
        ]
        tree = build_tree(small_chart, transactions)

        total = sum(node.total_balance for roots in tree.values() for node in roots)
        assert total == Decimal("0")

    def test_orphan_postings_are_ignored_and_counted(self, small_chart):
        diagnostics = LedgerDiagnostics()
        tree = build_tree(
            small_chart,
            [_txn("100", "bank", "ghost"), _txn("5", "phantom", "bank")],
            diagnostics=diagnostics,
        )

        assert find_node(tree[AccountClass.ASSETS], "bank").direct_balance == Decimal("95")
        assert diagnostics.orphaned_postings == 2
        assert diagnostics.missing_account_ids == {"ghost", "phantom"}

    def test_single_sided_posting(self, small_chart):
        tree = build_tree(small_chart, [_txn("40", "bank")])
        assert find_node(tree[AccountClass.ASSETS], "bank").direct_balance == Decimal("40")

    def test_deterministic(self, small_chart):
        transactions = [_txn("10", "bank", "salary"), _txn("3", "groceries", "petty")]
        first = build_tree(small_chart, transactions)
        second = build_tree(list(reversed(small_chart)), list(reversed(transactions)))

        def shape(tree):
            return [
                (n.id, n.direct_balance, n.total_balance)
                for roots in tree.values()
                for n in flatten_tree(roots)
            ]

        assert shape(first) == shape(second)

    def test_default_chart_builds(self):
        tree = build_tree(DEFAULT_ACCOUNTS, [])
        assert [n.id for n in tree[AccountClass.ASSETS]] == ["10000"]
        assert find_node(tree[AccountClass.ASSETS], "asset_bank_main") is not None


class TestCycles:
    """Tests for cycle detection."""

    def test_find_cycle_none_for_tree(self, small_chart):
        assert find_cycle(small_chart) is None

    def test_find_cycle_reports_loop(self):
        accounts = [_account("a", "1", "b"), _account("b", "2", "a"), _account("c", "3")]
        cycle = find_cycle(accounts)
        assert cycle[0] == cycle[-1]
        assert set(cycle) == {"a", "b"}

    def test_build_tree_rejects_cycle(self):
        accounts = [_account("a", "1", "b"), _account("b", "2", "a")]
        with pytest.raises(CyclicHierarchyError) as excinfo:
            build_tree(accounts, [])
        assert "cycle" in str(excinfo.value)
        assert set(excinfo.value.cycle) == {"a", "b"}

    def test_self_parent_is_cycle(self):
        with pytest.raises(CyclicHierarchyError):
            build_tree([_account("a", "1", "a")], [])


class TestDescendants:
    """Tests for get_all_descendant_ids."""

    def test_includes_root_and_all_levels(self):
        accounts = [
            _account("root", "1", is_posting=False),
            _account("mid", "2", "root", is_posting=False),
            _account("leaf", "3", "mid"),
            _account("other", "4"),
        ]
        assert get_all_descendant_ids("root", accounts) == {"root", "mid", "leaf"}

    def test_leaf_returns_itself(self, small_chart):
        assert get_all_descendant_ids("bank", small_chart) == {"bank"}

    def test_unknown_root_returns_itself(self, small_chart):
        assert get_all_descendant_ids("nope", small_chart) == {"nope"}

    def test_matches_tree_descendants(self):
        tree = build_tree(DEFAULT_ACCOUNTS, [])
        node = find_node(tree[AccountClass.ASSETS], "11000")
        from_tree = {n.id for n in flatten_tree([node])}
        assert get_all_descendant_ids("11000", DEFAULT_ACCOUNTS) == from_tree

    def test_cycle_under_root_raises(self):
        accounts = [_account("a", "1", "b"), _account("b", "2", "a")]
        with pytest.raises(CyclicHierarchyError) as excinfo:
            get_all_descendant_ids("a", accounts)
        assert excinfo.value.cycle == ["a", "b", "a"]


def _chain(depth):
    """Accounts n0 <- n1 <- ... each parented by the one before."""
    accounts = [_account("n0", "00000", is_posting=False)]
    for i in range(1, depth):
        accounts.append(_account(f"n{i}", f"{i:05d}", f"n{i - 1}"))
    return accounts


class TestDeepHierarchy:
    """Charts deeper than the interpreter's recursion limit."""

    DEPTH = 3000

    def test_build_tree_rolls_up_deep_chain(self):
        accounts = _chain(self.DEPTH)
        leaf = f"n{self.DEPTH - 1}"

        tree = build_tree(accounts, [_txn("5", leaf)])

        root = tree[AccountClass.ASSETS][0]
        assert root.id == "n0"
        assert root.total_balance == Decimal("5")
        assert find_node([root], leaf).direct_balance == Decimal("5")
        assert len(flatten_tree([root])) == self.DEPTH

    def test_descendants_of_deep_chain(self):
        assert len(get_all_descendant_ids("n0", _chain(self.DEPTH))) == self.DEPTH

    def test_tree_lines_keep_depth(self):
        tree = build_tree(_chain(self.DEPTH), [])
        lines = tree_lines(tree[AccountClass.ASSETS], AccountClass.ASSETS, include_zero=True)
        assert lines[-1].depth == self.DEPTH - 1
