"""Shared fixtures for condition tree tests."""

from __future__ import annotations

import pytest

from strategy_conditions.rules.builder import TreeBuilder
from strategy_conditions.rules.models import ConditionRule, ConditionTree


@pytest.fixture
def builder():
    """Builder using the reference catalog."""
    return TreeBuilder()


@pytest.fixture
def empty_tree():
    return ConditionTree.default()


@pytest.fixture
def rsi_rule():
    """RSI oversold rule."""
    return ConditionRule(
        factor="IND.RSI_14",
        operator="LT",
        value="30",
        type="NUMBER",
        nullable=False,
    )


@pytest.fixture
def nested_tree(builder, rsi_rule):
    """
    ALL(IND.RSI_14 LT 30, ANY(BAR.CLOSE GT 100, ALL(SIG.DIRECTION EQ "LONG")))
    """
    tree = ConditionTree.default()
    tree = builder.add_rule(tree, (), rsi_rule)
    tree = builder.add_group(tree, (), mode="ANY")
    tree = builder.add_rule(tree, (0,), factor="BAR.CLOSE", operator="GT", value="100")
    tree = builder.add_group(tree, (0,))
    tree = builder.add_rule(
        tree, (0, 0), factor="SIG.DIRECTION", operator="EQ", value="LONG", type="STRING"
    )
    return tree
