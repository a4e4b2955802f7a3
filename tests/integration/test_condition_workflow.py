"""
Integration Tests: Condition Authoring Workflow

Tests the complete workflow of opening a stored condition, editing it in a
session, committing it, and attaching it to a strategy parameter payload.
"""

import json

import pytest

from strategy_conditions.rules import (
    ConditionEditSession,
    ConditionTree,
    IndexOutOfRangeError,
    InvalidModeError,
    MalformedDocumentError,
    StrategyConditionParams,
    TreeBuilder,
    build_condition_params,
    deserialize_tree,
    read_condition_params,
    serialize_tree,
)


STORED_ENTRY = json.dumps({
    "version": "1.0",
    "mode": "ALL",
    "rules": [
        {"factor": "SIG.DIRECTION", "operator": "EQ", "value": "LONG", "type": "STRING", "nullable": False},
    ],
    "groups": [
        {
            "mode": "ANY",
            "rules": [
                {"factor": "IND.RSI_14", "operator": "LT", "value": "30", "type": "NUMBER", "nullable": False},
                {"factor": "IND.MACD", "operator": "GT", "value": "0", "type": "NUMBER", "nullable": True},
            ],
            "groups": [],
        },
    ],
})


class TestEditSession:
    """Test editing a tree through a session."""

    def test_new_session_starts_empty(self):
        session = ConditionEditSession()

        assert session.tree == ConditionTree.default()
        assert not session.can_undo
        assert not session.can_redo

    def test_build_entry_condition(self):
        session = ConditionEditSession()
        session.add_rule((), factor="SIG.DIRECTION", operator="EQ", value="LONG", type="STRING")
        session.add_group((), "ANY")
        session.add_rule((0,), factor="IND.RSI_14", value="30")
        session.add_rule((0,), factor="IND.MACD", operator="GT", value="0")
        session.update_rule_field((0,), 1, "nullable", True)

        assert session.tree == deserialize_tree(STORED_ENTRY)

    def test_open_stored_document(self):
        session = ConditionEditSession.from_document(STORED_ENTRY)

        assert session.tree.rule_count() == 3
        assert session.tree.groups[0].mode == "ANY"

    def test_open_absent_document(self):
        assert ConditionEditSession.from_document(None).tree == ConditionTree.default()

    def test_open_malformed_document(self):
        with pytest.raises(MalformedDocumentError):
            ConditionEditSession.from_document("{not json")

    def test_undo_redo(self):
        session = ConditionEditSession.from_document(STORED_ENTRY)
        original = session.tree

        session.set_mode((0,), "ALL")
        session.remove_rule((0,), 0)
        edited = session.tree

        assert session.undo() is True
        assert session.undo() is True
        assert session.tree == original
        assert session.undo() is False

        assert session.redo() is True
        assert session.redo() is True
        assert session.tree == edited
        assert session.redo() is False

    def test_new_edit_clears_redo(self):
        session = ConditionEditSession()
        session.add_group()
        session.undo()
        assert session.can_redo

        session.add_rule()
        assert not session.can_redo

    def test_failed_edit_keeps_state(self):
        session = ConditionEditSession.from_document(STORED_ENTRY)
        before = session.tree

        with pytest.raises(InvalidModeError):
            session.set_mode((), "BAD")
        with pytest.raises(IndexOutOfRangeError):
            session.remove_rule((), 5)

        assert session.tree == before
        assert not session.can_undo

    def test_reset_is_undoable(self):
        session = ConditionEditSession.from_document(STORED_ENTRY)
        before = session.tree

        session.reset()
        assert session.tree == ConditionTree.default()

        session.undo()
        assert session.tree == before

    def test_remove_group_with_contents(self):
        session = ConditionEditSession.from_document(STORED_ENTRY)
        session.remove_group((), 0)

        assert session.tree.groups == ()
        assert session.tree.rule_count() == 1

    def test_history_limit(self):
        session = ConditionEditSession(history_limit=2)
        for _ in range(5):
            session.add_rule()

        assert session.undo() and session.undo()
        assert not session.undo()
        assert len(session.tree.rules) == 3

    def test_commit_round_trips(self):
        session = ConditionEditSession.from_document(STORED_ENTRY)
        session.add_group((0,))
        session.add_rule((0, 0), factor="PX.LAST", operator="GT", value="100")

        text = session.commit()

        assert deserialize_tree(text) == session.tree

    def test_custom_builder(self):
        from strategy_conditions.rules.catalog import ConditionCatalog

        builder = TreeBuilder(ConditionCatalog(factors={"BAR.CLOSE": "Close"}))
        session = ConditionEditSession(builder=builder)
        session.add_rule()

        assert session.tree.rules[0].factor == "BAR.CLOSE"


class TestStrategyPayload:
    """Test attaching conditions to strategy parameters."""

    def test_build_payload(self):
        entry = deserialize_tree(STORED_ENTRY)
        params = build_condition_params(entry=entry)
        payload = params.to_payload()

        assert set(payload) == {"entryCondition", "exitCondition"}
        assert payload["exitCondition"] is None
        assert deserialize_tree(payload["entryCondition"]) == entry
        assert "\n" not in payload["entryCondition"]

    def test_empty_tree_sent_as_null(self):
        params = build_condition_params(entry=ConditionTree.default(), exit=None)
        assert params.to_payload() == {"entryCondition": None, "exitCondition": None}

    def test_read_payload(self):
        exit_tree = TreeBuilder().add_rule(
            ConditionTree.default(), (), factor="STATE.STOP_LOSS_PRICE", operator="GTE", value="PX.LAST"
        )
        payload = {
            "strategyId": 7,
            "entryCondition": STORED_ENTRY,
            "exitCondition": serialize_tree(exit_tree),
        }

        entry, exit_ = read_condition_params(payload)

        assert entry == deserialize_tree(STORED_ENTRY)
        assert exit_ == exit_tree

    def test_read_payload_missing_fields(self):
        entry, exit_ = read_condition_params({"entryCondition": "  "})

        assert entry == ConditionTree.default()
        assert exit_ == ConditionTree.default()

    def test_read_payload_malformed(self):
        with pytest.raises(MalformedDocumentError):
            read_condition_params({"entryCondition": "not json"})

    def test_populate_by_field_name(self):
        params = StrategyConditionParams(entry_condition='{"mode":"ANY"}')

        assert params.entry_tree().mode == "ANY"
        assert params.exit_tree() == ConditionTree.default()

    def test_session_to_payload(self):
        session = ConditionEditSession()
        session.add_rule((), factor="PX.LAST", operator="GT", value="100")

        payload = build_condition_params(entry=session.tree).to_payload()

        assert json.loads(payload["entryCondition"])["rules"][0]["factor"] == "PX.LAST"
