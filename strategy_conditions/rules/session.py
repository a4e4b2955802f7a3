"""
Editing session for a single condition tree.

Holds the authoritative tree while an editor is open. Edits go through the
TreeBuilder; each successful edit pushes the previous tree onto the undo
history. A failed edit raises and leaves both the tree and the history as
they were.
"""

from typing import Any, Callable, List, Optional

from strategy_conditions.utils.logger import get_logger
from .builder import TreeBuilder
from .models import ConditionRule, ConditionTree
from .serialization import load_condition, serialize_tree


logger = get_logger(__name__)


class ConditionEditSession:
    """Owns the current tree of one editor, with undo/redo."""

    def __init__(
        self,
        tree: Optional[ConditionTree] = None,
        builder: Optional[TreeBuilder] = None,
        history_limit: int = 100,
    ):
        self.tree = tree if tree is not None else ConditionTree.default()
        self.builder = builder or TreeBuilder()
        self.history_limit = history_limit
        self._undo: List[ConditionTree] = []
        self._redo: List[ConditionTree] = []

    @classmethod
    def from_document(cls, text: Optional[str], builder: Optional[TreeBuilder] = None) -> "ConditionEditSession":
        """Open a session on a stored document (None or blank starts empty)."""
        return cls(load_condition(text), builder=builder)

    def _apply(self, op: Callable[..., ConditionTree], *args, **kwargs) -> ConditionTree:
        new_tree = op(self.tree, *args, **kwargs)
        self._undo.append(self.tree)
        if len(self._undo) > self.history_limit:
            del self._undo[0]
        self._redo.clear()
        self.tree = new_tree
        return new_tree

    def add_rule(self, path=(), rule: Optional[ConditionRule] = None, **fields) -> ConditionTree:
        return self._apply(self.builder.add_rule, path, rule, **fields)

    def remove_rule(self, path, rule_index: int) -> ConditionTree:
        return self._apply(self.builder.remove_rule, path, rule_index)

    def add_group(self, path=(), mode="ALL") -> ConditionTree:
        return self._apply(self.builder.add_group, path, mode)

    def remove_group(self, path=(), group_index: Optional[int] = None) -> ConditionTree:
        return self._apply(self.builder.remove_group, path, group_index)

    def set_mode(self, path, mode) -> ConditionTree:
        return self._apply(self.builder.set_mode, path, mode)

    def update_rule_field(self, path, rule_index: int, field: str, value: Any) -> ConditionTree:
        return self._apply(self.builder.update_rule_field, path, rule_index, field, value)

    def reset(self) -> ConditionTree:
        """Clear the tree back to an empty default (undoable)."""
        return self.remove_group((), None)

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def undo(self) -> bool:
        """Restore the previous tree. Returns False if there is nothing to undo."""
        if not self._undo:
            return False
        self._redo.append(self.tree)
        self.tree = self._undo.pop()
        return True

    def redo(self) -> bool:
        """Re-apply the last undone edit. Returns False if there is nothing to redo."""
        if not self._redo:
            return False
        self._undo.append(self.tree)
        self.tree = self._redo.pop()
        return True

    def commit(self, pretty: Optional[bool] = None) -> str:
        """Serialize the current tree for persistence."""
        text = serialize_tree(self.tree, pretty=pretty)
        logger.info("Committed condition tree: %s", self.tree.to_display_string())
        return text
