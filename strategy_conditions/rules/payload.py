"""
Strategy parameter fields carrying condition documents.

Strategies store their entry and exit conditions as opaque JSON strings
next to other parameters. These helpers produce and read those two fields.
"""

from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .models import ConditionTree
from .serialization import load_condition, serialize_tree


class StrategyConditionParams(BaseModel):
    """The entryCondition/exitCondition pair of a strategy parameter payload."""
    entry_condition: Optional[str] = Field(None, alias="entryCondition")
    exit_condition: Optional[str] = Field(None, alias="exitCondition")

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    def to_payload(self) -> Dict[str, Optional[str]]:
        """Camel-case dict to merge into a strategy create/update request."""
        return self.model_dump(by_alias=True)

    def entry_tree(self) -> ConditionTree:
        return load_condition(self.entry_condition)

    def exit_tree(self) -> ConditionTree:
        return load_condition(self.exit_condition)


def _as_document(tree: Optional[ConditionTree]) -> Optional[str]:
    # Empty conditions are sent as null
    if tree is None or tree.is_empty():
        return None
    return serialize_tree(tree, pretty=False)


def build_condition_params(
    entry: Optional[ConditionTree] = None,
    exit: Optional[ConditionTree] = None,
) -> StrategyConditionParams:
    """
    Serialize entry and exit trees for submission.

    Args:
        entry: Entry condition tree
        exit: Exit condition tree

    Returns:
        StrategyConditionParams with JSON text, or None for absent/empty trees
    """
    return StrategyConditionParams(
        entry_condition=_as_document(entry),
        exit_condition=_as_document(exit),
    )


def read_condition_params(payload: Mapping[str, Any]) -> Tuple[ConditionTree, ConditionTree]:
    """
    Read the entry and exit trees from a stored strategy parameter payload.

    Absent or blank documents yield default trees.

    Raises:
        MalformedDocumentError: If a stored document cannot be parsed
    """
    params = StrategyConditionParams.model_validate(dict(payload))
    return params.entry_tree(), params.exit_tree()
