"""
Serialization utilities for condition trees.

Converts trees to and from their canonical JSON document. Keys are written
in a fixed order: version, mode, rules, groups for groups and factor,
operator, value, type, nullable for rules.
"""

import json
from typing import Any, Dict, Optional, Tuple

from pydantic import ValidationError

from strategy_conditions.config.settings import get_settings
from strategy_conditions.utils.logger import get_logger
from .errors import MalformedDocumentError
from .models import ConditionTree


logger = get_logger(__name__)


def tree_to_dict(tree: ConditionTree) -> Dict[str, Any]:
    """Convert a tree to a plain dict in canonical key order."""
    return tree.model_dump(mode='json')


def tree_from_dict(data: Dict[str, Any]) -> ConditionTree:
    """
    Create a tree from a plain dict.

    Missing version, mode, rules and groups take their defaults; unknown
    keys are ignored.

    Raises:
        MalformedDocumentError: If the data does not have the shape of a tree
    """
    if not isinstance(data, dict):
        raise MalformedDocumentError(
            f"Condition document must be a JSON object, got {type(data).__name__}"
        )
    try:
        return ConditionTree.model_validate(data)
    except ValidationError as e:
        raise MalformedDocumentError(f"Invalid condition document: {e}") from e
    except RecursionError as e:
        raise MalformedDocumentError("Condition document is nested too deeply") from e


def serialize_tree(tree: ConditionTree, pretty: Optional[bool] = None) -> str:
    """
    Convert a tree to its JSON text.

    Args:
        tree: Tree to serialize
        pretty: Indent the output; the codec setting is used when None

    Returns:
        JSON string representation
    """
    codec = get_settings().codec
    if pretty is None:
        pretty = codec.pretty

    tree_dict = tree_to_dict(tree)
    if pretty:
        return json.dumps(tree_dict, indent=codec.indent, ensure_ascii=codec.ensure_ascii)
    return json.dumps(tree_dict, ensure_ascii=codec.ensure_ascii)


def deserialize_tree(text: str) -> ConditionTree:
    """
    Parse JSON text into a tree.

    Args:
        text: JSON document

    Returns:
        ConditionTree object

    Raises:
        MalformedDocumentError: If the text is not JSON or not a tree object
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError, RecursionError) as e:
        raise MalformedDocumentError(f"Invalid JSON: {e}") from e

    return tree_from_dict(data)


def load_condition(text: Optional[str]) -> ConditionTree:
    """
    Open a stored condition document for editing.

    A missing or blank document starts from the default tree.
    """
    if text is None or not text.strip():
        logger.debug("No stored condition, starting from default tree")
        return ConditionTree.default()
    return deserialize_tree(text)


def validate_condition_json(text: str) -> Tuple[bool, Optional[str], Optional[ConditionTree]]:
    """
    Validate a JSON string as a condition document.

    Returns:
        Tuple of (is_valid, error_message, tree)
        If valid: (True, None, ConditionTree)
        If invalid: (False, error_message, None)
    """
    try:
        return True, None, deserialize_tree(text)
    except MalformedDocumentError as e:
        return False, str(e), None


serialize = serialize_tree
deserialize = deserialize_tree
