"""
Condition tree models, builder and codec.

This module provides the data structures for authoring entry/exit
conditions of a strategy as nested ALL/ANY groups of factor comparisons.
"""

from .models import (
    SCHEMA_VERSION,
    GroupMode,
    Operator,
    ValueType,
    ConditionRule,
    ConditionGroup,
    ConditionTree,
    default_tree,
)
from .errors import (
    ConditionTreeError,
    PathNotFoundError,
    IndexOutOfRangeError,
    InvalidModeError,
    InvalidFieldError,
    InvalidFieldValueError,
    MalformedDocumentError,
)
from .catalog import (
    ConditionCatalog,
    REFERENCE_CATALOG,
    catalog_from_settings,
)
from .builder import (
    TreeBuilder,
    create_tree_builder,
    resolve_group,
    walk_groups,
    iter_rules,
)
from .serialization import (
    serialize_tree,
    deserialize_tree,
    load_condition,
    validate_condition_json,
    tree_to_dict,
    tree_from_dict,
)
from .payload import (
    StrategyConditionParams,
    build_condition_params,
    read_condition_params,
)
from .session import ConditionEditSession

__all__ = [
    # Enums
    'SCHEMA_VERSION',
    'GroupMode',
    'Operator',
    'ValueType',
    # Models
    'ConditionRule',
    'ConditionGroup',
    'ConditionTree',
    'default_tree',
    # Errors
    'ConditionTreeError',
    'PathNotFoundError',
    'IndexOutOfRangeError',
    'InvalidModeError',
    'InvalidFieldError',
    'InvalidFieldValueError',
    'MalformedDocumentError',
    # Catalog
    'ConditionCatalog',
    'REFERENCE_CATALOG',
    'catalog_from_settings',
    # Builder
    'TreeBuilder',
    'create_tree_builder',
    'resolve_group',
    'walk_groups',
    'iter_rules',
    # Serialization
    'serialize_tree',
    'deserialize_tree',
    'load_condition',
    'validate_condition_json',
    'tree_to_dict',
    'tree_from_dict',
    # Strategy payload
    'StrategyConditionParams',
    'build_condition_params',
    'read_condition_params',
    # Session
    'ConditionEditSession',
]
