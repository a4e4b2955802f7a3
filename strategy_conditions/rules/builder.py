"""
Path-addressed mutations on condition trees.

A path is a sequence of group indices descending from the root: ``()`` is
the root itself, ``(0,)`` its first child group, ``(0, 2)`` the third child
of that group, and so on. Every operation validates its path, indices and
arguments before building anything, then returns a new tree. The input tree
is never modified, so callers can keep old trees for undo.
"""

from typing import Any, Callable, Iterator, Optional, Sequence, Tuple, TYPE_CHECKING, Union

from strategy_conditions.utils.logger import get_logger
from .catalog import ConditionCatalog, REFERENCE_CATALOG, catalog_from_settings
from .errors import (
    IndexOutOfRangeError,
    InvalidFieldError,
    InvalidFieldValueError,
    InvalidModeError,
    PathNotFoundError,
)
from .models import (
    RULE_FIELDS,
    ConditionGroup,
    ConditionRule,
    ConditionTree,
    GroupLike,
    GroupMode,
)

if TYPE_CHECKING:
    from strategy_conditions.config.settings import Settings


logger = get_logger(__name__)

Path = Sequence[int]


def _is_index(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def resolve_group(tree: ConditionTree, path: Path = ()) -> GroupLike:
    """
    Return the group addressed by ``path``.

    Raises:
        PathNotFoundError: If any step is not a valid child group index
    """
    node: GroupLike = tree
    for step in path:
        if not _is_index(step) or step >= len(node.groups):
            raise PathNotFoundError(path)
        node = node.groups[step]
    return node


def walk_groups(tree: ConditionTree) -> Iterator[Tuple[Tuple[int, ...], GroupLike]]:
    """Yield ``(path, group)`` for every group, depth-first, root first."""
    stack = [((), tree)]
    while stack:
        path, node = stack.pop()
        yield path, node
        for i in reversed(range(len(node.groups))):
            stack.append((path + (i,), node.groups[i]))


def iter_rules(tree: ConditionTree) -> Iterator[Tuple[Tuple[int, ...], int, ConditionRule]]:
    """Yield ``(group_path, rule_index, rule)`` for every rule in the tree."""
    for path, group in walk_groups(tree):
        for index, rule in enumerate(group.rules):
            yield path, index, rule


def _replace_group(node: GroupLike, path: Tuple[int, ...], fn: Callable[[GroupLike], GroupLike]) -> GroupLike:
    """Rebuild the spine from ``node`` down to ``path`` with ``fn`` applied at the end."""
    if not path:
        return fn(node)
    index = path[0]
    child = _replace_group(node.groups[index], path[1:], fn)
    groups = node.groups[:index] + (child,) + node.groups[index + 1:]
    return node.model_copy(update={"groups": groups})


def _check_index(kind: str, index: Any, size: int, path: Path) -> None:
    if not _is_index(index) or index >= size:
        raise IndexOutOfRangeError(kind, index, size, path)


def _check_field_value(field: str, value: Any) -> None:
    if field == "nullable":
        if not isinstance(value, bool):
            raise InvalidFieldValueError(field, value, "bool")
    elif not isinstance(value, str):
        raise InvalidFieldValueError(field, value, "str")


class TreeBuilder:
    """
    Structural edits on a ConditionTree.

    The builder keeps no tree state of its own; the catalog only supplies
    defaults for new rules.

    Example:
        builder = TreeBuilder()
        tree = ConditionTree.default()
        tree = builder.add_group(tree, (), mode="ANY")
        tree = builder.add_rule(tree, (0,), factor="IND.RSI_14", value="30")
    """

    def __init__(self, catalog: Optional[ConditionCatalog] = None):
        self.catalog = catalog or REFERENCE_CATALOG

    def new_rule(self, **fields) -> ConditionRule:
        """
        Create a rule, filling unspecified fields from the catalog defaults.

        Defaults: first catalog factor, LT, empty value, NUMBER, not nullable.
        """
        for name in fields:
            if name not in RULE_FIELDS:
                raise InvalidFieldError(name, RULE_FIELDS)
        data = {
            "factor": self.catalog.default_factor,
            "operator": self.catalog.default_operator,
            "value": "",
            "type": self.catalog.default_value_type,
            "nullable": False,
        }
        data.update(fields)
        return ConditionRule(**data)

    def add_rule(
        self,
        tree: ConditionTree,
        path: Path = (),
        rule: Optional[Union[ConditionRule, dict]] = None,
        **fields,
    ) -> ConditionTree:
        """
        Append a rule to the group at ``path``.

        Args:
            tree: Tree to edit
            path: Target group path, () for the root
            rule: Rule (or rule dict) to append; built from ``fields`` and
                catalog defaults when None

        Raises:
            PathNotFoundError: If ``path`` does not resolve
            InvalidFieldError: If ``fields`` names an unknown rule field
        """
        resolve_group(tree, path)
        if rule is None:
            rule = self.new_rule(**fields)
        elif isinstance(rule, dict):
            rule = self.new_rule(**{**rule, **fields})
        elif fields:
            rule = self.new_rule(**{**rule.model_dump(), **fields})

        result = _replace_group(
            tree, tuple(path), lambda g: g.model_copy(update={"rules": g.rules + (rule,)})
        )
        logger.debug("Added rule %s at %s", rule.to_display_string(), list(path))
        return result

    def remove_rule(self, tree: ConditionTree, path: Path, rule_index: int) -> ConditionTree:
        """
        Remove the rule at ``rule_index`` from the group at ``path``.

        Raises:
            PathNotFoundError: If ``path`` does not resolve
            IndexOutOfRangeError: If ``rule_index`` is not a valid rule index
        """
        group = resolve_group(tree, path)
        _check_index("rule", rule_index, len(group.rules), path)

        result = _replace_group(
            tree,
            tuple(path),
            lambda g: g.model_copy(update={"rules": g.rules[:rule_index] + g.rules[rule_index + 1:]}),
        )
        logger.debug("Removed rule %d at %s", rule_index, list(path))
        return result

    def add_group(self, tree: ConditionTree, path: Path = (), mode: Union[str, GroupMode] = GroupMode.ALL) -> ConditionTree:
        """
        Append an empty child group to the group at ``path``.

        Nesting depth is not limited.

        Raises:
            PathNotFoundError: If ``path`` does not resolve
            InvalidModeError: If ``mode`` is not ALL or ANY
        """
        resolve_group(tree, path)
        new_group = ConditionGroup(mode=self._mode(mode))

        result = _replace_group(
            tree, tuple(path), lambda g: g.model_copy(update={"groups": g.groups + (new_group,)})
        )
        logger.debug("Added %s group at %s", new_group.mode, list(path))
        return result

    def remove_group(self, tree: ConditionTree, path: Path = (), group_index: Optional[int] = None) -> ConditionTree:
        """
        Remove a child group together with everything inside it.

        With ``group_index`` the child at that index of the group at ``path``
        is removed. Without it, the group addressed by ``path`` itself is
        removed; for the root that means resetting to an empty default tree.

        Raises:
            PathNotFoundError: If ``path`` does not resolve
            IndexOutOfRangeError: If ``group_index`` is not a valid group index
        """
        path = tuple(path)
        if group_index is None:
            if not path:
                logger.debug("Reset condition tree to default")
                return ConditionTree.default()
            resolve_group(tree, path)
            path, group_index = path[:-1], path[-1]
        else:
            group = resolve_group(tree, path)
            _check_index("group", group_index, len(group.groups), path)

        result = _replace_group(
            tree,
            path,
            lambda g: g.model_copy(update={"groups": g.groups[:group_index] + g.groups[group_index + 1:]}),
        )
        logger.debug("Removed group %d at %s", group_index, list(path))
        return result

    def set_mode(self, tree: ConditionTree, path: Path, mode: Union[str, GroupMode]) -> ConditionTree:
        """
        Set the combinator of the group at ``path``.

        Raises:
            PathNotFoundError: If ``path`` does not resolve
            InvalidModeError: If ``mode`` is not ALL or ANY
        """
        resolve_group(tree, path)
        mode = self._mode(mode)
        result = _replace_group(tree, tuple(path), lambda g: g.model_copy(update={"mode": mode}))
        logger.debug("Set mode %s at %s", mode, list(path))
        return result

    def update_rule_field(self, tree: ConditionTree, path: Path, rule_index: int, field: str, value: Any) -> ConditionTree:
        """
        Set one field of a rule.

        The value is stored as given, without coercion: text fields take
        ``str`` and ``nullable`` takes ``bool``.

        Raises:
            InvalidFieldError: If ``field`` is not a rule field
            InvalidFieldValueError: If ``value`` has the wrong type for ``field``
            PathNotFoundError: If ``path`` does not resolve
            IndexOutOfRangeError: If ``rule_index`` is not a valid rule index
        """
        if field not in RULE_FIELDS:
            raise InvalidFieldError(field, RULE_FIELDS)
        _check_field_value(field, value)
        group = resolve_group(tree, path)
        _check_index("rule", rule_index, len(group.rules), path)

        def update(g: GroupLike) -> GroupLike:
            rules = list(g.rules)
            rules[rule_index] = rules[rule_index].model_copy(update={field: value})
            return g.model_copy(update={"rules": tuple(rules)})

        result = _replace_group(tree, tuple(path), update)
        logger.debug("Set rule %d %s=%r at %s", rule_index, field, value, list(path))
        return result

    @staticmethod
    def _mode(mode: Any) -> str:
        if isinstance(mode, GroupMode):
            return mode.value
        if isinstance(mode, str) and mode in GroupMode.__members__:
            return mode
        raise InvalidModeError(mode)


def create_tree_builder(settings: Optional["Settings"] = None) -> TreeBuilder:
    """Create a TreeBuilder using the catalog configured in settings."""
    return TreeBuilder(catalog_from_settings(settings))
