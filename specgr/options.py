"""
Create typed objects from YAML option text.

A class becomes creatable by declaring the options it takes:

    class Sphere:
        help = "A spherical shell"
        options = [Option("InnerRadius", float, "Inner radius", lower_bound=0.0),
                   Option("OuterRadius", float, "Outer radius")]

and is then built with ``create(Sphere, "InnerRadius: 1.0\\nOuterRadius: 2.0")``.
Option values are passed to the constructor positionally, in declaration
order. Constructors that accept ``context`` and ``metavariables`` keywords
receive them too (``metavariables`` is None when the caller gives none).
"""
import enum
import inspect
import logging
import typing
from dataclasses import dataclass

import yaml

logger = logging.getLogger(__name__)


class ParseError(ValueError):
    """Malformed or unexpected option text."""
    def __init__(self, context, message):
        self.context = list(context)
        where = ":".join(self.context) if self.context else "<top level>"
        super().__init__(f"In {where}: {message}")


@dataclass(frozen=True)
class OptionGroup:
    name: str
    help: str
    group: "OptionGroup" = None


@dataclass(frozen=True)
class Option:
    name: str
    type: typing.Any
    help: str
    group: OptionGroup = None
    lower_bound: typing.Any = None
    upper_bound: typing.Any = None
    # Called with the created value; returns an error message or None
    check: typing.Callable = None

    def path(self):
        """Names of the enclosing groups (outermost first) and the option."""
        names = [self.name]
        group = self.group
        while group is not None:
            names.append(group.name)
            group = group.group
        return names[::-1]


def default_option(type_):
    name = getattr(type_, "__name__", None) or "Value"
    return Option(name, type_, f"Option holding a {name}")


class Parser:
    """Validates option text against a list of Options and creates values."""
    def __init__(self, options):
        self.options = list(options)
        names = [o.name for o in self.options]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate option names in {names}")

    def parse(self, text, metavariables=None):
        try:
            node = yaml.safe_load(text)
        except yaml.YAMLError as err:
            raise ParseError([], f"Unable to parse option text: {err}") from err
        return self.parse_node(node, metavariables=metavariables)

    def parse_node(self, node, context=(), metavariables=None):
        """Return {option name: created value} for a parsed YAML mapping."""
        context = list(context)
        if node is None:
            node = {}
        tree = {}
        for option in self.options:
            level = tree
            for name in option.path()[:-1]:
                level = level.setdefault(name, {})
            level[option.name] = option
        return self._parse_level(node, tree, context, metavariables)

    def _parse_level(self, node, tree, context, metavariables):
        if not isinstance(node, dict):
            raise ParseError(context, f"Expected a mapping of options, got {node!r}")
        unknown = sorted(set(node) - set(tree), key=str)
        if unknown:
            raise ParseError(
                context, f"Option '{unknown[0]}' is not a valid option. "
                f"Expected one of: {{{', '.join(tree)}}}.")
        values = {}
        for name, entry in tree.items():
            if name not in node:
                raise ParseError(context, f"You did not specify the option '{name}'")
            if isinstance(entry, dict):
                values.update(
                    self._parse_level(node[name], entry, context + [name], metavariables))
            else:
                value = create_from_node(
                    entry.type, node[name], context + [name], metavariables, entry)
                if entry.check is not None:
                    message = entry.check(value)
                    if message:
                        raise ParseError(context + [name], message)
                values[name] = value
        return values


def _check_bounds(value, option, context):
    if option is None:
        return
    if option.lower_bound is not None and value < option.lower_bound:
        raise ParseError(context, f"Value {value} is below the lower bound of {option.lower_bound}.")
    if option.upper_bound is not None and value > option.upper_bound:
        raise ParseError(context, f"Value {value} is above the upper bound of {option.upper_bound}.")


def create_from_node(type_, node, context=(), metavariables=None, option=None):
    """Create a ``type_`` from an already parsed YAML node."""
    context = list(context)
    origin = typing.get_origin(type_)

    if type_ is bool:
        if not isinstance(node, bool):
            raise ParseError(context, f"Failed to convert {node!r} to bool.")
        return node
    if type_ is int:
        if isinstance(node, bool) or not isinstance(node, int):
            raise ParseError(context, f"Failed to convert {node!r} to int.")
        _check_bounds(node, option, context)
        return node
    if type_ is float:
        if isinstance(node, bool) or not isinstance(node, (int, float)):
            raise ParseError(context, f"Failed to convert {node!r} to float.")
        _check_bounds(float(node), option, context)
        return float(node)
    if type_ is str:
        if not isinstance(node, str):
            raise ParseError(context, f"Failed to convert {node!r} to str.")
        return node
    if isinstance(type_, type) and issubclass(type_, enum.Enum):
        names = list(type_.__members__)
        if isinstance(node, str) and node in type_.__members__:
            return type_[node]
        raise ParseError(
            context, f"Failed to convert \"{node}\" to {type_.__name__}. "
            f"Expected one of: {{{', '.join(names)}}}.")
    if origin in (list, tuple):
        if not isinstance(node, list):
            raise ParseError(context, f"Failed to convert {node!r} to a sequence.")
        args = typing.get_args(type_)
        if origin is list:
            return [create_from_node(args[0], v, context, metavariables) for v in node]
        if len(args) == 2 and args[1] is Ellipsis:
            return tuple(create_from_node(args[0], v, context, metavariables) for v in node)
        if len(node) != len(args):
            raise ParseError(
                context, f"Expected a sequence of {len(args)} values, got {len(node)}: {node!r}")
        return tuple(create_from_node(t, v, context, metavariables) for t, v in zip(args, node))
    if hasattr(type_, "options"):
        values = Parser(type_.options).parse_node(node, context, metavariables)
        args = [values[o.name] for o in type_.options]
        params = inspect.signature(type_).parameters
        if "metavariables" in params and "context" in params:
            return type_(*args, context=context, metavariables=metavariables)
        return type_(*args)
    raise ParseError(context, f"Do not know how to create a {type_!r} from options.")


def create(type_, text, option=None, metavariables=None):
    """
    Create a ``type_`` from option text.

    ``text`` is the value of the option only; it is nested under the
    option's name and groups before parsing, so the full group path is
    exercised. With no ``option``, one named after the type is used.
    """
    option = option or default_option(type_)
    path = option.path()
    lines = [f"{'  ' * depth}{name}:" for depth, name in enumerate(path)]
    indent = "  " * len(path)
    lines.extend(indent + line for line in (text.splitlines() or [""]))
    full_text = "\n".join(lines)
    logger.debug("Creating %s from:\n%s", getattr(type_, "__name__", type_), full_text)
    return Parser([option]).parse(full_text, metavariables)[option.name]
