# ABOUTME: Typed command-line flag definitions and their application to argv
# ABOUTME: Parses Go-style -name/-name=value flags into an owned FlagValues mapping
"""Flag definitions and parsing for configrepo"""

import argparse
import logging
import re
import sys
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from fractions import Fraction
from typing import Any

from configrepo.exceptions import (
    ArgumentsEmptyError,
    FlagDefinitionError,
    FlagParseError,
    HelpRequested,
)

logger = logging.getLogger(__name__)

_POSITIONAL_DEST = " args"

# Nanoseconds per unit
_DURATION_UNITS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # U+00B5
    "μs": 1_000,  # U+03BC
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60_000_000_000,
    "h": 3_600_000_000_000,
}

_DURATION_PART_RX = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)")

_TRUE_LITERALS = {"1", "t", "T", "true", "TRUE", "True"}
_FALSE_LITERALS = {"0", "f", "F", "false", "FALSE", "False"}


class FlagKind(str, Enum):
    """Value kinds a flag can carry."""

    STRING = "string"
    INT = "int"
    BOOL = "bool"
    DURATION = "duration"


def parse_duration(text: str) -> timedelta:
    """
    Parse a duration string such as "300ms", "1h20m" or "-1.5h".

    A duration is an optional sign followed by one or more decimal numbers,
    each with a unit suffix (ns, us, µs, ms, s, m, h). The bare string "0"
    is also accepted.

    Raises:
        ValueError: If the text is not a valid duration
    """
    orig = text
    sign = 1
    if text[:1] in ("-", "+"):
        if text[0] == "-":
            sign = -1
        text = text[1:]

    if text == "0":
        return timedelta(0)
    if not text:
        raise ValueError(f"invalid duration {orig!r}")

    total = Fraction(0)
    pos = 0
    while pos < len(text):
        m = _DURATION_PART_RX.match(text, pos)
        if not m:
            if re.match(r"\d*\.?\d*", text[pos:]).group(0):
                raise ValueError(f"missing or unknown unit in duration {orig!r}")
            raise ValueError(f"invalid duration {orig!r}")
        total += Fraction(m.group(1)) * _DURATION_UNITS[m.group(2)]
        pos = m.end()

    # Whole nanoseconds, truncated to microseconds
    return timedelta(microseconds=sign * (int(total) // 1_000))


def _format_fraction(value: int, scale: int) -> str:
    whole, frac = divmod(value, scale)
    if not frac:
        return str(whole)
    width = len(str(scale)) - 1
    return f"{whole}.{frac:0{width}d}".rstrip("0")


def format_duration(value: timedelta) -> str:
    """Render a timedelta the way parse_duration reads it, e.g. "1h20m0s"."""
    us = abs(value) // timedelta(microseconds=1)
    sign = "-" if value < timedelta(0) else ""

    if us == 0:
        return "0s"
    if us < 1_000:
        return f"{sign}{us}µs"
    if us < 1_000_000:
        return f"{sign}{_format_fraction(us, 1_000)}ms"

    hours, rem = divmod(us, 3_600_000_000)
    minutes, rem = divmod(rem, 60_000_000)
    seconds = _format_fraction(rem, 1_000_000)
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}s"
    if minutes:
        return f"{sign}{minutes}m{seconds}s"
    return f"{sign}{seconds}s"


def _parse_bool(text: str) -> bool:
    if text in _TRUE_LITERALS:
        return True
    if text in _FALSE_LITERALS:
        return False
    raise ValueError(f"invalid boolean value {text!r}")


def _parse_int(text: str) -> int:
    return int(text, 0)


# Keep argparse's "invalid int value" message readable
_parse_int.__name__ = "int"


def _parse_duration_arg(text: str) -> timedelta:
    return parse_duration(text)


_parse_duration_arg.__name__ = "duration"

_DEFAULT_TYPES = {
    FlagKind.STRING: (str,),
    FlagKind.INT: (int,),
    FlagKind.BOOL: (bool,),
    FlagKind.DURATION: (timedelta,),
}


@dataclass(frozen=True)
class FlagDefinition:
    """
    Declares one named command-line option.

    The kind is the tag; the default must have the Python type that matches
    it (str, int, bool, or timedelta). Mismatches are rejected when the
    definition is built, not when arguments are parsed.
    """

    kind: FlagKind
    name: str
    default: Any
    usage: str = ""

    def __post_init__(self):
        """Validate after initialization"""
        try:
            kind = FlagKind(self.kind)
        except ValueError:
            valid = ", ".join(k.value for k in FlagKind)
            raise FlagDefinitionError(
                f"Unknown flag kind {self.kind!r} for flag {self.name!r}",
                recovery_hint=f"Use one of: {valid}",
            ) from None
        object.__setattr__(self, "kind", kind)

        if not isinstance(self.name, str) or not self.name or self.name.startswith("-"):
            raise FlagDefinitionError(
                f"Invalid flag name {self.name!r}",
                recovery_hint="Names are non-empty and given without leading dashes",
            )
        if any(ch.isspace() or ch == "=" for ch in self.name):
            raise FlagDefinitionError(f"Invalid flag name {self.name!r}: contains whitespace or '='")

        expected = _DEFAULT_TYPES[kind]
        mistyped = not isinstance(self.default, expected)
        # bool is an int subclass; an int flag must not take True/False
        if kind is FlagKind.INT and isinstance(self.default, bool):
            mistyped = True
        if mistyped:
            raise FlagDefinitionError(
                f"Default for {kind.value} flag {self.name!r} has type "
                f"{type(self.default).__name__}, expected {expected[0].__name__}"
            )


def string_flag(name: str, default: str = "", usage: str = "") -> FlagDefinition:
    return FlagDefinition(FlagKind.STRING, name, default, usage)


def int_flag(name: str, default: int = 0, usage: str = "") -> FlagDefinition:
    return FlagDefinition(FlagKind.INT, name, default, usage)


def bool_flag(name: str, default: bool = False, usage: str = "") -> FlagDefinition:
    return FlagDefinition(FlagKind.BOOL, name, default, usage)


def duration_flag(name: str, default: timedelta = timedelta(0), usage: str = "") -> FlagDefinition:
    return FlagDefinition(FlagKind.DURATION, name, default, usage)


DEFAULT_FLAGS: tuple[FlagDefinition, ...] = (
    string_flag(
        "configDir", "./config/", "full path to the config directory with slash at the end."
    ),
    string_flag("environment", "prod", "the system environment"),
)


class FlagValues(Mapping):
    """Parsed flag values keyed by flag name, plus leftover positional args."""

    def __init__(self, values: dict[str, Any], args: Sequence[str] = ()):
        self._values = dict(values)
        self.args = list(args)

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self):
        return f"FlagValues({self._values!r}, args={self.args!r})"


class _FlagParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting the process."""

    def error(self, message):
        raise FlagParseError(f"{self.prog}: {message}")


class _HelpAction(argparse.Action):
    def __init__(self, option_strings, dest=argparse.SUPPRESS, default=argparse.SUPPRESS, help=None):
        super().__init__(option_strings, dest=dest, default=default, nargs=0, help=help)

    def __call__(self, parser, namespace, values, option_string=None):
        parser.print_usage(sys.stderr)
        raise HelpRequested()


def _usage_text(definition: FlagDefinition) -> str:
    default = definition.default
    if definition.kind is FlagKind.DURATION:
        default = format_duration(default)
    elif definition.kind is FlagKind.STRING:
        default = f'"{default}"'
    usage = definition.usage or definition.name
    return f"{usage} (default {default})"


def _add_flag(parser: argparse.ArgumentParser, definition: FlagDefinition) -> None:
    option_strings = [f"-{definition.name}", f"--{definition.name}"]
    common = {
        "dest": definition.name,
        "default": definition.default,
        "help": _usage_text(definition),
    }

    if definition.kind is FlagKind.STRING:
        parser.add_argument(*option_strings, metavar="string", **common)
    elif definition.kind is FlagKind.INT:
        parser.add_argument(*option_strings, type=_parse_int, metavar="int", **common)
    elif definition.kind is FlagKind.BOOL:
        parser.add_argument(*option_strings, action="store_const", const=True, **common)
    elif definition.kind is FlagKind.DURATION:
        parser.add_argument(
            *option_strings, type=_parse_duration_arg, metavar="duration", **common
        )


def build_parser(prog: str, definitions: Iterable[FlagDefinition]) -> argparse.ArgumentParser:
    """Build a parser for the given definitions that raises FlagParseError on bad input."""
    parser = _FlagParser(prog=prog, add_help=False, allow_abbrev=False)
    parser.add_argument("-h", "-help", "--help", action=_HelpAction, help="show usage and stop")

    for definition in definitions:
        try:
            _add_flag(parser, definition)
        except argparse.ArgumentError as e:
            raise FlagParseError(f"{prog}: flag redefined: {definition.name}") from e

    parser.add_argument(_POSITIONAL_DEST, nargs=argparse.REMAINDER, metavar="args")
    return parser


def _bind_flag_tokens(
    prog: str, definitions: Sequence[FlagDefinition], args: Sequence[str]
) -> tuple[list[str], dict[str, bool]]:
    """
    Prepare the flag section of args for argparse.

    Bool flags never take a separate value: "-v" is true and "-v=false" sets
    it explicitly; both are bound here and removed. Other known flags given
    as "-name value" are joined into "-name=value" so values starting with
    "-" are kept. Scanning stops at "--" or the first non-flag argument.
    """
    by_name = {d.name: d for d in definitions}
    out: list[str] = []
    bools: dict[str, bool] = {}

    i = 0
    while i < len(args):
        token = args[i]
        if token == "--" or token == "-" or not token.startswith("-"):
            out.extend(args[i:])
            break

        stripped = token[2:] if token.startswith("--") else token[1:]
        name, eq, value = stripped.partition("=")
        definition = by_name.get(name)

        if definition is None:
            # Unknown flags and -h are left for the parser to report
            out.append(token)
            i += 1
        elif definition.kind is FlagKind.BOOL:
            if eq:
                try:
                    bools[name] = _parse_bool(value)
                except ValueError:
                    raise FlagParseError(
                        f"{prog}: invalid boolean value {value!r} for flag -{name}"
                    ) from None
            else:
                bools[name] = True
            i += 1
        elif eq or i + 1 >= len(args):
            out.append(token)
            i += 1
        else:
            out.append(f"{token}={args[i + 1]}")
            i += 2

    return out, bools


def apply_flags(definitions: Iterable[FlagDefinition], argv: Sequence[str]) -> FlagValues:
    """
    Parse argv against the flag definitions.

    Args:
        definitions: Flag definitions, applied in order
        argv: Argument list; argv[0] is the program name

    Returns:
        FlagValues with every defined flag set to its parsed or default value

    Raises:
        ArgumentsEmptyError: If argv is empty
        FlagParseError: If a flag is unknown, redefined, or has a bad value
    """
    logger.debug(f"Applying flags to arguments: {list(argv)}")
    if len(argv) == 0:
        raise ArgumentsEmptyError(recovery_hint="Pass at least a program name as argv[0]")

    definitions = list(definitions)
    parser = build_parser(argv[0], definitions)
    args, bools = _bind_flag_tokens(argv[0], definitions, argv[1:])
    namespace = parser.parse_args(args)

    values = {d.name: getattr(namespace, d.name) for d in definitions}
    values.update(bools)
    rest = list(getattr(namespace, _POSITIONAL_DEST, None) or [])
    if rest[:1] == ["--"]:
        rest = rest[1:]

    logger.debug(f"Parsed flags: {values}")
    return FlagValues(values, rest)
