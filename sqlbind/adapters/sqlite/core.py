"""SQLite adapter helpers: placeholder numbering and value coercion."""

import re
from typing import TYPE_CHECKING, Any, Final, Optional

from sqlbind.parameters import BindType

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = (
    "CompiledPlaceholders",
    "PlaceholderInfo",
    "coerce_bind_value",
    "collect_rows",
    "compile_placeholders",
    "resolve_rowcount",
)


# Placeholder extraction regex
_PLACEHOLDER_REGEX: Final = re.compile(
    r"""
    # Literals, quoted identifiers and comments are matched first and skipped
    (?P<squote>'(?:[^']|'')*') |
    (?P<dquote>"(?:[^"]|"")*") |
    (?P<backtick>`(?:[^`]|``)*`) |
    (?P<bracket>\[[^\]]*\]) |
    (?P<line_comment>--[^\r\n]*) |
    (?P<block_comment>/\*[\s\S]*?(?:\*/|$)) |
    # Placeholders
    (?P<numbered>\?(?P<number>\d+)) |
    (?P<qmark>\?) |
    (?P<named>(?<![\w$])[:@$](?P<name>\w+))
    """,
    re.VERBOSE,
)


class PlaceholderInfo:
    """Immutable placeholder information."""

    __slots__ = ("index", "name", "position", "placeholder_text")

    def __init__(self, index: int, name: Optional[str], position: int, placeholder_text: str) -> None:
        self.index = index
        self.name = name
        self.position = position
        self.placeholder_text = placeholder_text

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return False
        return (self.index, self.name, self.position) == (other.index, other.name, other.position)

    def __hash__(self) -> int:
        return hash((self.index, self.name, self.position))

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(index={self.index!r}, name={self.name!r}, "
            f"position={self.position!r}, placeholder_text={self.placeholder_text!r})"
        )


class CompiledPlaceholders:
    """A query rewritten to numbered ``?NNN`` placeholders."""

    __slots__ = ("names", "parameter_count", "placeholders", "sql")

    def __init__(
        self, sql: str, placeholders: "list[PlaceholderInfo]", names: "dict[str, int]", parameter_count: int
    ) -> None:
        self.sql = sql
        self.placeholders = placeholders
        self.names = names
        self.parameter_count = parameter_count

    def resolve_name(self, name: str) -> "Optional[int]":
        """Return the index of a named placeholder.

        A name given without its ``:``, ``@`` or ``$`` prefix is looked up as ``:name``.
        """
        if name in self.names:
            return self.names[name]
        if name and name[0] not in ":@$":
            return self.names.get(f":{name}")
        return None


def compile_placeholders(sql: str) -> CompiledPlaceholders:
    """Number the placeholders of a query the way SQLite does.

    ``?`` takes the largest index assigned so far plus one, ``?NNN`` takes
    ``NNN`` and a named placeholder takes the next index the first time its name
    appears and reuses it afterwards. Every placeholder is rewritten to its
    ``?NNN`` form so values can be supplied as one sequence.

    Args:
        sql: The query text.

    Returns:
        The rewritten query with placeholder metadata.
    """
    placeholders: list[PlaceholderInfo] = []
    names: dict[str, int] = {}
    largest = 0
    parts: list[str] = []
    last_end = 0

    for match in _PLACEHOLDER_REGEX.finditer(sql):
        if match.group("numbered"):
            index = int(match.group("number"))
            name = None
        elif match.group("qmark"):
            index = largest + 1
            name = None
        elif match.group("named"):
            name = match.group("named")
            if name not in names:
                names[name] = largest + 1
            index = names[name]
        else:
            continue

        largest = max(largest, index)
        placeholders.append(PlaceholderInfo(index, name, match.start(), match.group(0)))
        parts.append(sql[last_end : match.start()])
        parts.append(f"?{index}")
        last_end = match.end()

    parts.append(sql[last_end:])
    return CompiledPlaceholders("".join(parts), placeholders, names, largest)


def coerce_bind_value(value: Any, bind_type: BindType) -> Any:
    """Convert a value to the form SQLite receives for its bind type.

    Args:
        value: The value to bind.
        bind_type: The inferred bind type.

    Returns:
        ``None`` for NULL, ``0``/``1`` for booleans, the integer for INTEGER and,
        for STRING, the text of floats and the unchanged ``str``/``bytes`` otherwise.
    """
    if bind_type is BindType.NULL:
        return None
    if bind_type is BindType.BOOLEAN:
        return int(value)
    if bind_type is BindType.STRING and isinstance(value, float):
        return str(value)
    return value


def collect_rows(
    fetched_data: "list[Any]", description: "Optional[Sequence[Any]]"
) -> "list[dict[str, Any]]":
    """Convert SQLite result tuples to rows indexed by column name.

    Args:
        fetched_data: Raw rows from cursor.fetchall()
        description: Cursor description (tuple of tuples)

    Returns:
        List of rows as dictionaries
    """
    if not description:
        return []

    column_names = [col[0] for col in description]
    return [dict(zip(column_names, row)) for row in fetched_data]


def resolve_rowcount(cursor: Any) -> int:
    """Resolve rowcount from a SQLite cursor.

    Args:
        cursor: SQLite cursor with optional rowcount metadata.

    Returns:
        Positive rowcount value or 0 when unknown.
    """
    try:
        rowcount = cursor.rowcount
    except AttributeError:
        return 0

    if isinstance(rowcount, int) and rowcount > 0:
        return rowcount
    return 0
