"""Parsing of ``Import-Package`` and ``Export-Package`` manifest headers.

Version: 0.2.0

Header grammar::

    header    := clause ( ',' clause )*
    clause    := path ( ';' path )* ( ';' parameter )*
    parameter := attribute '=' value | directive ':=' value

Values may be wrapped in double quotes, in which case they can contain
``,`` and ``;`` (version ranges such as ``"[1.0,2.0)"`` need this).

Installed modules have not been wired yet, so their dependency report is
built from these parsed declarations instead of the registry wiring.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from bundleconsole.core.exceptions import HeaderParseError, VersionFormatError
from bundleconsole.core.version import EMPTY_VERSION, Version, VersionRange


VERSION_ATTRIBUTE = "version"
SPECIFICATION_VERSION_ATTRIBUTE = "specification-version"
RESOLUTION_DIRECTIVE = "resolution"
RESOLUTION_OPTIONAL = "optional"


@dataclass
class HeaderClause:
    """One comma separated clause of a header."""

    paths: List[str]
    attributes: Dict[str, str] = field(default_factory=dict)
    directives: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ImportDescriptor:
    """A package import, declared or derived from wiring."""

    name: str
    version_range: VersionRange = field(default_factory=VersionRange)
    optional: bool = False

    @property
    def version(self) -> Version:
        """The version shown for the import: the floor of its range."""
        return self.version_range.floor

    def is_satisfied_by(self, name: str, version: Version) -> bool:
        return name == self.name and self.version_range.contains(version)


@dataclass(frozen=True)
class ExportDescriptor:
    """A package export declared in a manifest."""

    name: str
    version: Version = EMPTY_VERSION


def _split(text: str, separator: str, header: str) -> List[str]:
    """Split ``text`` on ``separator`` outside double quotes."""
    pieces: List[str] = []
    current: List[str] = []
    in_quote = False

    for char in text:
        if char == '"':
            in_quote = not in_quote
            current.append(char)
        elif char == separator and not in_quote:
            pieces.append("".join(current))
            current = []
        else:
            current.append(char)

    if in_quote:
        raise HeaderParseError("Unterminated quoted value", header)

    pieces.append("".join(current))
    return pieces


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == '"' and value[-1] == '"':
        return value[1:-1]
    return value


def _find_assignment(piece: str) -> Tuple[int, str]:
    """Locate the first ``=`` or ``:=`` outside double quotes.

    Returns:
        (index, operator), or (-1, "") for a plain package name
    """
    in_quote = False
    for index, char in enumerate(piece):
        if char == '"':
            in_quote = not in_quote
        elif char == "=" and not in_quote:
            if index > 0 and piece[index - 1] == ":":
                return index - 1, ":="
            return index, "="
    return -1, ""


def _parse_clause(text: str, header: str) -> HeaderClause:
    paths: List[str] = []
    attributes: Dict[str, str] = {}
    directives: Dict[str, str] = {}

    for piece in _split(text, ";", header):
        piece = piece.strip()
        if not piece:
            raise HeaderParseError("Empty element in clause", header, details={"clause": text})

        index, operator = _find_assignment(piece)
        if operator == ":=":
            target = directives
        elif operator == "=":
            target = attributes
        else:
            if attributes or directives:
                raise HeaderParseError(
                    f"Package name '{piece}' must precede parameters",
                    header,
                    details={"clause": text},
                )
            paths.append(piece)
            continue

        if not paths:
            raise HeaderParseError("Parameter without a package name", header, details={"clause": text})

        key = piece[:index].strip()
        value = piece[index + len(operator):]
        if key in target:
            raise HeaderParseError(f"Duplicate parameter '{key}'", header, details={"clause": text})
        target[key] = _unquote(value)

    return HeaderClause(paths=paths, attributes=attributes, directives=directives)


def parse_header(header: Optional[str]) -> List[HeaderClause]:
    """Parse an ``Import-Package``/``Export-Package`` value into clauses.

    Args:
        header: The raw header value; None or blank yields no clauses

    Returns:
        The clauses in declaration order

    Raises:
        HeaderParseError: If the header is malformed
    """
    if header is None or not header.strip():
        return []

    clauses: List[HeaderClause] = []
    for text in _split(header, ",", header):
        if not text.strip():
            raise HeaderParseError("Empty clause", header)
        clauses.append(_parse_clause(text, header))
    return clauses


def parse_imports(header: Optional[str]) -> List[ImportDescriptor]:
    """Build one ImportDescriptor per package named in ``header``.

    Raises:
        HeaderParseError: If the header or one of its version ranges is
            malformed
    """
    imports: List[ImportDescriptor] = []
    for clause in parse_header(header):
        try:
            version_range = VersionRange.parse(clause.attributes.get(VERSION_ATTRIBUTE))
        except VersionFormatError as e:
            raise HeaderParseError(e.message, header or "", details={"value": e.value}) from e
        optional = clause.directives.get(RESOLUTION_DIRECTIVE) == RESOLUTION_OPTIONAL
        for path in clause.paths:
            imports.append(ImportDescriptor(path, version_range, optional))
    return imports


def parse_exports(header: Optional[str]) -> List[ExportDescriptor]:
    """Build one ExportDescriptor per package named in ``header``.

    ``version`` wins over the legacy ``specification-version`` attribute.
    """
    exports: List[ExportDescriptor] = []
    for clause in parse_header(header):
        raw_version = clause.attributes.get(
            VERSION_ATTRIBUTE,
            clause.attributes.get(SPECIFICATION_VERSION_ATTRIBUTE),
        )
        try:
            version = Version.parse(raw_version)
        except VersionFormatError as e:
            raise HeaderParseError(e.message, header or "", details={"value": e.value}) from e
        for path in clause.paths:
            exports.append(ExportDescriptor(path, version))
    return exports
