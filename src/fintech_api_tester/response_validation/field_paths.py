"""Field path parsing, rendering, and resolution."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

_PART_PATTERN = re.compile(r"^([^\[\]]*)((?:\[\d+\])*)$")
_INDEX_PATTERN = re.compile(r"\[(\d+)\]")

PathSegment = str | int


class FieldPathError(ValueError):
    """Raised when a field path string cannot be parsed."""


class _Missing:
    """Sentinel for a location that does not exist in a JSON value."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


@dataclass(frozen=True)
class FieldPath:
    """Location inside a nested JSON value, as key and index segments."""

    segments: tuple[PathSegment, ...] = ()

    @classmethod
    def parse(cls, text: str) -> FieldPath:
        """Parse `a.b[0].c` style text; the empty string is the root path."""
        stripped = text.strip()
        if not stripped:
            return ROOT
        segments: list[PathSegment] = []
        for part in stripped.split("."):
            match = _PART_PATTERN.fullmatch(part)
            if match is None:
                raise FieldPathError(f"Malformed field path: {text!r}")
            key, indexes = match.groups()
            if key:
                segments.append(key)
            elif not indexes:
                raise FieldPathError(f"Empty segment in field path: {text!r}")
            segments.extend(int(index) for index in _INDEX_PATTERN.findall(indexes))
        return cls(tuple(segments))

    def child(self, key: str) -> FieldPath:
        return FieldPath(self.segments + (key,))

    def item(self, index: int) -> FieldPath:
        return FieldPath(self.segments + (index,))

    @property
    def is_root(self) -> bool:
        return not self.segments

    @property
    def leaf_name(self) -> str:
        """Last key segment, used in short error messages."""
        for segment in reversed(self.segments):
            if isinstance(segment, str):
                return segment
        return str(self)

    def __str__(self) -> str:
        rendered = ""
        for segment in self.segments:
            if isinstance(segment, int):
                rendered += f"[{segment}]"
            elif rendered:
                rendered += f".{segment}"
            else:
                rendered = segment
        return rendered


ROOT = FieldPath()


def as_field_path(path: FieldPath | str) -> FieldPath:
    return FieldPath.parse(path) if isinstance(path, str) else path


def parse_field_paths(paths: Sequence[FieldPath | str]) -> frozenset[FieldPath]:
    """Parse declared field path strings into a lookup set."""
    return frozenset(as_field_path(path) for path in paths)


def resolve(value: object, path: FieldPath | str) -> object:
    """Return the value at `path`, or MISSING when any step does not exist."""
    field_path = as_field_path(path)
    current = value
    for segment in field_path.segments:
        current = _step(current, segment)
        if current is MISSING:
            return MISSING
    return current


def _step(current: object, segment: PathSegment) -> object:
    if isinstance(current, Mapping):
        key = str(segment)
        return current[key] if key in current else MISSING
    if isinstance(current, Sequence) and not isinstance(current, str | bytes):
        index = _as_index(segment)
        if index is None or index >= len(current):
            return MISSING
        return current[index]
    return MISSING


def _as_index(segment: PathSegment) -> int | None:
    if isinstance(segment, int):
        return segment
    if segment.isdigit():
        return int(segment)
    return None
