"""Typed documentation tree produced by the external parser.

The parser emits one record per source file (JSON). These models are the
only place the tree's structure is checked; everything downstream trusts it.

Tree shape:
    ParsedFile
      ├── functions: Function[] ── hooks: Hook[]
      ├── classes:   Class[]    ── methods: Method[] ── hooks: Hook[]
      └── hooks:     Hook[]     (file scoped)
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from refdocs.core.errors import ParseInputError


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class Tag(BaseModel):
    """A single `@name content` annotation.

    Extra keys the parser attaches (types, variable, refers) are kept so the
    raw tag list can be stored verbatim.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    name: str
    content: str = ""


class Docblock(_Frozen):
    description: str = ""
    long_description: str = ""
    tags: tuple[Tag, ...] = ()

    def tags_named(self, name: str) -> list[Tag]:
        """All tags with this name, in source order."""
        return [t for t in self.tags if t.name == name]

    def tag(self, name: str) -> Tag | None:
        """First tag with this name. First match wins when a tag repeats."""
        for t in self.tags:
            if t.name == name:
                return t
        return None

    def has_tag(self, name: str) -> bool:
        return self.tag(name) is not None

    def tags_as_dicts(self) -> list[dict[str, Any]]:
        return [t.model_dump() for t in self.tags]


HookType = Literal["action", "filter", "action_reference", "filter_reference", "action_deprecated", "filter_deprecated"]


class Hook(_Frozen):
    name: str
    type: HookType = "action"
    doc: Docblock = Field(default_factory=Docblock)
    arguments: tuple[Any, ...] = ()
    line: int = 0
    end_line: int = 0

    @property
    def is_stub(self) -> bool:
        """Cross-reference hooks that point at a hook documented elsewhere."""
        desc = self.doc.description
        if desc.startswith(("This action is documented in", "This filter is documented in")):
            return True
        return desc == "" and self.doc.long_description == ""


class Function(_Frozen):
    name: str
    doc: Docblock = Field(default_factory=Docblock)
    arguments: tuple[dict[str, Any], ...] = ()
    line: int = 0
    end_line: int = 0
    hooks: tuple[Hook, ...] = ()


class Method(Function):
    final: bool = False
    abstract: bool = False
    static: bool = False
    visibility: str = "public"

    def namespaced(self, class_name: str) -> Method:
        """Copy of this method named `Class::method`."""
        return self.model_copy(update={"name": f"{class_name}::{self.name}"})


class Class(_Frozen):
    name: str
    doc: Docblock = Field(default_factory=Docblock)
    line: int = 0
    end_line: int = 0
    final: bool = False
    abstract: bool = False
    extends: str | None = None
    implements: tuple[str, ...] = ()
    properties: tuple[dict[str, Any], ...] = ()
    methods: tuple[Method, ...] = ()


class ParsedFile(_Frozen):
    path: str
    file: Docblock = Field(default_factory=Docblock)
    functions: tuple[Function, ...] = ()
    classes: tuple[Class, ...] = ()
    hooks: tuple[Hook, ...] = ()


Entity = Function | Method | Class | Hook


def parse_tree(data: Any) -> list[ParsedFile]:
    """Validate raw parser output into ParsedFile records.

    Raises:
        ParseInputError: If the tree is absent or does not match the model.
    """
    if data is None:
        raise ParseInputError.missing()
    if not isinstance(data, Iterable) or isinstance(data, (str, bytes, dict)):
        raise ParseInputError.invalid("expected a list of files", got=type(data).__name__)

    files: list[ParsedFile] = []
    for index, raw in enumerate(data):
        try:
            files.append(ParsedFile.model_validate(raw))
        except ValidationError as e:
            err = e.errors()[0]
            loc = ".".join(str(part) for part in err["loc"])
            raise ParseInputError.invalid(
                f"file #{index}: {loc}: {err['msg']}", index=index, loc=loc
            ) from e
    return files


def load_tree(path: Path) -> list[ParsedFile]:
    """Read and validate a JSON export from the parser."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ParseInputError.unreadable(str(path), e.strerror or str(e)) from e
    if not text.strip():
        raise ParseInputError.unreadable(str(path), "file is empty")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseInputError.unreadable(str(path), f"JSON can't be decoded: {e.msg}") from e
    return parse_tree(data)
