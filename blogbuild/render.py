from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from bs4 import BeautifulSoup
from jinja2 import Environment, StrictUndefined, TemplateError, TemplateSyntaxError


class ContextTypeError(TypeError):
    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"expected {expected}, found {actual}")


class TemplateText(str):
    """A text leaf as templates see it: printable, but not iterable."""

    def __iter__(self):
        raise ContextTypeError("collection", "text")


class TemplateObject:
    """Read-only named fields, reached with ``obj.key`` or ``obj["key"]``."""

    __slots__ = ("_fields",)

    def __init__(self, fields: Mapping[str, object]) -> None:
        self._fields = dict(fields)

    def __getitem__(self, key: str) -> object:
        return self._fields[key]

    def __contains__(self, key: object) -> bool:
        return key in self._fields

    def __iter__(self):
        raise ContextTypeError("collection", "object")


class TemplateCollection(tuple):
    """An ordered list; iterable and indexable, but not printable."""


def _finalize(value: object) -> object:
    if isinstance(value, TemplateObject):
        raise ContextTypeError("text", "object")
    if isinstance(value, TemplateCollection):
        raise ContextTypeError("text", "collection")
    return value


_ENV = Environment(
    undefined=StrictUndefined,
    autoescape=False,
    keep_trailing_newline=True,
    finalize=_finalize,
)


class RenderError(Exception):
    """A template could not be rendered against its context."""

    def __init__(self, message: str, template_name: str = "") -> None:
        self.message = message
        self.template_name = template_name
        if template_name:
            message = f"{template_name}: {message}"
        super().__init__(message)


def show_error(exc: Exception) -> str:
    kind = type(exc).__name__
    if isinstance(exc, TemplateSyntaxError):
        return f"{kind} at line {exc.lineno}: {exc.message}"
    if isinstance(exc, TemplateError):
        return f"{kind}: {exc.message}"
    return f"{kind}: {exc}"


def render_template(template: str, context: Mapping[str, object], name: str = "") -> str:
    """Render ``template`` with Jinja2; any failure is raised as ``RenderError``.

    Undefined names are errors rather than empty strings, and so is using a
    value as the wrong shape: looping over text or an object, or printing an
    object or a collection.
    """
    try:
        return _ENV.from_string(template).render(context)
    except (TemplateError, TypeError) as exc:
        raise RenderError(show_error(exc), name) from exc


def extract_text(html_text: str) -> str:
    return BeautifulSoup(html_text, "html.parser").get_text()


def list_dir(path: Path) -> list[Path]:
    return sorted((item for item in path.iterdir() if item.is_file()), key=lambda p: p.name)


def read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def read_bytes(path: Path) -> bytes:
    return path.read_bytes()


def write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def write_bytes(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
