"""The recursive value templates are rendered against.

A context is one of three shapes: ``Text`` (a string leaf), ``Object`` (named
fields) or ``Collection`` (an ordered list). Contexts are frozen once built;
``to_template_value`` turns one into the read-only template values of
``blogbuild.render``, which fail when a template uses them as the wrong shape.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Union

from .config import BuildSettings
from .content import Post, discover_posts, load_post, render_markdown, sort_by_date
from .paths import base_name, join
from .render import (
    ContextTypeError,
    TemplateCollection,
    TemplateObject,
    TemplateText,
    list_dir,
    read_text,
)

COMPONENTS_DIR = "components"
PAGES_DIR = "pages"
POSTS_DIR = "posts"
INDEX_PAGE = "index.md"

class ContextKeyError(KeyError):
    def __init__(self, key: str, available: Iterable[str]) -> None:
        self.key = key
        self.available = sorted(available)
        super().__init__(key)

    def __str__(self) -> str:
        return f"missing key {self.key!r} (available: {', '.join(self.available) or 'none'})"


class ContextItem(ABC):
    kind = ""

    def as_text(self) -> str:
        raise ContextTypeError(Text.kind, self.kind)

    def as_object(self) -> Object:
        raise ContextTypeError(Object.kind, self.kind)

    def as_collection(self) -> Collection:
        raise ContextTypeError(Collection.kind, self.kind)

    @abstractmethod
    def to_template_value(self) -> object:
        ...


@dataclass(frozen=True)
class Text(ContextItem):
    value: str
    kind = "text"

    def as_text(self) -> str:
        return self.value

    def to_template_value(self) -> TemplateText:
        return TemplateText(self.value)


@dataclass(frozen=True)
class Object(ContextItem):
    fields: Mapping[str, Context]
    kind = "object"

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, Context]]) -> Object:
        fields: dict[str, Context] = {}
        for key, value in pairs:
            if key in fields:
                raise ValueError(f"duplicate context key {key!r}")
            fields[key] = value
        return cls(fields)

    def as_object(self) -> Object:
        return self

    def get(self, key: str) -> Context:
        try:
            return self.fields[key]
        except KeyError:
            raise ContextKeyError(key, self.fields) from None

    def keys(self) -> list[str]:
        return list(self.fields)

    def with_field(self, key: str, value: Context) -> Object:
        if key in self.fields:
            raise ValueError(f"duplicate context key {key!r}")
        return Object({**self.fields, key: value})

    def to_template_vars(self) -> dict[str, object]:
        """Top-level template variables, one per field."""
        return {key: value.to_template_value() for key, value in self.fields.items()}

    def to_template_value(self) -> TemplateObject:
        return TemplateObject(self.to_template_vars())


@dataclass(frozen=True)
class Collection(ContextItem):
    items: tuple[Context, ...]
    kind = "collection"

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))

    def as_collection(self) -> Collection:
        return self

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def to_template_value(self) -> TemplateCollection:
        return TemplateCollection(item.to_template_value() for item in self.items)


Context = Union[Text, Object, Collection]


def build_components_context(content_path: Path) -> Object:
    components_path = join(content_path, COMPONENTS_DIR)
    return Object.from_pairs(
        (base_name(path), Text(read_text(path))) for path in list_dir(components_path)
    )


def post_context(post: Post) -> Object:
    return Object(
        {
            "title": Text(post.title),
            "createdat": Text(post.createdat),
            "createdatRfc822": Text(post.createdat_rfc822),
            "summary": Text(post.summary),
            "path": Text(post.path.as_posix()),
            "content": Text(post.content),
            "url": Text(post.url),
        }
    )


def posts_path(settings: BuildSettings) -> Path:
    return join(join(settings.content_path, PAGES_DIR), POSTS_DIR)


def load_posts(settings: BuildSettings) -> list[Post]:
    """Discover, sort (newest first) and render every post."""
    entries = sort_by_date(discover_posts(posts_path(settings)))
    return [load_post(source, metadata, settings.site_url) for source, metadata in entries]


def build_context(settings: BuildSettings, components: Object | None = None) -> Object:
    """Build the shared context with ``components``, ``index`` and ``posts``.

    Pass ``components`` to reuse a map already read during this build.
    """
    if components is None:
        components = build_components_context(settings.content_path)
    index_path = join(join(settings.content_path, PAGES_DIR), INDEX_PAGE)
    index = Text(render_markdown(read_text(index_path)))
    posts = Collection(tuple(post_context(post) for post in load_posts(settings)))
    return Object({"components": components, "index": index, "posts": posts})
