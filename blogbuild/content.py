from __future__ import annotations

import datetime as dt
import json
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

import markdown

from .paths import base_name, derive_post_path, ext, join
from .render import extract_text, list_dir, read_text
from .utils import iso_date, join_url, rfc822_date

MARKDOWN_EXTENSIONS = ["fenced_code", "tables"]
TITLE_FIELD = "title"
CREATED_AT_FIELD = "created-at"
SUMMARY_SENTENCES = 3


class MetadataError(ValueError):
    """Sidecar metadata is not a mapping or lacks a required string field."""


class DuplicatePostPathError(ValueError):
    def __init__(self, path: PurePosixPath, first: Path, second: Path) -> None:
        self.path = path
        self.sources = (first, second)
        super().__init__(f"Posts {first.name} and {second.name} both render to {path}")


@dataclass(frozen=True)
class PostMetadata:
    title: str
    created_at: dt.date


@dataclass(frozen=True)
class Post:
    source: Path
    metadata: PostMetadata
    content: str
    summary: str
    path: PurePosixPath
    url: str

    @property
    def title(self) -> str:
        return self.metadata.title

    @property
    def created_at(self) -> dt.date:
        return self.metadata.created_at

    @property
    def createdat(self) -> str:
        return iso_date(self.metadata.created_at)

    @property
    def createdat_rfc822(self) -> str:
        return rfc822_date(self.metadata.created_at)


def _string_field(fields: dict, name: str) -> str:
    if name not in fields:
        raise MetadataError(f"expected '{name}' field in the metadata")
    value = fields[name]
    if not isinstance(value, str):
        raise MetadataError(f"'{name}' field must contain string")
    return value


def parse_post_metadata(doc: object) -> PostMetadata:
    """Validate a decoded sidecar document.

    Both ``title`` and ``created-at`` are required strings. A date string that
    ``date.fromisoformat`` rejects raises its own ``ValueError``.
    """
    if not isinstance(doc, dict):
        raise MetadataError("Expected json object")
    title = _string_field(doc, TITLE_FIELD)
    created_at = dt.date.fromisoformat(_string_field(doc, CREATED_AT_FIELD))
    return PostMetadata(title=title, created_at=created_at)


def load_post_metadata(path: Path) -> PostMetadata:
    doc = json.loads(read_text(path))
    try:
        return parse_post_metadata(doc)
    except MetadataError as exc:
        raise MetadataError(f"{path.name}: {exc}") from exc


def render_markdown(text: str) -> str:
    md = markdown.Markdown(extensions=MARKDOWN_EXTENSIONS)
    return md.convert(text)


def extract_summary(html_text: str) -> str:
    # Every "." splits, abbreviations and decimals included. Text that already
    # ends in "." within the first three segments gains a second one.
    segments = extract_text(html_text).split(".")
    return ".".join(segments[:SUMMARY_SENTENCES] + [""])


def discover_posts(posts_dir: Path) -> list[tuple[Path, PostMetadata]]:
    """Pair every ``*.md`` file in ``posts_dir`` with its ``.json`` sidecar.

    Entries come back in directory listing order. A missing sidecar raises
    ``FileNotFoundError``; two posts whose titles map to the same output path
    raise ``DuplicatePostPathError``.
    """
    entries = []
    seen: dict[PurePosixPath, Path] = {}
    for path in list_dir(posts_dir):
        if ext(path) != "md":
            continue
        metadata = load_post_metadata(join(posts_dir, f"{base_name(path)}.json"))
        output_path = derive_post_path(metadata.title)
        if output_path in seen:
            raise DuplicatePostPathError(output_path, seen[output_path], path)
        seen[output_path] = path
        entries.append((path, metadata))
    return entries


def sort_by_date(entries: list[tuple[Path, PostMetadata]]) -> list[tuple[Path, PostMetadata]]:
    return sorted(entries, key=lambda entry: entry[1].created_at, reverse=True)


def load_post(source: Path, metadata: PostMetadata, site_url: str) -> Post:
    content = render_markdown(read_text(source))
    path = derive_post_path(metadata.title)
    return Post(
        source=source,
        metadata=metadata,
        content=content,
        summary=extract_summary(content),
        path=path,
        url=join_url(site_url, path.as_posix()),
    )
