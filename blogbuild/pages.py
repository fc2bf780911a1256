from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Optional, Union

from .config import BuildSettings
from .content import Post, discover_posts, load_post
from .context import (
    Object,
    Text,
    build_components_context,
    build_context,
    posts_path,
)
from .paths import join
from .render import list_dir, read_bytes, read_text, render_template, write_bytes, write_text
from .utils import rfc822_date, utc_today

TEMPLATES_DIR = "templates"
CSS_DIR = "css"
FONTS_DIR = "fonts"
STYLESHEETS = ["simple.css", "custom.css", "highlight.css"]
HIGHLIGHT_JS = "highlight/highlight.min.js"


@dataclass(frozen=True)
class OutputFile:
    path: PurePosixPath
    content: Union[str, bytes]


def render_page(settings: BuildSettings, template_name: str, context: Object) -> str:
    template_path = join(join(settings.content_path, TEMPLATES_DIR), template_name)
    return render_template(
        read_text(template_path),
        context.to_template_vars(),
        name=f"{TEMPLATES_DIR}/{template_name}",
    )


def build_index(settings: BuildSettings, context: Object) -> OutputFile:
    return OutputFile(PurePosixPath("index.html"), render_page(settings, "index.html", context))


def build_blog(settings: BuildSettings, context: Object) -> OutputFile:
    return OutputFile(PurePosixPath("blog.html"), render_page(settings, "blog.html", context))


def build_style(settings: BuildSettings) -> OutputFile:
    css_dir = join(settings.content_path, CSS_DIR)
    # Later sheets override earlier ones, so the order is fixed.
    sheets = [read_bytes(join(css_dir, name)) for name in STYLESHEETS]
    return OutputFile(PurePosixPath("style.css"), b"\n".join(sheets))


def build_fonts(settings: BuildSettings) -> list[OutputFile]:
    fonts_dir = join(join(settings.content_path, CSS_DIR), FONTS_DIR)
    return [
        OutputFile(PurePosixPath(FONTS_DIR) / path.name, read_bytes(path))
        for path in list_dir(fonts_dir)
    ]


def build_highlight_js(settings: BuildSettings) -> OutputFile:
    return OutputFile(PurePosixPath("highlight.js"), read_bytes(join(settings.content_path, HIGHLIGHT_JS)))


def post_page_context(post: Post, components: Object) -> Object:
    return Object(
        {
            "title": Text(post.title),
            "createdat": Text(post.createdat),
            "content": Text(post.content),
            "components": components,
        }
    )


def build_posts(settings: BuildSettings, components: Object) -> list[OutputFile]:
    """Render one page per post, in directory listing order."""
    files = []
    for source, metadata in discover_posts(posts_path(settings)):
        post = load_post(source, metadata, settings.site_url)
        html_doc = render_page(settings, "post.html", post_page_context(post, components))
        files.append(OutputFile(post.path, html_doc))
    return files


def build_feed(settings: BuildSettings, context: Object, today: Optional[dt.date] = None) -> OutputFile:
    pub_date = rfc822_date(today or utc_today())
    feed_context = context.with_field("pubDate", Text(pub_date))
    return OutputFile(PurePosixPath("feed.xml"), render_page(settings, "feed.xml", feed_context))


def generate(settings: BuildSettings, today: Optional[dt.date] = None) -> tuple[OutputFile, ...]:
    """Build every output file of the site in memory.

    The order is: ``index.html``, ``blog.html``, ``style.css``,
    ``highlight.js``, ``feed.xml``, then fonts, then one page per post in
    listing order.
    The first missing file, bad sidecar or template error aborts the whole
    build; nothing is returned in that case.

    ``today`` fixes the feed's ``pubDate``; it defaults to the current UTC date.
    """
    components = build_components_context(settings.content_path)
    context = build_context(settings, components=components)
    index_file = build_index(settings, context)
    blog_file = build_blog(settings, context)
    style_file = build_style(settings)
    font_files = build_fonts(settings)
    highlight_js_file = build_highlight_js(settings)
    post_files = build_posts(settings, components)
    feed_file = build_feed(settings, context, today)
    return (index_file, blog_file, style_file, highlight_js_file, feed_file, *font_files, *post_files)


def write_outputs(files: tuple[OutputFile, ...], output_dir: Path) -> None:
    for output in files:
        target = output_dir / output.path
        if isinstance(output.content, bytes):
            write_bytes(target, output.content)
        else:
            write_text(target, output.content)
