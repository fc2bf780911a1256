from __future__ import annotations

import json
from pathlib import Path

import pytest

from blogbuild.config import BuildSettings

TEMPLATES = {
    "index.html": (
        "{{ components.header }}<main>{{ index }}</main>\n"
        "<ul>{% for post in posts %}<li><a href=\"{{ post.path }}\">{{ post.title }}</a></li>{% endfor %}</ul>\n"
    ),
    "blog.html": (
        "{% for post in posts %}<article><h2>{{ post.title }}</h2>"
        "<time>{{ post.createdat }}</time><p>{{ post.summary }}</p></article>\n{% endfor %}"
    ),
    "post.html": "{{ components.header }}<h1>{{ title }}</h1><time>{{ createdat }}</time>{{ content }}\n",
    "feed.xml": (
        "<rss><channel><pubDate>{{ pubDate }}</pubDate>\n"
        "{% for post in posts %}<item><title>{{ post.title }}</title><link>{{ post.url }}</link>"
        "<pubDate>{{ post.createdatRfc822 }}</pubDate><description>{{ post.summary }}</description></item>\n"
        "{% endfor %}</channel></rss>\n"
    ),
}


class SiteTree:
    def __init__(self, root: Path) -> None:
        self.root = root
        self.posts_dir = root / "pages" / "posts"

    def write(self, relative: str, content: str | bytes) -> Path:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return path

    def add_post(self, name: str, title: str, created_at: str, body: str = "Some text.") -> Path:
        self.write(f"pages/posts/{name}.json", json.dumps({"title": title, "created-at": created_at}))
        return self.write(f"pages/posts/{name}.md", body)

    @property
    def settings(self) -> BuildSettings:
        return BuildSettings(content_path=self.root)


@pytest.fixture
def site(tmp_path: Path) -> SiteTree:
    tree = SiteTree(tmp_path / "content")
    tree.write("pages/index.md", "# Welcome\n\nHello there.\n")
    tree.posts_dir.mkdir(parents=True)
    tree.write("components/header.html", "<header>Blog</header>")
    for name, text in TEMPLATES.items():
        tree.write(f"templates/{name}", text)
    tree.write("css/simple.css", "body{margin:0}")
    tree.write("css/custom.css", "body{margin:1em}")
    tree.write("css/highlight.css", ".hljs{color:red}")
    tree.write("css/fonts/inter.woff2", b"\x00\x01woff")
    tree.write("highlight/highlight.min.js", "var hljs={};")
    return tree
