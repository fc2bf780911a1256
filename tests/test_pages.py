import datetime as dt

import pytest

from blogbuild.content import DuplicatePostPathError, MetadataError
from blogbuild.context import Object, Text
from blogbuild.pages import build_feed, build_fonts, build_highlight_js, build_style, generate, write_outputs
from blogbuild.render import RenderError

TODAY = dt.date(2024, 5, 6)


def outputs_by_path(files):
    return {output.path.as_posix(): output.content for output in files}


def test_generate_end_to_end(site):
    site.add_post("hello", "Hello World", "2024-01-01", "Hello from the **first** post.")
    files = generate(site.settings, today=TODAY)
    by_path = outputs_by_path(files)

    post_page = by_path["posts/hello-world.html"]
    assert "<p>Hello from the <strong>first</strong> post.</p>" in post_page
    assert post_page.startswith("<header>Blog</header><h1>Hello World</h1><time>2024-01-01</time>")

    feed = by_path["feed.xml"]
    assert "<pubDate>Mon, 06 May 2024 00:00:00 +0000</pubDate>" in feed
    assert "<link>https://blog.aiono.dev/posts/hello-world.html</link>" in feed
    assert "<pubDate>Mon, 01 Jan 2024 00:00:00 +0000</pubDate>" in feed

    assert '<a href="posts/hello-world.html">Hello World</a>' in by_path["index.html"]
    assert "<h1>Welcome</h1>" in by_path["index.html"]


def test_generate_output_order(site):
    site.add_post("first", "Old News", "2020-01-01")
    site.add_post("second", "New News", "2024-01-01")
    site.write("css/fonts/mono.woff", b"mono")
    files = generate(site.settings, today=TODAY)
    assert [output.path.as_posix() for output in files] == [
        "index.html",
        "blog.html",
        "style.css",
        "highlight.js",
        "feed.xml",
        "fonts/inter.woff2",
        "fonts/mono.woff",
        "posts/old-news.html",
        "posts/new-news.html",
    ]


def test_blog_lists_posts_newest_first(site):
    site.add_post("old", "Old News", "2020-01-01", "Old. Older. Oldest. Ancient.")
    site.add_post("new", "New News", "2024-01-01")
    blog = outputs_by_path(generate(site.settings, today=TODAY))["blog.html"]
    assert blog.index("New News") < blog.index("Old News")
    assert "<p>Old. Older. Oldest.</p>" in blog


def test_generate_is_deterministic(site):
    site.add_post("a", "First Post", "2023-01-01")
    site.add_post("b", "Second Post", "2023-06-01")
    assert generate(site.settings, today=TODAY) == generate(site.settings, today=TODAY)


def test_build_style_concatenates_in_order(site):
    assert build_style(site.settings).content == b"body{margin:0}\nbody{margin:1em}\n.hljs{color:red}"


def test_build_highlight_js_copies_bytes_verbatim(site):
    script = b"var a=1;\r\nvar b=\"\xff\xfe\";\r\n"
    site.write("highlight/highlight.min.js", script)
    output = build_highlight_js(site.settings)
    assert output.path.as_posix() == "highlight.js"
    assert output.content == script


def test_build_style_keeps_line_endings_and_raw_bytes(site):
    site.write("css/custom.css", b"a{}\r\n/* \xe9 */\r\n")
    assert build_style(site.settings).content == b"body{margin:0}\na{}\r\n/* \xe9 */\r\n\n.hljs{color:red}"


def test_build_fonts_copies_bytes(site):
    [font] = build_fonts(site.settings)
    assert font.path.as_posix() == "fonts/inter.woff2"
    assert font.content == b"\x00\x01woff"


def test_build_feed_adds_pub_date_without_touching_context(site):
    context = Object({"posts": Text("")})
    site.write("templates/feed.xml", "{{ pubDate }}")
    feed = build_feed(site.settings, context, today=dt.date(2024, 1, 1))
    assert feed.content == "Mon, 01 Jan 2024 00:00:00 +0000"
    assert context.keys() == ["posts"]


def test_missing_template_aborts(site):
    (site.root / "templates" / "blog.html").unlink()
    with pytest.raises(FileNotFoundError):
        generate(site.settings, today=TODAY)


def test_missing_stylesheet_aborts(site):
    (site.root / "css" / "highlight.css").unlink()
    with pytest.raises(FileNotFoundError):
        generate(site.settings, today=TODAY)


def test_undefined_variable_aborts(site):
    site.write("templates/index.html", "{{ nope }}")
    with pytest.raises(RenderError) as excinfo:
        generate(site.settings, today=TODAY)
    assert "templates/index.html" in str(excinfo.value)
    assert "'nope' is undefined" in str(excinfo.value)


def test_looping_over_text_aborts(site):
    site.write("templates/index.html", "{% for p in index %}[{{ p }}]{% endfor %}")
    with pytest.raises(RenderError, match="expected collection, found text"):
        generate(site.settings, today=TODAY)


def test_template_syntax_error_reports_line(site):
    site.write("templates/post.html", "ok\n{% for %}")
    site.add_post("hello", "Hello World", "2024-01-01")
    with pytest.raises(RenderError, match="line 2"):
        generate(site.settings, today=TODAY)


def test_bad_metadata_aborts(site):
    site.write("pages/posts/broken.md", "Body.")
    site.write("pages/posts/broken.json", '{"title": "Broken"}')
    with pytest.raises(MetadataError, match="broken.json"):
        generate(site.settings, today=TODAY)


def test_colliding_post_paths_abort(site):
    site.add_post("one", "Hello World", "2024-01-01")
    site.add_post("two", "hello world", "2024-01-02")
    with pytest.raises(DuplicatePostPathError):
        generate(site.settings, today=TODAY)


def test_write_outputs(site, tmp_path):
    site.add_post("hello", "Hello World", "2024-01-01")
    output_dir = tmp_path / "dist"
    write_outputs(generate(site.settings, today=TODAY), output_dir)
    assert (output_dir / "posts" / "hello-world.html").read_text(encoding="utf-8").startswith("<header>")
    assert (output_dir / "fonts" / "inter.woff2").read_bytes() == b"\x00\x01woff"
    assert (output_dir / "highlight.js").read_text(encoding="utf-8") == "var hljs={};"
