from __future__ import annotations

from pathlib import PurePath, PurePosixPath

POSTS_DIR = PurePosixPath("posts")


def derive_post_path(title: str) -> PurePosixPath:
    """Return the output path of a post, e.g. ``My Post?`` -> ``posts/my-post.html``.

    Only spaces and question marks are touched; any other punctuation in the
    title ends up in the file name as-is.
    """
    slug = title.lower().replace(" ", "-").replace("?", "")
    return PurePosixPath(f"{POSTS_DIR}/{slug}.html")


def join(base: PurePath | str, path: PurePath | str) -> PurePath:
    """Join two paths, keeping the concrete type of ``base`` when it is a path."""
    if isinstance(base, str):
        base = PurePosixPath(base)
    return base / path


def base_name(path: PurePath | str) -> str:
    name = PurePosixPath(path).name
    stem, dot, _ = name.rpartition(".")
    return stem if dot and stem else name


def ext(path: PurePath | str) -> str:
    name = PurePosixPath(path).name
    _, dot, suffix = name.rpartition(".")
    return suffix if dot else ""
