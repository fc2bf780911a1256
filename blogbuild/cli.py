from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from .config import DEFAULT_CONFIG, DEFAULT_SITE_URL, BuildSettings, load_config, resolve_path
from .pages import OutputFile, generate, write_outputs
from .render import RenderError
from .utils import clean_output_dir, parse_bool

DEFAULT_CONTENT = "content"
DEFAULT_OUTPUT = "dist"


def build_site(args: argparse.Namespace) -> tuple[OutputFile, ...]:
    content_path = Path(args.content)
    output_dir = Path(args.output)
    if not content_path.is_dir():
        print(f"Content directory not found: {content_path}", file=sys.stderr)
        sys.exit(1)

    settings = BuildSettings(content_path=content_path, site_url=args.site_url)
    files = generate(settings)

    if args.clean:
        clean_output_dir(output_dir, Path.cwd())
    write_outputs(files, output_dir)
    return files


def main(argv: list[str] | None = None) -> None:
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG,
        help="Path to site config file (TOML/YAML/JSON).",
    )
    pre_args, _ = pre_parser.parse_known_args(argv)
    config_path = Path(pre_args.config)
    config = load_config(config_path)

    def cfg_path(key: str, default: str) -> str:
        value = config.get(key)
        if value is None:
            return default
        return str(resolve_path(str(value), config_path))

    def cfg_str(key: str, default: str) -> str:
        value = config.get(key)
        return default if value is None else str(value)

    def cfg_bool(key: str, default: bool) -> bool:
        value = config.get(key)
        return default if value is None else parse_bool(value)

    parser = argparse.ArgumentParser(description="Build a static blog from a content directory.")
    parser.add_argument("--config", default=pre_args.config, help="Path to site config file (TOML/YAML/JSON).")
    parser.add_argument(
        "--content",
        default=cfg_path("content", DEFAULT_CONTENT),
        help="Content root with pages/, components/, templates/, css/ and highlight/.",
    )
    parser.add_argument("--output", default=cfg_path("output", DEFAULT_OUTPUT), help="Output directory for the site.")
    parser.add_argument(
        "--site-url",
        default=cfg_str("site_url", DEFAULT_SITE_URL),
        help="Public site origin used for post URLs in the feed.",
    )
    parser.add_argument(
        "--clean",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("clean", True),
        help="Clean output directory before writing.",
    )
    args = parser.parse_args(argv)

    start = time.perf_counter()
    try:
        files = build_site(args)
    except (OSError, ValueError, RenderError) as exc:
        print(f"Build failed: {exc}", file=sys.stderr)
        sys.exit(1)
    elapsed = time.perf_counter() - start
    print(f"Wrote {len(files)} files to {args.output}")
    print(f"Build completed in {elapsed:.2f}s.")
