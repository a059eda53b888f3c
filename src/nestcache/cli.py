"""Operator commands for inspecting and cleaning the nested-jar cache.

    nestcache discover tools.jar core.jar
    nestcache classpath tools.jar core.jar --debug names
    nestcache resolve 'jar:file:///opt/app/ui.jar!/icons/save.png'
    nestcache clean --apply
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from nestcache.assemble import DebugClasspath, assemble_classpath, format_classpath
from nestcache.cache import MaterializationCache
from nestcache.config import get_settings
from nestcache.discovery import NestedBundles
from nestcache.errors import NestcacheError
from nestcache.resolver import ArchiveUrlResolver

logger = logging.getLogger(__name__)


def _cache(args: argparse.Namespace) -> MaterializationCache:
    if args.cache_dir is not None:
        return MaterializationCache(args.cache_dir.expanduser())
    return MaterializationCache.from_settings()


def _cmd_discover(args: argparse.Namespace) -> int:
    for locator in NestedBundles.in_files(args.archives).discover():
        print(locator.url)
    return 0


def _cmd_classpath(args: argparse.Namespace) -> int:
    classpath = assemble_classpath(args.archives, _cache(args))
    print(format_classpath(classpath, DebugClasspath(args.debug)))
    return 0


def _cmd_resolve(args: argparse.Namespace) -> int:
    print(ArchiveUrlResolver.from_settings().to_file_url(args.url))
    return 0


def _cmd_clean(args: argparse.Namespace) -> int:
    cache = _cache(args)
    files = cache.files()
    print(f"Cache dir: {cache.root}")
    if not args.apply:
        for f in files:
            print(f"[dry-run] delete: {f.name}")
        print("Done (dry-run). Re-run with --apply to perform deletion.")
        return 0
    removed = cache.clean()
    print(f"[ok] removed {removed} files")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nestcache", description="Extract and inspect nested bundle archives."
    )
    parser.add_argument(
        "--cache-dir",
        type=Path,
        default=None,
        help="Nested jar cache directory (default: $NESTCACHE_CACHE_DIR)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    discover = sub.add_parser("discover", help="List nested jars declared by archives")
    discover.add_argument("archives", nargs="+", type=Path)
    discover.set_defaults(func=_cmd_discover)

    classpath = sub.add_parser("classpath", help="Extract nested jars and print the classpath")
    classpath.add_argument("archives", nargs="+", type=Path)
    classpath.add_argument(
        "--debug",
        choices=[DebugClasspath.NAMES.value, DebugClasspath.PATHS.value],
        default=DebugClasspath.PATHS.value,
        help="Print entry names or full paths (default: paths)",
    )
    classpath.set_defaults(func=_cmd_classpath)

    resolve = sub.add_parser("resolve", help="Copy a jar:...!/ resource to a real file")
    resolve.add_argument("url")
    resolve.set_defaults(func=_cmd_resolve)

    clean = sub.add_parser("clean", help="Remove every cached nested jar")
    clean.add_argument("--apply", action="store_true", help="Actually delete files.")
    clean.set_defaults(func=_cmd_clean)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        logging.basicConfig(
            level=get_settings().log_level.upper(),
            format="%(levelname)s %(name)s: %(message)s",
        )
        return args.func(args)
    except (NestcacheError, ValidationError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1
