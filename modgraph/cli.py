"""CLI entrypoints for modgraph commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import DEFAULT_LINKS_FILES, ConfigError, load_config
from .detector import ModuleDetector, write_result
from .logging import configure_logging
from .overrides import add_manual_link, load_manual_links, remove_manual_link


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_path_argument(parser: argparse.ArgumentParser, *, positional: bool = True) -> None:
    help_text = "Path to the repository root (defaults to current directory)."
    if positional:
        parser.add_argument("path", nargs="?", default=".", help=help_text)
    else:
        parser.add_argument("--path", default=".", help=help_text)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="modgraph",
        description="Detect repository modules, their dependency graph and health scores.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    detect_parser = subparsers.add_parser(
        "detect",
        help="Scan a repository and print its module graph as JSON.",
    )
    _add_verbose_option(detect_parser, suppress_default=True)
    _add_path_argument(detect_parser)
    detect_parser.add_argument(
        "-o",
        "--output",
        help="Write the JSON result to this file instead of stdout.",
    )
    detect_parser.add_argument(
        "--compact",
        action="store_true",
        help="Emit JSON without indentation.",
    )

    links_parser = subparsers.add_parser(
        "links",
        help="Inspect or edit manual module links.",
    )
    _add_verbose_option(links_parser, suppress_default=True)
    links_sub = links_parser.add_subparsers(dest="links_command", required=True)

    list_parser = links_sub.add_parser("list", help="Print the manual links.")
    _add_verbose_option(list_parser, suppress_default=True)
    _add_path_argument(list_parser)

    for name, help_text in (
        ("add", "Add a manual dependency between two detected modules."),
        ("remove", "Remove a manual dependency."),
    ):
        sub = links_sub.add_parser(name, help=help_text)
        _add_verbose_option(sub, suppress_default=True)
        sub.add_argument("source", help="Id of the depending module.")
        sub.add_argument("target", help="Id of the module depended upon.")
        _add_path_argument(sub, positional=False)

    return parser


def _links_files(root: Path) -> tuple[str, ...]:
    try:
        return load_config(root).overrides.links_files
    except ConfigError:
        return DEFAULT_LINKS_FILES


def _run_links(
    parser: argparse.ArgumentParser, args: argparse.Namespace, detector: ModuleDetector
) -> None:
    root = Path(args.path).expanduser().resolve()
    if not root.is_dir():
        parser.exit(1, f"Repository path not found: {args.path}\n")
    candidates = _links_files(root)

    if args.links_command == "list":
        links = load_manual_links(root, candidates)
        print(json.dumps([link.to_dict() for link in links], indent=2))
        return

    if args.links_command == "add":
        known_ids = [module.id for module in detector.detect(root).modules]
        try:
            link, created = add_manual_link(
                root, args.source, args.target, known_ids, candidates
            )
        except ValueError as exc:
            parser.exit(1, f"{exc}\n")
        except KeyError:
            parser.exit(1, f"Source or target module not found: {args.source} -> {args.target}\n")
        if created:
            print(f"Linked {link.source} -> {link.target}")
        else:
            print(f"Link {link.source} -> {link.target} already exists")
        return

    try:
        removed = remove_manual_link(root, args.source, args.target, candidates)
    except ValueError as exc:
        parser.exit(1, f"{exc}\n")
    if not removed:
        parser.exit(1, f"Link not found: {args.source} -> {args.target}\n")
    print(f"Removed link {args.source} -> {args.target}")


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for modgraph commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    detector = ModuleDetector()

    if args.command == "detect":
        try:
            result = detector.detect(args.path)
        except (FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(1, f"{exc}\n")
        except OSError as exc:
            parser.exit(1, f"modgraph detect failed: {exc}\nRun with --verbose for more details.\n")
        if args.output:
            written = write_result(result, Path(args.output))
            print(f"Module graph written to {_relativize(written)}")
        else:
            indent = None if args.compact else 2
            print(json.dumps(result.to_dict(), indent=indent))
    elif args.command == "links":
        _run_links(parser, args, detector)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
