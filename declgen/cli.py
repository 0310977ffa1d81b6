"""CLI entrypoints for declgen commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .entrypoints import find_entrypoints
from .generator import TypesGenerator
from .hooks import HookError
from .i18n import I18nError
from .logging import configure_logging, get_logger


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


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="declgen",
        description="Generate type declarations for an extension project's build surface.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    prepare_parser = subparsers.add_parser(
        "prepare",
        help="Generate the types directory and tsconfig.json.",
    )
    _add_verbose_option(prepare_parser, suppress_default=True)
    prepare_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for declgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)
    logger = get_logger("cli")

    if args.command == "prepare":
        try:
            settings = load_config(Path(args.path))
            entrypoints = find_entrypoints(settings)
            logger.debug("Found %d entrypoints", len(entrypoints))
            result = TypesGenerator(settings).generate(entrypoints)
        except ConfigError as exc:
            parser.exit(1, f"Invalid configuration: {exc}\n")
        except (I18nError, json.JSONDecodeError) as exc:
            parser.exit(1, f"Invalid message bundle: {exc}\n")
        except UnicodeDecodeError as exc:
            parser.exit(1, f"declgen prepare failed: input is not valid UTF-8: {exc}\n")
        except (HookError, OSError) as exc:
            parser.exit(1, f"declgen prepare failed: {exc}\nRun with --verbose for more details.\n")
        written = len(result.written)
        unchanged = len(result.writes) - written
        print(f"Types generated in {_relativize(settings.output_dir)} ({written} written, {unchanged} unchanged)")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
