"""CLI entrypoints for lastfm-readme commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, load_config, validate_settings
from .logging import configure_logging
from .orchestrator import Orchestrator
from .sections import SectionError


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


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .lastfm-readme.yml or the directory containing it (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lastfm-readme",
        description="Keep Last.fm listening charts up to date inside a README.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also append log output to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    update_parser = subparsers.add_parser(
        "update",
        help="Regenerate every Last.fm section in the README.",
    )
    _add_verbose_option(update_parser, suppress_default=True)
    _add_config_option(update_parser)
    update_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Preview README changes without writing them.",
    )
    update_parser.add_argument(
        "--store",
        choices=("local", "github"),
        default=None,
        help="Override where the README is read from and written to.",
    )

    scan_parser = subparsers.add_parser(
        "scan",
        help="List the Last.fm sections found in a local README and validate their markers.",
    )
    _add_verbose_option(scan_parser, suppress_default=True)
    _add_config_option(scan_parser)
    scan_parser.add_argument(
        "--readme",
        default=None,
        help="README to scan (defaults to the configured readme path).",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Expose the update pipeline over HTTP.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    _add_config_option(serve_parser)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for lastfm-readme commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    if args.command == "update":
        _run_update(parser, args)
    elif args.command == "scan":
        _run_scan(parser, args)
    elif args.command == "serve":
        _run_serve(parser, args)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_update(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    dry_run = bool(getattr(args, "dry_run", False))
    try:
        settings = load_config(args.config)
        if args.store:
            settings.store.mode = args.store
        validate_settings(settings)
        result = Orchestrator(settings).run_update(dry_run=dry_run)
    except ConfigError as exc:
        parser.exit(1, f"Invalid configuration: {exc}\n")
    except SectionError as exc:
        parser.exit(1, f"Malformed README sections: {exc}\n")
    except RuntimeError as exc:
        parser.exit(1, f"lastfm-readme update failed: {exc}\nRun with --verbose for more details.\n")

    if result is None:
        message = "README already up to date"
        if dry_run:
            message += " (dry-run)"
        print(message)
        return
    if dry_run:
        print("README changes (dry-run):")
        print(result.diff or "(no diff)")
    else:
        print(f"README updated at {result.locator}")
    print(f"Sections processed: {result.sections_processed}, updated: {result.sections_updated}")


def _run_scan(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    try:
        settings = validate_settings(load_config(args.config), require_lastfm=False)
        readme_path = Path(args.readme) if args.readme else settings.readme.path
        content = readme_path.read_text(encoding="utf-8")
        found = Orchestrator(settings).inspect(content)
    except FileNotFoundError as exc:
        parser.exit(1, f"README not found: {exc.filename}\n")
    except (ConfigError, SectionError) as exc:
        parser.exit(1, f"{exc}\n")

    if not found:
        print(f"No Last.fm sections found in {_relativize(readme_path)}")
        return
    for name, regions in found:
        print(f"{name.marker}: {len(regions)} section(s)")
        for region in regions:
            settings_line = (
                f"rows={region.settings.rows} period={region.settings.period.value} "
                f"display={','.join(option.value for option in region.settings.display)}"
            )
            print(f"  {region.start.strip()}  [{settings_line}]")


def _run_serve(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    from .service import run_service

    try:
        settings = validate_settings(load_config(args.config))
    except ConfigError as exc:
        parser.exit(1, f"Invalid configuration: {exc}\n")
    run_service(settings, host=args.host, port=args.port)


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


__all__ = ["main"]


if __name__ == "__main__":
    main(sys.argv[1:])
