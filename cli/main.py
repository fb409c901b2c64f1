"""Command line interface for IAM action expansion."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from cli import config, output
from core.catalog.catalog import ActionCatalog
from core.catalog.source import CatalogSource
from core.errors import IamxError
from core.policy.expander import PolicyExpander
from core.search.matcher import GlobMatcher


class CLIError(Exception):
    def __init__(self, message: str, exit_code: int = 2) -> None:
        super().__init__(message)
        self.exit_code = exit_code


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="iamx", description="Expand wildcard AWS IAM actions")
    parser.add_argument("--config", type=Path, default=Path("iamx.yml"), help="Path to CLI configuration file")
    parser.add_argument("--catalog", help="Catalog location: URL, s3://bucket/key or local JSON file")
    parser.add_argument("--no-cache", action="store_true", help="Ignore and do not write the local catalog cache")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # list-services ----------------------------------------------------------
    list_cmd = subparsers.add_parser("list-services", help="List every known service prefix")
    list_cmd.add_argument("--with-names", action="store_true", help="Include descriptive service names")
    list_cmd.add_argument("--format", choices=output.FORMATS, help="Output format override")

    # expand -----------------------------------------------------------------
    expand_cmd = subparsers.add_parser("expand", help="Expand actions for a service or qualified patterns")
    expand_cmd.add_argument("patterns", nargs="*", help="Qualified patterns such as iam:Create* or s3:Get?bject")
    expand_cmd.add_argument("--service-name", help="Service prefix to expand, e.g. iam")
    filters = expand_cmd.add_mutually_exclusive_group()
    filters.add_argument("--prefix", help="Only actions whose name starts with this prefix")
    filters.add_argument("--pattern", help="Wildcard pattern for action names, e.g. Get*Acl")
    expand_cmd.add_argument("--format", choices=output.FORMATS, help="Output format override")

    # expand-file ------------------------------------------------------------
    file_cmd = subparsers.add_parser("expand-file", help="Expand Action/NotAction in a policy file")
    file_cmd.add_argument("--policy-file", type=Path, required=True)
    file_cmd.add_argument("--output-file", type=Path)
    file_cmd.add_argument("--strict", action="store_true", default=None, help="Abort on the first bad statement")
    file_cmd.add_argument(
        "--fail-on-errors",
        action="store_true",
        help="Exit with status 4 when any statement could not be expanded",
    )

    # cache ------------------------------------------------------------------
    cache_cmd = subparsers.add_parser("cache", help="Manage the local catalog cache")
    cache_cmd.add_argument("operation", choices=["path", "delete", "update"])

    return parser


def app(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = config.load_settings(args.config)
        merged = settings.merge_cli(
            format_override=getattr(args, "format", None),
            catalog_source=args.catalog,
            use_cache=False if args.no_cache else None,
            strict=getattr(args, "strict", None),
        )

        if args.command == "cache":
            return _cmd_cache(args, merged)
        matcher = _load_matcher(merged)
        if args.command == "list-services":
            return _cmd_list_services(args, matcher, merged)
        if args.command == "expand":
            return _cmd_expand(args, matcher, merged)
        if args.command == "expand-file":
            return _cmd_expand_file(args, matcher, merged)
    except CLIError as exc:
        print(f"[!] Error: {exc}", file=sys.stderr)
        return exc.exit_code
    except IamxError as exc:
        print(f"[!] Error: {exc}", file=sys.stderr)
        return 2
    except Exception as exc:  # pragma: no cover - unexpected errors bubble up
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


# ---------------------------------------------------------------------------
# Command implementations


def _cmd_list_services(args: argparse.Namespace, matcher: GlobMatcher, settings: config.Settings) -> int:
    print("[*] Listing AWS IAM services", file=sys.stderr)
    services = matcher.list_services()
    if args.with_names:
        rows = [{"prefix": service, "name": matcher.index.service_name(service) or ""} for service in services]
        output.emit(rows, settings.default_format if settings.default_format != "text" else "table")
    else:
        output.emit(services, settings.default_format)
    return 0


def _cmd_expand(args: argparse.Namespace, matcher: GlobMatcher, settings: config.Settings) -> int:
    if args.patterns and args.service_name:
        raise CLIError("Pass either qualified patterns or --service-name, not both")
    if args.patterns and (args.prefix is not None or args.pattern is not None):
        raise CLIError("--prefix and --pattern only apply with --service-name")
    if args.patterns:
        actions: list[str] = []
        for pattern in args.patterns:
            actions.extend(matcher.expand_qualified(pattern))
        actions = list(dict.fromkeys(actions))
    elif args.service_name:
        service = args.service_name
        print(f"[+] Expanding AWS IAM actions for '{service}' service...", file=sys.stderr)
        if service not in matcher.index:
            raise CLIError(f"Service '{service}' not found.", exit_code=1)
        if args.pattern is not None:
            actions = [record.qualified for record in matcher.expand(service, args.pattern)]
        else:
            actions = matcher.expand_service(service, args.prefix)
    else:
        raise CLIError("Provide qualified patterns (e.g. iam:Create*) or --service-name")

    if not actions:
        print("[!] No matching actions", file=sys.stderr)
    output.emit(actions, settings.default_format)
    return 0


def _cmd_expand_file(args: argparse.Namespace, matcher: GlobMatcher, settings: config.Settings) -> int:
    document = _load_policy(args.policy_file)
    result = PolicyExpander(matcher, strict=settings.strict).expand(document)

    if args.output_file:
        print(f"[+] Writing expanded policy to file: {args.output_file}", file=sys.stderr)
    output.emit(result.document, "json", output_path=args.output_file)

    if result.errors:
        print(f"[!] {len(result.errors)} statement(s) left unexpanded:", file=sys.stderr)
        for error in result.errors:
            print(f"\t[-] {error.message}", file=sys.stderr)
        if args.fail_on_errors:
            return 4
    return 0


def _cmd_cache(args: argparse.Namespace, settings: config.Settings) -> int:
    source = _source(settings)
    if args.operation == "path":
        print(source.cache_path)
    elif args.operation == "delete":
        if source.delete_cache():
            print("[*] Deleted AWS IAM actions cache.", file=sys.stderr)
        else:
            print("[!] No AWS IAM actions cache found to delete.", file=sys.stderr)
    else:
        if not source.is_remote:
            raise CLIError(f"Catalog source '{source.location}' is a local file; nothing to cache")
        source.use_cache = True
        ActionCatalog.load(source.refresh())
        print("[*] Updated AWS IAM actions cache.", file=sys.stderr)
    return 0


# ---------------------------------------------------------------------------
# Helpers


def _source(settings: config.Settings) -> CatalogSource:
    return CatalogSource(
        location=settings.catalog_source,
        cache_path=Path(settings.cache_path),
        use_cache=settings.use_cache,
        timeout=settings.request_timeout,
        user_agent=settings.user_agent,
    )


def _load_matcher(settings: config.Settings) -> GlobMatcher:
    source = _source(settings)
    raw = source.load()
    if source.origin == "cache":
        print("[*] Using cached AWS IAM actions data...", file=sys.stderr)
    elif source.origin == "remote":
        print("[*] Fetched AWS IAM actions.", file=sys.stderr)
    return GlobMatcher.from_raw(raw)


def _load_policy(path: Path) -> object:
    try:
        return output.load_json(path)
    except OSError as exc:
        raise CLIError(f"Could not read policy file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise CLIError(f"Policy file {path} is not valid JSON: {exc}") from exc


def main() -> None:
    raise SystemExit(app())


if __name__ == "__main__":
    main()
