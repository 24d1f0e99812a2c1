"""Main CLI entry point for the wish-xml command-line tool.

Checks, reformats and searches XML documents, and dumps settings files.
"""

import argparse
import json
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

from wish_xml import __version__
from wish_xml.api import XMLCodec
from wish_xml.settings import SettingsFile
from wish_xml.shared import (
    ConfigError,
    XMLConfig,
    XMLError,
    collect_statistics,
    configure_logging,
    get_logger,
)
from wish_xml.shared.result import resident_memory

MS_PER_SECOND = 1000


def load_config(config_path: Optional[Path]) -> XMLConfig:
    """Load an :class:`XMLConfig` from a JSON file, or the default one."""
    if config_path is None:
        return XMLConfig.default()
    return XMLConfig.from_json(config_path.read_text(encoding="utf-8"))


class XMLProcessor:
    """Core document processing logic for CLI operations."""

    def __init__(self, config: XMLConfig):
        self.config = config
        self.codec = XMLCodec(config)
        self.logger = get_logger(__name__, None, "cli_processor")

    def check_file(self, file_path: Path) -> Dict[str, Any]:
        """Parse one file and report its statistics or the failure."""
        memory_before = resident_memory()
        start_time = time.perf_counter()
        try:
            root = self.codec.parse_file(file_path)
        except (XMLError, OSError, UnicodeError) as e:
            self.logger.error("Failed to check file", extra={"file": str(file_path)})
            return {"file": str(file_path), "success": False, "error": str(e)}

        stats = collect_statistics(root)
        stats.processing_time_ms = (time.perf_counter() - start_time) * MS_PER_SECOND
        stats.memory_used_bytes = max(0, resident_memory() - memory_before)
        stats.characters_read = self.codec.characters_read
        return {
            "file": str(file_path),
            "success": True,
            "root": root.name,
            "statistics": stats.to_dict(),
        }


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="wish-xml",
        description="Read, check and rewrite small XML documents"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Check command
    check_parser = subparsers.add_parser("check", help="Parse files and report statistics")
    check_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="XML files to check"
    )
    check_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format (default: text)"
    )

    # Format command
    format_parser = subparsers.add_parser("format", help="Re-serialize a document")
    format_parser.add_argument("path", type=Path, help="XML file to format")
    format_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )

    # Find command
    find_parser = subparsers.add_parser("find", help="Print the first matching element")
    find_parser.add_argument("path", type=Path, help="XML file to search")
    find_parser.add_argument("--tag", "-t", help="Element name to match")
    find_parser.add_argument("--attribute", "-a", help="Attribute name to match")

    # Settings command
    settings_parser = subparsers.add_parser("settings", help="Dump a settings file as JSON")
    settings_parser.add_argument("path", type=Path, help="Settings file to read")

    # Global options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="JSON configuration file"
    )

    return parser


def format_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format check results for output."""
    if format_type == "json":
        return json.dumps(results, indent=2)

    if not results:
        return "No results to display."

    successful = sum(1 for r in results if r["success"])
    lines = [f"Checked {len(results)} files, {successful} successful", "-" * 60]
    for result in results:
        if result["success"]:
            stats = result["statistics"]
            lines.append(f"OK   {result['file']}")
            lines.append(
                f"     Root: {result['root']}, Elements: {stats['elements']}, "
                f"Attributes: {stats['attributes']}, Depth: {stats['max_depth']}, "
                f"Time: {stats['processing_time_ms']:.1f}ms"
            )
        else:
            lines.append(f"FAIL {result['file']}")
            lines.append(f"     Error: {result['error']}")
    return "\n".join(lines)


def cmd_check(args: argparse.Namespace, config: XMLConfig) -> int:
    """Handle check command."""
    processor = XMLProcessor(config)
    results = [processor.check_file(path) for path in args.paths]
    print(format_results(results, args.format))
    return 0 if all(r["success"] for r in results) else 1


def cmd_format(args: argparse.Namespace, config: XMLConfig) -> int:
    """Handle format command."""
    codec = XMLCodec(config)
    root = codec.parse_file(args.path)
    if args.output:
        codec.write_file(root, args.output)
        print(f"Formatted document written to {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(codec.to_string(root))
    return 0


def cmd_find(args: argparse.Namespace, config: XMLConfig) -> int:
    """Handle find command."""
    if not args.tag and not args.attribute:
        print("find requires --tag, --attribute or both", file=sys.stderr)
        return 2

    codec = XMLCodec(config)
    root = codec.parse_file(args.path)
    if args.tag:
        match = root.find_element(args.tag, args.attribute)
    else:
        match = root.find_attribute(args.attribute)

    if match is None:
        print("No matching element", file=sys.stderr)
        return 1
    sys.stdout.write(codec.to_string(match, preamble=False))
    return 0


def cmd_settings(args: argparse.Namespace, config: XMLConfig) -> int:
    """Handle settings command."""
    if not args.path.is_file():
        print(f"File not found: {args.path}", file=sys.stderr)
        return 1

    settings = SettingsFile(args.path, encoding=config.reader.encoding)
    print(json.dumps(
        {
            "file_id": settings.file_id,
            "settings": [{"label": s.label, "value": s.value} for s in settings],
        },
        indent=2
    ))
    return 0


COMMANDS = {
    "check": cmd_check,
    "format": cmd_format,
    "find": cmd_find,
    "settings": cmd_settings,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = load_config(args.config)
    except (ConfigError, OSError, UnicodeError) as e:
        print(f"Could not load config file: {e}", file=sys.stderr)
        return 2

    # Set up logging verbosity
    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")
    else:
        configure_logging(config.global_.logging_level)

    try:
        return COMMANDS[args.command](args, config)
    except (XMLError, OSError, UnicodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
