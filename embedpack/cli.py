"""
Embedpack CLI.

Commands:
    generate   Embed files into a generated Python module
    info       Inspect a generated module (package, tags, files, sizes)

Examples:
    embedpack generate assets ./static -o assets.py
    embedpack generate assets ./static -o assets.py --gzip --strip 1
    embedpack generate assets static -w ./web --tags prod,linux
    embedpack info assets.py
"""

from __future__ import annotations

import argparse
import sys


def cmd_generate(args: argparse.Namespace) -> int:
    """Handle generate command."""
    from pydantic import ValidationError

    from embedpack.config import get_encoder_options, set_global_options
    from embedpack.encode import generate
    from embedpack.errors import EmbedpackError

    try:
        options = get_encoder_options(
            tags=args.tags,
            gzip=args.gzip,
            min_gzip_space_savings=args.min_gzip_space_savings,
        )
    except ValidationError as e:
        print(f"Error: invalid options: {e}", file=sys.stderr)
        return 1
    set_global_options(options)

    try:
        manifest = generate(
            args.package,
            args.files,
            output=args.output,
            strip=args.strip,
            options=options,
            cwd=args.cwd,
            verbose=args.verbose,
        )
        if args.output and not args.verbose:
            print(f"Created: {args.output} ({len(manifest)} files)", file=sys.stderr)
        return 0
    except (EmbedpackError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def load_generated_module(path: str):  # noqa: ANN201
    """Import a generated module from a file path."""
    import importlib.util
    from pathlib import Path

    module_path = Path(path)
    spec = importlib.util.spec_from_file_location(f"_embedpack_{module_path.stem}", module_path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load module: {path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def cmd_info(args: argparse.Namespace) -> int:
    """Handle info command."""
    from pathlib import Path

    from embedpack.errors import EmbedpackError

    module_path = Path(args.module)
    if not module_path.exists():
        print(f"Error: File not found: {module_path}", file=sys.stderr)
        return 1

    try:
        module = load_generated_module(str(module_path))
        fs = module.FS
        files = list(fs.walk())
    except (ImportError, AttributeError, SyntaxError) as e:
        print(f"Error: not a generated module: {e}", file=sys.stderr)
        return 1
    except EmbedpackError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Header
    print(f"Module: {module_path}")
    print(f"Size: {module_path.stat().st_size:,} bytes")
    print(f"Package: {module.PACKAGE}")
    if module.BUILD_TAGS:
        print(f"Build tags: {','.join(module.BUILD_TAGS)}")
    print(f"Format: {module.FORMAT_VERSION}")

    # Stats
    total = sum(info.size for info in files)
    stored = sum(info.stored_size for info in files)
    compressed = sum(1 for info in files if info.compressed)
    print()
    print("Stats:")
    print(f"  Files: {len(files)}")
    print(f"  Compressed: {compressed}")
    print(f"  Content size: {total:,} bytes")
    print(f"  Stored size: {stored:,} bytes")

    if args.list:
        print()
        print("Files:")
        for info in files:
            flag = "gz" if info.compressed else "  "
            print(f"  {flag} {info.size:>10,}  {info.mod_time.isoformat()}  {info.path}")

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entrypoint."""
    parser = argparse.ArgumentParser(
        prog="embedpack",
        description="Embed files into a generated Python module with a read-only filesystem.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # generate
    generate_parser = subparsers.add_parser(
        "generate",
        help="Embed files into a generated Python module",
        description=(
            "Generates a single Python source file for package PACKAGE with the "
            "given files embedded. Directories are added recursively."
        ),
    )
    generate_parser.add_argument(
        "package",
        help="Package name written into the generated module",
    )
    generate_parser.add_argument(
        "files",
        nargs="+",
        help="Files or directories to embed",
    )
    generate_parser.add_argument(
        "-o",
        "--output",
        help="Output filename (default: stdout)",
    )
    generate_parser.add_argument(
        "-w",
        "--cwd",
        default=None,
        help="Change working directory before reading files",
    )
    generate_parser.add_argument(
        "--tags",
        default="",
        help="Comma-delimited list of build tags",
    )
    generate_parser.add_argument(
        "--gzip",
        action="store_true",
        help="Compress data with gzip",
    )
    generate_parser.add_argument(
        "--min-gzip-space-savings",
        type=float,
        default=None,
        help="Minimal reduction in size relative to the uncompressed size in percent (default: 5)",
    )
    generate_parser.add_argument(
        "--strip",
        type=int,
        default=0,
        help="Remove the specified number of leading path elements",
    )
    generate_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print progress information",
    )

    # info
    info_parser = subparsers.add_parser(
        "info",
        help="Inspect a generated module",
    )
    info_parser.add_argument(
        "module",
        help="Path to a generated .py module",
    )
    info_parser.add_argument(
        "-l",
        "--list",
        action="store_true",
        help="List every embedded file",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "generate":
        return cmd_generate(args)
    elif args.command == "info":
        return cmd_info(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
