# src/flatsrc/cli.py
import sys
import argparse
import logging
from pathlib import Path
from typing import Optional

# Module imports
from flatsrc.config import DEFAULT_DEPTH_LIMIT, DEFAULT_MAX_TOKENS
from flatsrc.core.flatten import flatten
from flatsrc.core.formatter import render_summary
from flatsrc.errors import FlattenError
from flatsrc.models import FlattenRequest
from flatsrc.utils.tokenizer import ESTIMATORS


def setup_logging(debug: bool) -> None:
    """Diagnostics go to stderr so stdout carries only the artifact."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))

    logger = logging.getLogger("flatsrc")
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)


def create_arg_parser():
    parser = argparse.ArgumentParser(
        prog="flatsrc",
        description="Flatten matching source files into one LLM-friendly text block, within a token budget."
    )
    parser.add_argument("--pattern", type=str, default="", help="Regular expression matched against the full file path")
    parser.add_argument("--extension", type=str, default="", help="Wildcard matched against the file name (e.g. *.go)")
    parser.add_argument(
        "--max-input-tokens",
        type=int,
        default=DEFAULT_MAX_TOKENS,
        help=f"Maximum estimated tokens in the output (default: {DEFAULT_MAX_TOKENS})",
    )
    parser.add_argument(
        "--depth-limit",
        type=int,
        default=DEFAULT_DEPTH_LIMIT,
        help=f"Maximum directory depth to search (default: {DEFAULT_DEPTH_LIMIT})",
    )
    parser.add_argument("-p", "--path", type=str, default="", help="Directory to search (default: current directory)")
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Gitignore-style pattern to exclude (repeatable)",
    )
    parser.add_argument(
        "--tokenizer",
        choices=sorted(ESTIMATORS),
        default="heuristic",
        help="Token counting strategy used for the budget (default: heuristic)",
    )
    parser.add_argument("-o", "--output", type=str, default=None, help="Write the result to a file instead of stdout")
    parser.add_argument("-d", "--debug", action="store_true", help="Print diagnostics and a summary to stderr")
    return parser


def output_exclude_pattern(output: str, base_path: Path) -> Optional[str]:
    """Anchored exclude pattern for an output file written inside the search root."""
    output_path = Path(output).resolve()
    try:
        rel_path = output_path.relative_to(base_path.resolve())
    except ValueError:
        return None
    escaped = "".join("\\" + ch if ch in "\\*?[]" else ch for ch in rel_path.as_posix())
    return "/" + escaped


def main(argv=None):
    parser = create_arg_parser()
    args = parser.parse_args(argv)

    setup_logging(args.debug)

    try:
        base_path = Path(args.path) if args.path else Path.cwd()
        exclude = list(args.exclude)
        if args.output:
            # Never read back our own previous output
            own_output = output_exclude_pattern(args.output, base_path)
            if own_output:
                exclude.append(own_output)

        request = FlattenRequest.create(
            pattern=args.pattern,
            extension=args.extension,
            max_tokens=args.max_input_tokens,
            depth_limit=args.depth_limit,
            base_path=base_path,
            debug=args.debug,
            exclude=exclude,
        )
        result = flatten(request, estimator=ESTIMATORS[args.tokenizer])

        if args.output:
            output_file = Path(args.output)
            try:
                output_file.write_text(result.text, encoding="utf-8")
            except OSError as e:
                print(f"Error writing file: {e}", file=sys.stderr)
                sys.exit(1)
            print(f"Context written to: {output_file}", file=sys.stderr)
        else:
            sys.stdout.write(result.text)

        if request.debug:
            sys.stderr.write(render_summary(result))

    except FlattenError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
