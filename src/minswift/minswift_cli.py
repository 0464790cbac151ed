"""
MinSwift CLI Entrypoint.

Runs the front end over a source file or an inline string and prints the result
as JSON, either the token list or the parsed AST.

Example usage:
    minswift program.swift
    minswift -s "func f(a: Int) -> Int { a * 2 }" --pretty
    minswift program.swift --tokens
    minswift program.swift --no-strict -o ast.json

Functions:
    run_minswift(source: str, is_string: bool = False, tokens_only: bool = False,
                 strict: bool = True, out: str | None = None, pretty: bool = False) -> int:
        Lex and parse, then emit JSON. Returns the process exit code.

    main(argv: list[str] | None = None) -> int:
        Parses CLI arguments, configures logging and invokes `run_minswift`.
"""

import argparse
import json
import logging
import sys

from minswift.minswift_lexer import tokenize
from minswift.minswift_parser import Parser

logger = logging.getLogger(__name__)

SOURCE_SUFFIXES = (".swift", ".minswift")


def run_minswift(
    source: str,
    is_string: bool = False,
    tokens_only: bool = False,
    strict: bool = True,
    out: str | None = None,
    pretty: bool = False,
) -> int:
    """
    Run the MinSwift front end: lex, parse, and write JSON output.

    Args:
        source (str): The MinSwift source code or path to a source file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        tokens_only (bool): If True, emit the token list and skip parsing.
        strict (bool): If False, recover from top-level errors and report them as diagnostics.
        out (str | None): Optional path to write the JSON output. If None, prints to stdout.
        pretty (bool): If True, indent the JSON output.

    Returns:
        int: 0 on success, 1 if lexing or parsing reported any error.

    Raises:
        ValueError: If `is_string` is False and the file suffix is not recognized.
    """
    if not is_string and not source.endswith(SOURCE_SUFFIXES):
        raise ValueError(f"Only {', '.join(SOURCE_SUFFIXES)} files are supported.")
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    try:
        tokens = tokenize(source)
        logger.debug("lexed %d token(s)", len(tokens))
        if tokens_only:
            payload: list[object] = [tok.to_dict() for tok in tokens]
            status = 0
        else:
            parser = Parser(tokens, strict=strict)
            ast = parser.parse()
            payload = [node.to_dict() for node in ast]
            for diag in parser.diagnostics:
                print(f"error: {diag}", file=sys.stderr)
            status = 1 if parser.diagnostics else 0
    except SyntaxError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    text = json.dumps(payload, indent=2 if pretty else None)
    if out:
        with open(out, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        logger.info("wrote output to %s", out)
    else:
        print(text)
    return status


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the MinSwift CLI.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `--tokens`: Dump the token list instead of the AST.
        - `--no-strict`: Report top-level errors as diagnostics and keep parsing.
        - `-o`, `--out`: Write JSON output to a file.
        - `-p`, `--pretty`: Indent the JSON output.
        - `--verbose`: Enable debug logging on stderr.
    """
    parser = argparse.ArgumentParser(prog="minswift")
    parser.add_argument("source", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "--tokens", action="store_true", help="Print tokens instead of the AST"
    )
    parser.add_argument(
        "--no-strict",
        dest="strict",
        action="store_false",
        help="Recover from top-level errors and report them",
    )
    parser.add_argument("-o", "--out", metavar="OUTFILE", help="Output to file")
    parser.add_argument(
        "-p", "--pretty", action="store_true", help="Indent JSON output"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING, stream=sys.stderr
    )

    try:
        return run_minswift(
            source=args.source,
            is_string=args.string,
            tokens_only=args.tokens,
            strict=args.strict,
            out=args.out,
            pretty=args.pretty,
        )
    except (OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
