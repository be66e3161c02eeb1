"""
Ember - Command Line Interface

Usage:
    ember program.em                 print the AST
    ember program.em --tokens        print the token stream
    ember - --tokens --raw < program.em
"""

import sys
import argparse
import logging

from .lexer import Lexer, LexerConfig, LexerError, clean_tokens
from .parser import Parser, ParseError, dump_ast

logger = logging.getLogger(__name__)


def read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="ember",
        description="Ember front end: tokenize and parse Ember source files",
    )
    parser.add_argument("input", help="Path to the source file, or - for stdin")
    parser.add_argument(
        "--tokens",
        action="store_true",
        help="Print the token stream instead of the AST",
    )
    parser.add_argument(
        "--raw",
        action="store_true",
        help="With --tokens, skip the token clean-up pass",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat unrecognized characters, unterminated strings and misaligned dedents as errors",
    )
    parser.add_argument(
        "--keep-comments",
        action="store_true",
        dest="keep_comments",
        help="Keep COMMENT tokens in the cleaned stream",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log lexer and parser diagnostics to stderr",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[ember] %(levelname)s %(name)s: %(message)s",
    )

    config = LexerConfig(strict=args.strict, keep_comments=args.keep_comments)
    filename = "<stdin>" if args.input == "-" else args.input

    try:
        source = read_source(args.input)
    except FileNotFoundError:
        print(f"[ember] Error: Input file not found: {args.input!r}", file=sys.stderr)
        sys.exit(1)
    except (OSError, UnicodeDecodeError) as e:
        print(f"[ember] Error: Cannot read {args.input!r}: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        lexer = Lexer(source, filename, config)
        tokens = lexer.tokenize()
        for warning in lexer.warnings:
            logger.warning(str(warning).rstrip())

        if not (args.tokens and args.raw):
            tokens = clean_tokens(tokens, keep_comments=config.keep_comments)

        if args.tokens:
            for token in tokens:
                print(f"{token.location.line}:{token.location.column}\t{token}")
        else:
            program = Parser(tokens).parse()
            print(dump_ast(program))
    except (LexerError, ParseError) as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
