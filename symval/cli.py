#!/usr/bin/env python3
"""
symval CLI - Symbolic Value Tool.

A unified command-line interface for symval's capabilities:
- demo: Build and render a small mixed concrete/symbolic expression
- solve: Decide satisfiability of an SMT-LIB 2 file
- parse: Parse and display a rendered value
- encode: Encode a constraint over rendered values as an SMT-LIB query

Usage:
    symval demo                                  # (MUL (ADD 10 <x:8>) (XOR 50 <y:8>))
    symval solve query.smt2                      # SAT / UNSAT / UNDEF
    symval parse "(ADD 10 <x:8>)" --format tree  # Display value structure
    symval encode "(ADD 10 <x:8>)" --eq 15       # Print SMT-LIB query
"""

import argparse
import json
import sys
import time
from typing import List

from symval import __version__


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser"""
    from symval.core.value import SCALAR_TYPES

    parser = argparse.ArgumentParser(
        prog="symval",
        description="symval - Symbolic Value Tool",
        epilog="Use 'symval <command> --help' for more information on a specific command.",
    )

    parser.add_argument(
        "-V", "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # === DEMO command ===
    demo_parser = subparsers.add_parser(
        "demo",
        help="Render a sample expression",
        description="Build (10 + x) * (50 ^ y) and print its rendering."
    )
    demo_parser.add_argument(
        "-t", "--type",
        default="u8",
        choices=sorted(SCALAR_TYPES),
        help="Scalar type (default: u8)"
    )

    # === SOLVE command ===
    solve_parser = subparsers.add_parser(
        "solve",
        help="Decide satisfiability of an SMT-LIB 2 file",
        description="Run Z3 on an SMT-LIB 2 file and report SAT, UNSAT or UNDEF."
    )
    solve_parser.add_argument(
        "file",
        help="SMT-LIB 2 file with assertions and check-sat"
    )
    solve_parser.add_argument(
        "--timeout",
        type=int,
        default=None,
        help="Solver timeout in ms (default: no limit)"
    )
    solve_parser.add_argument(
        "--rlimit",
        type=int,
        default=None,
        help="Solver resource limit (default: no limit)"
    )
    solve_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show solver progress"
    )
    solve_parser.add_argument(
        "-f", "--format",
        default="text",
        choices=["text", "json"],
        help="Output format (default: text)"
    )

    # === PARSE command ===
    parse_parser = subparsers.add_parser(
        "parse",
        help="Parse and display a rendered value",
        description="Parse a rendered value such as '(ADD 10 <x:8>)' and display it."
    )
    parse_parser.add_argument(
        "value",
        help="Rendered value to parse"
    )
    parse_parser.add_argument(
        "-t", "--type",
        default="u8",
        choices=sorted(SCALAR_TYPES),
        help="Scalar type of literals and variables (default: u8)"
    )
    parse_parser.add_argument(
        "-f", "--format",
        default="text",
        choices=["text", "json", "tree"],
        help="Output format (default: text)"
    )

    # === ENCODE command ===
    encode_parser = subparsers.add_parser(
        "encode",
        help="Encode a constraint as an SMT-LIB query",
        description="Encode a rendered value, or a relation between two, as SMT-LIB 2."
    )
    encode_parser.add_argument(
        "value",
        help="Rendered value to encode"
    )
    encode_parser.add_argument(
        "-t", "--type",
        default="u8",
        choices=sorted(SCALAR_TYPES),
        help="Scalar type of literals and variables (default: u8)"
    )
    relation = encode_parser.add_mutually_exclusive_group()
    relation.add_argument(
        "--eq",
        metavar="TARGET",
        help="Assert VALUE = TARGET"
    )
    relation.add_argument(
        "--neq",
        metavar="TARGET",
        help="Assert VALUE != TARGET"
    )
    encode_parser.add_argument(
        "--solve",
        action="store_true",
        help="Also decide the query with Z3 (requires --eq or --neq)"
    )
    encode_parser.add_argument(
        "--timeout",
        type=int,
        default=None,
        help="Solver timeout in ms when solving (default: no limit)"
    )
    encode_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show solver progress"
    )

    return parser


# ============================================================================
# DEMO Command
# ============================================================================

def cmd_demo(args) -> int:
    """Execute demo command - build and render a sample expression"""
    from symval.core.value import SCALAR_TYPES, concrete, symbolic

    scalar_type = SCALAR_TYPES[args.type]

    a = concrete(10, scalar_type)
    b = concrete(50, scalar_type)
    c = symbolic("x", scalar_type)
    d = symbolic("y", scalar_type)

    e = a + c
    f = b ^ d
    g = e * f
    print(g)
    return 0


# ============================================================================
# SOLVE Command
# ============================================================================

def cmd_solve(args) -> int:
    """Execute solve command - decide one SMT-LIB file"""
    from symval.solving import Oracle
    from symval.errors import SymvalError

    oracle = Oracle(timeout=args.timeout, rlimit=args.rlimit, verbose=args.verbose)

    start_time = time.time()
    try:
        result = oracle.solve(args.file)
    except SymvalError as e:
        if args.format == "json":
            print(json.dumps({"file": args.file, "error": str(e), "result": None}, indent=2))
        else:
            print(f"Error: {e}", file=sys.stderr)
        return 1

    elapsed_ms = (time.time() - start_time) * 1000

    if args.format == "json":
        print(json.dumps({
            "file": args.file,
            "result": result.value,
            "time_ms": round(elapsed_ms, 2)
        }, indent=2))
    else:
        print(result.value)

    return 0


# ============================================================================
# PARSE Command
# ============================================================================

def cmd_parse(args) -> int:
    """Execute parse command - parse and display a rendered value"""
    from symval.core.value import SCALAR_TYPES
    from symval.core.parser import parse
    from symval.errors import ParseError

    try:
        value = parse(args.value, SCALAR_TYPES[args.type])
    except ParseError as e:
        print(f"Parse error: {e}", file=sys.stderr)
        return 1

    if args.format == "json":
        try:
            text = json.dumps(value_to_dict(value), indent=2)
        except RecursionError:
            print("Error: value is nested too deeply for JSON output", file=sys.stderr)
            return 1
        print(text)
    elif args.format == "tree":
        print(value_to_tree(value))
    else:
        print(value)

    return 0


def value_to_dict(value) -> dict:
    """Convert a value to dictionary representation"""
    from symval.core.value import Concrete, Variable, reduce_tree

    def leaf(node):
        if isinstance(node, Concrete):
            return {"type": "concrete", "value": int(node.value)}
        elif isinstance(node, Variable):
            return {"type": "variable", "name": node.name, "bit_width": node.bit_width}
        return {"type": "unknown", "repr": str(node)}

    def equation(node, left, right):
        return {"type": "equation", "op": node.op.value, "operands": [left, right]}

    return reduce_tree(value, leaf, equation)


def value_to_tree(value, prefix="", is_last=True) -> str:
    """Convert a value to tree visualization"""
    from symval.core.value import Equation

    lines = []
    stack = [(value, prefix, is_last)]
    while stack:
        node, node_prefix, last = stack.pop()
        connector = "└── " if last else "├── "
        if isinstance(node, Equation):
            lines.append(f"{node_prefix}{connector}{node.op.value}")
            child_prefix = node_prefix + ("    " if last else "│   ")
            stack.append((node.right, child_prefix, True))
            stack.append((node.left, child_prefix, False))
        else:
            lines.append(f"{node_prefix}{connector}{node}")
    return "\n".join(lines)


# ============================================================================
# ENCODE Command
# ============================================================================

def cmd_encode(args) -> int:
    """Execute encode command - print an SMT-LIB query and optionally solve it"""
    from symval.core.value import SCALAR_TYPES
    from symval.core.parser import parse
    from symval.encoding import Eq, Neq, SmtLibEncoder
    from symval.solving import Oracle
    from symval.errors import SymvalError

    scalar_type = SCALAR_TYPES[args.type]
    encoder = SmtLibEncoder(signed=scalar_type.signed)

    target_text = args.eq if args.eq is not None else args.neq
    if args.solve and target_text is None:
        print("Error: --solve requires --eq or --neq", file=sys.stderr)
        return 1

    try:
        value = parse(args.value, scalar_type)
        if target_text is None:
            print(encoder.encode_term(value))
            return 0

        target = parse(target_text, scalar_type)
        constraint = Eq(value, target) if args.eq is not None else Neq(value, target)
        query = encoder.encode_query([constraint])
        print(query, end="")

        if args.solve:
            oracle = Oracle(timeout=args.timeout, verbose=args.verbose)
            result = oracle.solve_text(query)
            print(f"; result: {result.value}")
    except SymvalError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


# ============================================================================
# Main Entry Point
# ============================================================================

def main(argv: List[str] = None) -> int:
    """Main CLI entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    # Dispatch to command handler
    commands = {
        "demo": cmd_demo,
        "solve": cmd_solve,
        "parse": cmd_parse,
        "encode": cmd_encode,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
