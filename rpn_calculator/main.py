"""
Command-line entrypoint for the RPN calculator.

Subcommands:
- eval: evaluate one expression, optionally printing every stack step
- batch: evaluate every line of a text file or archive in worker processes
- examples: list worked infix/RPN examples
- info: describe the calculator

Exit codes: 0 on success, 1 when an expression cannot be evaluated,
2 on invalid command-line usage.
"""

import argparse
import json
from pathlib import Path
import sys
from typing import Optional, Sequence

from pydantic import BaseModel, Field, FilePath, ValidationError

from rpn_calculator.batch.reader import ExpressionSource
from rpn_calculator.batch.runner import BatchRunner
from rpn_calculator.common.calculator import EXAMPLES, evaluate, get_info
from rpn_calculator.common.errors import CalculationError
from rpn_calculator.common.logger import logger
from rpn_calculator.common.operations import CalculationRequest, OperationStep, Step


class BatchArgs(BaseModel):
    """
    Pydantic model used to validate batch CLI arguments.

    Attributes
    ----------
    file_path : FilePath
        Path to the file containing RPN expressions.
    workers : Optional[int]
        Maximum simultaneous worker processes.
    """

    file_path: FilePath
    workers: Optional[int] = Field(default=None, ge=1)


def format_number(value: float) -> str:
    """Render integral values without a trailing ``.0``."""
    if value.is_integer():
        return str(int(value))
    return repr(value)


def render_step(step: Step) -> str:
    """
    Render one verbose step as a line of text.

    Examples
    --------
    Push 3 -> Stack: [3]
    3 + 4 = 7 -> Stack: [7]
    """
    stack = ", ".join(format_number(value) for value in step.stack_snapshot)
    if isinstance(step, OperationStep):
        a, b = step.operands
        return (
            f"{format_number(a)} {step.operator} {format_number(b)} = "
            f"{format_number(step.result)} -> Stack: [{stack}]"
        )
    return f"Push {format_number(step.value)} -> Stack: [{stack}]"


def build_output_path(input_path: Path) -> Path:
    """
    Construct a safe output file path based on the input file.

    - Preserves the original folder
    - Replaces dots in extensions with underscores
    - Appends '_results.txt' at the end

    Examples
    --------
    input: resources/operations_short.7z
    output: resources/operations_short_7z_results.txt
    input: resources/operations.tar.xz
    output: resources/operations_tar_xz_results.txt

    :param input_path: Path to the input file
    :return: Path to the output file
    """
    suffix_safe = "".join(input_path.suffixes).replace(".", "_")
    stem = input_path.name[: len(input_path.name) - len("".join(input_path.suffixes))]
    return input_path.with_name(f"{stem}{suffix_safe}_results.txt")


def cmd_eval(args: argparse.Namespace) -> int:
    """Evaluate a single expression and print its result."""
    request = CalculationRequest(expression=args.expression, verbose=args.verbose)
    try:
        result = evaluate(request.expression, verbose=request.verbose)
    except CalculationError as exc:
        if args.json:
            print(json.dumps({"success": False, "error": exc.to_dict()}))
        else:
            print(f"Error: {exc.message}", file=sys.stderr)
        return 1

    if args.json:
        # model_dump_json writes infinite and NaN results as null
        data = json.loads(result.model_dump_json())
        print(json.dumps({"success": True, "data": data}))
        return 0

    if result.steps is not None:
        for step in result.steps:
            print(render_step(step))
    print(f"Expression: {result.expression}")
    print(f"Result: {format_number(result.result)}")
    return 0


def cmd_batch(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    """Evaluate every expression of a file and write the results next to it."""
    try:
        batch_args = BatchArgs(file_path=args.file_path, workers=args.workers)
    except ValidationError as exc:
        parser.error(str(exc))

    input_path: Path = Path(batch_args.file_path)
    output_path: Path = build_output_path(input_path)

    try:
        expressions = ExpressionSource(path=input_path).expressions()
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    runner = BatchRunner(output_file=output_path, max_workers=batch_args.workers)
    payloads = runner.run(expressions)
    logger.info(f"📄 Results written to {output_path}")
    return 1 if any("error" in payload for payload in payloads) else 0


def cmd_examples(args: argparse.Namespace) -> int:
    """Print the worked examples."""
    for example in EXAMPLES:
        print(f"Infix: {example.infix}")
        print(f"RPN:   {example.rpn}")
        print(f"Result: {format_number(example.result)}")
        print()
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    """Print calculator information as JSON."""
    print(json.dumps(get_info().model_dump(), indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with every subcommand."""
    parser = argparse.ArgumentParser(
        prog="rpn-calculator", description="Reverse Polish Notation calculator"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    eval_parser = subparsers.add_parser("eval", help="Evaluate one RPN expression")
    eval_parser.add_argument("expression", help='RPN expression, e.g. "3 4 + 5 *"')
    eval_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Print every stack step"
    )
    eval_parser.add_argument("--json", action="store_true", help="Print the result as JSON")

    batch_parser = subparsers.add_parser(
        "batch", help="Evaluate every line of a text file or archive"
    )
    batch_parser.add_argument("file_path", help="Path to the file containing RPN expressions")
    batch_parser.add_argument(
        "-w", "--workers", type=int, default=None, help="Maximum simultaneous workers"
    )

    subparsers.add_parser("examples", help="List worked examples")
    subparsers.add_parser("info", help="Describe the calculator")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Parse arguments and run the requested subcommand.

    :param argv: Arguments, sys.argv[1:] when None
    :return: Process exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "eval":
        return cmd_eval(args)
    if args.command == "batch":
        return cmd_batch(args, parser)
    if args.command == "examples":
        return cmd_examples(args)
    return cmd_info(args)


if __name__ == "__main__":
    sys.exit(main())
