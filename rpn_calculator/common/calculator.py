"""Entry points evaluating RPN expressions into CalculationResult objects."""
from typing import List, Optional

from rpn_calculator.common.evaluator import RPNEvaluator
from rpn_calculator.common.operations import (
    CalculationExample,
    CalculationRequest,
    CalculationResult,
    CalculatorInfo,
    Step,
)
from rpn_calculator.common.parser import SUPPORTED_OPERATORS, RPNParser

__version__ = "1.0.0"

EXAMPLES: List[CalculationExample] = [
    CalculationExample(infix="(3 + 4) * 5", rpn="3 4 + 5 *", result=35.0),
    CalculationExample(infix="5 + ((1 + 2) * 4) - 3", rpn="5 1 2 + 4 * + 3 -", result=14.0),
    CalculationExample(
        infix="15 / (7 - (1 + 1)) * 3 - (2 + (1 + 1))",
        rpn="15 7 1 1 + - / 3 * 2 1 1 + + -",
        result=5.0,
    ),
    CalculationExample(infix="(1 + 2) * (3 + 4)", rpn="1 2 + 3 4 + *", result=21.0),
    CalculationExample(infix="(4 + 2) + 3 * (5 - 1)", rpn="4 2 + 3 5 1 - * +", result=18.0),
    CalculationExample(infix="2 ^ 3", rpn="2 3 ^", result=8.0),
]


def evaluate(expression: str, verbose: bool = False) -> CalculationResult:
    """
    Evaluate an RPN expression.

    :param str expression: RPN expression, tokens separated by whitespace
    :param bool verbose: Also return the step-by-step trace

    :return: Result with the trimmed expression, value, optional steps and timestamp
    :rtype: CalculationResult
    :raises CalculationError: If the expression cannot be evaluated
    """
    tokens = RPNParser.parse(expression)
    steps: Optional[List[Step]] = [] if verbose else None
    result = RPNEvaluator.evaluate(tokens, steps)
    return CalculationResult(
        expression=expression.strip(),
        result=result,
        steps=tuple(steps) if steps is not None else None,
    )


def calculate(request: CalculationRequest) -> CalculationResult:
    """Evaluate a validated CalculationRequest."""
    return evaluate(request.expression, verbose=request.verbose)


def get_info() -> CalculatorInfo:
    """Describe the calculator and what it supports."""
    return CalculatorInfo(
        name="RPN Calculator",
        version=__version__,
        supported_operators=list(SUPPORTED_OPERATORS),
        description="Reverse Polish Notation calculator",
        features=[
            "Basic arithmetic operations",
            "Exponentiation",
            "Step-by-step verbose mode",
            "Input validation",
            "Error handling",
            "Parallel batch evaluation",
        ],
    )
