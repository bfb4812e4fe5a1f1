"""Tokenize and validate Reverse Polish Notation expressions."""
from dataclasses import dataclass
from enum import Enum
import math
from typing import List, Optional, Union

from rpn_calculator.common.errors import (
    EmptyExpressionError,
    InvalidTokenError,
    NoOperandError,
    TooManyOperatorsError,
)


class Operator(str, Enum):
    """Closed set of binary operators understood by the calculator."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    POW = "^"


SUPPORTED_OPERATORS: List[str] = [op.value for op in Operator]


@dataclass(frozen=True)
class OperandToken:
    """A token holding a number, parsed once during validation."""

    text: str
    value: float


@dataclass(frozen=True)
class OperatorToken:
    """A token holding one of the supported operators."""

    text: str
    operator: Operator


ClassifiedToken = Union[OperandToken, OperatorToken]


class RPNParser:
    """
    Turn a raw RPN string into classified tokens ready for evaluation.

    Phases:
        1. Tokenize on whitespace
        2. Classify each token as operand or operator
        3. Reject expressions whose operand/operator counts cannot work

    No arithmetic happens here. Any token ``float()`` accepts with a finite
    value is an operand, so "-2.5", "+4" and "1e3" are all numbers while
    "inf" and "nan" are invalid tokens.
    """

    @staticmethod
    def tokenize(expr: str) -> List[str]:
        """
        Split an RPN expression into tokens.

        :param str expr: Raw expression, surrounding whitespace is ignored

        :return: Non-empty list of tokens
        :rtype: List[str]
        :raises EmptyExpressionError: If the expression holds no token
        """
        tokens: List[str] = expr.strip().split()
        if not tokens:
            raise EmptyExpressionError()
        return tokens

    @staticmethod
    def _parse_number(token: str) -> Optional[float]:
        """
        Parse a token as a finite number.

        :param str token: Token string

        :return: The parsed value, or None when the token is not a finite number
        :rtype: Optional[float]
        """
        try:
            value = float(token)
        except ValueError:
            return None
        if not math.isfinite(value):
            return None
        return value

    @staticmethod
    def classify(tokens: List[str]) -> List[ClassifiedToken]:
        """
        Classify every token as an operand or an operator.

        :param List[str] tokens: Tokens in input order

        :return: Classified tokens in input order
        :rtype: List[ClassifiedToken]
        :raises InvalidTokenError: On the first token that is neither
        """
        classified: List[ClassifiedToken] = []
        for token in tokens:
            if token in SUPPORTED_OPERATORS:
                classified.append(OperatorToken(text=token, operator=Operator(token)))
                continue
            value = RPNParser._parse_number(token)
            if value is None:
                raise InvalidTokenError(token)
            classified.append(OperandToken(text=token, value=value))
        return classified

    @staticmethod
    def validate(classified: List[ClassifiedToken]) -> None:
        """
        Count-based sanity checks run before evaluation.

        This is a fast reject only: an expression passing it may still fail
        during evaluation ("1 + 2" has the right counts in the wrong order).

        :param List[ClassifiedToken] classified: Output of classify()

        :raises NoOperandError: If there is no number at all
        :raises TooManyOperatorsError: If operators are not fewer than operands
        """
        operand_count = sum(1 for token in classified if isinstance(token, OperandToken))
        operator_count = len(classified) - operand_count

        if operand_count == 0:
            raise NoOperandError()

        if operator_count >= operand_count:
            raise TooManyOperatorsError(
                operator=RPNParser._first_starved_operator(classified),
                operator_count=operator_count,
                operand_count=operand_count,
            )

    @staticmethod
    def _first_starved_operator(classified: List[ClassifiedToken]) -> str:
        """Return the first operator reached with fewer than two values available."""
        depth = 0
        for token in classified:
            if isinstance(token, OperandToken):
                depth += 1
            elif depth < 2:
                return token.text
            else:
                depth -= 1
        # Unreachable when operators are not fewer than operands
        raise AssertionError("every operator has enough operands")

    @staticmethod
    def parse(expr: str) -> List[ClassifiedToken]:
        """
        Tokenize, classify and validate an expression.

        :param str expr: Raw RPN expression

        :return: Classified tokens ready for the evaluator
        :rtype: List[ClassifiedToken]
        :raises CalculationError: If the expression fails any static check
        """
        classified = RPNParser.classify(RPNParser.tokenize(expr))
        RPNParser.validate(classified)
        return classified
