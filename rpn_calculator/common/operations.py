"""Pydantic models for RPN calculation requests, traces and results."""
from datetime import datetime, timezone
from typing import Annotated, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class CalculationRequest(BaseModel):
    """Represents a single RPN evaluation request."""

    model_config = ConfigDict(frozen=True)

    expression: str = Field(..., description="RPN expression, tokens separated by whitespace")
    verbose: bool = Field(default=False, description="Record a step-by-step trace of the stack")


class PushStep(BaseModel):
    """An operand pushed onto the stack."""

    model_config = ConfigDict(frozen=True)

    action: Literal["push"] = "push"
    token: str = Field(..., description="Token as written in the expression")
    value: float = Field(..., description="Parsed value of the token")
    stack_snapshot: Tuple[float, ...] = Field(..., description="Stack contents after the push")


class OperationStep(BaseModel):
    """An operator applied to the two topmost stack values."""

    model_config = ConfigDict(frozen=True)

    action: Literal["operation"] = "operation"
    operator: str = Field(..., description="Operator symbol")
    operands: Tuple[float, float] = Field(..., description="Left and right operands, in push order")
    result: float = Field(..., description="Value pushed back onto the stack")
    stack_snapshot: Tuple[float, ...] = Field(..., description="Stack contents after the operation")


Step = Annotated[Union[PushStep, OperationStep], Field(discriminator="action")]


class CalculationResult(BaseModel):
    """Represents the result of an evaluated RPN expression."""

    model_config = ConfigDict(frozen=True)

    expression: str = Field(..., description="Trimmed RPN expression")
    result: float = Field(..., description="Evaluated numeric result of the expression")
    steps: Optional[Tuple[Step, ...]] = Field(
        default=None, description="Step-by-step trace, present only in verbose mode"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="UTC time the evaluation completed",
    )


class CalculationExample(BaseModel):
    """A worked example pairing an infix expression with its RPN form."""

    model_config = ConfigDict(frozen=True)

    infix: str
    rpn: str
    result: float


class CalculatorInfo(BaseModel):
    """Static description of the calculator capabilities."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    supported_operators: List[str]
    description: str
    features: List[str]
