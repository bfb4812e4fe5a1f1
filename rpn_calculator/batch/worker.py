"""Child-process side of a batch run: one RPN expression per process."""
from multiprocessing.connection import Connection
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rpn_calculator.common.calculator import evaluate
from rpn_calculator.common.errors import CalculationError
from rpn_calculator.common.logger import logger


class WorkerProcess(BaseModel):
    """
    Evaluate one line of a batch input inside a child process.

    The payload sent back to the BatchRunner is a plain dict so it pickles
    across the pipe:
        - ``{"line", "expression", "result"}`` when evaluation succeeds
        - ``{"line", "expression", "error", "kind"}`` on a CalculationError

    Any other exception escapes ``run()`` and ends the process without a
    payload; the runner reports that from the exit code.
    """

    # Frozen once handed to the child; Connection is not a pydantic type
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    conn: Connection = Field(..., description="Child end of the pipe to the BatchRunner")
    expression: str = Field(..., description="RPN expression read from the input file")
    line_number: int = Field(..., ge=1, description="1-based position among the non-empty input lines")

    @field_validator("expression")
    def expression_must_not_be_empty(cls, v: str) -> str:
        """Blank lines are filtered by the reader and never reach a worker."""
        if not v.strip():
            raise ValueError("Expression cannot be empty")
        return v

    def run(self) -> None:
        """
        Evaluate the expression and send exactly one payload to the runner.

        :return: None
        """
        logger.info(f"👷🏁 Line {self.line_number}: evaluating {self.expression!r}")

        result: Optional[float] = None

        try:
            result = evaluate(self.expression).result
            self.conn.send(
                {
                    "line": self.line_number,
                    "expression": self.expression,
                    "result": result,
                }
            )

        except CalculationError as exc:
            logger.error(f"👷❌ Line {self.line_number}: {exc.kind.value}: {exc.message}")
            self.conn.send(
                {
                    "line": self.line_number,
                    "expression": self.expression,
                    "error": exc.message,
                    "kind": exc.kind.value,
                }
            )

        finally:
            # The runner reads EOF as "exited without a payload"
            self.conn.close()

            if result is not None:
                logger.info(f"👷✅ Line {self.line_number}: {result}")
