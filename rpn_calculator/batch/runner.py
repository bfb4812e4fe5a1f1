"""Batch runner evaluating many RPN expressions using worker processes."""
from multiprocessing import Pipe, Process, cpu_count
from multiprocessing.connection import Connection
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, TextIO

from pydantic import BaseModel, ConfigDict, Field

from rpn_calculator.batch.worker import WorkerProcess
from rpn_calculator.common.logger import logger

Payload = Dict[str, Any]

# Payload kind reported when a worker exits without sending anything
WORKER_CRASHED = "worker_crashed"


class ActiveWorker(NamedTuple):
    """A running worker together with the expression it evaluates."""

    process: Process
    conn: Connection
    line_number: int
    expression: str


def format_payload(payload: Payload) -> str:
    """
    Render a worker payload as one output line.

    :param dict payload: Payload sent by a WorkerProcess

    :return: ``"<expr> = <result>"`` or ``"<expr> -> ERROR: <message>"``
    :rtype: str
    """
    if "result" in payload:
        return f"{payload['expression']} = {payload['result']}"
    return f"{payload['expression']} -> ERROR: {payload['error']}"


class BatchRunner(BaseModel):
    """
    Evaluate a list of RPN expressions in parallel worker processes.

    Features:
        - Spawns one worker process per expression.
        - Writes results immediately to disk as soon as a worker finishes.
        - Ensures each worker is destroyed immediately after finishing.
        - Handles multiple simultaneous workers up to max_workers (CPU count by default).
    """

    # Allow arbitrary types like multiprocessing.Connection
    model_config = ConfigDict(arbitrary_types_allowed=True)

    output_file: Path = Field(..., description="Path to write computation results")
    max_workers: Optional[int] = Field(
        default=None, ge=1, description="Maximum simultaneous workers, CPU count when unset"
    )

    def _spawn_worker(self, expr: str, line_number: int) -> ActiveWorker:
        """
        Spawn a WorkerProcess for the given expression.

        :param str expr: RPN expression
        :param int line_number: Line number of expression in input

        :return: The started process, the parent end of its pipe and its input
        :rtype: ActiveWorker
        """
        parent_conn, child_conn = Pipe()
        worker = WorkerProcess(conn=child_conn, expression=expr, line_number=line_number)
        process = Process(target=worker.run)
        process.start()
        # The child owns its end now
        child_conn.close()
        return ActiveWorker(process, parent_conn, line_number, expr)

    def _crash_payload(self, worker: ActiveWorker) -> Payload:
        """Build the error payload of a worker that exited without sending one."""
        worker.process.join()
        logger.error(
            f"👷💥 Worker on line {worker.line_number} exited with code "
            f"{worker.process.exitcode} without a result"
        )
        return {
            "line": worker.line_number,
            "expression": worker.expression,
            "error": f"Worker exited with code {worker.process.exitcode} without a result",
            "kind": WORKER_CRASHED,
        }

    def _collect_finished_workers(
        self,
        active_workers: List[ActiveWorker],
        f_out: TextIO,
        payloads: List[Payload],
    ) -> None:
        """
        Collect results from all finished workers and write them to the output file.

        Finished workers are removed from the active_workers list. A worker
        that exits without sending a payload is reported as an error line
        carrying its exit code.

        :param list active_workers: List of ActiveWorker
        :param TextIO f_out: Open file handle for writing results
        :param list payloads: List receiving every collected payload
        """
        # Iterate in reverse to safely remove finished workers while iterating
        for i in reversed(range(len(active_workers))):
            worker = active_workers[i]
            if worker.process.is_alive() and not worker.conn.poll():
                continue

            # poll() is also true at EOF, when the worker closed its end unsent
            try:
                payload: Payload = worker.conn.recv()
            except EOFError:
                payload = self._crash_payload(worker)

            worker.conn.close()
            worker.process.join()
            active_workers.pop(i)

            f_out.write(format_payload(payload) + "\n")
            f_out.flush()
            payloads.append(payload)

    def run(self, expressions: List[str]) -> List[Payload]:
        """
        Evaluate every expression and write one line per result to the output file.

        Lines are written in completion order; the returned payloads are
        sorted by line number.

        :param List[str] expressions: Non-empty RPN expressions, one per input line

        :return: Worker payloads ordered by line number
        :rtype: List[Payload]
        """
        logger.info(f"🧮 Evaluating {len(expressions)} expressions into {self.output_file}")

        payloads: List[Payload] = []
        with self.output_file.open("w", encoding="utf-8") as f_out:
            if not expressions:
                return payloads

            # Limit number of active workers to CPU cores or number of expressions
            max_workers: int = min(self.max_workers or cpu_count(), len(expressions))
            active_workers: List[ActiveWorker] = []

            for line_number, expr in enumerate(expressions, start=1):
                # Wait until a worker slot is available
                while len(active_workers) >= max_workers:
                    self._collect_finished_workers(active_workers, f_out, payloads)

                active_workers.append(self._spawn_worker(expr, line_number))

            # Collect remaining active workers
            while active_workers:
                self._collect_finished_workers(active_workers, f_out, payloads)

        failures = sum(1 for payload in payloads if "error" in payload)
        logger.info(f"🧮✅ Batch finished: {len(payloads) - failures} succeeded, {failures} failed")
        return sorted(payloads, key=lambda payload: payload["line"])
