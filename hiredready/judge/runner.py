import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from fastapi import Request

from hiredready.models import SubmissionStatus

logger = logging.getLogger(__name__)

REVEALED_CASES = 2
HIDDEN = "Hidden"


@dataclass
class CaseResult:
    passed: bool
    input: str
    output: str
    actual: str

    def to_dict(self) -> dict:
        return {"passed": self.passed, "input": self.input, "output": self.output, "actual": self.actual}


@dataclass
class ExecutionResult:
    status: str
    passed: int
    total: int
    execution_time_ms: int
    test_results: List[CaseResult] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "passed": self.passed,
            "total": self.total,
            "executionTime": self.execution_time_ms,
            "testResults": [r.to_dict() for r in self.test_results],
        }


class Judge(Protocol):
    def execute(self, code: str, language: str, test_cases: List[dict]) -> ExecutionResult:
        ...


def verdict(passed: int, total: int) -> str:
    if total > 0 and passed == total:
        return SubmissionStatus.ACCEPTED.value
    return SubmissionStatus.WRONG_ANSWER.value


def final_status(execution: ExecutionResult, total: int) -> str:
    """Status recorded on a submission; pass/fail verdicts are recounted against ``total``."""
    if execution.status in (SubmissionStatus.ACCEPTED.value, SubmissionStatus.WRONG_ANSWER.value):
        return verdict(execution.passed, total)
    return execution.status


def redacted_results(test_cases: List[dict], passed: int) -> List[CaseResult]:
    """Per-test breakdown; only the first two visible cases show their data.

    The first ``passed`` cases count as passing. Everything not revealed
    reads "Hidden" whether it passed or not.
    """
    results = []
    revealed = 0
    for index, case in enumerate(test_cases):
        ok = index < passed
        if not case.get("isHidden") and revealed < REVEALED_CASES:
            revealed += 1
            expected = case.get("expectedOutput", "")
            results.append(CaseResult(
                passed=ok,
                input=case.get("input", ""),
                output=expected,
                actual=expected if ok else "Wrong output",
            ))
        else:
            results.append(CaseResult(passed=ok, input=HIDDEN, output=HIDDEN, actual=HIDDEN))
    return results


class SimulatedJudge:
    """Stand-in for a sandboxed judge: nothing is executed.

    The pass count is drawn at random (at least one case passes when any
    exist). Swap in a real ``Judge`` to get actual verdicts.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def execute(self, code: str, language: str, test_cases: List[dict]) -> ExecutionResult:
        total = len(test_cases)
        passed = self.rng.randint(1, total) if total else 0
        execution_time_ms = self.rng.randint(50, 1049)
        logger.debug("Simulated %s run: %d/%d passed", language, passed, total)
        return ExecutionResult(
            status=verdict(passed, total),
            passed=passed,
            total=total,
            execution_time_ms=execution_time_ms,
            test_results=redacted_results(test_cases, passed),
        )


def get_judge(request: Request) -> Judge:
    return request.app.state.judge
