# worldforge/services/saga.py
"""
Ordered multi-step operations with a per-step failure policy.

A fatal step aborts the saga: completed steps are compensated in reverse
order and the original exception propagates. A non-fatal step failure is
logged and recorded, and the saga carries on with the next step.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


@dataclass
class SagaStep:
    name: str
    action: Callable[[Dict[str, Any]], Any]
    fatal: bool = True
    compensate: Optional[Callable[[Dict[str, Any]], None]] = None


@dataclass
class SagaResult:
    context: Dict[str, Any]
    completed: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def status(self) -> str:
        return "degraded" if self.failed else "complete"


class Saga:
    def __init__(
        self,
        name: str,
        steps: List[SagaStep],
        on_step_error: Optional[Callable[[SagaStep, Exception], None]] = None,
    ):
        self.name = name
        self.steps = steps
        # Called after any failing step, e.g. to roll back the session
        self.on_step_error = on_step_error

    def run(self, context: Optional[Dict[str, Any]] = None) -> SagaResult:
        result = SagaResult(context=context if context is not None else {})
        done: List[SagaStep] = []

        for step in self.steps:
            try:
                value = step.action(result.context)
                if value is not None:
                    result.context[step.name] = value
                done.append(step)
                result.completed.append(step.name)
            except Exception as e:
                if self.on_step_error:
                    self.on_step_error(step, e)

                if step.fatal:
                    logger.error(f"Saga {self.name}: fatal step {step.name} failed: {e}")
                    self._compensate(done, result.context)
                    raise

                logger.warning(f"Saga {self.name}: step {step.name} failed, continuing: {e}")
                result.failed.append(step.name)
                result.errors[step.name] = str(e)

        return result

    def _compensate(self, done: List[SagaStep], context: Dict[str, Any]) -> None:
        for step in reversed(done):
            if not step.compensate:
                continue
            try:
                step.compensate(context)
            except Exception as e:
                logger.error(f"Saga {self.name}: compensation for {step.name} failed: {e}")
