"""
Debounced pro forma recalculation.

An input form edits assumptions on every keystroke; RecalculationSession
waits for the edits to settle before running the pro forma, and makes sure
only the newest submission can publish results.

State machine:

    IDLE --submit--> DEBOUNCING --delay--> COMPUTING --> DONE
                          ^                    |
                          +------submit--------+   (superseded run is dropped)

Every submit bumps a generation counter. A run whose generation is no
longer current when it wakes up or finishes is discarded.
"""

import asyncio
import enum
import logging
from typing import Any, Callable, Mapping, Optional, Union

from propfolio.calculations.assumptions import PropertyAssumptions, normalize_assumptions
from propfolio.calculations.proforma import ProFormaResults, calculate_proforma
from propfolio.config import get_settings

logger = logging.getLogger(__name__)

AssumptionInput = Union[Mapping[str, Any], PropertyAssumptions]


class RecalcState(str, enum.Enum):
    """Recalculation lifecycle state."""

    idle = "idle"
    debouncing = "debouncing"
    computing = "computing"
    done = "done"


def has_meaningful_inputs(assumptions: AssumptionInput) -> bool:
    """True once a purchase price or any rental income has been entered."""
    normalized = normalize_assumptions(assumptions)
    return normalized.purchase_price > 0 or any(
        income > 0 for income in normalized.potential_rental_income
    )


class RecalculationSession:
    """Debounces assumption edits into pro forma runs. Last submission wins."""

    def __init__(
        self,
        debounce_seconds: Optional[float] = None,
        calculator: Callable[[AssumptionInput], ProFormaResults] = calculate_proforma,
    ):
        if debounce_seconds is None:
            debounce_seconds = get_settings().recalc_debounce_seconds
        self.debounce_seconds = debounce_seconds
        self.calculator = calculator

        self.state = RecalcState.idle
        self.generation = 0
        self.results: Optional[ProFormaResults] = None
        self.error: Optional[str] = None
        self._task: Optional[asyncio.Task] = None

    def submit(self, assumptions: AssumptionInput) -> int:
        """
        Schedule a recalculation, superseding any pending one.

        Must be called from a running event loop.

        Returns:
            Generation number of this submission
        """
        self.generation += 1
        generation = self.generation

        self._cancel_pending()
        self.state = RecalcState.debouncing
        self._task = asyncio.get_running_loop().create_task(self._run(generation, assumptions))

        return generation

    def cancel(self) -> None:
        """Drop any pending run and invalidate in-flight results."""
        self.generation += 1
        self._cancel_pending()
        self.state = RecalcState.done if self.results is not None else RecalcState.idle

    async def wait(self) -> Optional[ProFormaResults]:
        """Wait until the newest submission has settled and return its results."""
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})
        return self.results

    def is_current(self, generation: int) -> bool:
        return generation == self.generation

    def _cancel_pending(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()

    def _fail(self, generation: int, message: str) -> None:
        if self.is_current(generation):
            # Keep the last good results on screen
            self.error = message
            self.state = RecalcState.done

    async def _run(self, generation: int, assumptions: AssumptionInput) -> None:
        await asyncio.sleep(self.debounce_seconds)

        if not self.is_current(generation):
            return

        if not has_meaningful_inputs(assumptions):
            # Nothing entered yet: clear rather than show an all-zero model
            self.results = None
            self.error = None
            self.state = RecalcState.done
            return

        self.state = RecalcState.computing

        try:
            results = await asyncio.to_thread(self.calculator, assumptions)
        except ValueError as e:
            logger.warning(f"Recalculation {generation} failed: {e}")
            self._fail(generation, str(e))
            return
        except Exception as e:
            logger.exception(f"Recalculation {generation} raised unexpectedly")
            self._fail(generation, f"Calculation error: {e}")
            return

        if not self.is_current(generation):
            logger.debug(f"Discarding superseded recalculation {generation}")
            return

        self.results = results
        self.error = None
        self.state = RecalcState.done
