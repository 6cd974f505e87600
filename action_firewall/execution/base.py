"""
Ranked fallback strategies.

One logical action ("put this value into that field") has no single reliable
realisation across real pages, so each verb owns an ordered list of
independent strategies. The pipeline tries them in order until one reports
success, then optionally reads the result back.
"""

import json
import logging
import traceback
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional, Sequence

from ..models import ExecutionResult

logger = logging.getLogger(__name__)

# (page, target) -> whether the page now reflects the target; raise if unreadable.
Verifier = Callable[[Any, Any], Awaitable[Optional[bool]]]


class Strategy(ABC):
    """
    One self-contained way of performing an action.

    ``attempt`` returns False when the target lacks the fields this strategy
    needs. Raising is treated the same as returning False.
    """

    name: str = ""

    @abstractmethod
    async def attempt(self, page: Any, target: Any) -> bool:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class FunctionStrategy(Strategy):
    """Wrap a plain coroutine function as a strategy."""

    def __init__(self, name: str, fn: Callable[[Any, Any], Awaitable[bool]]):
        self.name = name
        self._fn = fn

    async def attempt(self, page: Any, target: Any) -> bool:
        return await self._fn(page, target)


def describe_target(target: Any) -> str:
    to_dict = getattr(target, "to_dict", None)
    data = to_dict() if callable(to_dict) else target
    try:
        return json.dumps(data, default=str)
    except (TypeError, ValueError):
        return str(data)


class StrategyPipeline:
    """
    Runs strategies for one verb in a fixed order.

    Example::

        pipeline = StrategyPipeline("fill", FILL_STRATEGIES, verify=read_back_input)
        result = await pipeline.run(page, FillTarget(selector="#q", value="hello"))
    """

    def __init__(
        self,
        verb: str,
        strategies: Sequence[Strategy],
        verify: Optional[Verifier] = None,
    ):
        if not strategies:
            raise ValueError(f"Pipeline '{verb}' needs at least one strategy")
        self.verb = verb
        self.strategies = tuple(strategies)
        self.verify = verify

    def __len__(self) -> int:
        return len(self.strategies)

    async def run(self, page: Any, target: Any, read_back: bool = True) -> ExecutionResult:
        for index, strategy in enumerate(self.strategies, start=1):
            try:
                ok = await strategy.attempt(page, target)
            except Exception as e:
                logger.debug(f"{self.verb} strategy '{strategy.name}' raised {type(e).__name__}: {e}")
                logger.debug(traceback.format_exc())
                continue
            if not ok:
                continue

            verified = await self._read_back(page, target, strategy) if read_back else None
            logger.info(f"{self.verb} succeeded via '{strategy.name}' (#{index})")
            return ExecutionResult(
                success=True,
                method=strategy.name,
                method_index=index,
                verified=verified,
                attempts=index,
            )

        return ExecutionResult(
            success=False,
            error=(
                f"All {len(self.strategies)} {self.verb} methods failed for target: "
                f"{describe_target(target)}"
            ),
            attempts=len(self.strategies),
        )

    async def _read_back(self, page: Any, target: Any, strategy: Strategy) -> Optional[bool]:
        # The write call did not error, so a mismatch or an unreadable field
        # still counts as success.
        if self.verify is None:
            return None
        try:
            verified = await self.verify(page, target)
        except Exception as e:
            logger.debug(f"{self.verb} read-back after '{strategy.name}' failed: {e}")
            return None
        if verified is False:
            logger.warning(
                f"{self.verb} read-back mismatch after '{strategy.name}'; trusting the write"
            )
        return verified
