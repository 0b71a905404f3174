"""Execution strategies for running independent benchmark tasks."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Sequence

from tqdm import tqdm

# Optional Ray import for parallelization
try:
    import ray

    RAY_AVAILABLE = True
except ImportError:
    RAY_AVAILABLE = False

logger = logging.getLogger(__name__)

# func(shared, item) -> result. `shared` is the large read-only input
# (sample set, fitness function) that every task needs.
TaskFunction = Callable[[Any, Any], Any]


class ExecutionStrategy(ABC):
    """Abstract base class for task execution strategies."""

    @abstractmethod
    def map_tasks(
        self, func: TaskFunction, shared: Any, items: Sequence[Any], desc: str
    ) -> list[Any]:
        """Run func(shared, item) for every item and return results in item order.

        Returns only after every task has finished.
        """
        pass

    def shutdown(self) -> None:
        """Release any workers held by the strategy."""


class SequentialExecutionStrategy(ExecutionStrategy):
    """Execute tasks one after another with progress tracking."""

    def __init__(self, show_progress: bool = True):
        self.show_progress = show_progress

    def map_tasks(
        self, func: TaskFunction, shared: Any, items: Sequence[Any], desc: str
    ) -> list[Any]:
        """Run tasks sequentially with progress bar."""
        results = []
        for item in tqdm(items, desc=desc, disable=not self.show_progress, leave=False):
            results.append(func(shared, item))
        return results


class ParallelExecutionStrategy(ExecutionStrategy):
    """Execute tasks in parallel using Ray."""

    def __init__(self, ray_num_cpus: int | None = None, show_progress: bool = True):
        self.ray_num_cpus = ray_num_cpus
        self.show_progress = show_progress
        self._ray_initialized = False

    def map_tasks(
        self, func: TaskFunction, shared: Any, items: Sequence[Any], desc: str
    ) -> list[Any]:
        """Run tasks in parallel using Ray."""
        if not RAY_AVAILABLE or not self._initialize_ray():
            sequential_strategy = SequentialExecutionStrategy(self.show_progress)
            return sequential_strategy.map_tasks(func, shared, items, desc)

        return self._map_tasks_parallel(func, shared, items, desc)

    def _map_tasks_parallel(
        self, func: TaskFunction, shared: Any, items: Sequence[Any], desc: str
    ) -> list[Any]:
        """Internal parallel execution logic."""
        logger.debug("Using Ray parallel execution with %d tasks", len(items))

        # Put shared data in object store once, share across tasks
        shared_ref = ray.put(shared)

        future_results = [_run_task_parallel.remote(func, shared_ref, item) for item in items]
        future_index = {future: i for i, future in enumerate(future_results)}

        # Collect results maintaining submission order
        results: list[Any] = [None] * len(items)
        remaining_futures = future_results.copy()

        with tqdm(
            total=len(future_results),
            desc=f"{desc} (parallel)",
            disable=not self.show_progress,
            leave=False,
        ) as pbar:
            while remaining_futures:
                ready, remaining_futures = ray.wait(remaining_futures, num_returns=1)
                for future in ready:
                    results[future_index[future]] = ray.get(future)
                pbar.update(len(ready))

        return results

    def _initialize_ray(self) -> bool:
        """Initialize Ray if configured and available."""
        if self._ray_initialized:
            return True

        try:
            if ray.is_initialized():
                # Ray is already initialized, use existing instance
                self._ray_initialized = True
                return True

            # Initialize Ray with optional CPU limit
            init_kwargs = {"ignore_reinit_error": True}
            if self.ray_num_cpus is not None:
                init_kwargs["num_cpus"] = self.ray_num_cpus

            ray.init(**init_kwargs)
            self._ray_initialized = True
            return True

        except Exception as e:
            logger.warning("Failed to initialize Ray: %s", e)
            logger.warning("Falling back to sequential execution")
            return False

    def shutdown(self) -> None:
        """Clean up Ray resources if we initialized them."""
        if self._ray_initialized and ray.is_initialized():
            try:
                ray.shutdown()
            except Exception as e:
                logger.warning("Error during Ray cleanup: %s", e)
        self._ray_initialized = False


class ExecutionStrategyFactory:
    """Factory for creating execution strategies."""

    @staticmethod
    def create_strategy(
        use_ray: bool, ray_num_cpus: int | None = None, show_progress: bool = True
    ) -> ExecutionStrategy:
        """Create appropriate execution strategy based on configuration."""
        if use_ray and RAY_AVAILABLE:
            return ParallelExecutionStrategy(ray_num_cpus, show_progress)
        if use_ray:
            logger.warning("Ray is not installed; running sequentially")
        return SequentialExecutionStrategy(show_progress)


# Ray remote function for parallel execution
if RAY_AVAILABLE:

    @ray.remote
    def _run_task_parallel(func: TaskFunction, shared: Any, item: Any) -> Any:
        """Ray remote function for parallel task execution."""
        return func(shared, item)
