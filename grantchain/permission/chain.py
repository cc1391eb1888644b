"""Sequential execution of chain tasks"""

import logging
from typing import Callable

from .tasks import ChainTask

logger = logging.getLogger(__name__)


class RequestChain:
    """
    An immutable sequence of tasks with a progress index.

    There is no driving loop: a task's ``finish()`` calls ``advance()``, which
    activates the next task, so at most one task is ever in flight.
    """

    def __init__(self, tasks: list[ChainTask], on_complete: Callable[[], None]):
        self.tasks: tuple[ChainTask, ...] = tuple(tasks)
        self.index = -1
        self._on_complete = on_complete
        for task in self.tasks:
            task.chain = self

    @property
    def current(self) -> ChainTask | None:
        if 0 <= self.index < len(self.tasks):
            return self.tasks[self.index]
        return None

    @property
    def complete(self) -> bool:
        return self.index >= len(self.tasks)

    def start(self):
        if self.index != -1:
            raise RuntimeError("Request chain already started")
        self._step()

    def advance(self, task: ChainTask):
        if task is not self.current:
            logger.warning(f"Ignoring advance from inactive {task.name} task")
            return
        self._step()

    def _step(self):
        self.index += 1
        if self.index < len(self.tasks):
            self.tasks[self.index].activate()
        else:
            logger.debug("Request chain complete")
            self._on_complete()
