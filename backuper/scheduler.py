"""
Minimal cron trigger.

Each registered job fires on its cron schedule (local time). Every fire runs
the job's task on a fresh daemon thread, so a slow job never delays another
job, nor a later fire of itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import datetime
import threading
from typing import Any, Callable, List, Optional

from croniter import croniter

from .logging import getLogger
from .utils import localNow

LOG = getLogger(__name__)

# upper bound on one sleep, so clock jumps are noticed
MAX_SLEEP = 60.0


@dataclass
class ScheduledJob:
    name: str
    schedule: str
    task: Callable[[], Any]
    nextRun: datetime.datetime
    itr: Any = field(repr=False, default=None)

    def advance(self, now: datetime.datetime) -> None:
        while self.nextRun <= now:
            self.nextRun = self.itr.get_next(datetime.datetime)


def invoke(job: ScheduledJob) -> None:
    try:
        job.task()
    except Exception:  # pylint: disable=broad-except
        LOG.exception("unhandled error in scheduled job %s", job.name)


def spawnThread(job: ScheduledJob) -> None:
    thread = threading.Thread(
        target=invoke, args=(job,), name="backup-" + job.name, daemon=True)
    thread.start()


class CronScheduler:
    def __init__(self, clock: Callable[[], datetime.datetime] = localNow,
                 spawn: Optional[Callable[[ScheduledJob], None]] = None):
        self._clock = clock
        self._spawn = spawn or spawnThread
        self._jobs: List[ScheduledJob] = []
        self._stopEvent = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def jobs(self) -> List[ScheduledJob]:
        return list(self._jobs)

    def addJob(self, name: str, schedule: str, task: Callable[[], Any]) -> ScheduledJob:
        itr = croniter(schedule, self._clock())
        job = ScheduledJob(name=name, schedule=schedule, task=task,
                           nextRun=itr.get_next(datetime.datetime), itr=itr)
        self._jobs.append(job)
        LOG.debug("scheduled %s (%s), next run %s", name, schedule, job.nextRun)
        return job

    def runPending(self, now: Optional[datetime.datetime] = None) -> List[str]:
        """Fire every job that is due at `now`; missed ticks fire once."""
        if now is None:
            now = self._clock()
        fired = []
        for job in self._jobs:
            if job.nextRun > now:
                continue
            LOG.debug("firing %s (due %s)", job.name, job.nextRun)
            job.advance(now)
            self._spawn(job)
            fired.append(job.name)
        return fired

    def secondsUntilNext(self, now: Optional[datetime.datetime] = None) -> float:
        if not self._jobs:
            return MAX_SLEEP
        if now is None:
            now = self._clock()
        nextRun = min(job.nextRun for job in self._jobs)
        return max(0.0, min(MAX_SLEEP, (nextRun - now).total_seconds()))

    def _loop(self) -> None:
        while not self._stopEvent.is_set():
            self.runPending()
            self._stopEvent.wait(self.secondsUntilNext())

    def start(self) -> None:
        assert self._thread is None
        self._stopEvent.clear()
        self._thread = threading.Thread(
            target=self._loop, name="backup-scheduler", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop firing. Runs already in flight are left to finish."""
        self._stopEvent.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
