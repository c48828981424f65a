"""
Background scheduler for the batch jobs.

Uses APScheduler to run the periodic sweeps in background threads:
- **Liquidation check**: every ``liquidation_interval_minutes``
- **Trade exits** (stop loss / take profit): every ``trade_exits_interval_minutes``
- **Price alerts**: every ``alerts_interval_minutes``
- **Monthly ranking close**: day 1 at 00:05 UTC

Every job can also be triggered on demand with ``run_now``. Results of
scheduled and on-demand runs are kept in a bounded history.
"""

import logging
import threading
import time
from dataclasses import asdict, dataclass, field, is_dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger(__name__)

LIQUIDATION_JOB = "liquidate"
TRADE_EXITS_JOB = "process_trades"
ALERTS_JOB = "process_alerts"
MONTHLY_RESET_JOB = "monthly_reset"

JobFunction = Callable[[], Any]


class TaskStatus(Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class TaskResult:
    """Result of one job execution."""

    task_name: str
    status: TaskStatus
    started_at: str
    finished_at: Optional[str] = None
    duration_seconds: float = 0.0
    details: dict = field(default_factory=dict)
    error: Optional[str] = None


def _as_details(value: Any) -> dict:
    if value is None:
        return {}
    if is_dataclass(value):
        return asdict(value)
    if isinstance(value, dict):
        return value
    return {"result": str(value)}


class BatchScheduler:
    """Runs the batch jobs on their schedules.

    Args:
        jobs: Job name to zero-argument callable. Known names get their
            schedule from the intervals below; unknown names can only be
            run with ``run_now``.
        liquidation_minutes: Interval of the liquidation check.
        trade_exits_minutes: Interval of the trade-exit sweep.
        alerts_minutes: Interval of the alert processor.

    Usage:
        scheduler = BatchScheduler(jobs)
        scheduler.start()
        scheduler.run_now("liquidate")
        scheduler.stop()
    """

    def __init__(
        self,
        jobs: dict[str, JobFunction],
        liquidation_minutes: int = 1,
        trade_exits_minutes: int = 1,
        alerts_minutes: int = 5,
        max_history: int = 200,
    ) -> None:
        self._jobs = dict(jobs)
        self._intervals = {
            LIQUIDATION_JOB: liquidation_minutes,
            TRADE_EXITS_JOB: trade_exits_minutes,
            ALERTS_JOB: alerts_minutes,
        }
        self._task_history: list[TaskResult] = []
        self._max_history = max_history
        self._lock = threading.Lock()
        self._scheduler: Optional[BackgroundScheduler] = None

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None

    @property
    def task_history(self) -> list[TaskResult]:
        with self._lock:
            return list(self._task_history)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the scheduler with all configured jobs."""
        if self._scheduler is not None:
            logger.warning("Scheduler already running.")
            return

        self._scheduler = BackgroundScheduler(
            timezone="UTC",
            job_defaults={"coalesce": True, "max_instances": 1},
        )
        for name in self._jobs:
            trigger = self._trigger_for(name)
            if trigger is None:
                continue
            self._scheduler.add_job(
                self.run_now, trigger, args=[name], id=name, name=name
            )

        self._scheduler.start()
        logger.info("Scheduler started with %d jobs.", len(self._scheduler.get_jobs()))

    def stop(self) -> None:
        """Stop the scheduler without waiting for running jobs."""
        if self._scheduler is not None:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None
            logger.info("Scheduler stopped.")

    def _trigger_for(self, name: str):
        if name == MONTHLY_RESET_JOB:
            return CronTrigger(day=1, hour=0, minute=5, timezone="UTC")
        minutes = self._intervals.get(name)
        if minutes:
            return IntervalTrigger(minutes=minutes)
        return None

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def run_now(self, task_name: str) -> TaskResult:
        """Execute a named job immediately (blocking)."""
        started_at = datetime.now(timezone.utc).isoformat()
        fn = self._jobs.get(task_name)
        if fn is None:
            return TaskResult(
                task_name=task_name,
                status=TaskStatus.FAILED,
                started_at=started_at,
                error=f"Unknown task: {task_name}. Available: {sorted(self._jobs)}",
            )

        start = time.monotonic()
        try:
            details = _as_details(fn())
            result = TaskResult(
                task_name=task_name,
                status=TaskStatus.COMPLETED,
                started_at=started_at,
                finished_at=datetime.now(timezone.utc).isoformat(),
                duration_seconds=round(time.monotonic() - start, 2),
                details=details,
            )
        except Exception as exc:
            result = TaskResult(
                task_name=task_name,
                status=TaskStatus.FAILED,
                started_at=started_at,
                finished_at=datetime.now(timezone.utc).isoformat(),
                duration_seconds=round(time.monotonic() - start, 2),
                error=str(exc),
            )
            logger.exception("Scheduled task %s failed.", task_name)

        self._record_result(result)
        return result

    def _record_result(self, result: TaskResult) -> None:
        with self._lock:
            self._task_history.append(result)
            if len(self._task_history) > self._max_history:
                self._task_history = self._task_history[-self._max_history:]

    # ------------------------------------------------------------------
    # Status & introspection
    # ------------------------------------------------------------------

    def get_scheduled_jobs(self) -> list[dict]:
        if self._scheduler is None:
            return []
        return [
            {
                "id": job.id,
                "name": job.name,
                "next_run": str(job.next_run_time),
                "trigger": str(job.trigger),
            }
            for job in self._scheduler.get_jobs()
        ]

    def get_status(self) -> dict:
        recent = self.task_history[-10:]
        return {
            "running": self.is_running,
            "jobs": self.get_scheduled_jobs(),
            "recent_tasks": [
                {
                    "task": r.task_name,
                    "status": r.status.value,
                    "duration": r.duration_seconds,
                    "started_at": r.started_at,
                }
                for r in recent
            ],
        }
