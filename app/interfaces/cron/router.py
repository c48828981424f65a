"""
Batch-job endpoints for an external cron service.

Every route requires ``Authorization: Bearer <CRON_SECRET>`` and returns
the summary of the run. Job failures go through the regular error
handlers, so a second monthly close answers 409. The scheduler status
route reports the in-process scheduler when it is enabled.
"""

import logging
from dataclasses import asdict
from typing import Any, Callable

from fastapi import APIRouter, Depends, Request

from app.infrastructure.scheduler import (
    ALERTS_JOB,
    LIQUIDATION_JOB,
    MONTHLY_RESET_JOB,
    TRADE_EXITS_JOB,
)
from app.interfaces.cron.jobs import get_batch_jobs
from app.interfaces.dependencies import verify_cron_secret

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/cron", tags=["cron"], dependencies=[Depends(verify_cron_secret)]
)

Jobs = dict[str, Callable[[], Any]]


def _run(jobs: Jobs, name: str) -> dict:
    logger.info("Cron request for job %s", name)
    result = asdict(jobs[name]())
    return {"job": name, **result}


@router.get("/liquidate", summary="Liquidate futures positions past their price")
def liquidate(jobs: Jobs = Depends(get_batch_jobs)) -> dict:
    return _run(jobs, LIQUIDATION_JOB)


@router.get("/process-trades", summary="Apply stop loss and take profit")
def process_trades(jobs: Jobs = Depends(get_batch_jobs)) -> dict:
    return _run(jobs, TRADE_EXITS_JOB)


@router.get("/process-alerts", summary="Evaluate active price alerts")
def process_alerts(jobs: Jobs = Depends(get_batch_jobs)) -> dict:
    return _run(jobs, ALERTS_JOB)


@router.get("/monthly-reset", summary="Close the previous month's ranking")
def monthly_reset(jobs: Jobs = Depends(get_batch_jobs)) -> dict:
    return _run(jobs, MONTHLY_RESET_JOB)


@router.get(
    "/scheduler/status",
    summary="In-process scheduler status",
    description="Registered jobs and recent runs of the in-process scheduler.",
)
def scheduler_status(request: Request) -> dict:
    scheduler = getattr(request.app.state, "scheduler", None)
    if scheduler is None:
        return {"running": False, "jobs": [], "recent_tasks": []}
    return scheduler.get_status()
