#!/usr/bin/env python3
"""
CLI tool for re-enqueueing captioning tasks that have no live queue message.

Use after the API logged "stored ... but not enqueued", or after a worker
logged CRITICAL "gave up after N retries".

Usage:
    python scripts/requeue_tasks.py --dry-run
    python scripts/requeue_tasks.py --status pending
    python scripts/requeue_tasks.py --status pending --status processing

Requirements:
    - Same environment (.env) as the API and workers
    - Redis and the broker reachable
"""

import argparse
import logging
import sys

from caption_service.application.services import RequeueTasksUseCase
from caption_service.application.tasks.celery_app import celery_app, settings
from caption_service.domain.captioning import TaskStatus
from caption_service.domain.shared.exceptions import InfrastructureError
from caption_service.infrastructure.persistence.redis import (
    RedisTaskStatusStore,
    close_connections,
    get_redis_client,
)
from caption_service.infrastructure.queue import CeleryTaskQueue

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

STATUS_CHOICES = {
    "pending": TaskStatus.PENDING,
    "processing": TaskStatus.PROCESSING,
}


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Re-publish queue messages for Pending/Processing captioning tasks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show what would be requeued
  python scripts/requeue_tasks.py --dry-run

  # Requeue only tasks that never reached a worker
  python scripts/requeue_tasks.py --status pending
        """,
    )

    parser.add_argument(
        "--status",
        action="append",
        choices=sorted(STATUS_CHOICES),
        help="Status to requeue (repeatable, default: pending and processing)",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List matching tasks without publishing",
    )

    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    statuses = [STATUS_CHOICES[name] for name in args.status] if args.status else None

    queue = CeleryTaskQueue(celery_app, settings.task_queue_name)
    try:
        store = RedisTaskStatusStore(get_redis_client(settings))
        report = RequeueTasksUseCase(store, queue).execute(
            statuses=statuses, dry_run=args.dry_run
        )
    except InfrastructureError as e:
        logger.error(f"Requeue aborted: {e}")
        return 1
    finally:
        queue.close()
        close_connections()

    for task_id in report.task_ids:
        print(task_id)
    return 0


if __name__ == "__main__":
    sys.exit(main())
