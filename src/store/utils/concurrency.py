"""Optimistic-concurrency retry for commands that mutate a single aggregate.

Protean versions every aggregate and rejects a write made against a stale
version with ``ExpectedVersionError``. Cart commands are safe to re-run from
scratch, so they are retried against fresh state a few times before giving up.
A provider failure that is not a version conflict is reported as ``StorageError``.
"""

import os

import structlog
from protean.exceptions import DatabaseError, ExpectedVersionError, TransactionError
from protean.utils.globals import current_domain
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_random

from store.errors import StorageError

logger = structlog.get_logger(__name__)

MAX_ATTEMPTS = int(os.getenv("STORE_CONFLICT_RETRIES", "3"))


def _log_retry(retry_state):
    logger.warning(
        "concurrency.retry",
        attempt=retry_state.attempt_number,
        fn=getattr(retry_state.fn, "__name__", repr(retry_state.fn)),
    )


def retry_on_conflict(fn=None, *, attempts=MAX_ATTEMPTS):
    """Retry ``fn`` when a concurrent writer bumped the aggregate version first."""
    decorator = retry(
        retry=retry_if_exception_type(ExpectedVersionError),
        stop=stop_after_attempt(attempts),
        wait=wait_random(min=0.005, max=0.05),
        before_sleep=_log_retry,
        reraise=True,
    )
    if fn is None:
        return decorator
    return decorator(fn)


@retry_on_conflict
def _process(command):
    return current_domain.process(command, asynchronous=False)


def process_with_retry(command):
    """Process a command synchronously, re-running it on a version conflict."""
    try:
        return _process(command)
    except (DatabaseError, TransactionError) as exc:
        logger.error("Command could not be persisted", command=command.__class__.__name__, error=repr(exc))
        raise StorageError("Changes could not be saved, please try again", command=command.__class__.__name__) from exc
