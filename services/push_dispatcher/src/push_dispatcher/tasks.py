"""Celery tasks run outside the dispatch path."""

from push_dispatcher.celery import app
from push_dispatcher.pruning import PRUNE_TASK_NAME, TokenPruner


@app.task(name=PRUNE_TASK_NAME)
def prune_device_token(user_id: str, token: str) -> bool:
    """Remove a token the gateway reported as dead.

    Returns whether the removal was written. Failures are not retried: the
    token is reported again on the next send to that user.
    """
    pruner: TokenPruner = app.conf._token_pruner
    return pruner.prune(user_id, token).success
