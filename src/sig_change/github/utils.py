from gidgethub.abc import GitHubAPI
from sanic.log import logger

from sig_change.config import Config
from sig_change.messages import Messages
from sig_change.github.models import (
    ActionIdentifier,
    CheckRunConclusion,
    CheckRunCreate,
    CheckRunEvent,
    CheckRunStatus,
    CheckRunUpdate,
    CheckSuiteEvent,
)
from sig_change import metrics


def check_runs_url(full_name: str) -> str:
    return f"/repos/{full_name}/check-runs"


def check_run_url(full_name: str, check_run_id: int) -> str:
    return f"{check_runs_url(full_name)}/{check_run_id}"


async def post_check_run(
    gh: GitHubAPI, full_name: str, payload: CheckRunCreate, config: Config
):
    url = check_runs_url(full_name)
    logger.debug(
        "Creating check run '%s' for sha %s: %s", payload.name, payload.head_sha, url
    )
    if config.STERILE:
        logger.info("STERILE mode: would create check run at %s", url)
        return
    await gh.post(url, data=payload.model_dump(mode="json", exclude_none=True))
    metrics.check_run_updates_total.labels(CheckRunStatus.queued, "none").inc()


async def patch_check_run(
    gh: GitHubAPI,
    full_name: str,
    check_run_id: int,
    payload: CheckRunUpdate,
    config: Config,
):
    url = check_run_url(full_name, check_run_id)
    logger.debug(
        "Updating check run %d to %s (%s): %s",
        check_run_id,
        payload.status,
        payload.conclusion,
        url,
    )
    if config.STERILE:
        logger.info("STERILE mode: would update check run at %s", url)
        return
    await gh.patch(url, data=payload.model_dump(mode="json", exclude_none=True))
    metrics.check_run_updates_total.labels(
        payload.status, payload.conclusion or "none"
    ).inc()


async def create_check_run(
    gh: GitHubAPI,
    event: CheckSuiteEvent | CheckRunEvent,
    messages: Messages,
    config: Config,
):
    # rerequested check runs carry their own sha, suites carry the head sha
    if isinstance(event, CheckRunEvent):
        head_sha = event.check_run.head_sha
    else:
        head_sha = event.check_suite.head_sha

    await post_check_run(
        gh,
        event.repository.full_name,
        CheckRunCreate(name=messages.check_name, head_sha=head_sha),
        config,
    )


async def initiate_check_run(
    gh: GitHubAPI, event: CheckRunEvent, messages: Messages, config: Config
):
    full_name = event.repository.full_name
    check_run_id = event.check_run.id

    await patch_check_run(
        gh,
        full_name,
        check_run_id,
        CheckRunUpdate(status=CheckRunStatus.in_progress),
        config,
    )

    await patch_check_run(
        gh,
        full_name,
        check_run_id,
        CheckRunUpdate(
            status=CheckRunStatus.completed,
            conclusion=CheckRunConclusion.failure,
            output=messages.question,
            actions=list(messages.question_actions),
        ),
        config,
    )


async def take_requested_action(
    gh: GitHubAPI, event: CheckRunEvent, messages: Messages, config: Config
):
    if event.requested_action is None:
        logger.debug("requested_action event without requested action, ignoring")
        return

    identifier = event.requested_action.identifier
    logger.debug("Requested action: %s", identifier)

    match identifier:
        case ActionIdentifier.not_sig_change:
            update = CheckRunUpdate(
                status=CheckRunStatus.completed,
                conclusion=CheckRunConclusion.success,
            )
        case ActionIdentifier.is_sig_change:
            update = CheckRunUpdate(
                status=CheckRunStatus.completed,
                conclusion=CheckRunConclusion.failure,
                output=messages.sia_required,
                actions=list(messages.sia_actions),
            )
        case _:
            logger.debug("Unknown requested action %s, ignoring", identifier)
            return

    await patch_check_run(
        gh, event.repository.full_name, event.check_run.id, update, config
    )
