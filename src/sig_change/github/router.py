from enum import StrEnum

from gidgethub.routing import Router
from gidgethub.abc import GitHubAPI
from gidgethub.sansio import Event
from sanic.log import logger
from sanic import Sanic

from sig_change.github.utils import (
    create_check_run,
    initiate_check_run,
    take_requested_action,
)
from sig_change.github.models import CheckRunEvent, CheckSuiteEvent
from sig_change.config import Config

router = Router()

EVENT_MODELS: dict[str, type[CheckSuiteEvent] | type[CheckRunEvent]] = {
    "check_suite": CheckSuiteEvent,
    "check_run": CheckRunEvent,
}


class Route(StrEnum):
    create_check_run = "create_check_run"
    initiate_check_run = "initiate_check_run"
    take_requested_action = "take_requested_action"
    unhandled = "unhandled"


def check_run_app_id(event: Event) -> int | None:
    check_run = event.data.get("check_run")
    app = check_run.get("app") if isinstance(check_run, dict) else None
    return app.get("id") if isinstance(app, dict) else None


def classify(event: Event, config: Config) -> Route:
    """Map an (event type, action) pair onto the work it triggers."""
    action = event.data.get("action")

    match (event.event, action):
        case ("check_suite", "requested" | "rerequested"):
            return Route.create_check_run
        case ("check_run", _) if check_run_app_id(event) != config.APP_ID:
            # check runs of other apps are none of our business
            return Route.unhandled
        case ("check_run", "created"):
            return Route.initiate_check_run
        case ("check_run", "rerequested"):
            return Route.create_check_run
        case ("check_run", "requested_action"):
            return Route.take_requested_action
        case _:
            return Route.unhandled


def validate(event: Event) -> CheckSuiteEvent | CheckRunEvent:
    """Validate the payload of a routed event, raises pydantic.ValidationError."""
    return EVENT_MODELS[event.event].model_validate(event.data)


@router.register("check_suite")
async def on_check_suite(
    event: Event, gh: GitHubAPI, app: Sanic, route: Route, data: CheckSuiteEvent
):
    logger.debug("check_suite action %s => %s", data.action, route)
    if route is Route.create_check_run:
        await create_check_run(gh, data, app.ctx.messages, app.ctx.config)


@router.register("check_run")
async def on_check_run(
    event: Event, gh: GitHubAPI, app: Sanic, route: Route, data: CheckRunEvent
):
    logger.debug("check_run action %s => %s", data.action, route)
    messages = app.ctx.messages
    config: Config = app.ctx.config

    match route:
        case Route.create_check_run:
            await create_check_run(gh, data, messages, config)
        case Route.initiate_check_run:
            await initiate_check_run(gh, data, messages, config)
        case Route.take_requested_action:
            await take_requested_action(gh, data, messages, config)
        case Route.unhandled:
            logger.debug("Nothing to do for check_run %d", data.check_run.id)
