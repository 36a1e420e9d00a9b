import asyncio
import contextlib
import functools

from sanic import Sanic, response
import aiohttp
import gidgethub
from gidgethub.sansio import Event as GitHubEvent
from gidgethub import aiohttp as gh_aiohttp
from sanic.log import logger
from pydantic import ValidationError
import cachetools
from aiolimiter import AsyncLimiter
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from sig_change.config import Config
from sig_change.messages import Messages
from sig_change.github.router import router as github_router, classify, validate, Route
from sig_change.exceptions import InvalidPayloadError
import sig_change.auth as auth
from sig_change import metrics


def make_session(config: Config) -> aiohttp.ClientSession:
    return aiohttp.ClientSession(
        timeout=aiohttp.ClientTimeout(total=config.API_TIMEOUT)
    )


def with_session(func):
    @functools.wraps(func)
    async def wrapper(
        *args, app: Sanic, session: aiohttp.ClientSession | None = None, **kwargs
    ):
        async with contextlib.AsyncExitStack() as stack:
            if session is None:
                session = await stack.enter_async_context(make_session(app.ctx.config))
            return await func(*args, app=app, session=session, **kwargs)

    return wrapper


def parse_event(headers, body: bytes, secret: str) -> GitHubEvent:
    """
    Verify and decode a webhook delivery.

    Signature problems raise gidgethub.ValidationFailure, everything else that
    makes the delivery unreadable raises InvalidPayloadError.
    """
    try:
        event = GitHubEvent.from_http(headers, body, secret=secret)
    except TypeError as e:
        # hmac.compare_digest refuses non-ASCII digests
        raise gidgethub.ValidationFailure("signature is not a hex digest") from e
    except gidgethub.BadRequest as e:
        raise InvalidPayloadError(f"Unsupported delivery: {e}") from e
    except KeyError as e:
        raise InvalidPayloadError(f"Missing header {e}") from e
    except ValueError as e:
        raise InvalidPayloadError(f"Invalid JSON: {e}") from e

    if not isinstance(event.data, dict):
        raise InvalidPayloadError("Webhook payload is not a JSON object")

    return event


@with_session
async def handle_github_webhook(request, *, app: Sanic, session: aiohttp.ClientSession):
    config: Config = app.ctx.config

    try:
        event = parse_event(request.headers, request.body, config.WEBHOOK_SECRET)
    except gidgethub.ValidationFailure:
        metrics.signature_rejections_total.inc()
        raise

    logger.debug("---- received event %s", event.event)
    if "action" in event.data:
        logger.debug("----    action %s", event.data["action"])

    with metrics.track_webhook_processing(event.event):
        route = classify(event, config)
        if route is Route.unhandled:
            logger.debug("Nothing to do for event %s", event.event)
            return

        data = validate(event)
        logger.debug("Installation id: %s", data.installation.id)

        gh = await auth.client_for_installation(
            app.ctx.credentials,
            data.installation.id,
            session=session,
            cache=app.ctx.cache,
        )

        logger.debug("Dispatching event %s as %s", event.event, route)
        await github_router.dispatch(event, gh=gh, app=app, route=route, data=data)


def create_app(config: Config | None = None):
    if config is None:
        config = Config()  # type: ignore[call-arg]

    app = Sanic("sig-change")
    logger.setLevel(config.OVERRIDE_LOGGING)

    app.ctx.config = config
    app.ctx.messages = Messages.from_config(config)
    app.ctx.credentials = auth.AppCredentialCache(
        app_id=config.APP_ID, private_key=config.PRIVATE_KEY
    )
    app.ctx.cache = cachetools.LRUCache(maxsize=500)

    limiter = AsyncLimiter(10)

    @app.listener("before_server_start")
    async def init(app):
        logger.debug("Creating aiohttp session")
        app.ctx.aiohttp_session = make_session(config)

    @app.listener("after_server_stop")
    async def close(app):
        session = getattr(app.ctx, "aiohttp_session", None)
        if session is not None:
            logger.debug("Closing aiohttp session")
            await session.close()

    @app.exception(gidgethub.ValidationFailure)
    async def on_signature_mismatch(request, exception):
        logger.warning("Rejecting webhook: %s", exception)
        return response.text("Invalid signature", status=401)

    @app.exception(InvalidPayloadError, ValidationError)
    async def on_invalid_payload(request, exception):
        logger.warning("Invalid webhook payload: %s", exception)
        return response.text("Invalid payload", status=400)

    @app.exception(gidgethub.GitHubException, aiohttp.ClientError, asyncio.TimeoutError)
    async def on_github_error(request, exception):
        logger.error("GitHub API call failed: %r", exception)
        return response.text("GitHub API call failed", status=502)

    @app.route("/")
    async def index(request):
        logger.debug("status check")
        return response.text("ok")

    @app.route("/health")
    async def health(request):
        if not limiter.has_capacity():
            return response.text("Rate limited", status=429)
        await limiter.acquire()

        logger.info("Checking health")
        try:
            async with make_session(config) as session:
                gh = gh_aiohttp.GitHubAPI(session, __name__)
                credential = app.ctx.credentials.authenticate_app()
                app_info = await gh.getitem("/app", jwt=credential.token)
            github_ok = app_info is not None
            if not github_ok:
                logger.error("GitHub App info is None")
        except Exception as e:
            logger.error("GitHub App info failed: %s", e)
            logger.exception(e)
            github_ok = False

        status = 200 if github_ok else 500
        github_str = "ok" if github_ok else "not ok"
        return response.text(f"GitHub: {github_str}", status=status)

    @app.route("/metrics")
    async def prometheus_metrics(request):
        return response.raw(generate_latest(), content_type=CONTENT_TYPE_LATEST)

    @app.route("/event_handler", methods=["POST"])
    async def event_handler(request):
        logger.debug("Webhook received on event handler endpoint")

        await handle_github_webhook(
            request, app=app, session=getattr(app.ctx, "aiohttp_session", None)
        )

        return response.empty(200)

    return app
