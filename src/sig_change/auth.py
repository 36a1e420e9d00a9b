import time
from dataclasses import dataclass
from typing import Any, Callable

import cachetools
from gidgethub import aiohttp as gh_aiohttp
from gidgethub.abc import GitHubAPI
from gidgethub.apps import get_jwt
import aiohttp
from sanic.log import logger

# GitHub refuses app JWTs valid for longer than ten minutes
JWT_LIFETIME = 10 * 60


@dataclass(frozen=True)
class AppCredential:
    token: str
    expires_at: float


class AppCredentialCache:
    """
    Holds the app JWT used to talk to GitHub as the app itself.

    A new JWT is minted whenever the cached one has expired or will expire
    within ``margin`` seconds.
    """

    def __init__(
        self,
        app_id: int,
        private_key: str,
        lifetime: int = JWT_LIFETIME,
        margin: int = 60,
        clock: Callable[[], float] = time.time,
    ):
        self.app_id = app_id
        self.private_key = private_key
        self.lifetime = lifetime
        self.margin = margin
        self.clock = clock
        self._credential: AppCredential | None = None

    def is_fresh(self, credential: AppCredential | None) -> bool:
        return (
            credential is not None
            and self.clock() < credential.expires_at - self.margin
        )

    def authenticate_app(self) -> AppCredential:
        credential = self._credential
        if credential is not None and self.is_fresh(credential):
            return credential

        logger.debug("Minting new app JWT for app %s", self.app_id)
        now = self.clock()
        token = get_jwt(
            app_id=str(self.app_id),
            private_key=self.private_key,
            expiration=self.lifetime,
        )
        credential = AppCredential(token=token, expires_at=now + self.lifetime)
        self._credential = credential
        return credential


async def authenticate_installation(
    gh: GitHubAPI, credential: AppCredential, installation_id: int
) -> dict[str, Any]:
    logger.debug("Requesting access token for installation %s", installation_id)
    return await gh.post(
        f"/app/installations/{installation_id}/access_tokens",
        data=b"",
        jwt=credential.token,
    )


async def client_for_installation(
    credentials: AppCredentialCache,
    installation_id: int,
    session: aiohttp.ClientSession,
    cache: cachetools.Cache | None = None,
) -> GitHubAPI:
    gh_pre = gh_aiohttp.GitHubAPI(session, __name__)
    access_token_response = await authenticate_installation(
        gh_pre, credentials.authenticate_app(), installation_id
    )

    token = access_token_response["token"]

    return gh_aiohttp.GitHubAPI(
        session,
        __name__,
        oauth_token=token,
        cache=cache,
    )
