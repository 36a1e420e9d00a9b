import json
from pathlib import Path

import pytest
from unittest.mock import AsyncMock
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from sanic import Sanic
from sanic_testing import TestManager
from sanic.log import logger

from sig_change.config import Config

# every test builds a fresh app under the same name
Sanic.test_mode = True

SAMPLES = Path(__file__).parent / "samples"


def load_sample_data(filename):
    with open(SAMPLES / filename) as f:
        return json.load(f)


@pytest.fixture(scope="session")
def rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_key(rsa_key) -> str:
    return rsa_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()


@pytest.fixture(scope="session")
def public_key(rsa_key) -> str:
    return (
        rsa_key.public_key()
        .public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        .decode()
    )


@pytest.fixture
def config(private_key):
    config = Config(
        WEBHOOK_SECRET="abc",
        PRIVATE_KEY=private_key,
        APP_ID=12345,
        OVERRIDE_LOGGING="DEBUG",
        STERILE=False,
    )

    logger.setLevel(config.OVERRIDE_LOGGING)

    return config


@pytest.fixture(scope="function")
def app(config) -> Sanic:
    """Create a Sanic app for testing."""
    from sig_change.web import create_app

    app = create_app(config=config)
    TestManager(app)
    return app


@pytest.fixture
def session():
    return AsyncMock()


@pytest.fixture
def check_suite_requested():
    return load_sample_data("check_suite_requested.json")


@pytest.fixture
def check_run_created():
    return load_sample_data("check_run_created.json")


@pytest.fixture
def check_run_requested_action():
    return load_sample_data("check_run_requested_action.json")
