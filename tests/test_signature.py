import hashlib
import hmac

import pytest
from gidgethub import ValidationFailure

from sig_change.signature import Signature, verify_signature

BODY = b'{"action": "requested", "check_suite": {"head_sha": "abc123"}}'
SECRET = "s3cr3t"


def github_header(body: bytes, secret: str, algorithm: str) -> str:
    digest = hmac.new(secret.encode(), body, getattr(hashlib, algorithm)).hexdigest()
    return f"{algorithm}={digest}"


@pytest.mark.parametrize("algorithm", ["sha1", "sha256"])
def test_verify_signature_accepts(algorithm):
    verify_signature(BODY, github_header(BODY, SECRET, algorithm), SECRET)


@pytest.mark.parametrize("position", [0, 1, len(BODY) // 2, len(BODY) - 1])
def test_verify_signature_rejects_mutated_body(position):
    header = github_header(BODY, SECRET, "sha256")
    mutated = bytearray(BODY)
    mutated[position] ^= 0x01

    with pytest.raises(ValidationFailure):
        verify_signature(bytes(mutated), header, SECRET)


@pytest.mark.parametrize("position", range(len(SECRET)))
def test_verify_signature_rejects_mutated_secret(position):
    header = github_header(BODY, SECRET, "sha256")
    mutated = SECRET[:position] + chr(ord(SECRET[position]) ^ 0x01) + SECRET[position + 1 :]

    with pytest.raises(ValidationFailure):
        verify_signature(BODY, header, mutated)


def test_verify_signature_uses_declared_algorithm():
    # a sha1 digest declared as sha256 must not verify
    digest = github_header(BODY, SECRET, "sha1").split("=", 1)[1]

    with pytest.raises(ValidationFailure):
        verify_signature(BODY, f"sha256={digest}", SECRET)


def test_verify_signature_operates_on_raw_bytes():
    reserialized = b'{"action":"requested","check_suite":{"head_sha":"abc123"}}'
    header = github_header(BODY, SECRET, "sha256")

    with pytest.raises(ValidationFailure):
        verify_signature(reserialized, header, SECRET)


@pytest.mark.parametrize(
    "header",
    [None, "", "sha256", "sha256=", "=abcdef", "md5=abcdef", "sha256=ü"],
)
def test_verify_signature_rejects_malformed_header(header):
    with pytest.raises(ValidationFailure):
        verify_signature(BODY, header, SECRET)


def test_verify_signature_rejects_sha512():
    with pytest.raises(ValidationFailure):
        verify_signature(BODY, github_header(BODY, SECRET, "sha512"), SECRET)


def test_signature_header():
    header = Signature(SECRET, algorithm="sha1").header(BODY)

    assert header == github_header(BODY, SECRET, "sha1")
    verify_signature(BODY, header, SECRET)
