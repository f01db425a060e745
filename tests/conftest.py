# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Shared pytest fixtures used across multiple test packages."""

from collections.abc import Iterator

import pytest

from bucketbrowser.dotenv_loader import reset_dotenv_state
from bucketbrowser.logging import SecretFilter


@pytest.fixture(autouse=True)
def _isolate_process_state() -> Iterator[None]:
    """Reset registered secrets and the .env loaded flag around each test."""
    SecretFilter.clear_secrets()
    reset_dotenv_state()
    yield
    SecretFilter.clear_secrets()
    reset_dotenv_state()


@pytest.fixture
def aws_env() -> dict[str, str]:
    """A complete set of ``AWS_*`` variables."""
    return {
        "AWS_BUCKET_NAME": "test-bucket",
        "AWS_REGION": "eu-west-1",
        "AWS_ACCESS_KEY_ID": "AKIDTEST",
        "AWS_SECRET_ACCESS_KEY": "test-secret-key",
    }
