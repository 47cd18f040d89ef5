"""Client-specific test fixtures — API error responses."""

from __future__ import annotations

import pytest
from kubernetes.client.rest import ApiException


@pytest.fixture
def api_not_found() -> ApiException:
    return ApiException(status=404, reason="Not Found")


@pytest.fixture
def api_forbidden() -> ApiException:
    return ApiException(status=403, reason="Forbidden")


@pytest.fixture
def api_unavailable() -> ApiException:
    """503 is the usual answer from a control plane that is temporarily unreachable."""
    return ApiException(status=503, reason="Service Unavailable")
