# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

The fixtures assemble the content service over the in-memory repository
and staging area, so unit and API tests run without external services.
"""

import pytest

from h5p_api.core.config import clear_settings_cache
from h5p_api.infrastructure.authorization import CapabilityGate
from h5p_api.infrastructure.memory import InMemoryContentRepository
from h5p_api.services.h5p import (
    Capability,
    ContentTypeRegistry,
    H5PContentService,
    H5PContentTypeHandler,
    RequestContext,
    Scope,
    StagingArea,
)

BASE_URL = "https://lms.example.com"
PRINCIPAL_ID = "user-7"
COURSE_COLLECTION_ID = 7


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (HTTP API)"
    )


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Make every test load settings from its own environment."""
    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Content Bank Fixtures
# =============================================================================


@pytest.fixture
def repository() -> InMemoryContentRepository:
    """Provide an in-memory repository with the system scope only."""
    return InMemoryContentRepository()


@pytest.fixture
def course_scope(repository: InMemoryContentRepository) -> Scope:
    """Provide a collection scope below the system scope."""
    return repository.add_scope(collection_id=COURSE_COLLECTION_ID)


@pytest.fixture
def staging() -> StagingArea:
    """Provide an in-memory staging area."""
    return StagingArea()


@pytest.fixture
def registry(repository: InMemoryContentRepository, staging: StagingArea) -> ContentTypeRegistry:
    """Provide a registry with the H5P handler registered."""
    return ContentTypeRegistry(
        repository,
        handlers=[H5PContentTypeHandler(repository, staging)],
    )


@pytest.fixture
def gate(repository: InMemoryContentRepository) -> CapabilityGate:
    """Provide a capability gate without admin principals."""
    return CapabilityGate(repository)


@pytest.fixture
def service(
    repository: InMemoryContentRepository,
    staging: StagingArea,
    registry: ContentTypeRegistry,
    gate: CapabilityGate,
) -> H5PContentService:
    """Provide the content service with the principal allowed everywhere."""
    repository.grant(PRINCIPAL_ID, Capability.UPLOAD, 1)
    repository.grant(PRINCIPAL_ID, Capability.ACCESS, 1)
    return H5PContentService(
        repository=repository,
        staging=staging,
        registry=registry,
        gate=gate,
    )


@pytest.fixture
def context() -> RequestContext:
    """Provide the request context of the granted principal."""
    return RequestContext(principal_id=PRINCIPAL_ID, base_url=BASE_URL)


@pytest.fixture
def payload() -> str:
    """Provide a base64 payload ("Hello")."""
    return "SGVsbG8="
