# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Capability checks against content bank scopes.

A principal holds a capability in a scope when it was granted on that
scope or on any enclosing scope. Admin principals hold every capability
everywhere.
"""

import logging
from typing import Iterable

from h5p_api.services.h5p.exceptions import AuthorizationDeniedError
from h5p_api.services.h5p.models import Capability, Scope
from h5p_api.services.h5p.protocols import ContentRepositoryProtocol

logger = logging.getLogger(__name__)


class CapabilityGate:
    """Authorization gate backed by the content repository's grants."""

    def __init__(
        self,
        repository: ContentRepositoryProtocol,
        admin_principals: Iterable[str] = (),
    ) -> None:
        """Initialize the gate.

        Args:
            repository: Repository holding capability grants.
            admin_principals: Principals that bypass grant checks.
        """
        self._repository = repository
        self._admins = frozenset(admin_principals)

    def is_admin(self, principal_id: str) -> bool:
        """Check if a principal is configured as admin."""
        return principal_id in self._admins

    async def allows(self, principal_id: str, capability: Capability, scope: Scope) -> bool:
        """Check a capability without raising."""
        if not principal_id:
            return False
        if self.is_admin(principal_id):
            return True
        return await self._repository.has_capability(principal_id, capability, scope)

    async def require(self, principal_id: str, capability: Capability, scope: Scope) -> None:
        """Require a capability in a scope.

        Raises:
            AuthorizationDeniedError: If the principal lacks the capability.
        """
        if await self.allows(principal_id, capability, scope):
            return

        logger.info(
            "Capability denied: principal=%s, capability=%s, scope=%s",
            principal_id,
            capability.value,
            scope.id,
        )
        raise AuthorizationDeniedError(
            "Access denied",
            capability=capability.value,
            scope_id=scope.id,
        )
