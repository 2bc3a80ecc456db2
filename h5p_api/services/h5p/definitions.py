# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Catalogue of the remote-callable functions.

Each function declares whether it reads or writes and which capability
the caller must hold in the target scope. Operations look their required
capability up here instead of hard-coding it.
"""

from dataclasses import asdict, dataclass
from typing import Any, Literal

from h5p_api.services.h5p.models import Capability

SERVICE_NAME = "H5P API Service"
SERVICE_SHORTNAME = "local_h5p_api"


@dataclass(frozen=True)
class FunctionDefinition:
    """A remote-callable function.

    Attributes:
        name: Stable function name.
        description: What the function does.
        type: "read" or "write".
        capability: Capability required in the target scope.
    """

    name: str
    description: str
    type: Literal["read", "write"]
    capability: Capability

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        data = asdict(self)
        data["capability"] = self.capability.value
        return data


UPLOAD = FunctionDefinition(
    name="local_h5p_api_upload",
    description="Upload H5P content to the content bank",
    type="write",
    capability=Capability.UPLOAD,
)

LIST = FunctionDefinition(
    name="local_h5p_api_list",
    description="List H5P content in the content bank",
    type="read",
    capability=Capability.ACCESS,
)

GET_EMBED = FunctionDefinition(
    name="local_h5p_api_get_embed",
    description="Get embed code for H5P content",
    type="read",
    capability=Capability.ACCESS,
)

FUNCTIONS: tuple[FunctionDefinition, ...] = (UPLOAD, LIST, GET_EMBED)
