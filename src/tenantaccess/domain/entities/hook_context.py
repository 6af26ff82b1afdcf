"""Hook context and result structures for the hook system."""

import uuid
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class HookContext:
    """Context passed to all hook callbacks.

    Attributes:
        company_id: The tenant the triggering operation ran in.
        actor: Identifier of whoever requested the operation, if known.
        request_id: Correlation ID for logging and tracing.
    """

    company_id: str
    actor: Optional[str] = None
    request_id: str = ""

    def __post_init__(self) -> None:
        if not self.request_id:
            self.request_id = f"hk_{uuid.uuid4().hex[:12]}"


@dataclass
class HookResult:
    """Result of a hook trigger operation.

    Attributes:
        success: Whether all hooks executed without error.
        errors: Error messages from hooks that failed.
        data: The payload the hooks were called with.
    """

    success: bool = True
    errors: list[str] = field(default_factory=list)
    data: Optional[dict[str, Any]] = None
