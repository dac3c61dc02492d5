from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class IntegrationOutcome:
    """Result of one call to an external collaborator.

    Collaborators never raise for delivery problems; they report them here.
    """

    success: bool
    message: str = ""
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, message: str = "", **data: Any) -> IntegrationOutcome:
        return cls(success=True, message=message, data=data)

    @classmethod
    def failed(cls, message: str, **data: Any) -> IntegrationOutcome:
        return cls(success=False, message=message, data=data)

    def to_dict(self) -> dict[str, Any]:
        return {"success": self.success, "message": self.message, **self.data}
