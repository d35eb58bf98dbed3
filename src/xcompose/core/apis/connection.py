"""Connection details exposed by composed resources."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .meta import omit_none


class ConnectionDetailType(str, Enum):
    FROM_CONNECTION_SECRET_KEY = "FromConnectionSecretKey"
    FROM_FIELD_PATH = "FromFieldPath"
    FROM_VALUE = "FromValue"


@dataclass
class ConnectionDetail:
    """One secret-bearing value; exactly one source field should be set."""

    name: Optional[str] = None
    type: Optional[str] = None
    from_connection_secret_key: Optional[str] = None
    from_field_path: Optional[str] = None
    value: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConnectionDetail":
        return cls(
            name=data.get("name"),
            type=data.get("type"),
            from_connection_secret_key=data.get("fromConnectionSecretKey"),
            from_field_path=data.get("fromFieldPath"),
            value=data.get("value"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return omit_none({
            "name": self.name,
            "type": self.type.value if isinstance(self.type, Enum) else self.type,
            "fromConnectionSecretKey": self.from_connection_secret_key,
            "fromFieldPath": self.from_field_path,
            "value": self.value,
        })


__all__ = ["ConnectionDetailType", "ConnectionDetail"]
