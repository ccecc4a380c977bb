from __future__ import annotations

import json
from typing import Any, Mapping, Optional


def write_audit(
    cur,
    *,
    user_id: Optional[str],
    action: str,
    entity_type: str,
    entity_id: Any,
    changes: Optional[Mapping[str, Any]] = None,
) -> None:
    """Append an audit_logs row using the caller's cursor (same transaction)."""
    cur.execute(
        """
        INSERT INTO audit_logs(user_id, action, entity_type, entity_id, changes)
        VALUES(%s,%s,%s,%s,%s)
        """,
        (
            user_id,
            action,
            entity_type,
            str(entity_id),
            json.dumps(changes, default=str) if changes is not None else None,
        ),
    )
