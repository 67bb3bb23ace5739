from __future__ import annotations

import json
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from flowtask.domain.entities import TaskEntity, utcnow
from flowtask.domain.stats import aggregate_stats, priority_summary
from flowtask.infra.repository import to_record


def export_filename(now: datetime | None = None) -> str:
    now = now or utcnow()
    return f"tasks-export-{now.date().isoformat()}.json"


def build_export(tasks: Sequence[TaskEntity], now: datetime | None = None) -> dict[str, Any]:
    now = now or utcnow()
    stats = aggregate_stats(tasks)
    return {
        "exportedAt": now.isoformat(),
        "totalTasks": stats["total"],
        "completedTasks": stats["completed"],
        "pendingTasks": stats["pending"],
        "prioritySummary": priority_summary(tasks),
        "tasks": [to_record(task) for task in tasks],
    }


def write_export(tasks: Sequence[TaskEntity], path: Path, now: datetime | None = None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    document = build_export(tasks, now)
    path.write_text(json.dumps(document, ensure_ascii=False, indent=2), encoding="utf-8")
    return path
