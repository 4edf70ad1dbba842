"""Saved-project history on top of a key-value store."""

from __future__ import annotations

import json
import logging
import time

from app.config import settings
from app.db.kv_store import KeyValueStore
from app.schemas.project import SavedProject

logger = logging.getLogger(__name__)


class ProjectRepository:
    """Most-recent-first list of saved projects stored under one key."""

    def __init__(self, store: KeyValueStore, key: str | None = None) -> None:
        self.store = store
        self.key = key or settings.history_key

    def list_projects(self) -> list[SavedProject]:
        """Return saved projects, newest first; unreadable data reads as empty."""
        try:
            raw = self.store.get(self.key)
            if not raw:
                return []
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError("history is not a list")
            return [SavedProject.model_validate(item) for item in data]
        except (ValueError, TypeError) as exc:
            logger.error("Failed to parse project history: %s", exc)
            return []

    def _write(self, projects: list[SavedProject]) -> None:
        payload = [project.model_dump(by_alias=True) for project in projects]
        self.store.put(self.key, json.dumps(payload, ensure_ascii=False))

    def count(self) -> int:
        return len(self.list_projects())

    def get_project(self, project_id: int) -> SavedProject | None:
        return next((p for p in self.list_projects() if p.id == project_id), None)

    def new_project_id(self) -> int:
        """Creation timestamp in milliseconds, bumped until unused."""
        taken = {project.id for project in self.list_projects()}
        project_id = int(time.time() * 1000)
        while project_id in taken:
            project_id += 1
        return project_id

    def save_project(self, project: SavedProject) -> SavedProject:
        projects = self.list_projects()
        projects.insert(0, project)
        self._write(projects)
        return project

    def update_plan(self, project_id: int, plan_markdown: str) -> bool:
        projects = self.list_projects()
        for project in projects:
            if project.id == project_id:
                project.plan_markdown = plan_markdown
                self._write(projects)
                return True
        logger.error("Project with ID %s not found in history.", project_id)
        return False

    def delete_project(self, project_id: int) -> bool:
        projects = self.list_projects()
        remaining = [p for p in projects if p.id != project_id]
        if len(remaining) == len(projects):
            return False
        self._write(remaining)
        return True
