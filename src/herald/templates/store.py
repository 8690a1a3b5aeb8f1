"""In-memory template store."""

from __future__ import annotations

import threading

from herald.core.errors import ConflictError
from herald.templates.models import NotificationTemplate


class TemplateStore:
    """In-memory store for templates, indexed by id and by unique key."""

    def __init__(self) -> None:
        self._templates: dict[str, NotificationTemplate] = {}
        self._lock = threading.Lock()

    def save(self, template: NotificationTemplate) -> NotificationTemplate:
        with self._lock:
            for existing in self._templates.values():
                if existing.key == template.key and existing.id != template.id:
                    raise ConflictError(f'Template with key "{template.key}" already exists')
            self._templates[template.id] = template
        return template

    def get(self, template_id: str) -> NotificationTemplate | None:
        return self._templates.get(template_id)

    def get_by_key(self, key: str) -> NotificationTemplate | None:
        for template in list(self._templates.values()):
            if template.key == key:
                return template
        return None

    def delete(self, template_id: str) -> bool:
        with self._lock:
            return self._templates.pop(template_id, None) is not None

    def list_all(self) -> list[NotificationTemplate]:
        return sorted(self._templates.values(), key=lambda t: t.key)

    @property
    def count(self) -> int:
        return len(self._templates)
