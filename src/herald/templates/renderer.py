"""Template CRUD with placeholder validation and ``{{name}}`` rendering."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml

from herald.core.errors import ConflictError, NotFoundError, ValidationError
from herald.core.types import NotificationCategory
from herald.repositories import resolve
from herald.templates.models import (
    NotificationTemplate,
    RenderedTemplate,
    TemplateCreate,
    TemplateUpdate,
)

logger = logging.getLogger(__name__)

PLACEHOLDER_RE = re.compile(r"\{\{(\w+)\}\}")


def _content_key(template: NotificationTemplate) -> tuple[str, str, frozenset[str]]:
    """Fields whose change produces a new template version. Variable order is ignored."""
    return template.title, template.message, frozenset(template.variables)


def extract_placeholders(*texts: str) -> list[str]:
    """Return placeholder names in order of first appearance."""
    seen: dict[str, None] = {}
    for text in texts:
        for name in PLACEHOLDER_RE.findall(text):
            seen.setdefault(name, None)
    return list(seen)


def render_text(template_str: str, variables: dict[str, Any]) -> str:
    """Substitute ``{{name}}`` placeholders in a single pass.

    None renders as an empty string. Placeholders missing from
    ``variables`` are preserved in the output, and substituted values are
    never expanded again.
    """
    def _replace(m: re.Match) -> str:
        key = m.group(1)
        if key not in variables:
            return m.group(0)
        value = variables[key]
        return "" if value is None else str(value)

    return PLACEHOLDER_RE.sub(_replace, template_str)


def _check_declared(title: str, message: str, variables: list[str]) -> None:
    undeclared = [n for n in extract_placeholders(title, message) if n not in variables]
    if undeclared:
        raise ValidationError(
            f"Template uses undeclared variables: {', '.join(undeclared)}",
            field="variables",
        )


def load_template_file(path: str | Path) -> list[TemplateCreate]:
    """Read seed templates from a YAML file keyed by template key."""
    path = Path(path)
    if not path.exists():
        return []
    with open(path) as fh:
        data = yaml.safe_load(fh) or {}
    return [
        TemplateCreate(key=key, **fields)
        for key, fields in (data.get("templates") or {}).items()
    ]


class TemplateRenderer:
    """Keyed, versioned template service backed by a template repository."""

    def __init__(self, store: Any) -> None:
        self._store = store

    @property
    def store(self) -> Any:
        return self._store

    async def create(self, dto: TemplateCreate) -> NotificationTemplate:
        if await resolve(self._store.get_by_key(dto.key)) is not None:
            raise ConflictError(f'Template with key "{dto.key}" already exists')
        _check_declared(dto.title, dto.message, dto.variables)

        template = NotificationTemplate(**dto.model_dump(), version=1)
        await resolve(self._store.save(template))
        logger.info("Created template %s (%s)", template.key, template.id)
        return template

    async def update(self, template_id: str, dto: TemplateUpdate) -> NotificationTemplate:
        current = await self.get(template_id)
        changes = {
            name: value
            for name, value in dto.model_dump(exclude_unset=True).items()
            if value is not None or name == "description"
        }
        merged = current.model_copy(update=changes)
        _check_declared(merged.title, merged.message, merged.variables)

        content_changed = _content_key(merged) != _content_key(current)
        merged.version = current.version + 1 if content_changed else current.version
        merged.updated_at = datetime.now(timezone.utc)

        await resolve(self._store.save(merged))
        logger.info("Updated template %s to version %d", merged.key, merged.version)
        return merged

    async def delete(self, template_id: str) -> None:
        if not await resolve(self._store.delete(template_id)):
            raise NotFoundError(f"Template {template_id!r} not found")
        logger.info("Deleted template %s", template_id)

    async def get(self, template_id: str) -> NotificationTemplate:
        template = await resolve(self._store.get(template_id))
        if template is None:
            raise NotFoundError(f"Template {template_id!r} not found")
        return template

    async def find_by_key(self, key: str) -> NotificationTemplate:
        template = await resolve(self._store.get_by_key(key))
        if template is None:
            raise NotFoundError(f"Template with key {key!r} not found")
        return template

    async def list_templates(
        self,
        category: NotificationCategory | None = None,
        active_only: bool = False,
    ) -> list[NotificationTemplate]:
        templates = await resolve(self._store.list_all())
        return [
            t for t in templates
            if (category is None or t.category == category)
            and (not active_only or t.is_active)
        ]

    async def render(self, key: str, variables: dict[str, Any]) -> RenderedTemplate:
        template = await self.find_by_key(key)
        return self.render_template(template, variables)

    @staticmethod
    def render_template(
        template: NotificationTemplate, variables: dict[str, Any]
    ) -> RenderedTemplate:
        missing = [name for name in template.variables if name not in variables]
        if missing:
            raise ValidationError(
                f"Missing required variables: {', '.join(missing)}", field="variables"
            )
        return RenderedTemplate(
            title=render_text(template.title, variables),
            message=render_text(template.message, variables),
        )

    async def seed(self, templates: list[TemplateCreate]) -> int:
        """Create each template whose key is not yet taken. Returns the count created."""
        created = 0
        for dto in templates:
            try:
                await self.create(dto)
            except ConflictError:
                continue
            created += 1
        if created:
            logger.info("Seeded %d notification templates", created)
        return created
