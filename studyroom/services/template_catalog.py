"""Read-only catalog of curated workspace templates.

Templates are loaded from a JSON fixture (``{"templates": [...]}``) bundled
with the package, or from ``TEMPLATE_CATALOG_PATH`` when set. Seed content
is only shape-checked here; item and todo rules are enforced when a template
is instantiated.
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from pydantic import ValidationError as PydanticValidationError

from ..core.config import settings
from ..exceptions import TemplateNotFoundError
from ..schemas.template import TemplateDefinition, TemplateSummary

logger = logging.getLogger(__name__)

_FIXTURE_PATH = Path(__file__).parent.parent / "fixtures" / "study_templates.json"


class TemplateCatalog:
    """In-memory lookup over a fixed list of template definitions."""

    def __init__(self, templates: Iterable[TemplateDefinition] = ()):
        self._templates: Dict[str, TemplateDefinition] = {}
        for template in templates:
            self._templates[template.id] = template

    def __len__(self) -> int:
        return len(self._templates)

    def get(self, template_id: str) -> TemplateDefinition:
        template = self._templates.get(template_id)
        if template is None:
            raise TemplateNotFoundError(template_id)
        return template

    def summaries(self) -> List[TemplateSummary]:
        return [
            TemplateSummary(
                id=t.id,
                title=t.title,
                emoji=t.emoji,
                goal=t.goal,
                folder_count=len(t.folders),
                item_count=len(t.items),
                todo_count=len(t.todos),
            )
            for t in self._templates.values()
        ]


def load_template_catalog(path: Optional[Path] = None) -> TemplateCatalog:
    """Parse a template fixture. Unreadable files yield an empty catalog.

    Args:
        path: JSON file to read; defaults to the bundled fixture.

    Returns:
        The catalog, possibly empty.
    """
    path = Path(path) if path else _FIXTURE_PATH

    if not path.exists():
        logger.warning("No template fixture at %s", path)
        return TemplateCatalog()

    try:
        with open(path, encoding="utf-8") as f:
            fixture = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to read template fixture: %s", e)
        return TemplateCatalog()

    templates = []
    for raw in fixture.get("templates", []):
        try:
            templates.append(TemplateDefinition(**raw))
        except PydanticValidationError as e:
            logger.warning("Skipping template '%s': %s", raw.get("id", "?"), e)

    logger.debug("Loaded %d templates from %s", len(templates), path)
    return TemplateCatalog(templates)


@lru_cache(maxsize=1)
def get_template_catalog() -> TemplateCatalog:
    """FastAPI dependency: the process-wide catalog, loaded once."""
    return load_template_catalog(settings.template_catalog_path or None)
