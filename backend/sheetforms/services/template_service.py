"""Template catalog read from a directory of JSON documents"""
import json
import logging
from pathlib import Path
from typing import List

from pydantic import ValidationError

from sheetforms.core.errors import Unknown
from sheetforms.models.template import Template

logger = logging.getLogger(__name__)


class TemplateService:
    """Read-only catalog; the directory is re-read on every call"""

    def __init__(self, templates_dir: Path):
        self.templates_dir = Path(templates_dir)

    def list_templates(self) -> List[Template]:
        if not self.templates_dir.is_dir():
            logger.error(f"Templates directory does not exist: {self.templates_dir}")
            raise Unknown("Failed to load templates")

        try:
            files = sorted(self.templates_dir.glob("*.json"))
            templates = [
                Template.model_validate(json.loads(path.read_text(encoding='utf-8')))
                for path in files
            ]
        except (OSError, ValueError, ValidationError) as e:
            logger.error(f"Failed to load templates from {self.templates_dir}: {e}")
            raise Unknown("Failed to load templates", cause=e) from e

        return templates
