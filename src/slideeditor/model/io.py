"""
Input/Output Manager (JSON)
Converts a Project to and from the plain-JSON document the builder downloads.
"""
import json
import logging
import os
from typing import Any, Dict

from slideeditor import config
from slideeditor.model.schema import Project

# Get module logger
logger = logging.getLogger(__name__)


class ProjectIO:

    @staticmethod
    def to_dict(project: Project) -> Dict[str, Any]:
        return project.to_dict()

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Project:
        """Rebuild a Project; raises ValueError when the document is malformed."""
        if not isinstance(data, dict) or "slides" not in data:
            raise ValueError("Project document must be an object with a 'slides' list.")
        try:
            return Project.from_dict(data)
        except KeyError as e:
            raise ValueError(f"Project document is missing field {e}.") from e
        except (TypeError, AttributeError) as e:
            raise ValueError(f"Project document is malformed: {e}") from e

    @staticmethod
    def to_json(project: Project, indent: int = 2) -> str:
        return json.dumps(ProjectIO.to_dict(project), indent=indent)

    @staticmethod
    def from_json(text: str) -> Project:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Project document is not valid JSON: {e}") from e
        return ProjectIO.from_dict(data)

    @staticmethod
    def export_project(project: Project, filepath: str = config.EXPORT_FILENAME) -> str:
        """
        Writes the project JSON to `filepath` (a directory gets the default file name).
        Returns the path that was written.
        """
        if os.path.isdir(filepath):
            filepath = os.path.join(filepath, config.EXPORT_FILENAME)

        logger.info(f"Exporting project ({len(project.slides)} slides) to: {filepath}")
        try:
            with open(filepath, "w", encoding="utf-8") as f:
                f.write(ProjectIO.to_json(project))
        except OSError as e:
            logger.exception(f"Failed to export project: {e}")
            raise

        logger.info(f"Project exported to: {filepath}")
        return filepath
