"""Template registry for File checks.

Templates are Jinja2 sources registered under their path text; user and
external templates are additionally registered under their bare file name so
checklists can ``{% include %}`` them. Rendering is strict: referencing an
unknown fact is an error rather than an empty string.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import jinja2

from checklints.core.exceptions import TemplateError

logger = logging.getLogger(__name__)


class TemplateRegistry:
    def __init__(self) -> None:
        self._sources: Dict[str, str] = {}
        self._env = jinja2.Environment(
            loader=jinja2.DictLoader(self._sources),
            undefined=jinja2.StrictUndefined,
            keep_trailing_newline=True,
            autoescape=False,
        )

    def __contains__(self, name: object) -> bool:
        return str(name) in self._sources

    def __len__(self) -> int:
        return len(self._sources)

    def names(self) -> List[str]:
        return sorted(self._sources)

    def add(self, name: str, source: str) -> None:
        """Register ``source`` under ``name``, replacing any previous entry."""
        self._sources[str(name)] = source

    def register_file(self, path: Path, *, alias: Optional[str] = None) -> None:
        """Register a template file under its path text (and ``alias``).

        Raises:
            TemplateError: If the file cannot be read
        """
        path = Path(path)
        try:
            source = path.read_text(encoding="utf-8")
        except OSError as e:
            raise TemplateError(
                f"Unable to read template {path}: {e}", context={"template": str(path)}
            ) from e
        self.add(str(path), source)
        if alias:
            self.add(alias, source)
        logger.debug("Registered template %s", path)

    def register_dir(self, directory: Path, *, by_name: bool = False) -> int:
        """Register every file below ``directory``.

        With ``by_name`` each file is also registered under its path relative
        to ``directory``.

        Returns:
            Number of files registered
        """
        directory = Path(directory)
        count = 0
        for path in sorted(directory.rglob("*")):
            if not path.is_file():
                continue
            alias = path.relative_to(directory).as_posix() if by_name else None
            self.register_file(path, alias=alias)
            count += 1
        return count

    def register(self, path: Path, *, by_name: bool = False) -> None:
        """Register a file or a whole directory.

        Raises:
            TemplateError: If ``path`` does not exist
        """
        path = Path(path)
        if path.is_dir():
            self.register_dir(path, by_name=by_name)
        elif path.is_file():
            self.register_file(path, alias=path.name if by_name else None)
        else:
            raise TemplateError(f"Template not found: {path}", context={"template": str(path)})

    def render(self, name: str, context: Mapping[str, Any]) -> str:
        """Render a registered template with ``context``.

        Raises:
            TemplateError: If the template is unknown or fails to render
        """
        try:
            template = self._env.get_template(str(name))
            return template.render(**dict(context))
        except jinja2.TemplateNotFound as e:
            raise TemplateError(f"Template not found: {name}", context={"template": str(name)}) from e
        except jinja2.TemplateError as e:
            raise TemplateError(
                f"Failed to render template {name}: {e}", context={"template": str(name)}
            ) from e


__all__ = ["TemplateRegistry"]
