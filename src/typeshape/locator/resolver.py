"""Resolve a target string to a Python type.

Targets come in two shapes:

- ``package.module:Qual.Name``: import the module, walk the attributes.
- ``path/to/file.py:LINE[:COL]``: find the name under the caret, load the
  file as a module and evaluate the name in its namespace.

Anything that resolves to a non-type (function, instance, module) yields
None, the "not a type" signal.
"""

import asyncio
import builtins
import hashlib
import importlib
import importlib.util
import re
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, Optional, get_origin

from typeshape.exceptions import TargetResolutionError
from typeshape.logging_config import logger
from .position import SourcePosition, find_name_at


_FILE_TARGET = re.compile(r"^(?P<path>.+\.py):(?P<line>\d+)(?::(?P<column>\d+))?$")
_MODULE_TARGET = re.compile(r"^(?P<module>[A-Za-z_][\w.]*):(?P<qualname>[A-Za-z_][\w.]*)$")


def is_type_like(obj: Any) -> bool:
    """Classes and parameterised generics (list[Order]) count as types."""
    return isinstance(obj, type) or get_origin(obj) is not None


class TargetLocator:
    """Locates the type a target string points at."""

    def __init__(self, search_root: Optional[Path] = None):
        """
        Args:
            search_root: Directory prepended to sys.path while loading source
                files, so their sibling imports resolve. Defaults to the file's
                own directory.
        """
        self.search_root = search_root

    def resolve(self, target: str) -> Optional[Any]:
        """
        Resolve a target to a type.

        Returns:
            The type, or None if the target exists but is not a type

        Raises:
            TargetResolutionError: If the target cannot be parsed, loaded or found.
        """
        file_match = _FILE_TARGET.match(target)
        if file_match:
            column = file_match.group("column")
            position = SourcePosition(int(file_match.group("line")), int(column) if column else None)
            return self._resolve_in_file(target, Path(file_match.group("path")), position)

        module_match = _MODULE_TARGET.match(target)
        if module_match:
            module = self._import_module(target, module_match.group("module"))
            return self._check_type(target, self._lookup(target, module, module_match.group("qualname")))

        raise TargetResolutionError(target, "expected 'module:QualName' or 'file.py:LINE[:COL]'")

    async def resolve_async(self, target: str) -> Optional[Any]:
        """Resolve in a worker thread so the caller's event loop stays responsive."""
        return await asyncio.to_thread(self.resolve, target)

    def _resolve_in_file(self, target: str, path: Path, position: SourcePosition) -> Optional[Any]:
        if not path.is_file():
            raise TargetResolutionError(target, f"file not found: {path}")

        source = path.read_text(encoding="utf-8")
        try:
            name = find_name_at(source, position, filename=str(path))
        except SyntaxError as e:
            raise TargetResolutionError(target, f"syntax error: {e}") from e

        if name is None:
            logger.info(f"No name under {path}:{position.line}")
            return None

        logger.debug(f"Name under cursor in {path.name}: {name}")
        module = self._load_file(target, path)
        return self._check_type(target, self._lookup(target, module, name))

    def _import_module(self, target: str, module_name: str) -> ModuleType:
        try:
            return importlib.import_module(module_name)
        except ImportError as e:
            raise TargetResolutionError(target, f"cannot import module '{module_name}': {e}") from e

    def _load_file(self, target: str, path: Path) -> ModuleType:
        resolved = path.resolve()
        module_name = resolved.stem
        existing = sys.modules.get(module_name)
        if existing is not None and getattr(existing, "__file__", None) != str(resolved):
            # Another module owns the plain name
            digest = hashlib.sha1(str(resolved).encode("utf-8")).hexdigest()[:12]
            module_name = f"_typeshape_{resolved.stem}_{digest}"

        spec = importlib.util.spec_from_file_location(module_name, resolved)
        if spec is None or spec.loader is None:
            raise TargetResolutionError(target, f"cannot load {path}")

        module = importlib.util.module_from_spec(spec)
        search_root = str(self.search_root or resolved.parent)
        added = search_root not in sys.path
        if added:
            sys.path.insert(0, search_root)
        # Registered before exec so dataclasses and typing can find the module
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            sys.modules.pop(module_name, None)
            raise TargetResolutionError(target, f"error while loading {path.name}: {e}") from e
        finally:
            if added:
                sys.path.remove(search_root)

        return module

    def _lookup(self, target: str, namespace: Any, dotted: str) -> Any:
        first, *rest = dotted.split(".")
        if not hasattr(namespace, first) and hasattr(builtins, first):
            namespace = builtins

        obj = namespace
        for part in [first] + rest:
            try:
                obj = getattr(obj, part)
            except AttributeError:
                raise TargetResolutionError(target, f"'{dotted}' not found") from None
        return obj

    def _check_type(self, target: str, obj: Any) -> Optional[Any]:
        if is_type_like(obj):
            return obj
        logger.info(f"{target} resolved to a {type(obj).__name__}, not a type")
        return None
