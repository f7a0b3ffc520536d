"""
Build template resolution, materialization and parsing.

The template is an Ant build file. It is fetched from a configurable URI,
written into the project root as a scratch file for the duration of one run,
and parsed to find its default target and the names of all its targets.
"""

import importlib.resources
import logging
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import requests

from ..models.build import TaskSelector
from ..validation import TemplateFetchFailed, TemplateMaterializeFailed, UnknownTask

logger = logging.getLogger(__name__)

RESOURCE_PACKAGE = "objcexport.resources"


class TemplateSource(ABC):
    """Where template bytes come from."""

    def __init__(self, uri: str):
        self.uri = uri

    @abstractmethod
    def read(self) -> bytes:
        """
        Read the template.

        Raises:
            TemplateFetchFailed: If the resource cannot be read
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.uri!r})"


class PackageTemplateSource(TemplateSource):
    """A template shipped as package data in ``objcexport.resources``."""

    def __init__(self, uri: str, resource_name: str):
        super().__init__(uri)
        self.resource_name = resource_name

    def read(self) -> bytes:
        try:
            return importlib.resources.files(RESOURCE_PACKAGE).joinpath(self.resource_name).read_bytes()
        except (OSError, ModuleNotFoundError) as e:
            raise TemplateFetchFailed(self.uri, e) from e


class FileTemplateSource(TemplateSource):
    def __init__(self, uri: str, path: Path):
        super().__init__(uri)
        self.path = path

    def read(self) -> bytes:
        try:
            return self.path.read_bytes()
        except OSError as e:
            raise TemplateFetchFailed(self.uri, e) from e


class HttpTemplateSource(TemplateSource):
    def __init__(self, uri: str, timeout: float = 30.0):
        super().__init__(uri)
        self.timeout = timeout

    def read(self) -> bytes:
        try:
            response = requests.get(self.uri, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise TemplateFetchFailed(self.uri, e) from e
        return response.content


def resolve_template_source(uri: str, timeout: float = 30.0) -> TemplateSource:
    """
    Map a template URI to its source.

    Supported forms:
        package:<resource>          bundled resource
        file:<path>, file://<path>  local file
        http://..., https://...     remote file
        anything else               local path
    """
    if uri.startswith("package:"):
        return PackageTemplateSource(uri, uri[len("package:"):].lstrip("/"))
    if uri.startswith(("http://", "https://")):
        return HttpTemplateSource(uri, timeout=timeout)
    if uri.startswith("file://"):
        return FileTemplateSource(uri, Path(uri[len("file://"):]).expanduser())
    if uri.startswith("file:"):
        return FileTemplateSource(uri, Path(uri[len("file:"):]).expanduser())
    return FileTemplateSource(uri, Path(uri).expanduser())


class TemplateLoader:
    """Fetches the template and writes the scratch copy into a project."""

    def __init__(self, source: TemplateSource):
        self.source = source

    @classmethod
    def from_uri(cls, uri: str, timeout: float = 30.0) -> "TemplateLoader":
        return cls(resolve_template_source(uri, timeout=timeout))

    @property
    def uri(self) -> str:
        return self.source.uri

    def fetch(self) -> bytes:
        logger.debug(f"Fetching build template from {self.source.uri}")
        return self.source.read()

    def materialize(self, scratch_path: Path) -> Path:
        """
        Write the template to ``scratch_path`` unless a copy is already there.

        Raises:
            TemplateFetchFailed: If the template cannot be read
            TemplateMaterializeFailed: If the scratch file cannot be written
        """
        if scratch_path.exists():
            logger.info(f"Reusing existing build template at {scratch_path}")
            return scratch_path

        content = self.fetch()
        try:
            with open(scratch_path, "xb") as f:
                f.write(content)
        except FileExistsError:
            logger.info(f"Build template appeared at {scratch_path} while fetching, reusing it")
        except OSError as e:
            raise TemplateMaterializeFailed(scratch_path, e) from e

        logger.debug(f"Materialized build template at {scratch_path}")
        return scratch_path


@dataclass(frozen=True)
class BuildTemplate:
    """Targets declared by a materialized template."""

    path: Path
    default_target: Optional[str]
    targets: Tuple[str, ...]

    @classmethod
    def parse(cls, path: Path) -> "BuildTemplate":
        """
        Read the project's default target and target names.

        Raises:
            TemplateFetchFailed: If the file is not a readable Ant project
        """
        try:
            root = ET.parse(path).getroot()
        except (ET.ParseError, OSError) as e:
            raise TemplateFetchFailed(str(path), e) from e

        if root.tag != "project":
            raise TemplateFetchFailed(str(path), f"root element is <{root.tag}>, expected <project>")

        targets = tuple(
            target.get("name") for target in root.findall("target") if target.get("name")
        )
        return cls(path=path, default_target=root.get("default") or None, targets=targets)

    def has_target(self, name: str) -> bool:
        return name in self.targets

    def resolve(self, selector: TaskSelector) -> str:
        """
        Return the target name a selector refers to.

        Raises:
            UnknownTask: If the template has no such target
        """
        if selector.uses_default:
            if not self.default_target or not self.has_target(self.default_target):
                raise UnknownTask(self.default_target or selector.describe())
            return self.default_target
        if not self.has_target(selector.target_name):
            raise UnknownTask(selector.target_name)
        return selector.target_name
