"""
Orchestration of export and cleanup runs.

Components:
- BuildOrchestrator: template lifecycle and target selection
- BuildEventRelay: narrates target lifecycle events into a log sink
- AntEngine: runs Ant as a subprocess and parses its output into events
- TemplateLoader / BuildTemplate: template fetching, scratch copy, target table
"""

from .build_runner import BuildOrchestrator
from .engine import AntEngine, AntOutputParser, BuildEngine, BuildListener
from .relay import BuildEventRelay, RelayState
from .template import BuildTemplate, TemplateLoader, resolve_template_source

__all__ = [
    "AntEngine",
    "AntOutputParser",
    "BuildEngine",
    "BuildEventRelay",
    "BuildListener",
    "BuildOrchestrator",
    "BuildTemplate",
    "RelayState",
    "TemplateLoader",
    "resolve_template_source",
]
