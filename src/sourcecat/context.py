"""sourcecat context for passing state between CLI commands."""

from typing import Optional

import click

from .registry import ReaderRegistry, default_registry

LOG_LEVEL_ENV = "SOURCECAT_LOG_LEVEL"


class SourceCatContext:
    def __init__(self, registry: Optional[ReaderRegistry] = None):
        self.registry = registry
        self.log_level = "WARNING"

    def get_registry(self) -> ReaderRegistry:
        """Registry to build readers with: an injected one, else the default."""
        if self.registry is None:
            self.registry = default_registry()
        return self.registry


pass_context = click.make_pass_decorator(SourceCatContext, ensure=True)
