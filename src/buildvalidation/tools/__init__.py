"""Built-in build tools."""

from buildvalidation.tools.gradle import GradleTool
from buildvalidation.tools.maven import MavenTool


def register_builtin_tools(registry) -> None:
    """Register built-in build tools on the given registry."""
    registry.register_tool("gradle", GradleTool)
    registry.register_tool("maven", MavenTool)


__all__ = [
    "GradleTool",
    "MavenTool",
    "register_builtin_tools",
]
