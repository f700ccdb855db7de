from cc_switch.services.config import ConfigService, ToolPaths
from cc_switch.services.mcp import McpService
from cc_switch.services.prompt import PromptService
from cc_switch.services.provider import ProviderService
from cc_switch.services.skill import SkillService

__all__ = [
    "ConfigService",
    "McpService",
    "PromptService",
    "ProviderService",
    "SkillService",
    "ToolPaths",
]
