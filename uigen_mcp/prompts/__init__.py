"""Prompt registry of the UIGen MCP server."""

from .system import get_prompts as _system_prompts

GENERATION_PROMPT = "generation"


def get_prompts() -> dict[str, str]:
    return dict(_system_prompts())


def get_prompt(name: str) -> str:
    """
    Looks a prompt up by name.

    Raises:
        KeyError: If no prompt is registered under `name`.
    """
    prompts = get_prompts()
    try:
        return prompts[name]
    except KeyError:
        raise KeyError(f"Unknown prompt '{name}'. Available prompts: {', '.join(sorted(prompts))}") from None
