"""
Prompt loader utility for CloudMentor.

Loads YAML prompt templates from the package's prompts/ directory.
"""

from pathlib import Path
from typing import Any
import yaml


# Prompts ship inside the package so installed copies find them
PROMPTS_DIR = Path(__file__).parent.parent / "prompts"


def load_prompt(
    name: str,
    prompts_dir: Path | None = None,
    required: tuple[str, ...] = (),
) -> dict[str, Any]:
    """
    Load a prompt template by name.

    Args:
        name: Prompt name without .yaml extension (e.g., "mentor")
        prompts_dir: Optional custom prompts directory
        required: Top-level keys the caller reads (e.g. ("system", "greeting"))

    Returns:
        Dict containing the parsed YAML prompt template. Mentor templates use:
        - meta: version, model, temperature
        - system: system instruction string
        - greeting / fallback_text: fixed texts shown without a model call
        - user_template: optional user prompt template with {placeholders}

    Raises:
        FileNotFoundError: If prompt file doesn't exist
        ValueError: If the file is not a mapping or a required key is missing or blank
        yaml.YAMLError: If YAML parsing fails
    """
    dir_path = prompts_dir or PROMPTS_DIR
    file_path = dir_path / f"{name}.yaml"

    if not file_path.exists():
        raise FileNotFoundError(f"Prompt template not found: {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        prompt = yaml.safe_load(f)

    if not isinstance(prompt, dict):
        raise ValueError(f"Prompt template {file_path} must be a mapping")
    missing = [key for key in required if not str(prompt.get(key) or "").strip()]
    if missing:
        raise ValueError(f"Prompt template {name} is missing: {', '.join(missing)}")
    return prompt


def format_prompt(template: str, **kwargs) -> str:
    """
    Format a prompt template with provided values.

    Args:
        template: Template string with {placeholders}
        **kwargs: Values to substitute

    Returns:
        Formatted prompt string
    """
    return template.format(**kwargs)


def get_available_prompts(prompts_dir: Path | None = None) -> list[str]:
    """
    List all available prompt templates.

    Args:
        prompts_dir: Optional custom prompts directory

    Returns:
        List of prompt names (without .yaml extension)
    """
    dir_path = prompts_dir or PROMPTS_DIR
    if not dir_path.exists():
        return []
    return sorted(p.stem for p in dir_path.glob("*.yaml"))
