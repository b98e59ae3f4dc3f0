"""
Prompt templates for the tutor chat.

Templates live as YAML files in learnpath/prompts/ and are installed with the
package. ``tutor.yaml`` holds the seed request sent to the remote responder,
the fallback greeting, and the canned replies used in mock mode.
"""

import string
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


PROMPTS_DIR = Path(__file__).parent.parent / "prompts"


class TutorPrompts(BaseModel):
    seed_template: str
    greeting_template: str
    mock_responses: list[str] = Field(..., min_length=1)

    @field_validator("seed_template", "greeting_template")
    @classmethod
    def mentions_lesson_title(cls, v):
        if "{lesson_title}" not in v:
            raise ValueError("template must contain {lesson_title}")
        return v


def load_prompt(name: str, prompts_dir: Optional[Path] = None) -> dict[str, Any]:
    """
    Load a prompt file by name.

    Args:
        name: File name without .yaml extension (e.g., "tutor")
        prompts_dir: Optional custom prompts directory

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is not a YAML mapping
    """
    file_path = (prompts_dir or PROMPTS_DIR) / f"{name}.yaml"
    if not file_path.exists():
        raise FileNotFoundError(f"Prompt template not found: {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Prompt file {file_path} must contain a mapping")
    return data


@lru_cache(maxsize=None)
def load_tutor_prompts(prompts_dir: Optional[Path] = None) -> TutorPrompts:
    """Validated tutor templates, parsed once per directory."""
    return TutorPrompts.model_validate(load_prompt("tutor", prompts_dir))


def format_prompt(template: str, **values) -> str:
    """
    Fill {placeholders} in a template.

    Raises:
        KeyError: Naming the first placeholder without a value
    """
    for _, field_name, _, _ in string.Formatter().parse(template):
        if field_name and field_name not in values:
            raise KeyError(f"No value for placeholder {{{field_name}}}")
    return template.format(**values)
