"""learnpath utilities."""

from .prompt_loader import TutorPrompts, load_prompt, load_tutor_prompts, format_prompt

__all__ = [
    "TutorPrompts",
    "load_prompt",
    "load_tutor_prompts",
    "format_prompt",
]
