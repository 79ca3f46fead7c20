"""
Prompt maker that constructs instruction snippets from Jinja templates.

Uses Pydantic models for type-safe, validated prompt construction.
"""
from pathlib import Path
from jinja2 import Environment, FileSystemLoader, StrictUndefined

from notevoice.models.prompt_models import BasePromptConfig


PROMPTS_PATH = (Path(__file__).parent / "prompts").resolve()


class PromptMaker:
    """Constructs instruction snippets from Jinja templates using Pydantic models."""

    def __init__(self, prompts_path: Path = PROMPTS_PATH):
        """Initialize the prompt maker with Jinja environment."""
        self.env = Environment(
            loader=FileSystemLoader(prompts_path),
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined
        )

    def render(self, prompt_model: BasePromptConfig) -> str:
        """
        Render an instruction snippet from a Pydantic model.

        Properties of the model are passed alongside its fields, so templates
        can use derived values such as `target_range`.

        Args:
            prompt_model: Pydantic model containing validated template variables

        Returns:
            Rendered snippet as a string

        Raises:
            jinja2.TemplateNotFound: If template file doesn't exist

        Example:
            maker = PromptMaker()
            block = DetailLevelPolicy().instructions("brief")
            text = maker.render(block)
        """
        template_name = prompt_model.template_name() + ".jinja"
        template_vars = prompt_model.model_dump()
        template_vars["model"] = prompt_model

        template = self.env.get_template(template_name)
        return template.render(**template_vars)
