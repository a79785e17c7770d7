"""kickoff templates -- load ``template.toml`` and render a project from it.

Quick usage::

    from kickoff.template import Template

    template = Template.from_input("./my-template")
    template.set_variables(values)
    await template.generate("./out")
"""

from kickoff.template.definition import TemplateDefinition, VariableDefinition
from kickoff.template.renderer import TemplateRenderer
from kickoff.template.template import Template

__all__ = [
    "Template",
    "TemplateDefinition",
    "TemplateRenderer",
    "VariableDefinition",
]
