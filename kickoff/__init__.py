"""kickoff -- scaffold projects from declarative templates.

Variables declared by a template are resolved interactively, from a JSON
input file or from their defaults, then the project is rendered between two
phases of hooks.
"""

__version__ = "0.1.0"
