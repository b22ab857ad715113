"""tstarter -- scaffold TypeScript projects from the typescript-starter template.

The run is split across modules:

- ``resolver``: merge CLI flags or interactive answers with the probed
  environment into one immutable ``StarterOptions``
- ``transform``: the ordered, conditional edits applied to the cloned template
- ``tasks``: git, npm/yarn and GitHub collaborators
- ``orchestrator``: clone -> transform -> install -> commit
- ``cli``: argument parsing and error reporting
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
