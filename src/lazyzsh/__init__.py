"""lazy-zsh - interactive zsh / Oh My Zsh setup.

Core pieces:
- ``synthesizer``: pure ``.zshrc`` rendering from a ``Selection``
- ``backup``: timestamped snapshots of the live ``.zshrc``
- ``installer`` + ``registry``: git-cloned custom plugins and themes
- ``orchestrator``: the wizard as an explicit state machine
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
