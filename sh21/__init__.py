"""An interactive shell with a terminal line editor, history, pipes and redirections."""

__version__ = "0.1.0"
__all__ = ["__version__"]