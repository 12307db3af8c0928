"""Terminal gladiator arena with evolving neural-network fighters and a tycoon mode."""

__version__ = "0.1.0"