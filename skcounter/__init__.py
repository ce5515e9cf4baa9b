"""Score counter for Skull King style trick-taking games."""

__version__ = "0.1.0"
