"""Study session tracker: an ordered study task list with local or remote persistence."""

__version__ = "0.1.0"
