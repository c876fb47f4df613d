"""Personal day planner: dated Personal/Work lists, an undated Pool, gist backup."""

__version__ = "0.1.0"
