"""webstage - stage node modules and direct web assets into a build output tree."""

__version__ = "0.1.0"
