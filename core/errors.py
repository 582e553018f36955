"""Exceptions raised while setting up the flock simulation."""


class BoidsError(Exception):
    """Base class for setup-time failures."""


class ConfigError(BoidsError, ValueError):
    """A flock or environment parameter is out of range."""


class MissingSurfaceError(BoidsError, KeyError):
    """A named surface was looked up before it was added to the scene."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(name)

    def __str__(self):
        return f"Surface '{self.name}' is not in the scene"
