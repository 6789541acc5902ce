class VelcroError(Exception):
    """Base class for errors reported to the user by the CLI."""


class ConfigError(VelcroError):
    pass


class InitError(VelcroError):
    pass


class BuildError(VelcroError):
    pass


class CircularIncludeError(BuildError):
    pass


class ComponentNotFoundError(BuildError):
    pass


class PostNotFoundError(VelcroError):
    pass
