"""Exception types raised while resolving, fingerprinting and building projects.

Every error is fatal for the run: nothing here is retried. The driver maps
each class onto an exit code.
"""


class SetupSdlError(Exception):
    """Base class for all setup-sdl errors."""


class MalformedInput(SetupSdlError, ValueError):
    """A release tag, version string or input value does not match its grammar."""


class UnresolvableVersion(SetupSdlError):
    """No release matches the requested exact/latest/any version."""


class UnresolvableReference(SetupSdlError):
    """A git reference is neither a branch nor a commit of the repository."""


class CycleOrUnresolvable(SetupSdlError):
    """The build-order resolver made no progress in a full pass."""


class MissingConfiguration(SetupSdlError):
    """A required file or environment indicator is absent or invalid."""
