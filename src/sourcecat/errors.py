"""Exception taxonomy shared by the config, registry and reader layers."""

from __future__ import annotations


class SourceCatError(Exception):
    """Base class for every error raised by sourcecat."""


class SpecError(SourceCatError):
    """A configuration tree could not be turned into a descriptor or reader."""


class MalformedSpecError(SpecError):
    """A required field is missing from a spec."""


class TypeMismatchError(SpecError):
    """A field is present but has the wrong shape."""


class UnknownCoderError(SpecError):
    """A codec spec names a coder type that does not exist."""


class RegistryError(SourceCatError):
    """Generic reader registry error."""


class UnknownSourceTypeError(RegistryError, LookupError):
    """No factory is registered for the requested source-type tag."""

    def __init__(self, tag: str, available: tuple[str, ...] = ()):
        self.tag = tag
        self.available = available
        message = f"Unknown source type: {tag!r}"
        if available:
            message += f" (available: {', '.join(available)})"
        super().__init__(message)


class DuplicateRegistrationError(RegistryError):
    """A different factory is already registered under the same tag."""


class InvalidRegistrationError(RegistryError):
    """The tag or factory passed to register() is not usable."""


class RegistryFrozenError(RegistryError):
    """register() was called after the registry was frozen."""


class SubReaderConstructionError(SourceCatError):
    """A registered factory failed while building a reader."""

    def __init__(self, tag: str, message: str):
        self.tag = tag
        super().__init__(f"Failed to create {tag!r} reader: {message}")


class SubReaderIOError(SourceCatError):
    """I/O failure while iterating an opened reader."""


__all__ = [
    "DuplicateRegistrationError",
    "InvalidRegistrationError",
    "MalformedSpecError",
    "RegistryError",
    "RegistryFrozenError",
    "SourceCatError",
    "SpecError",
    "SubReaderConstructionError",
    "SubReaderIOError",
    "TypeMismatchError",
    "UnknownCoderError",
    "UnknownSourceTypeError",
]
