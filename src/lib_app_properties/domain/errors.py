"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by adapters, the loader, the
expression resolver, and consuming applications. The hierarchy lives in the
domain layer so outer layers may depend on it without creating cycles.

Contents
--------
* :class:`PropertiesError` – umbrella base class for all library failures.
* :class:`InvalidPathType` – unrecognised ``prefix:`` on a configured path.
* :class:`SourceNotFound` – a required properties source is missing/unreadable.
* :class:`InvalidFormat` – a properties file could not be decoded.
* :class:`ConfigurationError` – inconsistent or incomplete configuration.
* :class:`ExpansionLimitExceeded` – placeholder evaluation did not settle.
* :class:`UnresolvedReferenceError` – a placeholder names an absent value.

System Role
-----------
Construction-time failures (path type, source, configuration) abort the whole
:class:`~lib_app_properties.core.ApplicationProperties` instance. Accessor-time
failures (unresolved references) affect a single ``get`` call only. Numeric and
boolean parse failures never surface as exceptions.
"""

from __future__ import annotations


class PropertiesError(Exception):
    """Base type for all exceptions emitted by ``lib_app_properties``.

    Why
    ----
    Provide a single catch-all type for consumers that do not need fine-grained
    handling.
    """


class InvalidPathType(PropertiesError, ValueError):
    """Raised when a configured path carries a prefix other than the known three.

    Attributes
    ----------
    prefix:
        The offending prefix text including its trailing colon.
    """

    def __init__(self, prefix: str) -> None:
        super().__init__(f"Unknown properties path type prefix: {prefix}")
        self.prefix = prefix


class SourceNotFound(PropertiesError):
    """Raised when a required properties file or resource cannot be read.

    Why
    ----
    Every configured source is mandatory; a missing one aborts construction so
    callers never observe a half-merged configuration.

    Attributes
    ----------
    path_type / file_name / location:
        The prefix, the file name, and the location that were attempted.
    """

    MESSAGE_TEMPLATE = "Failed to load '{path_type}' properties file named '{file_name}' from path: {location}"

    def __init__(self, path_type: str, file_name: str, location: str) -> None:
        super().__init__(self.MESSAGE_TEMPLATE.format(path_type=path_type, file_name=file_name, location=location))
        self.path_type = path_type
        self.file_name = file_name
        self.location = location


class InvalidFormat(PropertiesError):
    """Raised when a properties source cannot be decoded into key/value pairs.

    Typical Sources
    ---------------
    Non UTF-8 payloads and malformed ``\\uXXXX`` escapes.
    """


class ConfigurationError(PropertiesError):
    """Signals configuration that cannot produce a usable property set.

    Current Usage
    -------------
    No sources configured while root defaults are disabled, a hosting container
    without ``CATALINA_COMMON``/``CATALINA_BASE``, or a container-dependent
    operation requested without a container context.
    """


class ExpansionLimitExceeded(ConfigurationError):
    """Raised when placeholder substitution keeps producing new placeholders."""


class UnresolvedReferenceError(PropertiesError):
    """Raised when a placeholder references an environment/system value that is absent.

    Attributes
    ----------
    name:
        Property being resolved.
    placeholder:
        The exact placeholder substring, e.g. ``${env:DB_HOST}``.
    """

    def __init__(self, name: str, placeholder: str) -> None:
        super().__init__(f"Failed to resolve property '{name}': no value found for {placeholder}")
        self.name = name
        self.placeholder = placeholder
