from __future__ import annotations

import pytest

from lib_app_properties.domain.errors import (
    ConfigurationError,
    ExpansionLimitExceeded,
    InvalidFormat,
    InvalidPathType,
    PropertiesError,
    SourceNotFound,
    UnresolvedReferenceError,
)


def test_error_hierarchy() -> None:
    for exception_type in (InvalidPathType, SourceNotFound, InvalidFormat, ConfigurationError, UnresolvedReferenceError):
        assert issubclass(exception_type, PropertiesError)
    assert issubclass(ExpansionLimitExceeded, ConfigurationError)
    assert issubclass(InvalidPathType, ValueError)


def test_source_not_found_names_every_part() -> None:
    error = SourceNotFound("servlet:", "shop.properties", "conf/apps/shop")
    assert str(error) == "Failed to load 'servlet:' properties file named 'shop.properties' from path: conf/apps/shop"
    assert (error.path_type, error.file_name, error.location) == ("servlet:", "shop.properties", "conf/apps/shop")


def test_unresolved_reference_mentions_property_and_placeholder() -> None:
    error = UnresolvedReferenceError("r", "${env:DOES_NOT_EXIST}")
    message = str(error)
    assert "r" in message
    assert "${env:DOES_NOT_EXIST}" in message
    assert error.name == "r"


def test_invalid_path_type_keeps_prefix() -> None:
    with pytest.raises(ValueError) as excinfo:
        raise InvalidPathType("ftp:")
    assert excinfo.value.prefix == "ftp:"
    assert "ftp:" in str(excinfo.value)
