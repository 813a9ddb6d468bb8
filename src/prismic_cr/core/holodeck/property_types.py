"""Content repository property type codes."""

from enum import IntEnum


class PropertyType(IntEnum):
    """Property type codes, numbered as in the JCR ``PropertyType`` table."""

    UNDEFINED = 0
    STRING = 1
    BINARY = 2
    LONG = 3
    DOUBLE = 4
    DATE = 5
    BOOLEAN = 6
    NAME = 7
    PATH = 8
    REFERENCE = 9
    WEAKREFERENCE = 10
    URI = 11
    DECIMAL = 12


__all__ = ["PropertyType"]
