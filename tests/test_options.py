#!/usr/bin/env python3
"""
Test creating objects from option text: fundamentals, option-aware
classes with and without metavariables, option groups and enumerations.
"""

import enum
import sys
from typing import List, Tuple

import pytest

from specgr.options import Option, OptionGroup, ParseError, Parser, create


class Color(enum.Enum):
    Red = 0
    Green = 1
    Purple = 2


class ClassWithoutMetavariables:
    help = "Help"
    options = [Option("SizeT", int, "SizeT help", lower_bound=0)]

    def __init__(self, value=0):
        self.value = value


class ClassWithMetavariables:
    help = "Help"
    options = [Option("SizeT", int, "SizeT help", lower_bound=0)]

    def __init__(self, value, context=None, metavariables=None):
        if metavariables is None:
            self.value = sys.maxsize
        else:
            self.value = value * metavariables.value_multiplier


class Metavars:
    def __init__(self, value_multiplier):
        self.value_multiplier = value_multiplier


OptionGroup1 = OptionGroup("OptionGroup1", "OptionGroup1 help")
OptionGroup2 = OptionGroup("OptionGroup2", "OptionGroup2 help", group=OptionGroup1)


def no_group(type_):
    return Option("NoGroup", type_, "halp")


def one_group(type_):
    return Option("OneGroup", type_, "halp", group=OptionGroup1)


def two_group(type_):
    return Option("TwoGroup", type_, "halp", group=OptionGroup2)


OPTION_MAKERS = [lambda t: None, no_group, one_group, two_group]


@pytest.mark.parametrize("make_option", OPTION_MAKERS)
def test_create_fundamentals(make_option):
    assert create(float, "1.846", option=make_option(float)) == 1.846
    assert create(int, "7", option=make_option(int)) == 7
    assert create(bool, "true", option=make_option(bool)) is True
    assert create(str, "hello", option=make_option(str)) == "hello"


@pytest.mark.parametrize("make_option, text, expected", [
    (OPTION_MAKERS[0], "SizeT: 7", 7),
    (no_group, "SizeT: 4", 4),
    (one_group, "SizeT: 5", 5),
    (two_group, "SizeT: 6", 6),
])
def test_class_without_metavariables(make_option, text, expected):
    option = make_option(ClassWithoutMetavariables)
    assert create(ClassWithoutMetavariables, text, option=option).value == expected
    # Passing metavariables does not matter to a class that ignores them
    created = create(ClassWithoutMetavariables, text, option=option, metavariables=Metavars(3))
    assert created.value == expected


@pytest.mark.parametrize("make_option, multiplier", [
    (OPTION_MAKERS[0], 3), (no_group, 4), (one_group, 5), (two_group, 6),
])
def test_class_with_metavariables(make_option, multiplier):
    option = make_option(ClassWithMetavariables)
    assert create(ClassWithMetavariables, "SizeT: 4", option=option).value == sys.maxsize
    created = create(ClassWithMetavariables, "SizeT: 4", option=option,
                     metavariables=Metavars(multiplier))
    assert created.value == 4 * multiplier


@pytest.mark.parametrize("make_option", OPTION_MAKERS)
def test_enum_creation(make_option):
    assert create(Color, "Purple", option=make_option(Color)) is Color.Purple
    assert create(Color, "Purple", option=make_option(Color),
                  metavariables=Metavars(3)) is Color.Purple


def test_enum_error_lists_accepted_names():
    with pytest.raises(ParseError) as excinfo:
        create(Color, "Blue")
    message = str(excinfo.value)
    assert "Failed to convert \"Blue\" to Color" in message
    assert "Expected one of: {Red, Green, Purple}." in message


def test_sequences():
    assert create(List[float], "[1, 2.5]") == [1.0, 2.5]
    assert create(Tuple[float, float, float], "[0.05, 0.06, 0.07]") == (0.05, 0.06, 0.07)
    assert create(Tuple[int, ...], "[1, 2, 3]") == (1, 2, 3)
    with pytest.raises(ParseError, match="Expected a sequence of 3 values"):
        create(Tuple[float, float, float], "[1.0, 2.0]")


def test_parse_errors_carry_context():
    with pytest.raises(ParseError) as excinfo:
        create(ClassWithoutMetavariables, "SizeT: seven", option=two_group(ClassWithoutMetavariables))
    assert "OptionGroup1:OptionGroup2:TwoGroup:SizeT" in str(excinfo.value)
    assert "'seven'" in str(excinfo.value)

    with pytest.raises(ParseError, match="is not a valid option"):
        create(ClassWithoutMetavariables, "SizeT: 3\nExtra: 1")
    with pytest.raises(ParseError, match="did not specify the option 'SizeT'"):
        create(ClassWithoutMetavariables, "")
    with pytest.raises(ParseError, match="below the lower bound"):
        create(ClassWithoutMetavariables, "SizeT: -1")
    with pytest.raises(ParseError, match="to int"):
        create(int, "true")
    with pytest.raises(ParseError, match="Unable to parse"):
        create(ClassWithoutMetavariables, "SizeT: [1, 2")


def test_parser_with_groups():
    options = [Option("Mass", float, "Mass"),
               Option("LMax", int, "Resolution", group=OptionGroup1)]
    values = Parser(options).parse("Mass: 1.5\nOptionGroup1:\n  LMax: 4\n")
    assert values == {"Mass": 1.5, "LMax": 4}
    with pytest.raises(ValueError, match="Duplicate option names"):
        Parser([Option("A", int, "a"), Option("A", float, "a")])


def test_option_check_reports_the_option_path():
    def even(value):
        return None if value % 2 == 0 else f"Value {value} is not even."

    options = [Option("LMax", int, "Resolution", group=OptionGroup1, check=even)]
    assert Parser(options).parse("OptionGroup1:\n  LMax: 4\n") == {"LMax": 4}
    with pytest.raises(ParseError) as excinfo:
        Parser(options).parse("OptionGroup1:\n  LMax: 5\n")
    assert excinfo.value.context == ["OptionGroup1", "LMax"]
    assert str(excinfo.value) == "In OptionGroup1:LMax: Value 5 is not even."
