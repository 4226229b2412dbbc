"""Tests for shell splitting helpers."""

import pytest

from common.shell import command_arglist_to_string, shlex_split


@pytest.mark.parametrize("text", [None, "", "   ", "\t\n"])
def test_blank_input_is_empty(text):
    assert shlex_split(text) == []


def test_simple_split():
    assert shlex_split("a b") == ["a", "b"]


def test_quoted_argument():
    assert shlex_split('"a b"  ') == ["a b"]


def test_cmake_generator_platform():
    assert shlex_split("-A win32") == ["-A", "win32"]


def test_cmake_defines():
    assert shlex_split("-DSDL_STATIC=ON -DSDL_X11=OFF") == ["-DSDL_STATIC=ON", "-DSDL_X11=OFF"]


def test_command_arglist_to_string():
    assert command_arglist_to_string(["cmake", "-S", "a b"]) == '"cmake" "-S" "a b"'
