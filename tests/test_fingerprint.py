"""Tests for the build-state fingerprint."""

import hashlib

import pytest

from errors import MissingConfiguration
from fingerprint import build_state, calculate_state_hash, environment_state, file_sha256, inputs_state

GIT_HASH = "f168f9c81326ad374aade49d1dc46f245b20d07a"


def _inputs(**overrides):
    inputs = {
        "build-type": "Release",
        "cmake-toolchain-file": "",
        "cmake-generator": "",
        "discriminator": "",
        "ninja": "true",
    }
    inputs.update(overrides)
    return inputs


class TestEnvironmentState:
    """Test the ENVIRONMENT section."""

    def test_unset_variables_are_undefined(self):
        state = environment_state({})
        assert state[0] == "AR=undefined"
        assert "CC=undefined" in state
        assert "PKG_CONFIG_PATH=undefined" in state
        assert len(state) == 11

    def test_cmake_variables_sorted_after_fixed_keys(self):
        state = environment_state({"CMAKE_Z": "z", "CC": "gcc", "CMAKE_A": "a", "OTHER": "x"})
        assert "CC=gcc" in state
        assert state[-2:] == ["CMAKE_A=a", "CMAKE_Z=z"]
        assert not any(entry.startswith("OTHER=") for entry in state)

    def test_cmake_prefix_path_listed_in_table_and_scan(self):
        state = environment_state({"CMAKE_PREFIX_PATH": "/opt"})
        assert state.count("CMAKE_PREFIX_PATH=/opt") == 2


class TestBuildState:
    """Test the canonical state layout."""

    def test_sections_in_order(self):
        state = build_state(GIT_HASH, "Linux", inputs=_inputs(), environ={})
        assert state[0] == "ENVIRONMENT"
        assert state.index("INPUTS") < state.index("MISC")
        misc = state[state.index("MISC") + 1:]
        assert misc == [f"GIT_HASH={GIT_HASH}", "build_platform=Linux", "shell="]

    def test_inputs_section(self):
        assert inputs_state(_inputs(discriminator="x")) == [
            "build-type=Release",
            "cmake-toolchain-file=",
            "cmake-generator=",
            "discriminator=x",
            "ninja=true",
        ]

    def test_optional_misc_entries(self, tmp_path):
        toolchain = tmp_path / "toolchain.cmake"
        toolchain.write_text("set(CMAKE_SYSTEM_NAME Linux)\n")
        state = build_state(
            GIT_HASH, "Linux",
            shell="bash",
            toolchain_file=str(toolchain),
            cmake_arguments="-DSDL_STATIC=ON",
            package_manager="apt-get",
            dependency_hashes={"SDL": "abc"},
            inputs=_inputs(),
            environ={},
        )
        misc = state[state.index("MISC") + 1:]
        assert misc == [
            f"GIT_HASH={GIT_HASH}",
            "build_platform=Linux",
            "shell=bash",
            "package_manager=apt-get",
            f"toolchain-file-hash={file_sha256(str(toolchain))}",
            "cmake_arguments=-DSDL_STATIC=ON",
            "dependency_SDL=abc",
        ]

    def test_missing_toolchain_file(self, tmp_path):
        with pytest.raises(MissingConfiguration):
            build_state(GIT_HASH, "Linux", toolchain_file=str(tmp_path / "missing.cmake"), environ={})


class TestCalculateStateHash:
    """Test hashing of the canonical state."""

    def test_is_sha256_of_joined_state(self):
        state = build_state(GIT_HASH, "Linux", inputs=_inputs(), environ={})
        expected = hashlib.sha256("##".join(state).encode("utf-8")).hexdigest()
        assert calculate_state_hash(GIT_HASH, "Linux", inputs=_inputs(), environ={}) == expected

    def test_deterministic(self):
        first = calculate_state_hash(GIT_HASH, "Linux", inputs=_inputs(), environ={"CC": "gcc"})
        second = calculate_state_hash(GIT_HASH, "Linux", inputs=_inputs(), environ={"CC": "gcc"})
        assert first == second
        assert len(first) == 64

    @pytest.mark.parametrize("change", [
        {"git_hash": "0" * 40},
        {"build_platform": "MacOS"},
        {"environ": {"CC": "clang"}},
        {"environ": {"CMAKE_GENERATOR": "Ninja"}},
        {"inputs": _inputs(discriminator="other")},
        {"dependency_hashes": {"SDL": "abc"}},
        {"shell": "pwsh"},
        {"cmake_arguments": "-DSDL_STATIC=ON"},
        {"package_manager": "apt-get"},
        {"package_manager": "brew"},
    ])
    def test_any_change_changes_hash(self, change):
        kwargs = {"git_hash": GIT_HASH, "build_platform": "Linux", "inputs": _inputs(), "environ": {}}
        baseline = calculate_state_hash(**kwargs)
        kwargs.update(change)
        assert calculate_state_hash(**kwargs) != baseline

    @pytest.mark.parametrize("first,second", [
        ("-DSDL_STATIC=ON", "-DSDL_STATIC=OFF"),
        ("-DA=1 -DB=2", "-DB=2 -DA=1"),
    ])
    def test_cmake_arguments_change_changes_hash(self, first, second):
        a = calculate_state_hash(GIT_HASH, "Linux", cmake_arguments=first, inputs=_inputs(), environ={})
        b = calculate_state_hash(GIT_HASH, "Linux", cmake_arguments=second, inputs=_inputs(), environ={})
        assert a != b

    def test_toolchain_contents_change_changes_hash(self, tmp_path):
        toolchain = tmp_path / "toolchain.cmake"
        toolchain.write_text("set(CMAKE_SYSTEM_NAME Linux)\n")
        inputs = _inputs(**{"cmake-toolchain-file": str(toolchain)})
        kwargs = {"toolchain_file": str(toolchain), "inputs": inputs, "environ": {}}
        before = calculate_state_hash(GIT_HASH, "Linux", **kwargs)
        toolchain.write_text("set(CMAKE_SYSTEM_NAME Windows)\n")
        after = calculate_state_hash(GIT_HASH, "Linux", **kwargs)
        assert before != after

    def test_toolchain_rewritten_with_same_bytes_keeps_hash(self, tmp_path):
        toolchain = tmp_path / "toolchain.cmake"
        toolchain.write_text("set(CMAKE_SYSTEM_NAME Linux)\n")
        before = calculate_state_hash(GIT_HASH, "Linux", toolchain_file=str(toolchain), environ={})
        toolchain.write_text("set(CMAKE_SYSTEM_NAME Linux)\n")
        assert calculate_state_hash(GIT_HASH, "Linux", toolchain_file=str(toolchain), environ={}) == before

    def test_unrelated_environment_ignored(self):
        a = calculate_state_hash(GIT_HASH, "Linux", inputs=_inputs(), environ={"HOME": "/a"})
        b = calculate_state_hash(GIT_HASH, "Linux", inputs=_inputs(), environ={"HOME": "/b"})
        assert a == b
