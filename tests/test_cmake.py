"""Tests for CMake command construction."""

from unittest.mock import MagicMock

from cmake import CMakeOptions, build_command, configure_build_install, configure_command, install_command


def test_configure_minimal():
    options = CMakeOptions(build_type="Release")
    assert configure_command("src", "build", options) == [
        "cmake", "-S", "src", "-B", "build", "-DCMAKE_BUILD_TYPE=Release",
    ]


def test_configure_full():
    options = CMakeOptions(
        build_type="Debug",
        generator="Ninja",
        toolchain_file="/tc.cmake",
        extra_args=["-DSDL_STATIC=ON"],
    )
    command = configure_command("src", "build", options, prefix_path=["/a", "/b"])
    assert command == [
        "cmake", "-S", "src", "-B", "build", "-DCMAKE_BUILD_TYPE=Debug",
        "-G", "Ninja",
        "-DCMAKE_TOOLCHAIN_FILE=/tc.cmake",
        "-DCMAKE_PREFIX_PATH=/a;/b",
        "-DSDL_STATIC=ON",
    ]


def test_build_and_install():
    options = CMakeOptions(build_type="RelWithDebInfo")
    assert build_command("build", options) == [
        "cmake", "--build", "build", "--config", "RelWithDebInfo", "--verbose",
    ]
    assert install_command("build", "prefix", options) == [
        "cmake", "--install", "build", "--prefix", "prefix", "--config", "RelWithDebInfo",
    ]


def test_configure_build_install_runs_three_steps():
    executor = MagicMock()
    configure_build_install(executor, "SDL", "src", "build", "prefix", CMakeOptions(build_type="Release"))
    commands = [c.args[0] for c in executor.run.call_args_list]
    assert [c[1] for c in commands] == ["-S", "--build", "--install"]
