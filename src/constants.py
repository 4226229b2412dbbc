"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    RESOLUTION_ERROR = 3
    BUILD_ERROR = 4


class BuildPlatform(Enum):
    """Platforms the libraries can be built on.

    Args:
        Enum (string): Platform identifiers.
    """

    WINDOWS = "Windows"
    LINUX = "Linux"
    MACOS = "MacOS"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    TOOL_NAME = "setup-sdl"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "SETUPSDL_LOG_LEVEL"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests

    # GitHub API constants
    GITHUB_API_BASE = "https://api.github.com"
    ENV_GITHUB_TOKEN = "GITHUB_TOKEN"
    REPO_API_PER_PAGE = 100
    GH_RELEASE_LIST_LIMIT = 1000
    HTTP_RETRY_MAX = 3
    HTTP_RETRY_BASE_DELAY_SEC = 0.3
    HTTP_CACHE_TTL_SEC = 300

    # Pipeline input/output conventions (GitHub Actions compatible)
    ENV_INPUT_PREFIX = "INPUT_"
    ENV_GITHUB_OUTPUT = "GITHUB_OUTPUT"
    ENV_GITHUB_ENV = "GITHUB_ENV"
    ENV_MSYSTEM = "MSYSTEM"

    # State fingerprint
    STATE_DELIMITER = "##"
    STATE_UNDEFINED = "undefined"
    STATE_ENV_KEYS = [
        "AR",
        "CC",
        "CXX",
        "ARFLAGS",
        "CFLAGS",
        "CXXFLAGS",
        "INCLUDES",
        "LDFLAGS",
        "LIB",
        "CMAKE_PREFIX_PATH",
        "PKG_CONFIG_PATH",
    ]
    STATE_ENV_PREFIX = "CMAKE_"
    STATE_INPUT_KEYS = [
        "build-type",
        "cmake-toolchain-file",
        "cmake-generator",
        "discriminator",
        "ninja",
    ]

    # CMake
    CMAKE_BUILD_TYPES = ["Release", "Debug", "MinSizeRel", "RelWithDebInfo"]
    DEFAULT_BUILD_TYPE = "Release"
    DEFAULT_SDL_VERSION = "2-latest"

    # Ninja
    NINJA_VERSION = "1.11.1"
    NINJA_DOWNLOAD_URL = "https://github.com/ninja-build/ninja/releases/download/v{version}/{filename}"

    # MSVC developer environment
    MSVC_EDITIONS = ["Enterprise", "Professional", "Community"]
    MSVC_YEARS = ["2022", "2019", "2017"]
    MSVC_YEAR_VERSIONS = {
        "2022": "17.0",
        "2019": "16.0",
        "2017": "15.0",
        "2015": "14.0",
        "2013": "12.0",
    }
    MSVC_ARCH_ALIASES = {
        "win32": "x86",
        "win64": "x64",
        "x86_64": "x64",
        "x86-64": "x64",
    }
    MSVC_PATH_VARIABLES = ["PATH", "INCLUDE", "LIB", "LIBPATH"]
    DEFAULT_MSVC_ARCH = "x64"

    # Root directories when none is configured
    DEFAULT_ROOT_WINDOWS = "C:/setupsdl"
    DEFAULT_ROOT_POSIX = "/tmp/setup-sdl"
