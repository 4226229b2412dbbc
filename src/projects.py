"""Static descriptions of the projects that can be built."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple

from package_manager import PackageList, PackageManagerType
from versioning.extractor import VersionExtractor


@dataclass(frozen=True)
class ProjectDescriptor:
    """Build configuration of one project.

    ``deps`` is a tuple of alternatives: each inner tuple is satisfied when
    any one of its projects has been built.
    """

    name: str
    option_name: str
    cmake_var_out: str
    major_define: str
    minor_define: str
    patch_define: str
    header_paths: Tuple[str, ...]
    header_filenames: Tuple[str, ...]
    git_url: str
    repo_owner: str
    repo_name: str
    version_branch_map: Mapping[int, str]
    deps: Tuple[Tuple[str, ...], ...] = ()
    discarded_prefix: Optional[str] = None
    packages: Mapping[PackageManagerType, PackageList] = field(default_factory=dict)

    @property
    def repository(self) -> str:
        return f"{self.repo_owner}/{self.repo_name}"

    def cmake_variable(self, major: int) -> str:
        """Name of the ``<Package>_ROOT`` variable pointing at the install prefix."""
        return self.cmake_var_out.format(major=major)

    def version_extractor(self) -> VersionExtractor:
        return VersionExtractor.for_project(self)

    def packages_for(self, kind: Optional[PackageManagerType]) -> PackageList:
        if kind is None:
            return PackageList()
        return self.packages.get(kind, PackageList())


_SDL_OR_COMPAT = ("SDL", "SDL2_compat")


def _satellite(name: str, define_stem: str, option: str, header_paths: Tuple[str, ...],
               deps: Tuple[Tuple[str, ...], ...] = (_SDL_OR_COMPAT,),
               packages: Optional[Dict[PackageManagerType, PackageList]] = None) -> ProjectDescriptor:
    suffix = name.split("_", 1)[1]
    return ProjectDescriptor(
        name=name,
        option_name=option,
        cmake_var_out="SDL{major}_" + suffix + "_ROOT",
        major_define=f"{define_stem}_MAJOR_VERSION",
        minor_define=f"{define_stem}_MINOR_VERSION",
        patch_define=f"(?:{define_stem}_MICRO_VERSION|{define_stem}_PATCHLEVEL)",
        header_paths=header_paths,
        header_filenames=(f"{name}.h",),
        git_url=f"https://github.com/libsdl-org/{name}.git",
        repo_owner="libsdl-org",
        repo_name=name,
        version_branch_map={2: "SDL2", 3: "main"},
        deps=deps,
        packages=packages or {},
    )


PROJECTS: Dict[str, ProjectDescriptor] = {
    "SDL": ProjectDescriptor(
        name="SDL",
        option_name="version",
        discarded_prefix="sdl",
        cmake_var_out="SDL{major}_ROOT",
        major_define="SDL_MAJOR_VERSION",
        minor_define="SDL_MINOR_VERSION",
        patch_define="(?:SDL_PATCHLEVEL|SDL_MICRO_VERSION)",
        header_paths=("include/SDL3", "include/SDL2"),
        header_filenames=("SDL_version.h",),
        git_url="https://github.com/libsdl-org/SDL.git",
        repo_owner="libsdl-org",
        repo_name="SDL",
        version_branch_map={2: "SDL2", 3: "main"},
        packages={
            PackageManagerType.APT_GET: PackageList(
                required=[
                    "cmake", "make", "ninja-build", "libasound2-dev", "libpulse-dev",
                    "libaudio-dev", "libjack-dev", "libsndio-dev", "libusb-1.0-0-dev",
                    "libx11-dev", "libxext-dev", "libxrandr-dev", "libxcursor-dev",
                    "libxfixes-dev", "libxi-dev", "libxss-dev", "libwayland-dev",
                    "libxkbcommon-dev", "libdrm-dev", "libgbm-dev", "libgl1-mesa-dev",
                    "libgles2-mesa-dev", "libegl1-mesa-dev", "libdbus-1-dev",
                    "libibus-1.0-dev", "libudev-dev", "fcitx-libs-dev",
                ],
                # Only available from Ubuntu 22.04 on
                optional=["libpipewire-0.3-dev", "libdecor-0-dev"],
            ),
            PackageManagerType.DNF: PackageList(
                required=[
                    "cmake", "make", "ninja-build", "alsa-lib-devel", "dbus-devel",
                    "ibus-devel", "libusb1-devel", "libX11-devel", "libXau-devel",
                    "libXScrnSaver-devel", "libXcursor-devel", "libXext-devel",
                    "libXfixes-devel", "libXi-devel", "libXrandr-devel",
                    "libxkbcommon-devel", "libdecor-devel", "libglvnd-devel",
                    "pipewire-devel", "pipewire-jack-audio-connection-kit-devel",
                    "pulseaudio-libs-devel", "wayland-devel",
                ],
            ),
        },
    ),
    "SDL_image": _satellite("SDL_image", "SDL_IMAGE", "version-sdl-image",
                            ("include/SDL3_image", "include/SDL2")),
    "SDL_mixer": _satellite("SDL_mixer", "SDL_MIXER", "version-sdl-mixer",
                            ("include/SDL3_mixer", "include/SDL2")),
    "SDL_net": _satellite("SDL_net", "SDL_NET", "version-sdl-net",
                          ("include/SDL3_net", "include/SDL2", "include")),
    "SDL_rtf": _satellite("SDL_rtf", "SDL_RTF", "version-sdl-rtf",
                          ("include/SDL3_rtf", "include/SDL2", "include"),
                          deps=(_SDL_OR_COMPAT, ("SDL_ttf",))),
    "SDL_ttf": _satellite(
        "SDL_ttf", "SDL_TTF", "version-sdl-ttf", ("include/SDL3_ttf", "include/SDL2"),
        packages={
            PackageManagerType.APT_GET: PackageList(required=["libfreetype-dev", "libharfbuzz-dev"]),
            PackageManagerType.DNF: PackageList(required=["freetype-devel", "harfbuzz-devel"]),
            PackageManagerType.MSYS2_PACMAN: PackageList(required=["freetype", "harfbuzz"]),
        },
    ),
    "SDL2_compat": ProjectDescriptor(
        name="SDL2_compat",
        option_name="version-sdl2-compat",
        cmake_var_out="SDL{major}_ROOT",
        major_define="SDL_MAJOR_VERSION",
        minor_define="SDL_MINOR_VERSION",
        patch_define="SDL_PATCHLEVEL",
        header_paths=("include/SDL2",),
        header_filenames=("SDL_version.h",),
        git_url="https://github.com/libsdl-org/sdl2-compat.git",
        repo_owner="libsdl-org",
        repo_name="sdl2-compat",
        version_branch_map={2: "main"},
        deps=(("SDL",),),
    ),
    "SDL12_compat": ProjectDescriptor(
        name="SDL12_compat",
        option_name="version-sdl12-compat",
        cmake_var_out="SDL{major}_compat_ROOT",
        major_define="SDL_MAJOR_VERSION",
        minor_define="SDL_MINOR_VERSION",
        patch_define="SDL_PATCHLEVEL",
        header_paths=("include/SDL",),
        header_filenames=("SDL_version.h",),
        git_url="https://github.com/libsdl-org/sdl12-compat.git",
        repo_owner="libsdl-org",
        repo_name="sdl12-compat",
        version_branch_map={1: "main"},
        deps=(("SDL2_compat", "SDL"),),
    ),
}
