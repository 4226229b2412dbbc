"""setup-sdl - build, cache and expose SDL for CI pipelines.

    Raises:
        SetupSdlError: On any resolution, configuration or input error

    Returns:
        int: Exit code
"""
from __future__ import annotations

import logging
import os
import subprocess
import sys
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

import requests

from args import cli_inputs, parse_args
from build_cache import BuildCache, make_cache_key
from build_order import resolve_build_order
from cmake import CMakeOptions, configure_build_install
from common.executor import Executor
from common.logging_utils import add_file_handler, configure_logging, extra_context, is_debug_enabled
from common.shell import shlex_split
from constants import BuildPlatform, Constants, ExitCodes
from errors import (
    CycleOrUnresolvable,
    MalformedInput,
    MissingConfiguration,
    SetupSdlError,
    UnresolvableReference,
    UnresolvableVersion,
)
from fingerprint import calculate_state_hash
from inputs import PipelineInputs, load_config
from msvc import setup_msvc_environment
from ninja import configure_ninja_build_tool
from outputs import OutputPublisher
from package_manager import (
    PackageManagerType,
    create_package_manager,
    detect_package_manager,
    install_project_packages,
    merge_package_lists,
    package_manager_type_from_string,
)
from platform_info import get_build_platform, get_platform_root_directory
from projects import PROJECTS, ProjectDescriptor
from repository.git import checkout_git_hash
from repository.github import GitHubClient, fetch_gh_release_output
from versioning.catalog import ReleaseCatalog
from versioning.models import ParsedVersionRequest, ReleaseType
from versioning.parser import parse_version_request

logger = logging.getLogger(__name__)

CatalogProvider = Callable[[ProjectDescriptor], ReleaseCatalog]


@dataclass
class BuildResult:
    """Outcome of one project in the build plan."""

    project: str
    git_hash: str
    state_hash: str
    prefix: str
    version: str
    cache_hit: bool


class ReleaseCatalogProvider:
    """Fetches and memoizes one release catalog per repository."""

    def __init__(self, client: GitHubClient, source: str = "api"):
        self.client = client
        self.source = source
        self._catalogs: Dict[str, ReleaseCatalog] = {}

    def __call__(self, descriptor: ProjectDescriptor) -> ReleaseCatalog:
        if descriptor.repository not in self._catalogs:
            if self.source == "gh":
                catalog = ReleaseCatalog.from_gh_output(fetch_gh_release_output(descriptor.repository))
            else:
                catalog = ReleaseCatalog.create(
                    self.client.get_releases(descriptor.repo_owner, descriptor.repo_name))
            logger.info("Found %d releases of %s", len(catalog), descriptor.repository)
            self._catalogs[descriptor.repository] = catalog
        return self._catalogs[descriptor.repository]


def resolve_git_ref(
    descriptor: ProjectDescriptor,
    request: ParsedVersionRequest,
    allow_prerelease: bool,
    catalog_provider: CatalogProvider,
) -> str:
    """Turn a parsed request into a branch, tag or commit of the project.

    Raises:
        UnresolvableVersion: No branch for a -head major, or no matching release.
    """
    if request.type == ReleaseType.COMMIT:
        return request.reference
    if request.type == ReleaseType.HEAD:
        branch = descriptor.version_branch_map.get(request.version.major)
        if branch is None:
            raise UnresolvableVersion(
                f"Invalid -head version for {descriptor.name}: {request.version.major}")
        return branch
    release = catalog_provider(descriptor).find(request.version, allow_prerelease, request.type)
    if release is None:
        raise UnresolvableVersion(
            f"Could not find a matching {descriptor.name} release for {request.version}")
    return release.tag


def output_suffix(descriptor: ProjectDescriptor) -> str:
    """Output name suffix: '' for SDL, '-sdl-image' for SDL_image, ..."""
    return descriptor.option_name[len("version"):]


def _dependency_names(descriptor: ProjectDescriptor, done: List[str]) -> List[str]:
    """Already-built projects that satisfy ``descriptor``'s dependencies, in build order."""
    wanted = {dep for group in descriptor.deps for dep in group}
    return [name for name in done if name in wanted]


def _setup_package_manager(inputs: PipelineInputs, build_platform: BuildPlatform,
                           executor: Executor) -> Optional[PackageManagerType]:
    requested = inputs.get("package-manager")
    if requested:
        return package_manager_type_from_string(requested)
    if inputs.get_bool("install-linux-dependencies"):
        kind = detect_package_manager(build_platform, executor)
        if kind is None:
            logger.warning("No package manager found; skipping dependency installation.")
        return kind
    return None


def run(
    inputs: PipelineInputs,
    executor: Optional[Executor] = None,
    github: Optional[GitHubClient] = None,
    publisher: Optional[OutputPublisher] = None,
    build_platform: Optional[BuildPlatform] = None,
    catalog_provider: Optional[CatalogProvider] = None,
) -> Dict[str, BuildResult]:
    """Resolve, build (or restore) and publish every requested project."""
    executor = executor or Executor()
    github = github or GitHubClient(token=inputs.get("token") or None)
    publisher = publisher or OutputPublisher()
    build_platform = build_platform or get_build_platform()
    catalog_provider = catalog_provider or ReleaseCatalogProvider(github, inputs.get("release-source") or "api")
    logger.info("build platform=%s", build_platform.value)

    root = get_platform_root_directory(build_platform, inputs.get("root"))
    logger.info("root=%s", root)

    build_type = inputs.get("build-type")
    if build_type not in Constants.CMAKE_BUILD_TYPES:
        raise MalformedInput(f"Invalid build-type: {build_type}")
    allow_prerelease = inputs.get_bool("pre-release")

    requests_by_project: Dict[str, ParsedVersionRequest] = {}
    for name, descriptor in PROJECTS.items():
        raw = inputs.get(descriptor.option_name)
        if raw:
            requests_by_project[name] = parse_version_request(raw, descriptor.discarded_prefix)
            logger.info("%s: requested %s", name, requests_by_project[name])

    build_order = resolve_build_order(requests_by_project)
    logger.info("Build order: %s", ", ".join(build_order))

    package_manager_type = _setup_package_manager(inputs, build_platform, executor)
    if package_manager_type is not None and inputs.get_bool("install-linux-dependencies"):
        pm = create_package_manager(package_manager_type, executor)
        pm.update()
        install_project_packages(pm, merge_package_lists(
            PROJECTS[name].packages_for(package_manager_type) for name in build_order))

    if build_platform == BuildPlatform.WINDOWS and not executor.getenv("MSYSTEM"):
        setup_msvc_environment(
            executor,
            arch=inputs.get("msvc-arch") or Constants.DEFAULT_MSVC_ARCH,
            sdk=inputs.get("msvc-sdk"),
            toolset=inputs.get("msvc-toolset"),
            uwp=inputs.get_bool("msvc-uwp"),
            spectre=inputs.get_bool("msvc-spectre"),
            vsversion=inputs.get("msvc-vsversion"),
        )

    generator = inputs.get("cmake-generator") or None
    if generator is None and inputs.get_bool("ninja"):
        configure_ninja_build_tool(build_platform, root, executor)
        generator = "Ninja"
    toolchain_file = inputs.get("cmake-toolchain-file") or None
    if toolchain_file and not os.path.isfile(toolchain_file):
        raise MissingConfiguration(f"Toolchain file {toolchain_file} does not exist")
    cmake_arguments = inputs.get("cmake-arguments")
    options = CMakeOptions(
        build_type=build_type,
        generator=generator,
        toolchain_file=toolchain_file,
        extra_args=shlex_split(cmake_arguments),
    )

    cache = BuildCache(inputs.get("cache-dir") or os.path.join(root, "cache"))
    add_to_environment = inputs.get_bool("add-to-environment")
    results: Dict[str, BuildResult] = {}

    for name in build_order:
        descriptor = PROJECTS[name]
        ref = resolve_git_ref(descriptor, requests_by_project[name], allow_prerelease, catalog_provider)
        git_hash = github.resolve_ref(descriptor.repo_owner, descriptor.repo_name, ref)
        deps = _dependency_names(descriptor, list(results))

        state_hash = calculate_state_hash(
            git_hash,
            build_platform.value,
            shell=inputs.get("shell") or None,
            toolchain_file=toolchain_file,
            cmake_arguments=cmake_arguments or None,
            package_manager=package_manager_type.value if package_manager_type else None,
            dependency_hashes={dep: results[dep].state_hash for dep in deps},
            inputs=inputs.as_dict(),
            environ=executor.environment(),
        )
        logger.info("%s state = %s", name, state_hash)

        project_root = os.path.join(root, state_hash)
        source_dir = os.path.join(project_root, "source")
        build_dir = os.path.join(project_root, "build")
        package_dir = os.path.join(project_root, "package")

        cache_key = make_cache_key(name, state_hash)
        cache_hit = cache.restore(cache_key, package_dir)
        if not cache_hit:
            logger.info("Building %s from scratch.", name)
            checkout_git_hash(executor, descriptor.git_url, git_hash, source_dir)
            configure_build_install(
                executor, name, source_dir, build_dir, package_dir, options,
                prefix_path=[results[dep].prefix for dep in deps],
            )
            cache.save(cache_key, package_dir)

        version = descriptor.version_extractor().extract_from_install_prefix(package_dir)
        logger.info("%s version is %s", name, version)
        results[name] = BuildResult(name, git_hash, state_hash, package_dir, str(version), cache_hit)

        suffix = output_suffix(descriptor)
        publisher.set_output(f"prefix{suffix}", package_dir)
        publisher.set_output(f"version{suffix}", str(version))
        if name == "SDL" or add_to_environment:
            publisher.export_variable(descriptor.cmake_variable(version.major), package_dir)

    return results


_EXIT_CODES = {
    MissingConfiguration: ExitCodes.FILE_ERROR,
    MalformedInput: ExitCodes.RESOLUTION_ERROR,
    UnresolvableVersion: ExitCodes.RESOLUTION_ERROR,
    UnresolvableReference: ExitCodes.RESOLUTION_ERROR,
    CycleOrUnresolvable: ExitCodes.RESOLUTION_ERROR,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main function of the program."""
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL)
    if args.LOG_FILE:
        add_file_handler(args.LOG_FILE)

    if is_debug_enabled(logger):
        logger.debug(
            "Function entry",
            extra=extra_context(event="function_entry", component="cli", action="main"),
        )

    try:
        inputs = PipelineInputs.collect(cli=cli_inputs(args), config=load_config(args.CONFIG))
        run(inputs)
    except SetupSdlError as exc:
        logger.error("%s", exc)
        for error_type, code in _EXIT_CODES.items():
            if isinstance(exc, error_type):
                return code.value
        return ExitCodes.RESOLUTION_ERROR.value
    except subprocess.CalledProcessError as exc:
        logger.error("Command failed with exit code %s: %s", exc.returncode, exc.cmd)
        return ExitCodes.BUILD_ERROR.value
    except requests.RequestException as exc:
        logger.error("Connection error: %s", exc)
        return ExitCodes.CONNECTION_ERROR.value
    return ExitCodes.SUCCESS.value


if __name__ == "__main__":
    sys.exit(main())
