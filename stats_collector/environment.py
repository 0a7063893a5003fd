"""
Informações do host onde o framework é executado
Sistema operacional, timezone, container Docker e detecção de sistemas de CI
"""
import os
import sys
import platform
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Mapping, Optional, Tuple

# (nome, variáveis que precisam existir, valores esperados)
CI_VENDORS: Tuple[Tuple[str, Tuple[str, ...], Mapping[str, str]], ...] = (
    ("AppVeyor", ("APPVEYOR",), {}),
    ("AWS CodeBuild", ("CODEBUILD_BUILD_ARN",), {}),
    ("Azure Pipelines", ("SYSTEM_TEAMFOUNDATIONCOLLECTIONURI",), {}),
    ("Bamboo", ("bamboo_planKey",), {}),
    ("Bitbucket Pipelines", ("BITBUCKET_COMMIT",), {}),
    ("Bitrise", ("BITRISE_IO",), {}),
    ("Buddy", ("BUDDY_WORKSPACE_ID",), {}),
    ("Buildkite", ("BUILDKITE",), {}),
    ("CircleCI", ("CIRCLECI",), {}),
    ("Cirrus CI", ("CIRRUS_CI",), {}),
    ("Codeship", (), {"CI_NAME": "codeship"}),
    ("Drone", ("DRONE",), {}),
    ("dsari", ("DSARI",), {}),
    ("GitHub Actions", ("GITHUB_ACTIONS",), {}),
    ("GitLab CI", ("GITLAB_CI",), {}),
    ("GoCD", ("GO_PIPELINE_LABEL",), {}),
    ("Hudson", ("HUDSON_URL",), {}),
    ("Jenkins", ("JENKINS_URL", "BUILD_ID"), {}),
    ("Magnum CI", ("MAGNUM",), {}),
    ("Netlify CI", ("NETLIFY_BUILD_BASE",), {}),
    ("Sail CI", ("SAILCI",), {}),
    ("Semaphore", ("SEMAPHORE",), {}),
    ("Shippable", ("SHIPPABLE",), {}),
    ("Strider CD", ("STRIDER",), {}),
    ("TaskCluster", ("TASK_ID", "RUN_ID"), {}),
    ("TeamCity", ("TEAMCITY_VERSION",), {}),
    ("Travis CI", ("TRAVIS",), {}),
)

GENERIC_CI_VARS = (
    "BUILD_ID", "BUILD_NUMBER", "CI", "CI_APP_ID", "CI_BUILD_ID",
    "CI_BUILD_NUMBER", "CI_NAME", "CONTINUOUS_INTEGRATION", "RUN_ID",
)

DOCKER_ENV_FILE = "/.dockerenv"
CGROUP_FILE = "/proc/self/cgroup"


@dataclass(frozen=True)
class CiInfo:
    is_ci: bool = False
    name: Optional[str] = None


def detect_ci(environ: Optional[Mapping[str, str]] = None) -> CiInfo:
    env = os.environ if environ is None else environ

    name = None
    for vendor, required, expected in CI_VENDORS:
        if all(env.get(var) for var in required) and all(
            env.get(var) == value for var, value in expected.items()
        ):
            name = vendor
            break

    if env.get("CI") == "false":
        return CiInfo(is_ci=False, name=name)

    is_ci = name is not None or any(env.get(var) for var in GENERIC_CI_VARS)
    return CiInfo(is_ci=is_ci, name=name)


def is_docker_container(docker_env_file: str = DOCKER_ENV_FILE, cgroup_file: str = CGROUP_FILE) -> bool:
    if Path(docker_env_file).exists():
        return True
    try:
        return "docker" in Path(cgroup_file).read_text(encoding="utf-8")
    except OSError:
        return False


def timezone_label(now: Optional[datetime] = None) -> str:
    """Offset local no formato GMT+0200"""
    moment = now or datetime.now()
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return f"GMT{moment.strftime('%z')}"


def user_agent(dashboard_env_var: str, environ: Optional[Mapping[str, str]] = None) -> str:
    env = os.environ if environ is None else environ
    return "dashboard" if env.get(dashboard_env_var) else "cli"


@dataclass(frozen=True)
class HostEnvironment:
    operating_system: str
    runtime_version: str
    user_agent: str
    is_docker_container: bool
    ci: CiInfo

    @classmethod
    def detect(cls, dashboard_env_var: str = "SERVERLESS_DASHBOARD",
               environ: Optional[Mapping[str, str]] = None) -> "HostEnvironment":
        return cls(
            operating_system=sys.platform,
            runtime_version=platform.python_version(),
            user_agent=user_agent(dashboard_env_var, environ),
            is_docker_container=is_docker_container(),
            ci=detect_ci(environ),
        )
