#!/usr/bin/env python3
"""
Testes unitários para a detecção do ambiente de execução.
"""

from datetime import datetime, timedelta, timezone

from stats_collector.environment import (
    CiInfo,
    HostEnvironment,
    detect_ci,
    is_docker_container,
    timezone_label,
    user_agent,
)


class TestDetectCi:
    """Testes para detect_ci."""

    def test_no_ci(self):
        assert detect_ci({}) == CiInfo(is_ci=False, name=None)

    def test_named_vendor(self):
        assert detect_ci({"GITHUB_ACTIONS": "true", "CI": "true"}) == CiInfo(True, "GitHub Actions")
        assert detect_ci({"TRAVIS": "true"}) == CiInfo(True, "Travis CI")

    def test_vendor_with_multiple_variables(self):
        assert detect_ci({"JENKINS_URL": "http://ci"}).name is None
        assert detect_ci({"JENKINS_URL": "http://ci", "BUILD_ID": "7"}) == CiInfo(True, "Jenkins")

    def test_vendor_matched_by_value(self):
        assert detect_ci({"CI_NAME": "codeship"}).name == "Codeship"

    def test_generic_ci(self):
        assert detect_ci({"CI": "1"}) == CiInfo(is_ci=True, name=None)
        assert detect_ci({"BUILD_NUMBER": "42"}).is_ci is True

    def test_ci_false_overrides(self):
        assert detect_ci({"CI": "false", "BUILD_NUMBER": "42"}).is_ci is False


class TestHostHelpers:
    """Testes para as funções auxiliares do host."""

    def test_timezone_label(self):
        assert timezone_label(datetime(2026, 1, 1, tzinfo=timezone(timedelta(hours=2)))) == "GMT+0200"
        assert timezone_label(datetime(2026, 1, 1, tzinfo=timezone(timedelta(hours=-3)))) == "GMT-0300"
        assert timezone_label(datetime(2026, 1, 1, tzinfo=timezone.utc)) == "GMT+0000"

    def test_timezone_label_local(self):
        label = timezone_label()
        assert label.startswith("GMT")
        assert len(label) == 8

    def test_user_agent(self):
        assert user_agent("SERVERLESS_DASHBOARD", {"SERVERLESS_DASHBOARD": "1"}) == "dashboard"
        assert user_agent("SERVERLESS_DASHBOARD", {}) == "cli"

    def test_docker_env_file(self, tmp_path):
        docker_env = tmp_path / ".dockerenv"
        docker_env.touch()
        assert is_docker_container(str(docker_env), str(tmp_path / "missing")) is True

    def test_docker_cgroup(self, tmp_path):
        cgroup = tmp_path / "cgroup"
        cgroup.write_text("12:pids:/docker/3f1a\n", encoding="utf-8")
        assert is_docker_container(str(tmp_path / "missing"), str(cgroup)) is True

        cgroup.write_text("0::/user.slice\n", encoding="utf-8")
        assert is_docker_container(str(tmp_path / "missing"), str(cgroup)) is False

    def test_docker_unreadable(self, tmp_path):
        assert is_docker_container(str(tmp_path / "missing"), str(tmp_path / "missing")) is False

    def test_detect_host(self):
        host = HostEnvironment.detect("SERVERLESS_DASHBOARD", {"SERVERLESS_DASHBOARD": "yes", "CIRCLECI": "true"})

        assert host.user_agent == "dashboard"
        assert host.ci == CiInfo(True, "CircleCI")
        assert host.operating_system
        assert host.runtime_version
