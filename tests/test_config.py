import sys
from unittest.mock import patch

import pytest

from kernel_ioc import (
    BindingScope,
    ConfigurationError,
    DictSource,
    EnvSource,
    KernelOptions,
    YamlSource,
    load_options,
)
from kernel_ioc.constants import DEFAULT_MAX_DEPTH


def test_defaults_without_sources():
    opts = load_options()
    assert opts == KernelOptions()
    assert opts.max_depth == DEFAULT_MAX_DEPTH
    assert opts.default_scope is BindingScope.TRANSIENT
    assert opts.skip_base_class_checks is False


def test_env_source_reads_prefixed_upper_case_names():
    env = {
        "KERNEL_IOC_MAX_DEPTH": "42",
        "KERNEL_IOC_DEFAULT_SCOPE": "Singleton",
        "KERNEL_IOC_SKIP_BASE_CLASS_CHECKS": "yes",
        "MAX_DEPTH": "7",
    }
    opts = load_options(EnvSource(environ=env))

    assert opts.max_depth == 42
    assert opts.default_scope is BindingScope.SINGLETON
    assert opts.skip_base_class_checks is True


def test_env_source_defaults_to_os_environ(monkeypatch):
    monkeypatch.setenv("APP_MAX_DEPTH", "12")
    assert load_options(EnvSource(prefix="APP_")).max_depth == 12


def test_later_sources_and_overrides_win():
    opts = load_options(
        DictSource({"max_depth": 10, "skip_base_class_checks": True}),
        DictSource({"max_depth": 20}),
        overrides={"skip_base_class_checks": False},
    )
    assert opts.max_depth == 20
    assert opts.skip_base_class_checks is False


def test_yaml_source_reads_section(tmp_path):
    path = tmp_path / "kernel.yml"
    path.write_text("kernel_ioc:\n  max_depth: 33\n  default_scope: singleton\nother: 1\n", encoding="utf-8")

    opts = load_options(YamlSource(str(path)))

    assert opts.max_depth == 33
    assert opts.default_scope is BindingScope.SINGLETON


def test_yaml_source_reads_document_root(tmp_path):
    path = tmp_path / "kernel.yml"
    path.write_text("skip_base_class_checks: true\n", encoding="utf-8")

    assert load_options(YamlSource(str(path), section=None)).skip_base_class_checks is True


def test_yaml_source_missing_dependency():
    with patch.dict(sys.modules, {"yaml": None}):
        with pytest.raises(ConfigurationError, match="PyYAML not installed"):
            YamlSource("config.yml").get("max_depth")


def test_yaml_source_load_error(tmp_path):
    with pytest.raises(ConfigurationError, match="Failed to load YAML"):
        YamlSource(str(tmp_path / "missing.yml")).get("max_depth")


def test_yaml_section_must_be_mapping(tmp_path):
    path = tmp_path / "kernel.yml"
    path.write_text("kernel_ioc: [1, 2]\n", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="Expected a mapping"):
        YamlSource(str(path)).get("max_depth")


@pytest.mark.parametrize(
    "data, message",
    [
        ({"max_depth": "deep"}, "Invalid integer for max_depth"),
        ({"max_depth": True}, "Invalid integer for max_depth"),
        ({"max_depth": 0}, "max_depth must be a positive integer"),
        ({"default_scope": "request"}, "Invalid scope for default_scope"),
        ({"skip_base_class_checks": "maybe"}, "Invalid boolean for skip_base_class_checks"),
    ],
)
def test_invalid_values_raise(data, message):
    with pytest.raises(ConfigurationError, match=message):
        load_options(DictSource(data))


@pytest.mark.parametrize("section", ["kernel_ioc", None])
@pytest.mark.parametrize("body", ["- 1\n- 2\n", "just text\n"])
def test_yaml_document_root_must_be_mapping(tmp_path, section, body):
    path = tmp_path / "kernel.yml"
    path.write_text(body, encoding="utf-8")

    with pytest.raises(ConfigurationError, match="Expected a mapping"):
        YamlSource(str(path), section=section).get("max_depth")


def test_unknown_override_keys_raise():
    with pytest.raises(ConfigurationError, match="Unknown options"):
        load_options(overrides={"max_dept": 3})


def test_options_are_immutable():
    opts = KernelOptions()
    with pytest.raises(AttributeError):
        opts.max_depth = 3
