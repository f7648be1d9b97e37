from __future__ import annotations

import os
import re
import subprocess
import sys
from pathlib import Path

import pytest

from beanwire import BeanMethodProxy, Container
from beanwire.app import AppConfig, Eoo, Foo, LiteAppConfig, bootstrap, main

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
_HASHCODE_SUFFIX = re.compile(r"hashcode: -?\d+$")


def _hashcode(line: str) -> int:
    return int(line.rsplit(": ", maxsplit=1)[1])


def test_foo_factory_called_directly_returns_distinct_instances(
    capsys: pytest.CaptureFixture[str],
) -> None:
    config = AppConfig()

    first = config.foo()
    second = config.foo()

    assert first is not second
    assert hash(first) != hash(second)
    lines = capsys.readouterr().out.splitlines()
    assert [_hashcode(line) for line in lines[1::2]] == [hash(first), hash(second)]


def test_bootstrap_holds_exactly_one_foo_and_one_eoo() -> None:
    container = bootstrap()

    foos = container.get_beans_of_type(Foo)
    eoos = container.get_beans_of_type(Eoo)

    assert list(foos) == ["foo"]
    assert list(eoos) == ["eoo"]
    assert container.get_or_create(Foo) is foos["foo"]


def test_bootstrap_registers_only_the_two_bean_names() -> None:
    container = bootstrap()

    assert container.get_bean_names() == ["foo", "eoo"]
    assert container.is_singleton("foo") is True
    assert container.is_singleton("eoo") is True


def test_eoo_observes_the_container_singleton_foo(capsys: pytest.CaptureFixture[str]) -> None:
    container = bootstrap()

    foo_hashcode = hash(container.get_or_create(Foo))
    assert capsys.readouterr().out.splitlines() == [
        "foo() invoked...",
        f"foo() method foo hashcode: {foo_hashcode}",
        "eoo() invoked...",
        f"eoo() method foo hashcode: {foo_hashcode}",
    ]


def test_lite_eoo_builds_its_own_foo(capsys: pytest.CaptureFixture[str]) -> None:
    container = bootstrap(LiteAppConfig)

    lines = capsys.readouterr().out.splitlines()
    assert [_HASHCODE_SUFFIX.sub("hashcode: <id>", line) for line in lines] == [
        "foo() invoked...",
        "foo() method foo hashcode: <id>",
        "eoo() invoked...",
        "foo() invoked...",
        "foo() method foo hashcode: <id>",
        "eoo() method foo hashcode: <id>",
    ]
    container_foo_hashcode = hash(container.get_or_create(Foo))
    assert _hashcode(lines[1]) == container_foo_hashcode
    assert _hashcode(lines[4]) == _hashcode(lines[5])
    assert _hashcode(lines[5]) != container_foo_hashcode
    assert container.get_bean_names() == ["foo", "eoo"]


def test_app_config_bean_methods_are_proxied_after_registration() -> None:
    config = Container().add_configuration(AppConfig)

    assert isinstance(config.foo, BeanMethodProxy)
    assert isinstance(config.eoo, BeanMethodProxy)


def test_main_prints_report_and_returns_zero(capsys: pytest.CaptureFixture[str]) -> None:
    assert main() == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "foo() invoked..."
    assert lines[2] == "eoo() invoked..."
    assert _hashcode(lines[1]) == _hashcode(lines[3])
    assert lines[4:] == ["foo", "eoo"]


def test_output_line_order_is_stable_across_runs(capsys: pytest.CaptureFixture[str]) -> None:
    runs = []
    for _ in range(3):
        main()
        runs.append(
            [
                _HASHCODE_SUFFIX.sub("hashcode: <id>", line)
                for line in capsys.readouterr().out.splitlines()
            ],
        )

    assert runs[0] == [
        "foo() invoked...",
        "foo() method foo hashcode: <id>",
        "eoo() invoked...",
        "eoo() method foo hashcode: <id>",
        "foo",
        "eoo",
    ]
    assert runs[0] == runs[1] == runs[2]


def test_module_entry_point_exits_zero() -> None:
    env = os.environ.copy()
    existing_pythonpath = env.get("PYTHONPATH")
    env["PYTHONPATH"] = (
        str(SRC_ROOT)
        if not existing_pythonpath
        else os.pathsep.join((str(SRC_ROOT), existing_pythonpath))
    )

    completed = subprocess.run(  # noqa: S603
        [sys.executable, "-m", "beanwire"],
        env=env,
        capture_output=True,
        text=True,
        check=False,
    )

    lines = completed.stdout.splitlines()
    assert completed.returncode == 0, completed.stderr
    assert completed.stderr == ""
    assert len(lines) == 6
    assert _hashcode(lines[1]) == _hashcode(lines[3])
    assert lines[4:] == ["foo", "eoo"]
