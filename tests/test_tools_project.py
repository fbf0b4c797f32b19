import json
import subprocess

import pytest

from symfony_boost import context as context_module
from symfony_boost.boost import build_registry
from symfony_boost.registry import ToolError
from symfony_boost.shared.config import BoostConfig
from symfony_boost.tools_packs import application, logs, project_files

PRODUCT_ENTITY = """<?php
namespace App\\Entity;

use App\\Repository\\ProductRepository;
use Doctrine\\ORM\\Mapping as ORM;

#[ORM\\Entity(repositoryClass: ProductRepository::class)]
#[ORM\\Table(name: 'shop_product')]
class Product
{
}
"""

LEGACY_ENTITY = """<?php
namespace App\\Entity;

use Doctrine\\ORM\\Mapping as ORM;

/**
 * @ORM\\Entity
 * @ORM\\Table(name="legacy_order")
 */
class Order
{
}
"""

BUNDLES = """<?php

return [
    Symfony\\Bundle\\FrameworkBundle\\FrameworkBundle::class => ['all' => true],
    Doctrine\\Bundle\\DoctrineBundle\\DoctrineBundle::class => ['all' => true],
    Symfony\\Bundle\\WebProfilerBundle\\WebProfilerBundle::class => ['dev' => true, 'test' => true],
    Symfony\\Bundle\\DebugBundle\\DebugBundle::class => ['dev' => true, 'prod' => false],
];
"""


class FakeRun:
    def __init__(self, stdout="", returncode=0, missing=False):
        self.stdout = stdout
        self.returncode = returncode
        self.missing = missing
        self.calls = []

    def __call__(self, cmd, **kwargs):
        self.calls.append((cmd, kwargs))
        if self.missing:
            raise FileNotFoundError(cmd[0])
        return subprocess.CompletedProcess(cmd, self.returncode, stdout=self.stdout)


@pytest.fixture
def ctx(symfony_project):
    _, context = build_registry(BoostConfig(project_path=symfony_project))
    return context


def test_registry_lists_every_tool(symfony_project):
    registry, _ = build_registry(BoostConfig(project_path=symfony_project))
    assert registry.names() == [
        "application_info",
        "list_routes",
        "console_command",
        "get_config",
        "database_query",
        "list_tables",
        "describe_table",
        "get_table_sizes",
        "show_foreign_keys",
        "list_entities",
        "list_env_vars",
        "list_bundles",
        "read_logs",
        "last_error",
    ]
    for tool in registry.list_tools():
        assert tool["inputSchema"]["type"] == "object"


def test_list_entities(ctx, symfony_project):
    entity_dir = symfony_project / "src" / "Entity"
    (entity_dir / "Product.php").write_text(PRODUCT_ENTITY, encoding="utf-8")
    (entity_dir / "Order.php").write_text(LEGACY_ENTITY, encoding="utf-8")
    (entity_dir / "Helper.php").write_text("<?php\nclass Helper {}\n", encoding="utf-8")
    result = project_files.list_entities(ctx, {})
    assert result == {
        "entities": [
            {"class": "Order", "table": "legacy_order", "file": "Order.php"},
            {"class": "Product", "table": "shop_product", "file": "Product.php"},
        ],
        "count": 2,
    }


def test_list_entities_without_directory(ctx, symfony_project):
    (symfony_project / "src" / "Entity").rmdir()
    assert project_files.list_entities(ctx, {}) == {"error": "Entity directory not found"}


def test_list_env_vars(ctx, symfony_project):
    (symfony_project / ".env").write_text(
        "# comment\nAPP_ENV=dev\nDATABASE_URL=mysql://x\nlower_case=1\n\nAPP_SECRET=abc\n", encoding="utf-8"
    )
    (symfony_project / ".env.local").write_text("MAILER_DSN=null://null\nAPP_ENV=prod\n", encoding="utf-8")
    assert project_files.list_env_vars(ctx, {}) == {
        "env_vars": ["APP_ENV", "APP_SECRET", "DATABASE_URL", "MAILER_DSN"],
        "count": 4,
    }


def test_list_bundles(ctx, symfony_project):
    (symfony_project / "config" / "bundles.php").write_text(BUNDLES, encoding="utf-8")
    result = project_files.list_bundles(ctx, {})
    assert result["count"] == 4
    assert result["bundles"][0] == {
        "name": "FrameworkBundle",
        "class": "Symfony\\Bundle\\FrameworkBundle\\FrameworkBundle",
        "environments": ["all"],
    }
    assert result["bundles"][2]["environments"] == ["dev", "test"]
    assert result["bundles"][3]["environments"] == ["dev"]


def test_list_bundles_missing_file(ctx):
    assert project_files.list_bundles(ctx, {}) == {"error": "bundles.php not found"}


def test_read_logs(ctx, symfony_project):
    lines = [f"[2024-01-01] app.INFO: line {i}\n" for i in range(100)]
    (symfony_project / "var" / "log" / "dev.log").write_text("".join(lines), encoding="utf-8")
    assert logs.read_logs(ctx, {"entries": 3}) == "".join(lines[-3:])
    assert logs.read_logs(ctx, {"entries": 0}) == "No log entries"


def test_read_logs_missing_file(ctx, symfony_project):
    message = logs.read_logs(ctx, {"entries": 5, "env": "prod"})
    assert message == f"Log file not found: {symfony_project / 'var' / 'log' / 'prod.log'}"


def test_read_logs_rejects_path_env(ctx):
    with pytest.raises(ToolError):
        logs.read_logs(ctx, {"entries": 5, "env": "../../etc/passwd"})


def test_last_error(ctx, symfony_project):
    lines = [f"app.INFO: fine {i}\n" for i in range(50)]
    lines += [f"app.ERROR: failure {i}\n" for i in range(12)]
    lines += ["request.CRITICAL: meltdown\n", "app.INFO: after\n"]
    (symfony_project / "var" / "log" / "dev.log").write_text("".join(lines), encoding="utf-8")
    output = logs.last_error(ctx, {})
    kept = output.splitlines()
    assert len(kept) == 10
    assert kept[-1] == "request.CRITICAL: meltdown"
    assert kept[0] == "app.ERROR: failure 3"


def test_last_error_none_found(ctx, symfony_project):
    (symfony_project / "var" / "log" / "dev.log").write_text("app.INFO: ok\n", encoding="utf-8")
    assert logs.last_error(ctx, {"env": "dev"}) == "No errors found in recent logs"


def test_console_command_runs_in_project(ctx, symfony_project, monkeypatch):
    fake = FakeRun(stdout="Cache cleared\n")
    monkeypatch.setattr(context_module.subprocess, "run", fake)
    assert application.console_command(ctx, {"command": "cache:clear --env='dev'"}) == "Cache cleared\n"
    cmd, kwargs = fake.calls[0]
    assert cmd == ["php", "bin/console", "cache:clear", "--env=dev"]
    assert kwargs["cwd"] == str(symfony_project)
    assert kwargs["stderr"] == subprocess.STDOUT


def test_console_command_empty_output(ctx, monkeypatch):
    monkeypatch.setattr(context_module.subprocess, "run", FakeRun(stdout=""))
    assert application.console_command(ctx, {"command": "about"}) == "No output"


def test_console_without_php(ctx, monkeypatch):
    monkeypatch.setattr(context_module.subprocess, "run", FakeRun(missing=True))
    with pytest.raises(ToolError, match="PHP executable not found"):
        application.list_routes(ctx, {})


def test_list_routes_and_get_config(ctx, monkeypatch):
    fake = FakeRun(stdout="")
    monkeypatch.setattr(context_module.subprocess, "run", fake)
    assert application.list_routes(ctx, {}) == "Could not retrieve routes"
    assert application.get_config(ctx, {"key": "framework.secret"}) == "Configuration key 'framework.secret' not found"
    assert fake.calls[0][0] == ["php", "bin/console", "debug:router", "--format=json"]
    assert fake.calls[1][0] == ["php", "bin/console", "debug:config", "framework.secret"]


def test_application_info(ctx, symfony_project, monkeypatch):
    lock = {"packages": [{"name": "symfony/console", "version": "v7.1.0"}, {"name": "symfony/framework-bundle", "version": "v7.1.2"}]}
    (symfony_project / "composer.lock").write_text(json.dumps(lock), encoding="utf-8")
    monkeypatch.setattr(context_module.subprocess, "run", FakeRun(stdout="8.3.4"))
    info = application.application_info(ctx, {})
    assert info["php_version"] == "8.3.4"
    assert info["symfony_version"] == "v7.1.2"
    assert info["project_path"] == str(symfony_project)
    assert info["database_platform"] == "unknown"
    assert not ctx.engine.initialized


def test_application_info_without_php_or_lock(symfony_project, monkeypatch):
    _, sqlite_ctx = build_registry(BoostConfig(project_path=symfony_project, database_url="sqlite:///:memory:"))
    monkeypatch.setattr(context_module.subprocess, "run", FakeRun(missing=True))
    info = application.application_info(sqlite_ctx, {})
    assert info["php_version"] == "unknown"
    assert info["symfony_version"] == "unknown"
    assert info["database_platform"] == "sqlite"
