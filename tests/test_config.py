"""
配置解析与日志测试
"""

import logging
import pathlib

import pytest

from uxexpr import (
    CompilerConfig,
    ConfigError,
    ConfigParser,
    ExpressionCompiler,
    compile_expression,
    load_config,
)
from uxexpr.utils.logger import LOG_DIR_ENV, SafeRotatingFileHandler, close_logger, get_logger


project_root = pathlib.Path(__file__).parent.parent


def test_default_config():
    config = load_config()
    assert config == CompilerConfig()
    assert (config.open_delimiter, config.close_delimiter, config.filter_separator) == ("{{", "}}", "|")


def test_shipped_config_file():
    assert load_config(project_root / "config" / "uxexpr.yaml") == CompilerConfig()


def test_parse_file_with_partial_keys(tmp_path):
    path = tmp_path / "conf.yaml"
    path.write_text('open_delimiter: "<%"\nclose_delimiter: "%>"\nunknown: 1\n', encoding="utf-8")
    config = ConfigParser().parse_file(path)
    assert config.open_delimiter == "<%"
    assert config.close_delimiter == "%>"
    assert config.filter_separator == "|"


def test_empty_file_uses_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert ConfigParser().parse_file(path) == CompilerConfig()


def test_non_mapping_file_is_rejected(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        ConfigParser().parse_file(path)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"open_delimiter": ""},
        {"open_delimiter": "%", "close_delimiter": "%"},
        {"filter_separator": "||"},
        {"filter_separator": "."},
        {"filter_separator": "("},
        {"filter_separator": "]"},
        {"filter_separator": "'"},
        {"filter_separator": '"'},
        {"filter_separator": " "},
    ],
)
def test_invalid_config(kwargs):
    with pytest.raises(ConfigError):
        CompilerConfig(**kwargs)


def test_compiler_from_config_file(tmp_path):
    path = tmp_path / "conf.yaml"
    path.write_text('open_delimiter: "<%"\nclose_delimiter: "%>"\n', encoding="utf-8")
    compiler = ExpressionCompiler.from_config_file(path)
    assert compiler.compile("<% a %>+<% b %>")({"a": 1, "b": 2}) == "1+2"


def test_logger_defaults_to_no_files(tmp_path, monkeypatch):
    """未指定日志目录时，导入和编译都不访问文件系统。"""
    monkeypatch.delenv(LOG_DIR_ENV, raising=False)
    monkeypatch.chdir(tmp_path)
    close_logger()
    try:
        logger = get_logger()
        assert isinstance(logger, logging.Logger)
        assert logger.name == "uxexpr"
        assert logger is get_logger()
        assert [type(h) for h in logger.handlers] == [logging.NullHandler]

        compile_expression("a{{b}}")
        assert list(tmp_path.iterdir()) == []
    finally:
        close_logger()


def test_logger_writes_files_when_dir_given(tmp_path, monkeypatch):
    monkeypatch.delenv(LOG_DIR_ENV, raising=False)
    log_dir = tmp_path / "logs"
    close_logger()
    try:
        get_logger()
        logger = get_logger(log_dir=str(log_dir))
        assert len(logger.handlers) == 4
        assert all(isinstance(h, SafeRotatingFileHandler) for h in logger.handlers)

        compile_expression("a{{b}}")
        assert (log_dir / "uxexpr_debug.log").exists()
    finally:
        close_logger()


def test_logger_dir_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path / "env_logs"))
    close_logger()
    try:
        assert len(get_logger().handlers) == 4
        assert (tmp_path / "env_logs").is_dir()
    finally:
        close_logger()
