"""
编译器配置

负责：
- 定义插值分隔符、过滤器分隔符等语法配置（CompilerConfig）
- 从 YAML 文件中读取配置（例如 config/uxexpr.yaml）

配置文件示例：

    open_delimiter: "{{"
    close_delimiter: "}}"
    filter_separator: "|"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

import pathlib

import yaml

from .errors import ConfigError


# 默认语法常量
DEFAULT_OPEN_DELIMITER = "{{"
DEFAULT_CLOSE_DELIMITER = "}}"
DEFAULT_FILTER_SEPARATOR = "|"

# 过滤器分隔符不能是括号、引号、"." 或空白，这些字符参与管道切分和过滤器改写
RESERVED_SEPARATOR_CHARS = "()[]{}'\"."


@dataclass(frozen=True)
class CompilerConfig:
    """
    编译器配置。

    Attributes:
        open_delimiter: 插值表达式起始标记，默认 "{{"。
        close_delimiter: 插值表达式结束标记，默认 "}}"。
        filter_separator: 过滤器管道分隔符（单个字符），默认 "|"。
    """

    open_delimiter: str = DEFAULT_OPEN_DELIMITER
    close_delimiter: str = DEFAULT_CLOSE_DELIMITER
    filter_separator: str = DEFAULT_FILTER_SEPARATOR

    def __post_init__(self) -> None:
        """验证配置有效性。"""
        if not self.open_delimiter or not self.close_delimiter:
            raise ConfigError("delimiters must be non-empty strings")
        if self.open_delimiter == self.close_delimiter:
            raise ConfigError(
                f"open_delimiter and close_delimiter must differ, got {self.open_delimiter!r}"
            )
        if len(self.filter_separator) != 1:
            raise ConfigError(
                f"filter_separator must be a single character, got {self.filter_separator!r}"
            )
        if self.filter_separator in RESERVED_SEPARATOR_CHARS or self.filter_separator.isspace():
            raise ConfigError(
                f"filter_separator must not be a bracket, quote, '.' or whitespace, "
                f"got {self.filter_separator!r}"
            )


class ConfigParser:
    """
    配置解析器。

    只解析一个 YAML 文件，返回 CompilerConfig；缺失的键使用默认值，未知的键忽略。
    """

    def parse_file(self, path: str | pathlib.Path) -> CompilerConfig:
        """
        从 YAML 文件解析 CompilerConfig。

        Args:
            path: 配置文件路径。

        Raises:
            ConfigError: 文件内容不是映射，或配置项无效。
        """
        path_obj = pathlib.Path(path)
        with path_obj.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ConfigError(f"配置文件顶层必须是映射: {path_obj}")

        return self.parse_dict(data)

    def parse_dict(self, data: Dict[str, Any]) -> CompilerConfig:
        """从已加载的字典构建配置。"""
        return CompilerConfig(
            open_delimiter=str(data.get("open_delimiter", DEFAULT_OPEN_DELIMITER)),
            close_delimiter=str(data.get("close_delimiter", DEFAULT_CLOSE_DELIMITER)),
            filter_separator=str(data.get("filter_separator", DEFAULT_FILTER_SEPARATOR)),
        )


def load_config(path: str | pathlib.Path | None = None) -> CompilerConfig:
    """读取配置文件；未指定路径时返回默认配置。"""
    if path is None:
        return CompilerConfig()
    return ConfigParser().parse_file(path)
