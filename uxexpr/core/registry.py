"""
过滤器注册表

本模块只负责「名称 -> 函数」的注册，不承载具体过滤器逻辑：
- FilterRegistry：统一管理模板表达式中可直接调用的过滤器。

内置过滤器放在独立的 uxexpr.filters 包中，导入时自动注册。
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional


class FilterRegistry:
    """
    过滤器注册表。

    所有注册/获取都通过类方法完成；注册只在导入阶段发生，之后只读。
    """

    _filters: Dict[str, Callable[..., Any]] = {}

    @classmethod
    def register_filter(cls, name: str, func: Callable[..., Any]) -> None:
        """
        注册过滤器。

        Args:
            name: 过滤器名称（区分大小写），例如 "upper"。
            func: 第一个参数为管道输入值的函数。
        """
        if not name.isidentifier():
            raise ValueError(f"过滤器名称必须是合法标识符: {name!r}")
        cls._filters[name] = func

    @classmethod
    def get_filter(cls, name: str) -> Optional[Callable[..., Any]]:
        """根据名称获取过滤器，找不到时返回 None。"""
        return cls._filters.get(name)

    @classmethod
    def list_filters(cls) -> List[str]:
        """返回已注册的过滤器名称列表。"""
        return sorted(cls._filters.keys())
