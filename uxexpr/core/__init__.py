"""
uxexpr.core

模板表达式编译核心：
- 编译入口与空白折叠 `expression`
- 可调用对象构造 `evaluator`
- 分词 `text_parser`、过滤器管道 `filter_parser`、表达式改写 `expr_parser`
- 配置 `config`、过滤器注册表 `registry`
"""
