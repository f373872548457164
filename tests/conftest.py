"""
测试公共配置。
"""

import pathlib
import sys

# 添加项目根目录到路径
project_root = pathlib.Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
