"""methaur - AUR 辅助工具（依赖解析 + 构建编排）"""

__version__ = "1.1.0"
