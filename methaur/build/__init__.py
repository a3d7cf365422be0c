"""构建层

- recipe.py: 构建脚本依赖提取
- snapshot.py: 源码快照下载/解压
- makepkg.py: 构建工具封装
- environment.py: 构建环境准备
- installer.py: 依赖安装器
- orchestrator/: 构建编排状态机
"""
