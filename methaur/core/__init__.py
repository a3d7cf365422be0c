"""核心层：异常体系、配置、数据模型、决策协议、构建依赖台账"""
