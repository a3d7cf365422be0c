"""服务层：容器接线 + 同步服务门面"""
