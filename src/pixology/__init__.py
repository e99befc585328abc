"""
Pixology - 文生图后端服务
"""

__version__ = "0.1.0"
