"""自定义异常类

业务层抛出，由 main.py 中注册的处理器统一转换为
{"message": ..., "status": false, "error": ...} 格式的 JSON 响应
"""
from typing import Optional


class ExportOfficeError(Exception):
    """后台系统基础异常"""
    status_code = 400

    def __init__(self, message: str, error: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error = error or message


class ValidationError(ExportOfficeError):
    """数据验证错误"""
    pass


class NotFoundError(ExportOfficeError):
    """资源不存在"""
    status_code = 404


class DuplicateError(ExportOfficeError):
    """唯一字段重复"""
    pass


class InsufficientBalanceError(ExportOfficeError):
    """余额不足错误"""
    pass


class ExternalServiceError(ExportOfficeError):
    """外部服务（汇率接口等）调用失败"""
    status_code = 502
