"""
业务异常定义（Error Taxonomy）

服务层只抛出这里定义的异常，路由层统一转换为 HTTP 响应：
- ValidationError      400  请求缺少必填字段或字段超长
- AuthenticationError  401  身份不存在或密码错误
- AuthorizationError   403  身份合法但无权限
- NotFoundError        404  引用的实体不存在
- ConflictError        409  创建时主键/自然键重复
- PersistenceError     500  数据库提交失败（只返回通用提示，原始错误写日志）
"""


class HealthAppError(Exception):
    """所有业务异常的基类，message 为可直接返回给客户端的提示"""

    status_code = 500

    def __init__(self, message: str = "Unexpected error"):
        super().__init__(message)
        self.message = message


class ValidationError(HealthAppError):
    status_code = 400


class AuthenticationError(HealthAppError):
    status_code = 401


class AuthorizationError(HealthAppError):
    status_code = 403


class NotFoundError(HealthAppError):
    status_code = 404


class ConflictError(HealthAppError):
    status_code = 409


class PersistenceError(HealthAppError):
    status_code = 500

    def __init__(self, message: str = "Database error"):
        super().__init__(message)
