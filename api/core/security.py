"""安全工具模块：密码哈希、Basic认证解析、会话令牌生成"""

import base64
import binascii
import uuid
from typing import Optional, Tuple

import bcrypt


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """验证密码是否正确

    Args:
        plain_password: 明文密码
        hashed_password: 哈希后的密码

    Returns:
        bool: 密码是否匹配
    """
    # bcrypt 限制密码最大长度为 72 字节，需要与哈希时保持一致
    password_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
    except (ValueError, TypeError):
        # 兼容历史异常哈希数据，统一按密码不匹配处理，避免抛 500
        return False


def get_password_hash(password: str) -> str:
    """生成密码哈希

    Args:
        password: 明文密码

    Returns:
        str: 哈希后的密码
    """
    # bcrypt 限制密码最大长度为 72 字节，超过需要截断
    password_bytes = password.encode("utf-8")[:72]
    return bcrypt.hashpw(password_bytes, bcrypt.gensalt()).decode("utf-8")


def parse_basic_authorization(authorization: Optional[str]) -> Optional[Tuple[str, str]]:
    """解析 Basic 认证头，返回 (邮箱, 密码)

    Args:
        authorization: Authorization 请求头，格式为 "Basic base64(email:password)"

    Returns:
        Optional[Tuple[str, str]]: 解析成功返回邮箱和密码，任一为空或格式错误返回 None
    """
    if not authorization:
        return None

    scheme, _, encoded = authorization.strip().partition(" ")
    if scheme.lower() != "basic" or not encoded:
        return None

    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None

    # 密码中允许出现冒号，只按第一个冒号切分
    email, sep, password = decoded.partition(":")
    if not sep or not email or not password:
        return None
    return email, password


def create_session_token() -> str:
    """生成不透明的会话令牌(uuid4基于系统安全随机数)"""
    return str(uuid.uuid4())
