"""配置管理"""
import os
from pathlib import Path


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {'1', 'true', 'yes', 'on'}


def _env_int(name: str):
    raw = (os.environ.get(name) or '').strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


# 导入监听目录（可选）：放入该目录的 JSON 导出文件会被自动导入
IMPORT_WATCH_DIR = (os.environ.get('IMPORT_WATCH_DIR') or '').strip()


# Flask 配置
class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key'
    DEBUG = _env_flag('DEBUG', True)
    TESTING = False

    # CORS 配置
    CORS_HEADERS = 'Content-Type'

    # 上传大小限制（导出文件可能很大）
    MAX_CONTENT_LENGTH = 64 * 1024 * 1024

    # 启动时是否载入示例对话（当前会话 + 演示数据）
    SEED_SAMPLE_DATA = _env_flag('SEED_SAMPLE_DATA', True)
    SAMPLE_SEED = _env_int('SAMPLE_SEED')

    IMPORT_WATCH_DIR = Path(IMPORT_WATCH_DIR) if IMPORT_WATCH_DIR else None

    LOG_LEVEL = (os.environ.get('LOG_LEVEL') or 'INFO').strip().upper()
