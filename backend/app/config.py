"""
问卷服务配置管理
统一管理数据文件路径、CORS来源和服务端口
"""
import os
from pathlib import Path
from typing import List
from dotenv import load_dotenv

# 项目根目录
BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
PROJECT_ROOT = os.path.dirname(BACKEND_DIR)

# 加载环境变量
env_path = Path(BACKEND_DIR) / '.env'
if env_path.exists():
    load_dotenv(env_path)
else:
    # 如果.env文件不存在,尝试从当前目录加载
    load_dotenv()


def _split_origins(value: str) -> List[str]:
    return [origin.strip() for origin in value.split(',') if origin.strip()]


# 数据文件配置
DATA_DIR = os.getenv('SURVEY_DATA_DIR', os.path.join(PROJECT_ROOT, 'data', 'survey'))
QUESTIONS_FILE = os.getenv('SURVEY_QUESTIONS_FILE', 'data.json')
RESPONSES_FILE = os.getenv('SURVEY_RESPONSES_FILE', 'responses.json')

# 管理端静态页面目录（可选）
STATIC_DIR = os.getenv('SURVEY_STATIC_DIR', '')

# CORS配置 - 允许管理端和问卷页面访问
DEFAULT_CORS_ORIGINS = [
    "http://localhost:5500",
    "http://127.0.0.1:5500",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
CORS_ORIGINS = _split_origins(os.getenv('SURVEY_CORS_ORIGINS', '')) or DEFAULT_CORS_ORIGINS

# 服务配置
HOST = os.getenv('SURVEY_HOST', '0.0.0.0')
PORT = int(os.getenv('SURVEY_PORT', '8000'))
LOG_LEVEL = os.getenv('SURVEY_LOG_LEVEL', 'INFO').upper()
