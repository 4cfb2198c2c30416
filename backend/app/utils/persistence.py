"""
数据持久化工具类
每个存储对应一个完整的JSON文档，读取和保存都是整文件操作
"""
import os
import json
import time
import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterable, List
from pathlib import Path

logger = logging.getLogger(__name__)


class JsonDocumentStore:
    """JSON文档存储

    读取失败时返回默认文档，保存失败时返回False，由调用方决定HTTP状态码。
    所有 读取-修改-保存 流程都应在 locked() 内完成。
    """

    def __init__(self, storage_dir: str, filename: str):
        """
        初始化存储

        Args:
            storage_dir: 存储目录路径
            filename: JSON文件名
        """
        self.storage_dir = Path(storage_dir)
        self.filepath = self.storage_dir / filename
        self._lock = threading.RLock()

    def default(self) -> Any:
        """文件缺失或损坏时使用的默认文档"""
        raise NotImplementedError

    def normalize(self, data: Any) -> Any:
        """校正已解析文档的结构"""
        return data

    def exists(self) -> bool:
        return self.filepath.exists()

    def load(self) -> Any:
        """从文件加载完整文档，不向调用方抛出读取错误"""
        if not self.filepath.exists():
            logger.debug("数据文件不存在, 使用默认文档: %s", self.filepath)
            return self.default()
        try:
            with open(self.filepath, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("加载数据文件失败: path=%s error=%s, 使用默认文档", self.filepath, e)
            return self.default()
        return self.normalize(data)

    def save(self, data: Any) -> bool:
        """保存完整文档，成功返回True"""
        # 临时文件名包含完整文件名，同目录下的不同存储互不冲突
        temp_file = self.filepath.with_name(self.filepath.name + '.tmp')
        try:
            self.storage_dir.mkdir(parents=True, exist_ok=True)

            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(data, f, ensure_ascii=False, indent=2, default=str)
                f.flush()
                os.fsync(f.fileno())

            # 原子性替换
            temp_file.replace(self.filepath)
        except (OSError, ValueError) as e:
            logger.error("保存数据文件失败: path=%s error=%s", self.filepath, e)
            self._discard(temp_file)
            return False
        return True

    @staticmethod
    def _discard(temp_file: Path):
        try:
            if temp_file.exists():
                temp_file.unlink()
        except OSError as e:
            logger.warning("清理临时文件失败: path=%s error=%s", temp_file, e)

    @contextmanager
    def locked(self):
        """串行化同一存储上的修改操作"""
        with self._lock:
            yield self

    @staticmethod
    def next_id(records: Iterable[Dict[str, Any]]) -> int:
        """
        生成新记录ID

        以毫秒时间戳为基础，并保证大于文档中已有的最大ID，
        同一毫秒内连续创建也不会重复。
        """
        new_id = int(time.time() * 1000)
        for record in records:
            record_id = record.get('id') if isinstance(record, dict) else None
            if isinstance(record_id, int) and not isinstance(record_id, bool):
                new_id = max(new_id, record_id + 1)
        return new_id


class QuestionsStore(JsonDocumentStore):
    """问题与回答配置存储: {questions: [...], responses: {...}}"""

    def default(self) -> Dict[str, Any]:
        return {'questions': [], 'responses': {}}

    def normalize(self, data: Any) -> Dict[str, Any]:
        if not isinstance(data, dict):
            logger.warning("问题文档格式错误(非对象): %s, 使用默认文档", self.filepath)
            return self.default()
        if not isinstance(data.get('questions'), list):
            if 'questions' in data:
                logger.warning("问题文档中 questions 不是数组, 已重置: %s", self.filepath)
            data['questions'] = []
        if not isinstance(data.get('responses'), dict):
            if 'responses' in data:
                logger.warning("问题文档中 responses 不是对象, 已重置: %s", self.filepath)
            data['responses'] = {}
        return data


class SurveyResponseStore(JsonDocumentStore):
    """问卷提交记录存储: [...]"""

    def default(self) -> List[Dict[str, Any]]:
        return []

    def normalize(self, data: Any) -> List[Dict[str, Any]]:
        if not isinstance(data, list):
            logger.warning("提交记录文档格式错误(非数组): %s, 使用空列表", self.filepath)
            return []
        return data
