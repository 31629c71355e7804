"""
异常定义
"""


class SavecbError(Exception):
    """savecb 所有异常的基类"""


class SaveError(SavecbError):
    """写入文件或图像编码失败"""

    def __init__(self, path: str, reason: str):
        super().__init__(reason)
        self.path = path
        self.reason = reason
