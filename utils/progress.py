from typing import Optional
import logging
import time
from tqdm import tqdm

class ProgressMonitor:
    """tqdm bar over the analysis methods; each finished step is also logged"""

    def __init__(self, total: int, desc: str = "Analysis",
                 logger: Optional[logging.Logger] = None, disable: bool = False):
        self.logger = logger or logging.getLogger('progress')
        self.desc = desc
        self.total = total
        self.done = 0  # tqdm does not count when disabled
        self.bar = tqdm(total=total, desc=desc, disable=disable)
        self.started = time.time()

    def update(self, n: int = 1, status: str = ""):
        self.done += n
        self.bar.update(n)
        if status:
            self.bar.set_postfix_str(status)
            self.logger.info(f"{self.desc} [{self.done}/{self.total}]: {status}")

    def close(self):
        self.bar.close()
        self.logger.info(f"{self.desc} finished in {time.time() - self.started:.1f}s")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
