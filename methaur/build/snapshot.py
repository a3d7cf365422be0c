"""AUR 源码快照拉取与解压

快照地址: <aur_snapshot_url><PackageBase>.tar.gz
下载到 <scratch>/<name>/，解压后构建脚本位于 <scratch>/<name>/<PackageBase>/。
"""

from __future__ import annotations

import logging
import shutil
import tarfile
from pathlib import Path

from methaur.core.exceptions import FetchError, RecipeError
from methaur.utils.net import download_file

logger = logging.getLogger(__name__)


class SnapshotFetcher:
    """源码快照下载 + 解压"""

    def __init__(self, snapshot_url: str, *, user_agent: str = "", timeout: float = 60) -> None:
        self.snapshot_url = snapshot_url if snapshot_url.endswith("/") else snapshot_url + "/"
        self.user_agent = user_agent
        self.timeout = timeout

    @staticmethod
    def reset_dir(work_dir: Path) -> None:
        """清掉上次失败构建的残留，重新创建工作目录"""
        if work_dir.exists():
            logger.info("清理残留构建目录: %s", work_dir)
            shutil.rmtree(work_dir, ignore_errors=True)
        work_dir.mkdir(parents=True, exist_ok=True)

    def download(self, base: str, work_dir: Path) -> Path:
        url = f"{self.snapshot_url}{base}.tar.gz"
        dest = work_dir / f"{base}.tar.gz"
        logger.info("下载: %s", url)
        try:
            download_file(url, str(dest), user_agent=self.user_agent, timeout=self.timeout)
        except ConnectionError as e:
            raise FetchError(str(e)) from e
        logger.info("已保存: %s", dest)
        return dest

    @staticmethod
    def extract(tarball: Path, work_dir: Path, base: str) -> Path:
        """解压快照，返回构建脚本所在目录"""
        try:
            with tarfile.open(tarball) as tf:
                tf.extractall(path=str(work_dir), filter="data")  # noqa: S202
        except (OSError, tarfile.TarError) as e:
            raise FetchError(f"解压失败 {tarball}: {e}") from e

        recipe_dir = work_dir / base
        if not recipe_dir.is_dir():
            raise RecipeError(f"解压后未找到目录: {recipe_dir}")
        logger.info("解压就绪: %s", recipe_dir)
        return recipe_dir
