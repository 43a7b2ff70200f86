"""FFprobe 실행 추상화. 미디어 메타데이터 조회는 모두 이 클래스를 통해 수행.

서비스 계층이 subprocess에 직접 의존하지 않도록 하여,
테스트 시 Mock으로 교체할 수 있게 함.
"""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import Any

from textcut.utils.ffmpeg_utils import find_ffprobe


class FFprobeRunner:
    """FFprobe 실행을 담당하는 인프라 클래스."""

    def __init__(self, ffprobe_path: str | None = None):
        """경로를 지정하지 않으면 자동 탐색 (config → PATH)."""
        self._ffprobe = ffprobe_path or find_ffprobe()

    @property
    def ffprobe_path(self) -> str | None:
        return self._ffprobe

    def is_available(self) -> bool:
        """FFprobe 실행 파일이 존재하는지."""
        return self._ffprobe is not None and Path(self._ffprobe).is_file()

    def run(
        self,
        args: list[str],
        *,
        check: bool = False,
        capture_output: bool = True,
        text: bool = True,
        timeout: int | None = None,
        **kwargs: Any,
    ) -> subprocess.CompletedProcess:
        """FFprobe를 동기 실행. args에는 ffprobe 바이너리 경로를 제외한 인자만 전달."""
        if not self._ffprobe:
            raise FileNotFoundError("FFprobe not found. Please install FFmpeg.")
        cmd = [self._ffprobe] + args
        run_kwargs = dict(capture_output=capture_output, text=text, **kwargs)
        if timeout is not None:
            run_kwargs["timeout"] = timeout
        if sys.platform == "win32":
            run_kwargs.setdefault("creationflags", subprocess.CREATE_NO_WINDOW)
        return subprocess.run(cmd, check=check, **run_kwargs)


# 싱글톤 인스턴스 (대부분의 서비스에서 공유)
_default_runner: FFprobeRunner | None = None


def get_ffprobe_runner() -> FFprobeRunner:
    """기본 FFprobeRunner 인스턴스 반환."""
    global _default_runner
    if _default_runner is None:
        _default_runner = FFprobeRunner()
    return _default_runner
