"""Infrastructure layer: external executables (ffprobe, the recognizer interpreter).

이 계층은 외부 도구를 추상화하여 서비스 계층이
subprocess에 직접 의존하지 않도록 합니다.
"""

from textcut.infrastructure.ffprobe_runner import FFprobeRunner

__all__ = [
    "FFprobeRunner",
]
