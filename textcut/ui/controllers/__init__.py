"""UI Controllers: 텍스트 기반 편집 로직을 위젯에서 분리.

AppContext를 통해 모니터, 타임라인 등 외부 협력자에 접근한다.
"""

from textcut.ui.controllers.app_context import AppContext

__all__ = ["AppContext"]
