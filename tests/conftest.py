import os

# 위젯 테스트는 디스플레이 없이 실행
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
