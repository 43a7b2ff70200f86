"""Korean UI strings."""

STRINGS: dict[str, str] = {
    # Recognition
    "Start Recognition": "음성 인식 시작",
    "Abort": "중단",
    "Starting speech recognition": "음성 인식을 시작합니다",
    "Starting speech recognition on {name}.": "{name} 클립의 음성 인식을 시작합니다.",
    "Speech recognition finished.": "음성 인식이 완료되었습니다.",
    "Speech recognition aborted.": "음성 인식이 중단되었습니다.",
    "No speech detected.": "음성이 감지되지 않았습니다.",
    "No speech": "음성 없음",
    "Another recognition job is running. Abort it?": "다른 음성 인식 작업이 실행 중입니다. 중단할까요?",
    "Cannot find python3, please install it on your system.": "python3를 찾을 수 없습니다. 시스템에 설치해 주세요.",
    "The speech script was not found, check your install.": "음성 인식 스크립트를 찾을 수 없습니다. 설치를 확인해 주세요.",
    "Select a clip for speech recognition.": "음성 인식할 클립을 선택하세요.",
    "Please install a language model.": "언어 모델을 설치해 주세요.",
    "Please install speech recognition models": "음성 인식 모델을 설치해 주세요",
    "Configure speech recognition": "음성 인식 설정",
    "Analyse clip zone only": "클립 구간만 분석",
    "Language model:": "언어 모델:",
    # Editing
    "Delete selected text": "선택한 텍스트 삭제",
    "Play edited text": "편집한 텍스트 재생",
    "Insert selected blocks in timeline": "선택한 블록을 타임라인에 삽입",
    "No text to export": "내보낼 텍스트가 없습니다",
    "Cannot open temporary playlist": "임시 재생목록을 열 수 없습니다",
    "Speech cut": "음성 편집본",
    "Search transcript": "스크립트 검색",
    # Banner
    "Show log": "로그 보기",
    "Detailed log": "상세 로그",
    "Close": "닫기",
    # Standalone host
    "Open Media": "미디어 열기",
    "Inserted Zones": "삽입된 구간",
    "Playlist ready": "재생목록 준비됨",
}
