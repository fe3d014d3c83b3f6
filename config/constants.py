"""Application constants.

Centralized location for magic numbers and strings used across the
application.
"""

from pathlib import Path

# ============================================================================
# API Configuration
# ============================================================================

# Gemini REST endpoint
GEMINI_API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
GEMINI_DEFAULT_MODEL = "gemini-2.5-flash"
GEMINI_API_KEY_HEADER = "x-goog-api-key"

# Timeouts (seconds)
API_CONNECT_TIMEOUT = 3.05
API_READ_TIMEOUT_DEFAULT = 60.0
API_READ_TIMEOUT_CONNECTION_TEST = 20.0

# One attempt per analysis, no retry loop
API_MAX_RETRY_ATTEMPTS = 0

# Prompt sent by the settings dialog to validate a key
CONNECTION_TEST_PROMPT = "Hello"

# ============================================================================
# Storage
# ============================================================================

SAVED_BLENDS_STORAGE_KEY = "essentialOilBlends"
API_KEY_STORAGE_KEY = "gemini_api_key"

DEFAULT_STORAGE_PATH = Path.home() / ".essential_oil_blender" / "storage.json"

ROOT_DIRECTORY = Path(__file__).resolve().parents[1]
OIL_CATALOG_PATH = ROOT_DIRECTORY / "data" / "essential_oils.json"

LOG_FILE = "app_debug.log"

# ============================================================================
# Composition Display
# ============================================================================

CHART_TOP_N = 10
# Slices below this percentage get no label
CHART_LABEL_MIN_PERCENT = 5.0

# ============================================================================
# Application Metadata
# ============================================================================

APP_NAME = "Essential Oil Blender"
APP_VERSION = "0.1.0"
APP_WINDOW_TITLE = "에센셜 오일 블렌더"

DEFAULT_WINDOW_WIDTH = 1200
DEFAULT_WINDOW_HEIGHT = 800

# ============================================================================
# User-facing Messages
# ============================================================================

NO_RESULT_TEXT = "분석 결과를 받지 못했습니다."
MSG_EMPTY_BLEND = "분석할 블렌드가 없습니다. 오일을 먼저 추가해주세요."
MSG_MISSING_API_KEY = "API Key가 필요합니다. 설정에서 키를 입력해주세요."
MSG_ANALYSIS_FAILED = "분석 중 오류가 발생했습니다."
MSG_SAVE_REQUIRES_ANALYSIS = "저장하려면 먼저 블렌드를 구성하고 분석해야 합니다."
MSG_SAVE_REQUIRES_NAME = "블렌드 이름을 입력해주세요."
MSG_CONFIRM_DELETE_BLEND = "정말로 이 블렌드를 삭제하시겠습니까?"
MSG_CONFIRM_DELETE_API_KEY = "저장된 API Key를 삭제하시겠습니까?"
