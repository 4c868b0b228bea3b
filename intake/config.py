import os
from dotenv import load_dotenv

# Load .env as soon as this module is imported (safe to call multiple times)
load_dotenv()

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))

LEXICON_PATH: str = os.getenv("LEXICON_PATH", os.path.join(_PACKAGE_DIR, "lexicon", "symptoms.yaml"))
CC_MAX_TEXT_CHARS: int = int(os.getenv("CC_MAX_TEXT_CHARS", "2000"))
CORS_ALLOW_ORIGINS: list[str] = [o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()]
