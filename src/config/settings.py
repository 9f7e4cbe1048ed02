# src/config/settings.py

"""Central configuration for the whisky_offers engine."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the whisky_offers engine."""

    # --- Marketplace credentials ---
    RAKUTEN_APP_ID: str = os.getenv("RAKUTEN_APP_ID", "")
    YAHOO_APP_ID: str = os.getenv("YAHOO_APP_ID", "")

    # --- Requests ---
    REQUEST_TIMEOUT: int = 10           # Seconds before a request times out
    RESULTS_PER_SOURCE: int = 30        # Hits requested from each marketplace
    SLOW_SOURCE_MS: float = 5000.0      # Health check latency threshold

    # --- Logging ---
    CONSOLE_LOG_LEVEL: str = os.getenv("LOG_LEVEL", "WARNING").upper()
    LOG_RETENTION: int = int(os.getenv("LOG_RETENTION", "20"))  # 0 keeps all

    # --- Ranking ---
    RESULT_LIMIT: int = 18              # Groups returned per query
    LOWER_QUANTILE: float = 0.05
    UPPER_QUANTILE: float = 0.95

    # --- Canonical key defaults ---
    DEFAULT_VOLUME_ML: int = 700
    DEFAULT_ABV_PERCENT: int = 40
    NO_AGE_STATEMENT: str = "NAS"
    BRAND_TOKEN_COUNT: int = 6

    # --- Filtering ---
    NO_FILTER: bool = os.getenv("NO_FILTER", "") == "1"
    EXCLUDED_CATEGORY_KEYWORDS: list[str] = [
        "日本酒",
        "清酒",
        "焼酎",
        "ビール",
        "ワイン",
        "梅酒",
        "スパークリング",
        "ブランデー",
    ]
    REQUIRED_CATEGORY_KEYWORDS: list[str] = [
        "ウイスキー",
        "whisky",
        "whiskey",
    ]
    SELLER_BLACKLIST: list[str] = [
        "訳あり",
        "アウトレット(非公式)",
    ]
    TITLE_NOISE_TERMS: list[str] = [
        "【", "】", "[", "]", "(", ")", "（", "）",
        "限定", "数量", "箱無", "箱あり", "正規", "並行",
        "国内", "海外", "ラベル", "特価", "セット", "福袋",
        "訳あり", "アウトレット",
        "limited", "quantity", "outlet", "bargain", "set",
    ]

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "ja-JP,ja;q=0.9,en;q=0.8",
    }

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"

    # --- Sources ---
    AVAILABLE_SOURCES: list[dict[str, str]] = [
        {
            "id": "rakuten",
            "label": "Rakuten Ichiba",
            "client": "src.clients.rakuten_client.RakutenClient",
        },
        {
            "id": "yahoo",
            "label": "Yahoo! Shopping",
            "client": "src.clients.yahoo_client.YahooClient",
        },
    ]
