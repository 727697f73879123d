"""
配置管理模块。

所有阈值都是策略参数 (policy knobs)，可以通过环境变量或 .env 覆盖。
"""
import os
from dotenv import load_dotenv

# 加载 .env 文件
load_dotenv()


class Settings:
    """全局配置类"""

    # 项目配置
    project_name = "EventFusion"
    debug = os.getenv("DEBUG", "False").lower() == "true"
    log_level = os.getenv("LOG_LEVEL", "INFO")

    # --- Event Builder ---
    # Candidates with confidence <= this value are dropped before dedup
    MIN_CANDIDATE_CONFIDENCE = float(os.getenv("MIN_CANDIDATE_CONFIDENCE", "0.5"))
    DEFAULT_SOURCE_RELIABILITY = float(os.getenv("DEFAULT_SOURCE_RELIABILITY", "0.7"))
    MIN_DETAIL_LENGTH = 200  # 文本长度 > 200 视为细节充分

    # --- Entity Extractor ---
    CONTEXT_WINDOW_CHARS = int(os.getenv("CONTEXT_WINDOW_CHARS", "100"))

    # --- Deduplicator ---
    # Strictly greater-than: a pair scoring exactly 0.7 stays apart
    DEDUP_SIMILARITY_THRESHOLD = float(os.getenv("DEDUP_SIMILARITY_THRESHOLD", "0.7"))

    # --- Verifier ---
    VERIFICATION_WINDOW_HOURS = float(os.getenv("VERIFICATION_WINDOW_HOURS", "48"))
    CLAIM_SIMILARITY_THRESHOLD = float(os.getenv("CLAIM_SIMILARITY_THRESHOLD", "0.4"))
    MIN_VERIFICATION_SOURCES = int(os.getenv("MIN_VERIFICATION_SOURCES", "2"))
    VERIFIED_CONFIDENCE_THRESHOLD = float(os.getenv("VERIFIED_CONFIDENCE_THRESHOLD", "0.7"))
    MAX_VERIFIED_DISCREPANCIES = int(os.getenv("MAX_VERIFIED_DISCREPANCIES", "2"))
    UNVERIFIED_CONFIDENCE = 0.3

    # Discrepancy tolerances
    CASUALTY_SPREAD_ABSOLUTE = 10
    CASUALTY_SPREAD_RATIO = 0.5
    MAX_CONSISTENT_LOCATIONS = 2
    MAX_CLAIM_SPAN_HOURS = 24

    # --- Corpus ---
    CORPUS_MAX_ARTICLES = int(os.getenv("CORPUS_MAX_ARTICLES", "200"))

    # Concurrency control
    EXTRACTION_CONCURRENCY = int(os.getenv("EXTRACTION_CONCURRENCY", "8"))


settings = Settings()
