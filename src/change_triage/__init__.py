"""
Change Triage

Decides how much review a change deserves (review tiers) and which changed
files deserve the deepest review (risk-ranked critical files).
"""

from .config import ReviewTierConfig, default_tier_config, load_tier_config
from .critical_files import ALGORITHM_VERSION, CriticalFileSelector
from .exceptions import ConfigError, FanInAnalysisError, ProfileError, TriageError
from .file_classifier import FileTypeClassifier
from .import_analyzer import FanInAnalyzer, ImportAnalyzer
from .models import (
    ChangedFile,
    ChangeMetrics,
    CriticalFileConfig,
    CriticalFilesReport,
    FileScore,
    FileType,
    RawToolResult,
    ReviewTier,
    SeverityLevel,
    TierRecommendation,
)
from .severity import SeverityExtractor
from .tier_classifier import ReviewTierClassifier

__all__ = [
    "ReviewTierClassifier",
    "CriticalFileSelector",
    "FileTypeClassifier",
    "SeverityExtractor",
    "ImportAnalyzer",
    "FanInAnalyzer",
    "ReviewTierConfig",
    "default_tier_config",
    "load_tier_config",
    "ChangedFile",
    "ChangeMetrics",
    "CriticalFileConfig",
    "CriticalFilesReport",
    "FileScore",
    "FileType",
    "RawToolResult",
    "ReviewTier",
    "SeverityLevel",
    "TierRecommendation",
    "ALGORITHM_VERSION",
    "TriageError",
    "ConfigError",
    "ProfileError",
    "FanInAnalysisError",
]
