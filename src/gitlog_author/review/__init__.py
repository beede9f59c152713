"""Risk assessment for code review packets."""

from .risk import FILE_PATTERNS, RISK_PATTERNS, RiskAssessor, RiskLevel

__all__ = ["FILE_PATTERNS", "RISK_PATTERNS", "RiskAssessor", "RiskLevel"]
