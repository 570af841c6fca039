"""Regression detection between two versions of a project's files."""

from src.regression.ai_assist import AIRegressionAnalyzer
from src.regression.comparator import RegressionComparator
from src.regression.detectors import FileFindings

__all__ = ["AIRegressionAnalyzer", "FileFindings", "RegressionComparator"]
