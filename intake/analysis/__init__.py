from intake.analysis.analyzer import Analyzer
from intake.analysis.base import BaseAnalyzer
from intake.analysis.factory import AnalyzerFactory

__all__ = ["Analyzer", "AnalyzerFactory", "BaseAnalyzer"]
