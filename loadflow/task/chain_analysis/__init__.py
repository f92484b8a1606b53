from .critical_path_analyzer import CriticalPathAnalyzer, ChainSummary, Segment, TreeRoot

__all__ = ["CriticalPathAnalyzer", "ChainSummary", "Segment", "TreeRoot"]
