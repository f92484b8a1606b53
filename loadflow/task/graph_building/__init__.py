from .graph_builder import GraphBuilder

__all__ = ["GraphBuilder"]
