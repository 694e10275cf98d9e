from .query_result import QueryResult

__all__ = ["QueryResult"]
