from cerberus.monitoring.metrics import LatencySummary, MetricsCollector, MetricsSnapshot

__all__ = ["LatencySummary", "MetricsCollector", "MetricsSnapshot"]
