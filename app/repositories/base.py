import os
import threading

import psutil


ENDPOINT_STATS_SQL = """
    SELECT endpoint,
           COUNT(1) AS total,
           AVG(duration_ms) AS avg_ms,
           MAX(duration_ms) AS max_ms,
           SUM(CASE WHEN status='error' THEN 1 ELSE 0 END) AS error_count
    FROM request_metrics
    GROUP BY endpoint
    ORDER BY endpoint
"""

TOTALS_SQL = "SELECT COUNT(1), AVG(duration_ms) FROM request_metrics"


def build_snapshot(totals_row, endpoint_rows) -> dict:
    served = int(totals_row[0] or 0)
    avg_ms = float(totals_row[1] or 0.0)
    memory_mb = psutil.Process(os.getpid()).memory_info().rss / (1024 * 1024)
    endpoint_stats = [
        {
            "endpoint": endpoint,
            "count": int(total or 0),
            "avgMs": round(float(endpoint_avg or 0.0), 3),
            "maxMs": round(float(max_ms or 0.0), 3),
            "errorCount": int(error_count or 0),
        }
        for endpoint, total, endpoint_avg, max_ms, error_count in endpoint_rows
    ]
    return {
        "time": f"{avg_ms:.3f} ms",
        "memory": f"{memory_mb:.2f} MB",
        "threads": threading.active_count(),
        "requestsServed": served,
        "endpointStats": endpoint_stats,
    }
