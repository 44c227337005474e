"""Readiness polling and probes.

Usage:
    from wpdev_backup.readiness import wait_until_ready, tcp_probe

    wait_until_ready(tcp_probe("localhost", 3306), interval=5, timeout=60)
"""

from wpdev_backup.readiness.poller import ReadinessResult, wait_until_ready
from wpdev_backup.readiness.probes import mysqladmin_probe, sql_probe, tcp_probe

__all__ = [
    "ReadinessResult",
    "wait_until_ready",
    "mysqladmin_probe",
    "sql_probe",
    "tcp_probe",
]
