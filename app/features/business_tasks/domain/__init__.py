"""
Domain subpackage for the business task feature.
"""

from .models import (
    AppointmentRecord,
    BenchmarkComparison,
    BusinessTask,
    ClientRecord,
    CompletionRow,
    ConsultationRecord,
    ConversationRecord,
    DashboardSettings,
    QuickStats,
    TaskCompletion,
    TaskReference,
    WeeklyMetrics,
    WeeklySnapshot,
)

__all__ = [
    "AppointmentRecord",
    "BenchmarkComparison",
    "BusinessTask",
    "ClientRecord",
    "CompletionRow",
    "ConsultationRecord",
    "ConversationRecord",
    "DashboardSettings",
    "QuickStats",
    "TaskCompletion",
    "TaskReference",
    "WeeklyMetrics",
    "WeeklySnapshot",
]
