"""fraud-records: fraud incident records with AI-assisted insights."""

__version__ = "0.1.0"

# Domain types used across the service, tools and CLI
from .records import FraudRecord, FraudReportRequest, FraudStatistics, RiskLevel

__all__ = [
    "FraudRecord",
    "FraudReportRequest",
    "FraudStatistics",
    "RiskLevel",
    "__version__",
]
