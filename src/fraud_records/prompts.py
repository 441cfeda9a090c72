"""Prompt and fallback templates for the insight service.

All text is rendered through Jinja2 so the prompt shapes live in one place.
Rendering depends only on the values passed in, which keeps the fallback
acknowledgment reproducible from a record alone.
"""

from __future__ import annotations

from decimal import Decimal

from jinja2 import Environment, StrictUndefined

from .records import RiskLevel, format_timestamp


def _money(value: Decimal | float) -> str:
    return f"{Decimal(str(value)):.2f}"


_env = Environment(
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=False,
    undefined=StrictUndefined,
    autoescape=False,
)
_env.filters["money"] = _money
_env.filters["timestamp"] = format_timestamp


RECORD_CREATION_SYSTEM = """\
You are a fraud detection expert assistant. Your role is to provide clear, professional,
and helpful responses about fraud incidents. When a fraud record is created, you should:

1. Acknowledge the fraud incident has been recorded
2. Provide the reference ID for tracking
3. Explain the risk level and what it means
4. Suggest next steps or recommendations
5. Be empathetic and professional in tone

Keep responses concise but informative, around 2-3 paragraphs."""

PATTERN_ANALYSIS_SYSTEM = """\
You are a fraud analyst expert. Analyze the provided fraud data and provide insights including:

1. Common fraud patterns and trends
2. Risk assessment and distribution
3. Merchant or transaction patterns
4. Recommendations for fraud prevention
5. Any concerning trends or anomalies

Be analytical and provide actionable insights."""

RISK_ASSESSMENT_SYSTEM = """\
You are a risk assessment specialist. Based on the user's fraud history, provide:

1. Overall risk profile assessment
2. Risk factors and concerns
3. Recommendations for account security
4. Monitoring suggestions
5. Preventive measures

Be professional and provide actionable advice."""

PREVENTION_TIPS_SYSTEM = """\
You are a fraud prevention expert. Provide specific, actionable fraud prevention tips based on:

1. The specific fraud type
2. The risk level
3. Best practices for prevention
4. Warning signs to watch for
5. Immediate actions to take

Make recommendations practical and easy to understand."""


_RECORD_CREATION_USER = _env.from_string("""\
A new fraud record has been created with the following details:

Reference ID: {{ reference_id }}
User ID: {{ record.user_id }}
Transaction ID: {{ record.transaction_id }}
Amount: {{ record.amount | money }} {{ record.currency }}
Merchant: {{ record.merchant_name }}
Fraud Type: {{ record.fraud_type }}
Risk Level: {{ record.risk_level }}
Description: {{ record.description or "" }}
Detection Time: {{ record.detected_at | timestamp }}
{% if record.location %}
Location: {{ record.location }}
{% endif %}
{% if record.ip_address %}
IP Address: {{ record.ip_address }}
{% endif %}

Please provide a natural language response to inform the user about this fraud incident.""")

_PATTERN_ANALYSIS_USER = _env.from_string("""\
Fraud Records Analysis:

{% for record in records %}
Record ID: {{ record.id }}
User: {{ record.user_id }} | Transaction: {{ record.transaction_id }}
Amount: {{ record.amount | money }} {{ record.currency }} | Merchant: {{ record.merchant_name }}
Type: {{ record.fraud_type }} | Risk: {{ record.risk_level }}
Date: {{ record.created_at | timestamp }}
---
{% endfor %}""")

_RISK_ASSESSMENT_USER = _env.from_string("""\
Risk Assessment for User: {{ user_id }}

Total Fraud Incidents: {{ records | length }}
{% if records %}

Fraud History:
{% for record in records %}
- {{ record.fraud_type }}: {{ record.amount | money }} {{ record.currency }} at {{ record.merchant_name }} (Risk: {{ record.risk_level }})
{% endfor %}
{% endif %}""")

_PREVENTION_TIPS_USER = _env.from_string("""\
Please provide fraud prevention recommendations for:

Fraud Type: {{ fraud_type }}
Risk Level: {{ risk_level }}

Focus on practical steps the user can take to prevent this type of fraud in the future.""")

_RECORD_CREATION_FALLBACK = _env.from_string("""\
Fraud Incident Recorded

Your fraud report has been successfully recorded in our system with reference ID: {{ reference_id }}

Details:
- Transaction ID: {{ record.transaction_id }}
- Amount: {{ record.amount | money }} {{ record.currency }}
- Merchant: {{ record.merchant_name }}
- Risk Level: {{ record.risk_level }}
- Fraud Type: {{ record.fraud_type }}

{{ guidance }}

Please keep this reference ID for your records. Our fraud investigation team will review this incident.""")

RISK_GUIDANCE: dict[str, str] = {
    RiskLevel.HIGH.value: (
        "This is a high-risk incident that requires immediate attention. "
        "Please contact your bank immediately."
    ),
    RiskLevel.MEDIUM.value: (
        "This is a medium-risk incident. Please monitor your accounts closely "
        "and consider additional security measures."
    ),
    RiskLevel.LOW.value: (
        "This is a low-risk incident. Continue monitoring your accounts "
        "and practice good security habits."
    ),
}
DEFAULT_GUIDANCE = "Please monitor your accounts and take appropriate security measures."

NO_RECORDS_MESSAGE = "No fraud records available for analysis."
PATTERN_ANALYSIS_UNAVAILABLE = (
    "Unable to analyze fraud patterns at this time. Please try again later."
)
RISK_ASSESSMENT_UNAVAILABLE = (
    "Unable to generate risk assessment at this time. Please try again later."
)
PREVENTION_TIPS_UNAVAILABLE = (
    "Unable to generate fraud prevention tips at this time. Please try again later."
)


def risk_guidance(risk_level: str | None) -> str:
    """Risk-level specific advice, generic for unrecognized levels."""
    return RISK_GUIDANCE.get((risk_level or "").upper(), DEFAULT_GUIDANCE)


def record_creation_prompt(reference_id, record) -> str:
    return _RECORD_CREATION_USER.render(reference_id=str(reference_id), record=record)


def pattern_analysis_prompt(records) -> str:
    return _PATTERN_ANALYSIS_USER.render(records=records)


def risk_assessment_prompt(user_id: str, records) -> str:
    return _RISK_ASSESSMENT_USER.render(user_id=user_id, records=records)


def prevention_tips_prompt(fraud_type: str, risk_level: str) -> str:
    return _PREVENTION_TIPS_USER.render(fraud_type=fraud_type, risk_level=risk_level)


def record_creation_fallback(reference_id, record) -> str:
    return _RECORD_CREATION_FALLBACK.render(
        reference_id=str(reference_id),
        record=record,
        guidance=risk_guidance(record.risk_level),
    )
