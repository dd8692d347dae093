"""Pydantic models for API payloads and directory records."""

from models.customer import Customer, QualificationRecord  # noqa: F401
from models.order import LineItem, Order  # noqa: F401
from models.qualification import Action, Decision, ReconcileResult, SweepResult  # noqa: F401
from models.response import JustQualifiedResponse, VipInfo  # noqa: F401
from models.webhook import WebhookData, WebhookEvent  # noqa: F401
