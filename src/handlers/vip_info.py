"""Handler for GET /api/vip-info."""

from models.response import VipInfo


def _get_context():
    """Lazy-load the service context."""
    from services.context import get_context

    return get_context()


def lambda_handler(event, context):
    """Describe the programme so the storefront can render its banner."""
    config = _get_context().config
    info = VipInfo(
        vip_group_id=config.vip_group_id,
        discount_percent=config.discount_percent,
        min_quantity=config.min_quantity,
        discount_days=config.discount_days,
    )
    return {
        "statusCode": 200,
        "headers": {"Content-Type": "application/json"},
        "body": info.to_json(),
    }
