"""Lambda/API Gateway adapter for the expansion services."""
