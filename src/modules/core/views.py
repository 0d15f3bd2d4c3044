import structlog
from django.conf import settings
from django.http import HttpRequest, JsonResponse
from django.utils import timezone

logger = structlog.get_logger()


def health_check(request: HttpRequest) -> JsonResponse:
    """Liveness probe; the hosted backend is not contacted."""
    logger.info("health_check_completed", status="healthy")

    return JsonResponse(
        {
            "status": "healthy",
            "timestamp": timezone.now().isoformat(),
            "backend": settings.BACKEND_CLIENT,
        }
    )
