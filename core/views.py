from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_GET


@require_GET
def health(request):
    return JsonResponse({
        "status": "healthy",
        "service": "purchase-transaction-api",
        "timestamp": timezone.now().isoformat(),
    })
