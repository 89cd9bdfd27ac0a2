"""Timeline app views."""
import logging

from django.http import Http404, HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import render
from django.views.decorators.http import require_GET

from content.loader import load_events

from .filters import has_filter_params, validate_filter_params
from .services import build_event_context, build_timeline, timeline_payload

logger = logging.getLogger(__name__)


@require_GET
def index(request: HttpRequest) -> HttpResponse:
    """Timeline home: every event in chronological order, spoilers hidden."""
    collection = load_events()
    result = validate_filter_params(request.GET, collection.catalog)
    filtered = has_filter_params(request.GET)

    if not result.ok:
        logger.debug("Rejected filter params %s: %s", dict(request.GET.items()), result.errors_by_field())
        context = build_timeline(collection, result.fallback, filtered=filtered)
        template_context = {
            **context.to_dict(),
            'state': context.state,
            'errors': result.errors_by_field(),
        }
        return render(request, 'timeline/index.html', template_context, status=400)

    context = build_timeline(collection, result.state, filtered=filtered)
    template_context = {
        **context.to_dict(),
        'state': context.state,
        'errors': {},
    }
    return render(request, 'timeline/index.html', template_context)


@require_GET
def detail(request: HttpRequest, event_id) -> HttpResponse:
    """Single event page with its neighbours on the timeline."""
    collection = load_events()
    result = validate_filter_params(request.GET, collection.catalog)
    state = result.state if result.ok else result.fallback

    context = build_event_context(collection, str(event_id), state)
    if context is None:
        raise Http404("Event not found")

    template_context = {
        **context.to_dict(),
        'state': state,
        'errors': result.errors_by_field(),
    }
    if not result.ok:
        logger.debug("Rejected filter params %s: %s", dict(request.GET.items()), result.errors_by_field())
        return render(request, 'timeline/event.html', template_context, status=400)
    return render(request, 'timeline/event.html', template_context)


@require_GET
def events_api(request: HttpRequest) -> JsonResponse:
    """Filtered timeline as JSON."""
    collection = load_events()
    result = validate_filter_params(request.GET, collection.catalog)
    if not result.ok:
        fields = {
            error.field: {'message': error.message, 'allowed': list(error.allowed)}
            for error in result.errors
        }
        return JsonResponse({'error': 'invalid_params', 'fields': fields}, status=400)

    context = build_timeline(collection, result.state, filtered=has_filter_params(request.GET))
    return JsonResponse(timeline_payload(context))
